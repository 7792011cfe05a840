from abc import ABC, abstractmethod
from typing import Protocol

import pytest

from graphwire.errors import DependencyError, MissingDependencyError, RegistrationError
from graphwire.registry import (
    Dependency,
    TypeRegistry,
    component_type_of,
    dependencies_of,
)


class Greeter(Protocol):
    def greet(self, name: str) -> str:
        ...


class Printer(ABC):
    @abstractmethod
    def print(self, line: str) -> None:
        ...


class EnglishGreeter:
    def greet(self, name: str) -> str:
        return "Hello %s" % name


class FrenchGreeter:
    def greet(self, name: str) -> str:
        return "Bonjour %s" % name


class Mute:
    pass


@pytest.fixture
def registry():
    return TypeRegistry()


def test_types_are_kept_in_registration_order(registry):
    registry.add(FrenchGreeter)
    registry.add(EnglishGreeter)
    registry.add(FrenchGreeter)

    assert registry.types() == [FrenchGreeter, EnglishGreeter]
    assert EnglishGreeter in registry
    assert Mute not in registry


def test_interfaces_cannot_be_registered_as_components(registry):
    with pytest.raises(RegistrationError, match="Greeter is an interface"):
        registry.add(Greeter)

    with pytest.raises(RegistrationError, match="Printer is an interface"):
        registry.add(Printer)


def test_bind_pins_implementor(registry):
    registry.bind(Greeter, FrenchGreeter)

    assert registry.binding(Greeter) is FrenchGreeter
    assert registry.binding(Printer) is None


def test_bind_rejects_non_interface(registry):
    with pytest.raises(RegistrationError, match="EnglishGreeter is not an interface"):
        registry.bind(EnglishGreeter, FrenchGreeter)


def test_bind_rejects_type_that_does_not_implement_interface(registry):
    with pytest.raises(RegistrationError, match="Mute does not implement Greeter"):
        registry.bind(Greeter, Mute)


def test_candidates_match_structurally_in_registration_order(registry):
    registry.add(Mute)
    registry.add(FrenchGreeter)
    registry.add(EnglishGreeter)

    assert registry.candidates(Greeter) == [FrenchGreeter, EnglishGreeter]


def test_undiscoverable_types_are_only_reachable_through_a_binding(registry):
    registry.add(FrenchGreeter, discoverable=False)
    registry.add(EnglishGreeter)

    assert FrenchGreeter in registry
    assert registry.candidates(Greeter) == [EnglishGreeter]

    registry.bind(Greeter, FrenchGreeter)
    assert registry.binding(Greeter) is FrenchGreeter


def test_verify_names_missing_type_and_kind(registry):
    with pytest.raises(MissingDependencyError, match=r"no such dependency in registry: Mute \(concrete\)"):
        registry.verify(Mute)


def test_component_type_of_distinguishes_classes_from_instances():
    greeter = EnglishGreeter()

    assert component_type_of(EnglishGreeter) == (EnglishGreeter, None)
    assert component_type_of(greeter) == (EnglishGreeter, greeter)


def test_dependencies_are_identified_by_annotation():
    def seed(greeter: Greeter, printer: Printer):
        pass

    assert dependencies_of(seed) == [
        Dependency("greeter", Greeter),
        Dependency("printer", Printer),
    ]


def test_bound_method_dependencies_exclude_self():
    class Service:
        def construct(self, greeter: Greeter):
            pass

    assert dependencies_of(Service().construct) == [Dependency("greeter", Greeter)]


def test_throws_dependency_error_on_unannotated_param():
    def seed(_ignored):
        pass

    with pytest.raises(DependencyError, match="Dependency '_ignored' of .*seed is not annotated"):
        dependencies_of(seed)


def test_throws_dependency_error_on_variadic_param():
    def seed(*greeters: Greeter):
        pass

    with pytest.raises(DependencyError, match="Dependency 'greeters' .* is variadic"):
        dependencies_of(seed)
