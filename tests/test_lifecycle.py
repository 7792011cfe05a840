from typing import ClassVar, Protocol

import pytest

from graphwire.errors import MissingDependencyError
from graphwire.lifecycle import LifecycleInvoker, constructor_arity, public_fields


class Store(Protocol):
    def get_all(self) -> list[str]:
        ...


class MemStore:
    def get_all(self) -> list[str]:
        return ["Bob"]


class Clock:
    pass


class Service:
    def __init__(self):
        self.store = None
        self.events = []

    def construct(self, store: Store, clock: Clock):
        self.events.append("construct")
        self.store = store
        self.clock = clock

    def initialize(self):
        self.events.append("initialize")


class Base:
    clock: Clock


class App(Base):
    store: Store
    _secret: str
    instances: ClassVar[int] = 0

    def __init__(self):
        self.events = []

    def initialize(self):
        self.events.append("initialize")


class Unresolvable:
    store: Store
    clock: Clock


@pytest.fixture
def components():
    return {Store: MemStore(), Clock: Clock()}


@pytest.fixture
def requests():
    return []


@pytest.fixture
def resolve(components, requests):
    def resolve(required, requester):
        requests.append((required, requester))
        if required not in components:
            raise MissingDependencyError(f"no such dependency in registry: {required}")
        return components[required]

    return resolve


def test_wiring_hook_receives_resolved_dependencies(components, resolve, requests):
    service = Service()

    LifecycleInvoker().wire(service, resolve)

    assert service.store is components[Store]
    assert service.clock is components[Clock]
    assert service.events == ["construct"]
    assert requests == [(Store, Service), (Clock, Service)]


def test_public_fields_are_wired_when_there_is_no_hook(components, resolve, requests):
    app = App()

    LifecycleInvoker().wire(app, resolve)

    assert app.clock is components[Clock]
    assert app.store is components[Store]
    assert not hasattr(app, "_secret")
    assert requests == [(Clock, App), (Store, App)]


def test_public_fields_skip_private_and_class_variables():
    assert public_fields(App) == {"clock": Clock, "store": Store}


def test_initialize_runs_post_wiring_hook():
    service = Service()

    LifecycleInvoker().initialize(service)
    LifecycleInvoker().initialize(Clock())

    assert service.events == ["initialize"]


def test_unresolvable_field_fails_wiring_by_default(components, resolve):
    components.pop(Store)

    with pytest.raises(MissingDependencyError):
        LifecycleInvoker().wire(Unresolvable(), resolve)


def test_unresolvable_fields_can_be_skipped(components, resolve):
    components.pop(Store)
    target = Unresolvable()

    LifecycleInvoker(strict_field_wiring=False).wire(target, resolve)

    assert not hasattr(target, "store")
    assert target.clock is components[Clock]


def test_constructor_arity_counts_hook_parameters():
    assert constructor_arity(Service) == 2
    assert constructor_arity(App) == -1
