"""Registration and introspection utilities for component types."""

import inspect
from typing import Any, Callable, Optional, get_type_hints

from graphwire.contracts import describe, implements, is_interface, kind_of
from graphwire.domain import Dependency
from graphwire.errors import DependencyError, MissingDependencyError, RegistrationError
from graphwire.logging import get_logger

__all__ = [
    "Dependency",
    "TypeRegistry",
    "component_type_of",
    "dependencies_of",
]

logger = get_logger(__name__)


class TypeRegistry:
    """Registry of component types and explicit interface bindings.

    Types are kept in registration order, which is the order in which
    implementors are considered when an interface has no binding yet. Types
    added with ``discoverable=False`` are never offered as candidates and can
    only satisfy an interface through an explicit binding.
    """

    def __init__(self):
        self._types: dict[type, None] = {}
        self._bindings: dict[type, type] = {}
        self._hidden: set[type] = set()

    def add(self, component_type: type, discoverable: bool = True):
        """Record a component type, ignoring repeat registrations.

        Raises:
            RegistrationError: If the type is an interface and can never be built.
        """
        if is_interface(component_type):
            raise RegistrationError(
                f"{describe(component_type)} is an interface; register an implementation instead"
            )
        if component_type not in self._types:
            self._types[component_type] = None
            logger.debug("component_registered", component=describe(component_type))
        if not discoverable:
            self._hidden.add(component_type)

    def bind(self, interface: type, component_type: type):
        """Pin ``component_type`` as the implementor of ``interface``.

        Raises:
            RegistrationError: If ``interface`` is not an interface or the type does not satisfy it.
        """
        if not is_interface(interface):
            raise RegistrationError(f"{describe(interface)} is not an interface")
        if not implements(component_type, interface):
            raise RegistrationError(
                f"{describe(component_type)} does not implement {describe(interface)}"
            )
        self._bindings[interface] = component_type
        logger.debug(
            "interface_bound",
            interface=describe(interface),
            component=describe(component_type),
        )

    def binding(self, interface: type) -> Optional[type]:
        return self._bindings.get(interface)

    def types(self) -> list[type]:
        return list(self._types)

    def candidates(self, interface: type) -> list[type]:
        """Registered types that structurally satisfy ``interface``, in registration order."""
        return [
            component_type
            for component_type in self._types
            if component_type not in self._hidden and implements(component_type, interface)
        ]

    def verify(self, component_type: type):
        """Ensure a type was registered.

        Raises:
            MissingDependencyError: If it was not.
        """
        if component_type not in self._types:
            raise MissingDependencyError(
                f"no such dependency in registry: {describe(component_type)} "
                f"({kind_of(component_type).value})"
            )

    def __contains__(self, component_type: Any) -> bool:
        return component_type in self._types


def component_type_of(component: Any) -> tuple[type, Optional[Any]]:
    """Split a registration argument into its component type and ready-made instance.

    Example:
        >>> component_type_of(UserService)        # (UserService, None)
        >>> component_type_of(MemStore(["Bob"]))  # (MemStore, <MemStore object>)
    """
    if inspect.isclass(component):
        return component, None
    return type(component), component


def dependencies_of(func: Callable, requester: Any = None) -> list[Dependency]:
    """Extract dependency information from a callable's type annotations.

    Args:
        func: The function, bound method or callable object to analyze.
        requester: What the dependencies are for, used in error messages.
            Defaults to ``func`` itself.

    Returns:
        List of Dependency objects describing each parameter, in signature order.

    Raises:
        DependencyError: If a parameter is not annotated or is variadic.

    Example:
        >>> def seed(svc: UserService, c: Container): ...
        >>> dependencies_of(seed)
        >>> # [Dependency("svc", UserService), Dependency("c", Container)]
    """
    requester = requester if requester is not None else func
    sig = inspect.signature(func)
    hints = get_type_hints(_annotated_target(func))

    dependencies = []
    for name, parameter in sig.parameters.items():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            raise DependencyError(
                f"Dependency '{name}' of {describe(requester)} is variadic and cannot be injected"
            )
        annotation = hints.get(name)
        if annotation is None:
            raise DependencyError(f"Dependency '{name}' of {describe(requester)} is not annotated")
        dependencies.append(Dependency(name, annotation))
    return dependencies


def _annotated_target(func: Callable) -> Any:
    if inspect.ismethod(func):
        return func.__func__
    if inspect.isclass(func):
        return func.__init__
    if inspect.isfunction(func):
        return func
    return type(func).__call__
