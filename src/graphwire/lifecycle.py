"""Application of the wiring and post-wiring hooks to component instances.

This module provides the LifecycleInvoker class, which is responsible for
handing resolved dependencies to a freshly allocated (or caller-supplied)
instance. An instance is wired in one of two ways:

    - If it is :class:`~graphwire.contracts.Constructible`, its ``construct``
      method is called with each of its annotated parameters resolved.
    - Otherwise every public annotated attribute of its class is resolved and
      assigned directly.

Either way, an :class:`~graphwire.contracts.Initializable` instance then has
its ``initialize`` method called with no arguments.
"""

import inspect
from typing import Any, Callable, ClassVar, get_origin, get_type_hints

from graphwire.contracts import Constructible, Initializable, describe
from graphwire.errors import MissingDependencyError, MissingImplementorError
from graphwire.logging import get_logger
from graphwire.registry import dependencies_of

__all__ = ["LifecycleInvoker", "Resolve", "constructor_arity"]

logger = get_logger(__name__)

Resolve = Callable[[Any, Any], Any]
"""Resolves ``(required_type, requester)`` to an instance."""


class LifecycleInvoker:
    """Wire and initialize component instances."""

    def __init__(self, strict_field_wiring: bool = True):
        self._strict_field_wiring = strict_field_wiring

    def wire(self, instance: Any, resolve: Resolve):
        """Inject dependencies into ``instance`` through its wiring hook or its public fields.

        Args:
            instance: The instance to wire.
            resolve: Callback resolving a required type on behalf of a requester.
        """
        requester = type(instance)
        if not isinstance(instance, Constructible):
            self.wire_fields(instance, resolve)
            return

        hook = instance.construct
        call_kwargs = {
            dependency.parameter_name: resolve(dependency.declared_type, requester)
            for dependency in dependencies_of(hook, requester)
        }
        hook(**call_kwargs)

    def wire_fields(self, instance: Any, resolve: Resolve):
        requester = type(instance)
        for name, declared_type in public_fields(requester).items():
            try:
                dependency = resolve(declared_type, requester)
            except (MissingDependencyError, MissingImplementorError):
                if self._strict_field_wiring:
                    raise
                logger.warning(
                    "field_skipped",
                    component=describe(requester),
                    field=name,
                    declared_type=describe(declared_type),
                )
                continue
            setattr(instance, name, dependency)

    def initialize(self, instance: Any):
        if isinstance(instance, Initializable):
            instance.initialize()


def public_fields(component_type: type) -> dict[str, Any]:
    """Public annotated attributes of a class, base classes first.

    Example:
        >>> class App:
        ...     svc: UserService
        ...     _name: str
        ...     instances: ClassVar[int] = 0
        >>> public_fields(App)  # {"svc": UserService}
    """
    return {
        name: hint
        for name, hint in get_type_hints(component_type).items()
        if not name.startswith("_") and get_origin(hint) is not ClassVar and hint is not ClassVar
    }


def constructor_arity(component_type: type) -> int:
    """Number of parameters of the type's wiring hook, or -1 if it has none."""
    if not issubclass(component_type, Constructible):
        return -1
    return len(inspect.signature(component_type.construct).parameters) - 1
