"""Capability contracts and structural interface checks.

Components opt in to lifecycle hooks by implementing the runtime-checkable
protocols defined here, either nominally (by subclassing) or structurally (by
simply defining the method):

    - :class:`Constructible` exposes ``construct``, the wiring hook. Its
      annotated parameters are resolved by the container and passed in.
    - :class:`Initializable` exposes ``initialize``, called with no arguments
      once the instance is wired.
    - :class:`Runnable` exposes ``run`` and can be handed to ``Container.run``.

An *interface* is any ``typing.Protocol`` class or abstract base class with
abstract members. A concrete type satisfies a protocol when it defines every
public member the protocol declares, and satisfies an abstract base class when
``issubclass`` says so (including virtual subclasses).
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Protocol, get_origin, runtime_checkable

from graphwire.domain import Kind

__all__ = [
    "Constructible",
    "Initializable",
    "Runnable",
    "Container",
    "is_interface",
    "implements",
    "kind_of",
    "describe",
]


@runtime_checkable
class Constructible(Protocol):
    def construct(self, *dependencies: Any) -> None:
        ...


@runtime_checkable
class Initializable(Protocol):
    def initialize(self) -> None:
        ...


@runtime_checkable
class Runnable(Protocol):
    def run(self) -> None:
        ...


class Container(ABC):
    """Public contract of a dependency container.

    The container registers itself as the implementor of this contract, so
    wiring hooks and entry points may declare a ``Container`` parameter to get
    hold of the container that is wiring them.
    """

    @abstractmethod
    def register(self, *components: Any) -> None:
        """Register classes to be built, or ready-made instances to be used as-is."""

    @abstractmethod
    def register_as_interface(self, interface: type, component: Any) -> None:
        """Register a component and pin it as the implementor of ``interface``."""

    @abstractmethod
    def provides(self, interface: Optional[type] = None) -> Callable:
        """Decorator form of ``register`` / ``register_as_interface``."""

    @abstractmethod
    def build(self) -> "Container":
        """Construct every registered component that is not yet cached."""

    @abstractmethod
    def load(self, marker: type) -> Any:
        """Return the instance for a type or interface, raising if there is none."""

    @abstractmethod
    def try_load(self, marker: Any) -> tuple[Any, bool]:
        """Return ``(instance, True)`` for a type or interface, ``(None, False)`` if none."""

    @abstractmethod
    def run(self, runnable: Runnable) -> None:
        """Inject dependencies into ``runnable`` and call its ``run`` method."""

    @abstractmethod
    def run_async(self, runnable: Runnable) -> None:
        """Background version of ``run``."""

    @abstractmethod
    def exec(self, func: Callable) -> None:
        """Resolve the parameters of ``func`` and call it."""

    @abstractmethod
    def exec_async(self, func: Callable) -> None:
        """Background version of ``exec``."""

    @abstractmethod
    def wait(self) -> None:
        """Block until all background work spawned by the ``*_async`` methods is complete."""


def is_interface(target: Any) -> bool:
    """Check whether ``target`` is a protocol or an abstract class.

    Example:
        >>> is_interface(Runnable)   # True
        >>> is_interface(Container)  # True
        >>> is_interface(dict)       # False
    """
    if not inspect.isclass(target):
        return False
    return _is_protocol(target) or inspect.isabstract(target)


def implements(component_type: type, interface: type) -> bool:
    """Check whether instances of ``component_type`` satisfy ``interface``."""
    if _is_protocol(interface):
        return all(hasattr(component_type, member) for member in _protocol_members(interface))
    return issubclass(component_type, interface)


def kind_of(required: Any) -> Optional[Kind]:
    """Classify a required type, returning None for anything that is not a class."""
    if get_origin(required) is not None:
        return None
    if is_interface(required):
        return Kind.INTERFACE
    if inspect.isclass(required):
        return Kind.CONCRETE
    return None


def describe(target: Any) -> str:
    """Human-readable name of a type, function or annotation for error messages."""
    return getattr(target, "__qualname__", None) or repr(target)


def _is_protocol(target: type) -> bool:
    return bool(target.__dict__.get("_is_protocol", False))


def _protocol_members(protocol: type) -> set[str]:
    members = set()
    for base in protocol.__mro__:
        if base is Protocol or not _is_protocol(base):
            continue
        members.update(name for name in vars(base) if not name.startswith("_"))
        members.update(
            name for name in inspect.get_annotations(base) if not name.startswith("_")
        )
    return members
