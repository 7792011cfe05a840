"""Resolution of required types into wired singleton instances.

The resolver is the only place instances are created. Given a required type it
either finds the instance already in the cache or builds it, recursing through
the Lifecycle Invoker into the new instance's own requirements:

    - An interface requirement is first mapped to a concrete implementor,
      using the interface's binding if there is one, or otherwise the first
      registered type that structurally satisfies it.
    - A concrete requirement must have been registered.
    - A type under construction is never chosen as an implementor, so a type
      cannot satisfy its own requirement, and a type that re-enters its own
      construction is reported as a cycle.

Unlike the build order heuristic, which only sorts by wiring-hook arity, this
recursive descent is what guarantees dependencies exist before their dependants.
"""

from typing import Any, Optional

from graphwire.contracts import describe, kind_of
from graphwire.domain import Kind
from graphwire.errors import ConstructionError, MissingDependencyError, MissingImplementorError
from graphwire.guard import ConstructionGuard
from graphwire.instance_cache import InstanceCache
from graphwire.lifecycle import LifecycleInvoker
from graphwire.logging import get_logger
from graphwire.registry import TypeRegistry

__all__ = ["GraphResolver"]

logger = get_logger(__name__)


class GraphResolver:
    """Find or build the instance satisfying a required type.

    The resolver is not thread-safe; callers serialize access to it together
    with the registry, cache and guard it shares.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        cache: InstanceCache,
        guard: ConstructionGuard,
        lifecycle: LifecycleInvoker,
    ):
        self._registry = registry
        self._cache = cache
        self._guard = guard
        self._lifecycle = lifecycle

    def resolve(self, required: Any, requester: Any) -> Any:
        """Return the instance satisfying ``required``, building it if needed.

        Args:
            required: The declared type of the dependency.
            requester: The type or function that needs it, used in error messages.

        Raises:
            MissingDependencyError: If the type was never registered or is not a class.
            MissingImplementorError: If no non-cyclic implementor exists for an interface.
            CyclicDependencyError: If construction re-enters a type already being built.
        """
        kind = kind_of(required)
        if kind is Kind.INTERFACE:
            return self.get_or_create(self.find_implementor(required, requester))
        if kind is Kind.CONCRETE:
            return self.get_or_create(required)
        raise MissingDependencyError(
            f"cannot resolve {describe(required)} required by {describe(requester)}: "
            "only classes, protocols and abstract classes can be injected"
        )

    def find_implementor(self, interface: type, requester: Any) -> type:
        """Choose the concrete type to satisfy ``interface``.

        A match found by scanning becomes the interface's permanent binding. If
        the interface is already bound to a type that is mid-construction, the
        match serves this request only and the binding is kept.
        """
        bound = self._registry.binding(interface)
        if bound is not None and not self._guard.is_constructing(bound):
            return bound

        implementor = self._first_available_candidate(interface)
        if implementor is None:
            raise MissingImplementorError(
                f"{describe(interface)} implementor not found, required by {describe(requester)}"
            )
        if bound is None:
            self._registry.bind(interface, implementor)
        return implementor

    def get_or_create(self, component_type: type) -> Any:
        self._registry.verify(component_type)
        if component_type in self._cache:
            return self._cache.get(component_type)
        return self.create(component_type)

    def create(self, component_type: type) -> Any:
        """Build, wire and cache a new instance of ``component_type``."""
        with self._guard.constructing(component_type):
            instance = _allocate(component_type)
            self._lifecycle.wire(instance, self.resolve)
            self._lifecycle.initialize(instance)

        logger.debug("component_constructed", component=describe(component_type))
        return self._cache.store(component_type, instance)

    def lookup(self, required: Any) -> tuple[Any, bool]:
        """Tolerant resolution: ``(instance, True)`` on a hit, ``(None, False)`` on a miss.

        A miss leaves no trace. A hit may bind an interface to its first
        matching implementor and may construct a registered type that has not
        been built yet.
        """
        kind = kind_of(required)
        if kind is None:
            return None, False

        component_type = required
        if kind is Kind.INTERFACE:
            component_type = self._registry.binding(required)
            if component_type is None:
                component_type = self._first_available_candidate(required)
                if component_type is None:
                    return None, False
                self._registry.bind(required, component_type)

        if component_type in self._cache:
            return self._cache.get(component_type), True
        if component_type not in self._registry:
            return None, False
        return self.create(component_type), True

    def _first_available_candidate(self, interface: type) -> Optional[type]:
        return next(
            (
                candidate
                for candidate in self._registry.candidates(interface)
                if not self._guard.is_constructing(candidate)
            ),
            None,
        )


def _allocate(component_type: type) -> Any:
    try:
        return component_type()
    except TypeError as e:
        raise ConstructionError(
            f"cannot allocate {describe(component_type)}: components must be "
            f"constructible without arguments ({e})"
        ) from e
