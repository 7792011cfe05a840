"""Tracking of types that are part-way through construction."""

from contextlib import contextmanager
from typing import Iterator

from graphwire.contracts import describe
from graphwire.errors import CyclicDependencyError

__all__ = ["ConstructionGuard"]


class ConstructionGuard:
    """Ordered set of the types currently inside their own construction.

    A type in the set is never offered as the implementor of an interface,
    which stops a type from satisfying its own (transitive) requirement, and a
    type entering the set twice is a true cycle.
    """

    def __init__(self):
        self._constructing: dict[type, None] = {}

    def enter(self, component_type: type):
        """
        Mark a type as under construction.

        Raises:
            CyclicDependencyError: If the type is already under construction.
        """
        if component_type in self._constructing:
            chain = " -> ".join(describe(t) for t in [*self._constructing, component_type])
            raise CyclicDependencyError(f"Cyclic dependency detected: {chain}")
        self._constructing[component_type] = None

    def leave(self, component_type: type):
        self._constructing.pop(component_type, None)

    @contextmanager
    def constructing(self, component_type: type) -> Iterator[None]:
        """Hold the guard for ``component_type`` for the duration of the block."""
        self.enter(component_type)
        try:
            yield
        finally:
            self.leave(component_type)

    def is_constructing(self, component_type: type) -> bool:
        return component_type in self._constructing

    def __len__(self) -> int:
        return len(self._constructing)
