"""Single-assignment store of wired component instances."""

from typing import Any, Iterator, Optional

from graphwire.contracts import describe
from graphwire.domain import CachedInstance
from graphwire.errors import RegistrationError

__all__ = ["InstanceCache"]


class InstanceCache:
    """Mapping from component type to its one shared instance.

    Once a type has an entry it is never constructed again and the entry is
    never replaced; every requester receives the same object.

    Example:
        >>> cache = InstanceCache()
        >>> cache.store(MemStore, store, supplied=True)
        >>> cache.get(MemStore) is store  # True
    """

    def __init__(self):
        self._entries: dict[type, CachedInstance] = {}

    def store(self, component_type: type, instance: Any, supplied: bool = False) -> Any:
        """Store the instance for a type and return it.

        Raises:
            RegistrationError: If the type already has an instance.
        """
        if component_type in self._entries:
            raise RegistrationError(f"{describe(component_type)} already has an instance")
        self._entries[component_type] = CachedInstance(component_type, instance, supplied)
        return instance

    def get(self, component_type: type) -> Optional[Any]:
        entry = self._entries.get(component_type)
        return entry.instance if entry else None

    def supplied(self) -> list[CachedInstance]:
        """Entries registered ready-made by the caller, in registration order."""
        return [entry for entry in self._entries.values() if entry.supplied]

    def __contains__(self, component_type: Any) -> bool:
        return component_type in self._entries

    def __iter__(self) -> Iterator[CachedInstance]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
