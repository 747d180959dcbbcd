"""Repository - Ordered, id-keyed store for mapped entities."""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


class KeyedStore(Generic[T]):
    """Insertion-ordered mapping of ``entity.id`` to entity.

    At most one entity is kept per identifier: putting a second entity
    under an existing id replaces the first. Misses never raise.

    Example:
        >>> store = KeyedStore()
        >>> store.put(otu)
        >>> store.get(otu.id) is otu
        True
    """

    def __init__(self) -> None:
        self._entries: dict[Any, T] = {}

    def put(self, entity: T) -> KeyedStore[T]:
        """Store an entity at its id, overwriting any previous entry."""
        self._entries[entity.id] = entity  # type: ignore[attr-defined]
        return self

    def delete(self, entity: T) -> T | None:
        """Remove whatever is stored at ``entity.id``.

        Returns:
            The removed entity, or None if nothing was stored at that id.
        """
        return self._entries.pop(entity.id, None)  # type: ignore[attr-defined]

    def contains(self, entity: T) -> bool:
        """True if the entity stored at ``entity.id`` is this very object."""
        return self._entries.get(entity.id) is entity  # type: ignore[attr-defined]

    def get(self, entity_id: Any) -> T | None:
        return self._entries.get(entity_id)

    def has_id(self, entity_id: Any) -> bool:
        return entity_id in self._entries

    def values(self) -> list[T]:
        """Return stored entities in insertion order."""
        return list(self._entries.values())

    def ids(self) -> list[Any]:
        return list(self._entries)

    def each(self, fn: Callable[[T], Any]) -> None:
        for entity in self.values():
            fn(entity)

    def each_with_id(self, fn: Callable[[Any, T], Any]) -> None:
        for entity_id, entity in list(self._entries.items()):
            fn(entity_id, entity)

    def clear(self) -> None:
        self._entries.clear()

    def length(self) -> int:
        """Return the number of distinct ids stored."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())

    def __repr__(self) -> str:
        return f"KeyedStore({self.ids()!r})"
