"""Framework - Declarative properties and one-to-many relations.

A relation is declared once on each side:

    class Otu(Entity):
        otus = BelongsTo()          # member side: one owner reference

    class Otus(Entity):
        otus = HasMany()            # owner side: KeyedStore of members

Declaring ``HasMany`` installs the relation methods on the owner class
(``add_otu``, ``delete_otu``, ``get_otu_by_id``, ``has_otu``,
``number_of_otus``, ``each_otu``, ``each_otu_with_id``) and makes the
attribute itself a read/replace view of the members. Every mutation, from
either side, keeps both ends in step:

    taxa.add_otu(otu)   ->  otu.otus is taxa
    otu.otus = other    ->  taxa.has_otu(otu) is False, other.has_otu(otu)
    otu.otus = None     ->  removed from its owner

The method a member calls on its owner is named after the member's type
key (``type_key(Otu) == "otu"``), not after the relation name, so the
owner must declare the matching ``HasMany``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator

from nexmap.errors import UnconfiguredPropertyError
from nexmap.mapper.inflection import singular, type_key
from nexmap.mapper.repository import KeyedStore

logger = logging.getLogger(__name__)


class Property:
    """A declared, settable attribute with a default value."""

    def __init__(self, default: Any = None) -> None:
        self.default = default
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        return obj.__dict__.get(self.name, self.default)

    def __set__(self, obj: Any, value: Any) -> None:
        obj.__dict__[self.name] = value


class BelongsTo:
    """Member side of a one-to-many relation.

    Attributes:
        name: Attribute holding the owner reference.
        update: Key of the owner's ``add_<key>`` / ``delete_<key>`` methods.
            Defaults to the type key of the declaring class.
    """

    def __init__(self, update: str | None = None) -> None:
        self.update = update
        self.name = ""
        self._slot = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self._slot = f"_{name}"
        if self.update is None:
            self.update = type_key(owner)

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        return self.owner_of(obj)

    def __set__(self, obj: Any, owner: Any) -> None:
        current = self.owner_of(obj)
        if owner is current:
            return
        if owner is None:
            getattr(current, f"delete_{self.update}")(obj)
            return
        getattr(owner, f"add_{self.update}")(obj)

    def owner_of(self, obj: Any) -> Any:
        return obj.__dict__.get(self._slot)

    def attach(self, obj: Any, owner: Any) -> None:
        """Set the owner reference without notifying the owner."""
        obj.__dict__[self._slot] = owner

    def detach(self, obj: Any) -> None:
        obj.__dict__[self._slot] = None


class HasMany:
    """Owner side of a one-to-many relation.

    Args:
        singularize: Derive the member name by singularizing the attribute
            name. With False, ``has_many`` on ``otus`` yields ``add_otus``.
        update: Name of the ``BelongsTo`` attribute on members. Defaults to
            the type key of the declaring class.
        check: Owner method called as ``check(objects, replace)`` before any
            change; it raises to reject the mutation.
        on_add: Owner method called with each member after it is stored.
        on_remove: Owner method called with each member after removal.
    """

    def __init__(
        self,
        singularize: bool = True,
        update: str | None = None,
        check: str | None = None,
        on_add: str | None = None,
        on_remove: str | None = None,
    ) -> None:
        self.singularize = singularize
        self.update = update
        self.check = check
        self.on_add = on_add
        self.on_remove = on_remove
        self.name = ""
        self.member = ""
        self._slot = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.member = singular(name) if self.singularize else name
        self._slot = f"_{name}_store"
        if self.update is None:
            self.update = type_key(owner)
        self._install(owner)

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        return self.store(obj).values()

    def __set__(self, obj: Any, objects: Iterable[Any]) -> None:
        self.replace(obj, objects)

    # ─────────────────────────────────────────────────────────────────────
    # Relation operations
    # ─────────────────────────────────────────────────────────────────────

    def store(self, owner: Any) -> KeyedStore[Any]:
        """Return the owner's member store, creating it on first use."""
        store = owner.__dict__.get(self._slot)
        if store is None:
            store = owner.__dict__[self._slot] = KeyedStore()
        return store

    def add(self, owner: Any, obj: Any) -> Any:
        link = self._reciprocal(obj)
        if self.check:
            getattr(owner, self.check)([obj], False)
        store = self.store(owner)
        if store.contains(obj):
            return owner

        previous = link.owner_of(obj)
        if previous is not None and previous is not owner:
            logger.debug("moving %r from %r to %r", obj, previous, owner)
            getattr(previous, f"delete_{link.update}")(obj)

        displaced = store.get(obj.id)
        if displaced is not None:
            getattr(owner, f"delete_{self.member}")(displaced)

        store.put(obj)
        link.attach(obj, owner)
        if self.on_add:
            getattr(owner, self.on_add)(obj)
        return owner

    def delete(self, owner: Any, obj: Any) -> Any:
        store = self.store(owner)
        if not store.contains(obj):
            return None
        store.delete(obj)
        link = self._reciprocal(obj)
        if link.owner_of(obj) is owner:
            link.detach(obj)
        if self.on_remove:
            getattr(owner, self.on_remove)(obj)
        return obj

    def replace(self, owner: Any, objects: Iterable[Any]) -> None:
        """Replace all members, adding each through ``add_<member>``.

        Current members that are also in ``objects`` stay attached, so
        their remove hooks do not fire; the store ends up in the order of
        ``objects``.
        """
        objects = list(objects)
        for obj in objects:
            self._reciprocal(obj)
        if self.check:
            getattr(owner, self.check)(objects, True)

        store = self.store(owner)
        kept = {id(obj) for obj in objects}
        remove = getattr(owner, f"delete_{self.member}")
        for current in store.values():
            if id(current) not in kept:
                remove(current)
        add = getattr(owner, f"add_{self.member}")
        for obj in objects:
            add(obj)

        members = [obj for obj in objects if store.contains(obj)]
        store.clear()
        for obj in members:
            store.put(obj)

    def contains(self, owner: Any, obj_or_id: Any) -> bool:
        store = self.store(owner)
        if isinstance(obj_or_id, str):
            return store.has_id(obj_or_id)
        return store.contains(obj_or_id)

    def _reciprocal(self, obj: Any) -> BelongsTo:
        link = getattr(type(obj), self.update, None)
        if not isinstance(link, BelongsTo):
            raise UnconfiguredPropertyError(type(obj).__name__, str(self.update))
        return link

    # ─────────────────────────────────────────────────────────────────────
    # Generated methods
    # ─────────────────────────────────────────────────────────────────────

    def _install(self, owner: type) -> None:
        relation = self
        member, name = self.member, self.name

        def add_member(self: Any, obj: Any) -> Any:
            return relation.add(self, obj)

        def delete_member(self: Any, obj: Any) -> Any:
            return relation.delete(self, obj)

        def get_member_by_id(self: Any, member_id: Any) -> Any:
            return relation.store(self).get(member_id)

        def has_member(self: Any, obj_or_id: Any) -> bool:
            return relation.contains(self, obj_or_id)

        def number_of_members(self: Any) -> int:
            return len(relation.store(self))

        def each_member(self: Any, fn: Callable[[Any], Any] | None = None) -> Iterator[Any] | None:
            members = relation.store(self).values()
            if fn is None:
                return iter(members)
            for obj in members:
                fn(obj)
            return None

        def each_member_with_id(
            self: Any, fn: Callable[[Any, Any], Any] | None = None
        ) -> Iterator[tuple[Any, Any]] | None:
            pairs = [(obj.id, obj) for obj in relation.store(self).values()]
            if fn is None:
                return iter(pairs)
            for member_id, obj in pairs:
                fn(member_id, obj)
            return None

        methods: dict[str, Callable[..., Any]] = {
            f"add_{member}": add_member,
            f"delete_{member}": delete_member,
            f"get_{member}_by_id": get_member_by_id,
            f"has_{member}": has_member,
            f"number_of_{name}": number_of_members,
            f"each_{member}": each_member,
            f"each_{member}_with_id": each_member_with_id,
        }
        for method_name, method in methods.items():
            if method_name in owner.__dict__:
                continue
            method.__name__ = method_name
            method.__qualname__ = f"{owner.__qualname__}.{method_name}"
            setattr(owner, method_name, method)


class Entity:
    """Base class for mapped entities.

    Example:
        >>> node = Node("n1", label="A node", root=True)
        >>> node.properties(label="renamed")["label"]
        'renamed'
        >>> node.properties(colour="red")
        Traceback (most recent call last):
        UnconfiguredPropertyError: Node has no property or relation named 'colour'
    """

    id = Property()

    def __init__(self, id: Any = None, **options: Any) -> None:
        self.id = id
        if options:
            self.properties(**options)

    @classmethod
    def key(cls) -> str:
        """Return the type key naming this class in relation methods."""
        return type_key(cls)

    @classmethod
    def settable(cls, name: str) -> bool:
        attr = getattr(cls, name, None)
        if isinstance(attr, (Property, BelongsTo, HasMany)):
            return True
        return isinstance(attr, property) and attr.fset is not None

    def properties(self, **options: Any) -> dict[str, Any]:
        """Set declared attributes and return a snapshot of all properties.

        Raises:
            UnconfiguredPropertyError: If an option names nothing declared.
                Nothing is set in that case.
        """
        for name in options:
            if not self.settable(name):
                raise UnconfiguredPropertyError(type(self).__name__, name)
        for name, value in options.items():
            setattr(self, name, value)

        snapshot: dict[str, Any] = {}
        for klass in reversed(type(self).__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Property):
                    snapshot[name] = getattr(self, name)
        return snapshot

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


__all__ = ["BelongsTo", "Entity", "HasMany", "Property"]
