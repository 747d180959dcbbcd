"""Taxa - Operational taxonomic units and the sets that hold them."""

from __future__ import annotations

from typing import Any, Iterator

from nexmap.mapper import BelongsTo, Entity, HasMany, Property


class Otu(Entity):
    """A single taxon.

    Attributes:
        id: File-level unique identifier.
        label: Human-readable name.
        otus: The taxon set holding this taxon.
        nodes: Tree nodes linked to this taxon.
    """

    label = Property()
    otus = BelongsTo()
    nodes = HasMany()

    def __init__(self, id: Any = None, label: str | None = None, **options: Any) -> None:
        super().__init__(id, label=label, **options)


class Otus(Entity):
    """A set of taxa.

    Supports the container protocol over its taxa:

        >>> taxa = Otus("taxa1") << Otu("t1") << Otu("t2")
        >>> "t1" in taxa, len(taxa)
        (True, 2)

    Attributes:
        otus: The taxa in this set, in insertion order.
        trees: Tree collections describing this set of taxa.
        nexml: The document holding this set.
    """

    label = Property()
    otus = HasMany()
    trees = HasMany(singularize=False)
    nexml = BelongsTo()

    def __init__(self, id: Any = None, label: str | None = None, **options: Any) -> None:
        super().__init__(id, label=label, **options)

    def __lshift__(self, otu: Otu) -> Otus:
        return self.add_otu(otu)

    def __getitem__(self, otu_id: str) -> Otu | None:
        return self.get_otu_by_id(otu_id)

    def __contains__(self, otu_or_id: Otu | str) -> bool:
        return self.has_otu(otu_or_id)

    def __iter__(self) -> Iterator[Otu]:
        return iter(self.otus)

    def __len__(self) -> int:
        return self.number_of_otus()

    def delete(self, otu: Otu) -> Otu | None:
        return self.delete_otu(otu)

    include = __contains__


__all__ = ["Otu", "Otus"]
