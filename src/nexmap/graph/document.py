"""Document - The root object of a NeXML document."""

from __future__ import annotations

from typing import Any, Iterator

from nexmap.graph.taxa import Otu, Otus
from nexmap.graph.trees import Tree, Trees
from nexmap.mapper import Entity, HasMany, Property


class Nexml(Entity):
    """A NeXML document: taxon sets and tree collections.

    Relations are not singularized, so the methods read ``add_otus``,
    ``get_trees_by_id``, ``number_of_otus`` and so on.

    Attributes:
        version: NeXML schema version of the document.
        generator: Name of the program that wrote the document.
        otus: Taxon sets, in document order.
        trees: Tree collections, in document order.
    """

    version = Property(default="0.9")
    generator = Property(default="nexmap")
    otus = HasMany(singularize=False)
    trees = HasMany(singularize=False)

    def __init__(
        self, version: str | None = "0.9", generator: str | None = "nexmap", **options: Any
    ) -> None:
        super().__init__(None, version=version, generator=generator, **options)

    def __lshift__(self, element: Otus | Trees) -> Nexml:
        if isinstance(element, Otus):
            self.add_otus(element)
        elif isinstance(element, Trees):
            self.add_trees(element)
        else:
            raise TypeError(f"can not add {type(element).__name__} to a document")
        return self

    def get_otu_by_id(self, otu_id: str) -> Otu | None:
        """Find a taxon by id in any taxon set."""
        for taxa in self.otus:
            otu = taxa.get_otu_by_id(otu_id)
            if otu is not None:
                return otu
        return None

    def get_tree_by_id(self, tree_id: str) -> Tree | None:
        """Find a tree or network by id in any tree collection."""
        for collection in self.trees:
            tree = collection[tree_id]
            if tree is not None:
                return tree
        return None

    def __iter__(self) -> Iterator[Tree]:
        """Iterate over every tree and network in the document."""
        for collection in self.trees:
            yield from collection


__all__ = ["Nexml"]
