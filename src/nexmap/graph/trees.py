"""Trees - Nodes, edges, rooted trees, networks, and tree collections.

A Tree keeps its nodes and edges in keyed stores and mirrors the edges in
an undirected adjacency. Orientation is not stored: ``parent``,
``children``, ``ancestors``, ``descendants`` and
``lowest_common_ancestor`` are answered per root, so the same edges read
differently from different roots:

    n1 - n2 - n3

    tree.parent(n2, n1)  ->  {n1: n1}
    tree.parent(n2, n3)  ->  {n3: n3}

A Tree rejects a second edge into an already-claimed node; a Network
accepts it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator

from nexmap.errors import StructuralViolationError, UnrootedTreeError
from nexmap.graph import traversal
from nexmap.graph.traversal import Adjacency
from nexmap.mapper import BelongsTo, Entity, HasMany, Property

logger = logging.getLogger(__name__)


class Node(Entity):
    """A node of a tree or network.

    Attributes:
        id: File-level unique identifier.
        label: Human-readable description.
        root: True if the node is a root of its tree.
        otu: Taxon this node represents, if any.
        tree: Tree holding this node.
    """

    label = Property()
    root = Property(default=False)
    otu = BelongsTo()
    tree = BelongsTo()

    def __init__(
        self, id: Any = None, label: str | None = None, root: bool = False, **options: Any
    ) -> None:
        super().__init__(id, label=label, root=root, **options)

    def is_root(self) -> bool:
        return bool(self.root)


class Edge(Entity):
    """An edge joining two nodes.

    ``source`` and ``target`` may be Node objects or node identifiers;
    identifiers are resolved against the tree's nodes, and replaced by
    them, when the edge is added to a tree.

    Attributes:
        id: File-level unique identifier.
        source: Node (or node id) the edge leaves.
        target: Node (or node id) the edge enters.
        length: Optional numeric branch length.
        label: Human-readable description.
        tree: Tree holding this edge.
    """

    label = Property()
    source = Property()
    target = Property()
    length = Property()
    tree = BelongsTo()

    def __init__(
        self,
        id: Any = None,
        source: Node | str | None = None,
        target: Node | str | None = None,
        length: float | int | None = None,
        label: str | None = None,
        **options: Any,
    ) -> None:
        super().__init__(
            id, source=source, target=target, length=length, label=label, **options
        )


class RootEdge(Edge):
    """An edge without a source: the branch leading into a root."""

    def __init__(
        self,
        id: Any = None,
        target: Node | str | None = None,
        length: float | int | None = None,
        label: str | None = None,
        **options: Any,
    ) -> None:
        super().__init__(id, target=target, length=length, label=label, **options)

    @property
    def source(self) -> None:
        return None

    @source.setter
    def source(self, value: Any) -> None:
        if value is not None:
            raise StructuralViolationError(f"root edge {self.id!r} can not have a source")


class Tree(Entity):
    """A rooted (or multiply rooted) tree.

    Attributes:
        id: File-level unique identifier.
        label: Human-readable description.
        rootedge: Optional RootEdge above the root.
        trees: Tree collection holding this tree.
        nodes: Nodes of the tree, in insertion order.
        edges: Edges of the tree, in insertion order.
    """

    # A node may be the target of at most one edge.
    single_parent = True

    label = Property()
    rootedge = Property()
    trees = BelongsTo()
    nodes = HasMany(on_add="_node_added", on_remove="_node_removed")
    edges = HasMany(check="_check_edges", on_add="_edge_added", on_remove="_edge_removed")

    def __init__(self, id: Any = None, label: str | None = None, **options: Any) -> None:
        self._adjacency = Adjacency()
        self._endpoints: dict[Edge, tuple[Node | None, Node | None]] = {}
        super().__init__(id, label=label, **options)

    @property
    def roots(self) -> list[Node]:
        """Nodes flagged as roots, in insertion order."""
        return [node for node in self.nodes if node.is_root()]

    def get_node(self, node: Node | str | None) -> Node | None:
        """Resolve a node or node id to a node of this tree."""
        if node is None or isinstance(node, Node):
            return node
        return self.get_node_by_id(node)

    def adjacent_nodes(self, node: Node | str) -> list[Node]:
        return self._adjacency.adjacent(self.get_node(node))

    def include(self, obj: Any) -> bool:
        """True if the node or edge (object or id) belongs to this tree."""
        return self.has_node(obj) or self.has_edge(obj)

    __contains__ = include

    def __getitem__(self, item_id: str) -> Node | Edge | None:
        return self.get_node_by_id(item_id) or self.get_edge_by_id(item_id)

    def __lshift__(self, obj: Node | Edge) -> Tree:
        if isinstance(obj, Node):
            self.add_node(obj)
        elif isinstance(obj, Edge):
            self.add_edge(obj)
        else:
            raise TypeError(f"can not add {type(obj).__name__} to a tree")
        return self

    # ─────────────────────────────────────────────────────────────────────────
    # Store hooks
    # ─────────────────────────────────────────────────────────────────────────

    def _resolve(self, endpoint: Node | str | None, edge: Edge) -> Node | None:
        if endpoint is None:
            return None
        if isinstance(endpoint, Node):
            if not self.has_node(endpoint):
                raise StructuralViolationError(
                    f"edge {edge.id!r} refers to node {endpoint.id!r} outside tree {self.id!r}"
                )
            return endpoint
        node = self.get_node_by_id(endpoint)
        if node is None:
            raise StructuralViolationError(
                f"edge {edge.id!r} refers to unknown node {endpoint!r} in tree {self.id!r}"
            )
        return node

    def _check_edges(self, edges: list[Edge], replace: bool) -> None:
        claimed: dict[Node, Edge] = {}
        if not replace:
            claimed = {target: e for e, (_, target) in self._endpoints.items() if target}
        for edge in edges:
            if edge.target is None:
                raise StructuralViolationError(f"edge {edge.id!r} has no target")
            self._resolve(edge.source, edge)
            target = self._resolve(edge.target, edge)
            if not self.single_parent:
                continue
            holder = claimed.get(target)
            if holder is not None and holder.id != edge.id:
                logger.debug("rejecting edge %r: %r already entered by %r", edge, target, holder)
                raise StructuralViolationError(
                    f"node {target.id!r} is already the target of edge {holder.id!r}"
                )
            claimed[target] = edge

    def _edge_added(self, edge: Edge) -> None:
        source = self._resolve(edge.source, edge)
        target = self._resolve(edge.target, edge)
        edge.source, edge.target = source, target
        self._endpoints[edge] = (source, target)
        if source is not None and target is not None:
            self._adjacency.connect(source, target, edge)
        elif target is not None:
            self._adjacency.add_node(target)

    def _edge_removed(self, edge: Edge) -> None:
        source, target = self._endpoints.pop(edge, (None, None))
        if source is not None and target is not None:
            self._adjacency.disconnect(source, target, edge)

    def _node_added(self, node: Node) -> None:
        self._adjacency.add_node(node)

    def _node_removed(self, node: Node) -> None:
        for edge, (source, target) in list(self._endpoints.items()):
            if source is node or target is node:
                self.delete_edge(edge)
        self._adjacency.remove_node(node)

    # ─────────────────────────────────────────────────────────────────────────
    # Root-relative queries
    # ─────────────────────────────────────────────────────────────────────────

    def _roots_for(self, roots: tuple[Node | str, ...]) -> list[Node]:
        if roots:
            resolved = [self.get_node(root) for root in roots]
            for given, node in zip(roots, resolved):
                if node is None or not self.has_node(node):
                    raise UnrootedTreeError(f"tree {self.id!r} has no root node {given!r}")
            return resolved
        found = self.roots
        if not found:
            raise UnrootedTreeError(f"tree {self.id!r} has no root to query from")
        return found

    def _per_root(
        self, roots: tuple[Node | str, ...], answer: Callable[[traversal.SearchResult], Any]
    ) -> dict[Node, Any]:
        return {root: answer(self._adjacency.search(root)) for root in self._roots_for(roots)}

    def parent(self, node: Node | str, *roots: Node | str) -> dict[Node, Node | None]:
        """Return the parent of ``node`` relative to each root.

        Args:
            node: The node (or its id).
            *roots: Roots to query from. Defaults to ``self.roots``.

        Returns:
            Mapping of root to parent node (None for the root itself).

        Raises:
            UnrootedTreeError: If no roots are given and none are flagged.
        """
        target = self.get_node(node)
        return self._per_root(roots, lambda search: traversal.parent(search, target))

    def children(self, node: Node | str, *roots: Node | str) -> dict[Node, list[Node]]:
        """Return the neighbours of ``node`` other than its parent, per root."""
        target = self.get_node(node)
        return self._per_root(
            roots, lambda search: traversal.children(self._adjacency, search, target)
        )

    def ancestors(self, node: Node | str, *roots: Node | str) -> dict[Node, list[Node]]:
        """Return ancestors of ``node`` per root, nearest first."""
        target = self.get_node(node)
        return self._per_root(roots, lambda search: traversal.ancestors(search, target))

    def descendants(self, node: Node | str, *roots: Node | str) -> dict[Node, list[Node]]:
        """Return nodes below ``node`` per root, in breadth-first order."""
        target = self.get_node(node)
        return self._per_root(roots, lambda search: traversal.descendants(search, target))

    def lowest_common_ancestor(
        self, node1: Node | str, node2: Node | str, *roots: Node | str
    ) -> dict[Node, Node | None]:
        """Return the deepest node on both root paths, per root."""
        a, b = self.get_node(node1), self.get_node(node2)
        return self._per_root(
            roots, lambda search: traversal.lowest_common_ancestor(search, a, b)
        )


class Network(Tree):
    """A rooted graph that allows reticulation (nodes with several parents)."""

    single_parent = False

    trees = BelongsTo()


class Trees(Entity):
    """A collection of trees and networks over one set of taxa.

    Attributes:
        id: File-level unique identifier.
        label: Human-readable description.
        otus: Taxon set the trees refer to.
        nexml: Document holding this collection.
        trees: Trees in this collection.
        networks: Networks in this collection.
    """

    label = Property()
    otus = BelongsTo()
    nexml = BelongsTo()
    trees = HasMany()
    networks = HasMany()

    def __init__(self, id: Any = None, label: str | None = None, **options: Any) -> None:
        super().__init__(id, label=label, **options)

    @property
    def tree_set(self):
        return Trees.trees.store(self)

    @property
    def network_set(self):
        return Trees.networks.store(self)

    def __lshift__(self, obj: Tree) -> Trees:
        # Network is a Tree, so it must be matched first.
        if isinstance(obj, Network):
            self.add_network(obj)
        elif isinstance(obj, Tree):
            self.add_tree(obj)
        else:
            raise TypeError(f"can not add {type(obj).__name__} to a tree collection")
        return self

    append = __lshift__

    def extend(self, objects: Iterable[Tree]) -> Trees:
        for obj in objects:
            self << obj
        return self

    def __getitem__(self, tree_id: str) -> Tree | None:
        return self.get_tree_by_id(tree_id) or self.get_network_by_id(tree_id)

    def include(self, obj: Tree | str) -> bool:
        return self.has_tree(obj) or self.has_network(obj)

    __contains__ = include

    def __iter__(self) -> Iterator[Tree]:
        yield from self.trees
        yield from self.networks

    def each(self, fn: Callable[[Tree], Any]) -> None:
        for tree in self:
            fn(tree)

    def count(self) -> int:
        """Return the total number of trees and networks."""
        return self.number_of_trees() + self.number_of_networks()

    __len__ = count


__all__ = ["Edge", "Network", "Node", "RootEdge", "Tree", "Trees"]
