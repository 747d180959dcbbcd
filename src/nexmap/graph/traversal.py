"""Traversal - Undirected adjacency and root-relative search.

Trees and networks store their edges without orientation. Parent/child
direction only exists relative to a chosen root, so every query here runs
a fresh breadth-first search from that root.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterator


@dataclass
class SearchResult:
    """Breadth-first search from a root.

    Attributes:
        root: The node the search started from.
        distance: Hop count from the root for every reachable node.
        predecessor: Previous node on a shortest path from the root.
            The root itself has no entry.
    """

    root: Hashable
    distance: dict[Hashable, int] = field(default_factory=dict)
    predecessor: dict[Hashable, Hashable] = field(default_factory=dict)

    def reaches(self, node: Hashable) -> bool:
        return node in self.distance

    def path_to(self, node: Hashable) -> list[Hashable]:
        """Return the nodes from the root to ``node``, both included.

        Returns an empty list if ``node`` is unreachable.
        """
        if node not in self.distance:
            return []
        path = [node]
        while path[-1] in self.predecessor:
            path.append(self.predecessor[path[-1]])
        path.reverse()
        return path


class Adjacency:
    """Undirected multigraph keyed by node objects.

    Edge payloads are kept per unordered node pair so that parallel edges
    can be removed individually.
    """

    def __init__(self) -> None:
        self._neighbours: dict[Hashable, dict[Hashable, list[Any]]] = {}

    def add_node(self, node: Hashable) -> None:
        self._neighbours.setdefault(node, {})

    def remove_node(self, node: Hashable) -> None:
        for other in self._neighbours.pop(node, {}):
            self._neighbours.get(other, {}).pop(node, None)

    def connect(self, a: Hashable, b: Hashable, payload: Any) -> None:
        self._neighbours.setdefault(a, {}).setdefault(b, []).append(payload)
        if a is not b:
            self._neighbours.setdefault(b, {}).setdefault(a, []).append(payload)

    def disconnect(self, a: Hashable, b: Hashable, payload: Any) -> None:
        for x, y in ((a, b), (b, a)):
            payloads = self._neighbours.get(x, {}).get(y)
            if payloads is None:
                continue
            if payload in payloads:
                payloads.remove(payload)
            if not payloads:
                del self._neighbours[x][y]

    def has_node(self, node: Hashable) -> bool:
        return node in self._neighbours

    def nodes(self) -> Iterator[Hashable]:
        yield from self._neighbours

    def adjacent(self, node: Hashable) -> list[Hashable]:
        """Return neighbours of ``node`` in the order they were connected."""
        return list(self._neighbours.get(node, {}))

    def payloads(self, a: Hashable, b: Hashable) -> list[Any]:
        return list(self._neighbours.get(a, {}).get(b, []))

    def search(self, root: Hashable) -> SearchResult:
        """Breadth-first search from ``root`` over undirected adjacency."""
        result = SearchResult(root=root, distance={root: 0})
        queue: deque[Hashable] = deque([root])
        while queue:
            node = queue.popleft()
            for other in self._neighbours.get(node, {}):
                if other in result.distance:
                    continue
                result.distance[other] = result.distance[node] + 1
                result.predecessor[other] = node
                queue.append(other)
        return result


def parent(search: SearchResult, node: Hashable) -> Hashable | None:
    """Return the node before ``node`` on the path from the root."""
    path = search.path_to(node)
    return path[-2] if len(path) >= 2 else None


def children(adjacency: Adjacency, search: SearchResult, node: Hashable) -> list[Hashable]:
    up = parent(search, node)
    return [n for n in adjacency.adjacent(node) if n is not up]


def ancestors(search: SearchResult, node: Hashable) -> list[Hashable]:
    """Return ancestors of ``node``, nearest first, ending at the root."""
    path = search.path_to(node)
    return list(reversed(path[:-1]))


def descendants(search: SearchResult, node: Hashable) -> list[Hashable]:
    """Return every node whose path from the root passes through ``node``."""
    if not search.reaches(node):
        return []
    depth = search.distance[node]
    found = []
    for other, distance in search.distance.items():
        if distance <= depth:
            continue
        step = other
        while step in search.predecessor:
            step = search.predecessor[step]
            if step is node:
                found.append(other)
                break
            if search.distance[step] <= depth:
                break
    return found


def lowest_common_ancestor(search: SearchResult, a: Hashable, b: Hashable) -> Hashable | None:
    """Return the deepest node shared by the root paths of ``a`` and ``b``."""
    path_a = search.path_to(a)
    path_b = search.path_to(b)
    lca = None
    for x, y in zip(path_a, path_b):
        if x is not y:
            break
        lca = x
    return lca


__all__ = [
    "Adjacency",
    "SearchResult",
    "ancestors",
    "children",
    "descendants",
    "lowest_common_ancestor",
    "parent",
]
