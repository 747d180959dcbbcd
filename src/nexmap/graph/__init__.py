"""Graph module - Phylogenetic entities and tree traversal.

Exports:
- Otu, Otus: Taxa and taxon sets
- Node, Edge, RootEdge: Tree elements
- Tree, Network: Rooted graphs with root-relative queries
- Trees: Collection of trees and networks
- Nexml: Document root
"""

from nexmap.graph.document import Nexml
from nexmap.graph.taxa import Otu, Otus
from nexmap.graph.trees import Edge, Network, Node, RootEdge, Tree, Trees

__all__ = [
    "Edge",
    "Network",
    "Nexml",
    "Node",
    "Otu",
    "Otus",
    "RootEdge",
    "Tree",
    "Trees",
]
