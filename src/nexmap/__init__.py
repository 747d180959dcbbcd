"""
nexmap - Phylogenetic object graphs from NeXML

nexmap reads NeXML documents into taxa, trees and networks whose
relations stay consistent from both ends as they are edited, and answers
parent, child, ancestor, descendant and common-ancestor queries relative
to any root.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("nexmap")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed

from nexmap.errors import (
    NexmapError,
    ParseError,
    StructuralViolationError,
    UnconfiguredPropertyError,
    UnrootedTreeError,
)
from nexmap.graph import Edge, Network, Nexml, Node, Otu, Otus, RootEdge, Tree, Trees
from nexmap.reader import NexmlReader, parse

__all__ = [
    "__version__",
    "Edge",
    "Network",
    "Nexml",
    "NexmapError",
    "NexmlReader",
    "Node",
    "Otu",
    "Otus",
    "ParseError",
    "RootEdge",
    "StructuralViolationError",
    "Tree",
    "Trees",
    "UnconfiguredPropertyError",
    "UnrootedTreeError",
    "parse",
]
