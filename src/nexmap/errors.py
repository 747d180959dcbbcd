"""Errors - Exception types raised by nexmap.

Lookup misses are not errors: ``get_*_by_id`` and store lookups return
None. Everything below is fatal and propagates to the caller.
"""

from __future__ import annotations


class NexmapError(Exception):
    """Base class for all nexmap errors."""


class StructuralViolationError(NexmapError, ValueError):
    """A mutation would break the shape of a tree.

    Raised before any store is modified, so the tree is left as it was.
    """


class UnconfiguredPropertyError(NexmapError, AttributeError):
    """An attribute was set that the entity does not declare."""

    def __init__(self, owner: str, name: str) -> None:
        super().__init__(f"{owner} has no property or relation named '{name}'")
        self.owner = owner
        self.name = name


class UnrootedTreeError(NexmapError, IndexError):
    """A root-relative query was made on a tree with no roots."""


class ParseError(NexmapError, ValueError):
    """The document ended, or was malformed, before parsing completed.

    Attributes:
        element: Local name of the element being read when parsing failed.
    """

    def __init__(self, message: str, element: str | None = None) -> None:
        super().__init__(message)
        self.element = element


__all__ = [
    "NexmapError",
    "ParseError",
    "StructuralViolationError",
    "UnconfiguredPropertyError",
    "UnrootedTreeError",
]
