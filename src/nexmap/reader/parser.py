"""NexmlReader - Build the object graph from a NeXML document.

The reader walks the document once, forward only, and builds each object
from the current element's attributes as it is reached:

    nexml
    ├── otus*         -> Otus
    │   └── otu*      -> Otu
    └── trees*        -> Trees
        ├── tree*     -> Tree
        │   ├── node*       -> Node
        │   ├── rootedge?   -> RootEdge
        │   └── edge*       -> Edge
        └── network*  -> Network (same children as tree)

Every scan is bounded by the element being read: reaching the end of the
stream, or the close of the enclosing element, before the expected
element raises ParseError instead of reading forever.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from nexmap.config import DEFAULT_CONFIG, ReaderConfig, configure_logging, load_config
from nexmap.errors import ParseError
from nexmap.graph import Edge, Network, Nexml, Node, Otu, Otus, RootEdge, Tree, Trees
from nexmap.reader.cursor import Cursor, Source, TokenKind, XmlCursor

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "1")


class NexmlReader:
    """Forward-only reader producing a Nexml object.

    Use as a context manager so the underlying stream is always released:

        with NexmlReader("trees.xml") as reader:
            document = reader.parse()

    Args:
        source: Path, XML text/bytes, file object, or an open Cursor.
        config: Reader settings. Defaults to the ``[reader]`` section of
            load_config(); a ``[logging]`` level set there is applied too.
    """

    def __init__(self, source: Source | Cursor, config: ReaderConfig | None = None) -> None:
        if config is None:
            settings = load_config()
            if settings.get("logging") != DEFAULT_CONFIG["logging"]:
                configure_logging(settings)
            config = ReaderConfig.from_config(settings)
        self._config = config
        if isinstance(source, Cursor):
            self._cursor = source
        else:
            self._cursor = XmlCursor(source, chunk_size=self._config.chunk_size)
        self._cache: dict[str, Any] = {}
        self._document: Nexml | None = None

    def __enter__(self) -> NexmlReader:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._cursor.close()

    def parse(self) -> Nexml:
        """Read the document and return its root object.

        Returns:
            The populated Nexml. Later calls return the same object.

        Raises:
            ParseError: If the document is malformed or ends early.
        """
        if self._document is not None:
            return self._document

        self.scan_to("nexml")
        document = Nexml(self._attr("version"), self._attr("generator"))
        for name in self._children("nexml"):
            if name == "otus":
                document.add_otus(self._parse_otus())
            elif name == "trees":
                document.add_trees(self._parse_trees())
            else:
                self._skip(name, "nexml")

        logger.debug(
            "parsed document with %d taxon sets and %d tree collections",
            document.number_of_otus(),
            document.number_of_trees(),
        )
        self._document = document
        return document

    # ─────────────────────────────────────────────────────────────────────────
    # Cursor movement
    # ─────────────────────────────────────────────────────────────────────────

    def scan_to(self, name: str, boundary: str | None = None) -> None:
        """Advance until the start of element ``name``.

        Args:
            name: Local name of the element to find.
            boundary: Enclosing element; meeting its close tag first fails.

        Raises:
            ParseError: At end of stream or when ``boundary`` closes first.
        """
        while True:
            if not self._cursor.read():
                raise ParseError(f"document ended before <{name}> was found", name)
            kind, local = self._cursor.kind, self._cursor.local_name
            if kind is TokenKind.START and local == name:
                return
            if boundary is not None and kind is TokenKind.END and local == boundary:
                raise ParseError(f"</{boundary}> closed before <{name}> was found", name)

    def _advance(self, inside: str) -> None:
        if not self._cursor.read():
            raise ParseError(f"document ended inside <{inside}>", inside)

    def _children(self, parent: str) -> Iterator[str]:
        """Yield the name of each child element until ``parent`` closes.

        The consumer must read each yielded child through its end tag.
        """
        while True:
            self._advance(parent)
            kind, local = self._cursor.kind, self._cursor.local_name
            if kind is TokenKind.START:
                yield local or ""
            elif kind is TokenKind.END:
                if local != parent:
                    raise ParseError(f"unexpected </{local}> inside <{parent}>", parent)
                return

    def _skip(self, name: str, parent: str | None = None) -> None:
        """Consume the current element and everything inside it."""
        if parent is not None and self._config.strict:
            raise ParseError(f"unexpected <{name}> inside <{parent}>", name)
        depth = 1
        while depth:
            self._advance(name)
            if self._cursor.kind is TokenKind.START:
                depth += 1
            elif self._cursor.kind is TokenKind.END:
                depth -= 1

    def _attr(self, name: str) -> str | None:
        return self._cursor.attribute(name)

    def _linked(self, attribute: str, kind: type) -> Any:
        """Return the cached object named by ``attribute`` if it is a ``kind``."""
        if not self._config.link_taxa:
            return None
        ref = self._attr(attribute)
        found = self._cache.get(ref) if ref is not None else None
        if ref is not None and not isinstance(found, kind):
            logger.debug("unresolved %s reference %r", attribute, ref)
            return None
        return found

    # ─────────────────────────────────────────────────────────────────────────
    # Elements
    # ─────────────────────────────────────────────────────────────────────────

    def _parse_otus(self) -> Otus:
        taxa = Otus(self._attr("id"), label=self._attr("label"))
        self._cache[taxa.id] = taxa
        for name in self._children("otus"):
            if name == "otu":
                taxa.add_otu(self._parse_otu())
            else:
                self._skip(name, "otus")
        return taxa

    def _parse_otu(self) -> Otu:
        otu = Otu(self._attr("id"), label=self._attr("label"))
        self._cache[otu.id] = otu
        self._skip("otu")
        return otu

    def _parse_trees(self) -> Trees:
        collection = Trees(self._attr("id"), label=self._attr("label"))
        taxa = self._linked("otus", Otus)
        if taxa is not None:
            collection.otus = taxa
        for name in self._children("trees"):
            if name == "tree":
                collection.add_tree(self._parse_tree(Tree, "tree"))
            elif name == "network":
                collection.add_network(self._parse_tree(Network, "network"))
            else:
                self._skip(name, "trees")
        return collection

    def _parse_tree(self, cls: type[Tree], element: str) -> Tree:
        tree = cls(self._attr("id"), label=self._attr("label"))
        integral = (self._attr("xsi:type") or "").endswith(("IntTree", "IntNetwork"))
        for name in self._children(element):
            if name == "node":
                tree.add_node(self._parse_node())
            elif name == "edge":
                tree.add_edge(self._parse_edge(integral))
            elif name == "rootedge" and element == "tree":
                tree.rootedge = self._parse_rootedge(integral)
            else:
                self._skip(name, element)

        logger.debug(
            "parsed %s %r: %d nodes, %d edges",
            element,
            tree.id,
            tree.number_of_nodes(),
            tree.number_of_edges(),
        )
        return tree

    def _parse_node(self) -> Node:
        node = Node(
            self._attr("id"),
            label=self._attr("label"),
            root=(self._attr("root") or "").lower() in TRUE_VALUES,
        )
        otu = self._linked("otu", Otu)
        if otu is not None:
            node.otu = otu
        self._skip("node")
        return node

    def _parse_edge(self, integral: bool) -> Edge:
        # Endpoints stay as raw ids; the tree resolves them on add_edge.
        edge = Edge(
            self._attr("id"),
            source=self._attr("source"),
            target=self._attr("target"),
            length=self._length(integral, "edge"),
            label=self._attr("label"),
        )
        self._skip("edge")
        return edge

    def _parse_rootedge(self, integral: bool) -> RootEdge:
        rootedge = RootEdge(
            self._attr("id"),
            target=self._attr("target"),
            length=self._length(integral, "rootedge"),
            label=self._attr("label"),
        )
        self._skip("rootedge")
        return rootedge

    def _length(self, integral: bool, element: str) -> int | float | None:
        text = self._attr("length")
        if text is None:
            return None
        try:
            return int(text) if integral else float(text)
        except ValueError as exc:
            raise ParseError(f"invalid length {text!r} on <{element}>", element) from exc


def parse(source: Source, config: ReaderConfig | None = None) -> Nexml:
    """Parse a NeXML document, always releasing the source.

    Args:
        source: Path, XML text/bytes, or file object.
        config: Reader settings. Defaults to the discovered configuration.

    Returns:
        The populated Nexml document.
    """
    with NexmlReader(source, config) as reader:
        return reader.parse()


__all__ = ["NexmlReader", "parse"]
