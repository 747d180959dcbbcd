"""Cursor - Forward-only token cursor over an XML document.

The cursor exposes one token at a time: its kind, the element's local name
(namespace stripped), and attribute lookup on start tokens. It never moves
backwards and holds a single read position.
"""

from __future__ import annotations

import io
import xml.etree.ElementTree as ET
from collections import deque
from enum import Enum
from pathlib import Path
from typing import IO, Any, Protocol, Union, runtime_checkable

from nexmap.errors import ParseError

Source = Union[str, bytes, Path, IO[Any]]


class TokenKind(Enum):
    """Kinds of token a cursor can stand on."""

    NONE = "none"  # before the first read, and after the last
    START = "start"
    END = "end"
    OTHER = "other"  # comments and processing instructions


@runtime_checkable
class Cursor(Protocol):
    """Protocol for forward-only document cursors."""

    @property
    def kind(self) -> TokenKind: ...

    @property
    def local_name(self) -> str | None: ...

    def read(self) -> bool:
        """Advance one token. Returns False at end of stream."""
        ...

    def attribute(self, name: str) -> str | None: ...

    def close(self) -> None: ...


def local_part(name: str) -> str:
    """Strip a ``{namespace}`` or ``prefix:`` qualifier from a name."""
    if name.startswith("{"):
        return name.rpartition("}")[2]
    return name.rpartition(":")[2]


def _open(source: Source) -> tuple[IO[Any], bool]:
    """Return a readable stream for ``source`` and whether we own it."""
    if isinstance(source, Path):
        return source.open("rb"), True
    if isinstance(source, bytes):
        return io.BytesIO(source), True
    if isinstance(source, str):
        if source.lstrip().startswith("<"):
            return io.StringIO(source), True
        return open(source, "rb"), True
    return source, False


class XmlCursor:
    """Cursor backed by ``xml.etree.ElementTree.XMLPullParser``.

    The source is read and fed to the parser ``chunk_size`` bytes at a time,
    only when no parsed token is pending.

    Args:
        source: File path, XML text, XML bytes, or a readable file object.
            File objects passed in are not closed by the cursor.
        chunk_size: Amount read from the stream per feed.
    """

    def __init__(self, source: Source, chunk_size: int = 16384) -> None:
        self._stream, self._owns_stream = _open(source)
        self._chunk_size = chunk_size
        self._parser = ET.XMLPullParser(events=("start", "end", "comment", "pi"))
        self._pending: deque[tuple[str, Any]] = deque()
        self._exhausted = False
        self._kind = TokenKind.NONE
        self._element: ET.Element | None = None
        self._closed = False

    @property
    def kind(self) -> TokenKind:
        return self._kind

    @property
    def local_name(self) -> str | None:
        if self._kind in (TokenKind.START, TokenKind.END) and self._element is not None:
            return local_part(self._element.tag)
        return None

    def read(self) -> bool:
        while not self._pending:
            if self._exhausted:
                self._kind, self._element = TokenKind.NONE, None
                return False
            self._fill()

        event, payload = self._pending.popleft()
        if event == "start":
            self._kind, self._element = TokenKind.START, payload
        elif event == "end":
            self._kind, self._element = TokenKind.END, payload
        else:
            self._kind, self._element = TokenKind.OTHER, None
        return True

    def attribute(self, name: str) -> str | None:
        """Look up an attribute of the current start element.

        ``name`` may be qualified (``xsi:type``) or local (``type``); an
        exact match wins over a namespace-stripped one.
        """
        if self._kind is not TokenKind.START or self._element is None:
            return None
        attrib = self._element.attrib
        if name in attrib:
            return attrib[name]
        wanted = local_part(name)
        for key, value in attrib.items():
            if local_part(key) == wanted:
                return value
        return None

    def _fill(self) -> None:
        chunk = self._stream.read(self._chunk_size)
        try:
            if chunk:
                self._parser.feed(chunk)
            else:
                self._exhausted = True
                self._parser.close()
            self._pending.extend(self._parser.read_events())
        except ET.ParseError as exc:
            self._exhausted = True
            raise ParseError(f"malformed document: {exc}") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_stream:
            self._stream.close()

    def __enter__(self) -> XmlCursor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["Cursor", "Source", "TokenKind", "XmlCursor", "local_part"]
