"""Reader module - Streaming NeXML input.

Exports:
- TokenKind, Cursor: Forward-only cursor protocol
- XmlCursor: Cursor over an XML stream
- NexmlReader: Builds a Nexml document from a cursor
- parse: One-call parse with guaranteed close
"""

from nexmap.reader.cursor import Cursor, TokenKind, XmlCursor
from nexmap.reader.parser import NexmlReader, parse

__all__ = ["Cursor", "NexmlReader", "TokenKind", "XmlCursor", "parse"]
