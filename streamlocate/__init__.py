"""
streamlocate - offset and (line, column) conversion for byte streams.

Converts between absolute byte offsets and line/column positions for any
readable byte source (files, sockets, in-memory buffers) without loading the
whole source up front:
- Incremental line index, extended only as far as a query needs
- "\n" and "\r\n" line terminators
- Zero-based locations with a one-based view for diagnostics
"""

__version__ = "0.1.0"

from streamlocate.core.errors import (
    ContiguityError,
    LineOutOfRange,
    OffsetOutOfRange,
    StreamLocateError,
)
from streamlocate.core.index import LineIndex
from streamlocate.core.io import ByteSource, ChunkReader
from streamlocate.core.location import Location, Offset
from streamlocate.core.stream import IndexedStream, QueryState

__all__ = [
    "ByteSource",
    "ChunkReader",
    "ContiguityError",
    "IndexedStream",
    "LineIndex",
    "LineOutOfRange",
    "Location",
    "Offset",
    "OffsetOutOfRange",
    "QueryState",
    "StreamLocateError",
]
