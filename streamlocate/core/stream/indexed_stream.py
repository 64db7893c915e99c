"""
Offset and (line, column) conversion over a readable byte stream.

IndexedStream reads its source lazily: a query pulls chunks only until the
line index covers the requested position, and bytes that have been indexed
are never read again to answer another query.
"""

import io
from enum import Enum
from typing import Callable, Optional, Tuple, TypeVar, Union

from streamlocate.core.errors import LineOutOfRange, OffsetOutOfRange
from streamlocate.core.index.line_index import LineIndex, NeedsMoreData
from streamlocate.core.io.source import ByteSource, ChunkReader
from streamlocate.core.location import Location, Offset
from streamlocate.utils.config import get_config
from streamlocate.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class QueryState(str, Enum):
    """States of a query's extension loop."""

    SEARCHING = "searching"  # Index too short, pulling more bytes
    FOUND = "found"          # Query answered
    EXHAUSTED = "exhausted"  # Source ended before the query could be answered


class IndexedStream:
    """
    Byte stream that converts between offsets and (line, column) locations.

    Offsets are counted from the position the source was at when it was
    wrapped. The stream is not thread-safe: callers sharing one instance
    must serialize access themselves.

    Bytes read through ``raw`` bypass the index and desynchronize it from the
    source; only use it when no further queries will be made, or seek the
    source back before querying again.

    Attributes:
        chunk_size: Bytes pulled from the source per extension step
    """

    def __init__(self, source: ByteSource, chunk_size: Optional[int] = None):
        """
        Initialize an indexed stream.

        Args:
            source: Readable binary source
            chunk_size: Bytes per read (default: ``stream.chunk_size`` from config)
        """
        if chunk_size is None:
            chunk_size = get_config().chunk_size

        self._reader = ChunkReader(source, chunk_size)
        self._index = LineIndex()
        self._exhausted = False
        self._origin = self._reader.tell() if self._reader.seekable() else 0

        logger.debug(
            "Initialized indexed stream",
            source=type(source).__name__,
            chunk_size=chunk_size,
            origin=self._origin,
        )

    @classmethod
    def from_reader(cls, source: ByteSource) -> "IndexedStream":
        return cls(source)

    @property
    def chunk_size(self) -> int:
        return self._reader.chunk_size

    @property
    def raw(self) -> ByteSource:
        """The underlying source. Reads through it are not indexed."""
        return self._reader.source

    @property
    def index(self) -> LineIndex:
        return self._index

    @property
    def reader(self) -> ChunkReader:
        return self._reader

    @property
    def read_len(self) -> int:
        """Bytes consumed from the source and indexed so far."""
        return self._index.high_water_mark

    high_water_mark = read_len

    @property
    def exhausted(self) -> bool:
        """Whether the source has reported end of data."""
        return self._exhausted

    def _pull(self) -> bytes:
        """
        Read one chunk and index it.

        The chunk is committed only after the read succeeds, so a failing
        read leaves the index untouched.

        Returns:
            The indexed chunk, b"" once the source is exhausted
        """
        if self._exhausted:
            return b""

        base = self._index.high_water_mark
        chunk = self._reader.read_chunk()

        if not chunk:
            self._exhausted = True
            logger.debug(
                "Source exhausted",
                stream_length=base,
                lines=self._index.line_count,
            )
            return b""

        self._index.extend(chunk, base)
        return chunk

    def _run_query(self, query: Callable[[], T]) -> Tuple[QueryState, Optional[T]]:
        """
        Retry a query against the index, pulling chunks until it succeeds or
        the source is exhausted.

        Returns:
            Tuple of (terminal state, result or None)
        """
        state = QueryState.SEARCHING
        result: Optional[T] = None
        pulls = 0

        while state is QueryState.SEARCHING:
            try:
                result = query()
            except NeedsMoreData:
                if self._pull():
                    pulls += 1
                else:
                    state = QueryState.EXHAUSTED
            else:
                state = QueryState.FOUND

        logger.debug(
            "Query finished",
            state=state.value,
            chunks_pulled=pulls,
            high_water_mark=self._index.high_water_mark,
        )

        return state, result

    def line_col_of(self, offset: Union[Offset, int]) -> Location:
        """
        Get the zero-based location of an offset.

        An offset equal to the stream length is valid: it is the position just
        past the last byte.

        Raises:
            OffsetOutOfRange: If the offset lies beyond the end of the stream
        """
        target = Offset.coerce(offset)
        state, location = self._run_query(lambda: self._index.locate(target))

        if state is QueryState.EXHAUSTED or location is None:
            raise OffsetOutOfRange(target.value, self._index.high_water_mark)

        return location

    def one_based_line_col_of(self, offset: Union[Offset, int]) -> Tuple[int, int]:
        """Get the one-based (line, column) of an offset."""
        return self.line_col_of(offset).one_based()

    def line_of(self, offset: Union[Offset, int]) -> int:
        """Get the zero-based line containing an offset."""
        return self.line_col_of(offset).line

    def offset_of(self, location: Union[Location, Tuple[int, int]]) -> Offset:
        """
        Get the offset of a zero-based location.

        The column is added to the line start as is; it is not checked against
        the length of the line.

        Raises:
            LineOutOfRange: If the line lies beyond the last line of the stream
        """
        loc = Location.coerce(location)
        state, offset = self._run_query(lambda: self._index.resolve(loc))

        if state is QueryState.EXHAUSTED or offset is None:
            raise LineOutOfRange(loc.line, self._index.line_count, loc.column)

        return offset

    def line_start_offset(self, line: int) -> Offset:
        """
        Get the offset at which a zero-based line begins.

        Raises:
            LineOutOfRange: If the line lies beyond the last line of the stream
        """
        state, offset = self._run_query(lambda: self._index.line_start_offset(line))

        if state is QueryState.EXHAUSTED or offset is None:
            raise LineOutOfRange(line, self._index.line_count)

        return offset

    def line_span(self, line: int) -> Tuple[int, int]:
        """
        Get the byte range [start, end) of a line, terminator included.

        Raises:
            LineOutOfRange: If the line lies beyond the last line of the stream
        """
        start = self.line_start_offset(line).value
        state, next_start = self._run_query(
            lambda: self._index.line_start_offset(line + 1)
        )

        if state is QueryState.FOUND and next_start is not None:
            return start, next_start.value

        return start, self._index.high_water_mark

    def line_bytes(self, line: int, keepends: bool = False) -> bytes:
        """
        Read the content of one line.

        The source is seeked to the line start and restored to its read
        position afterwards, so the index and the source stay in step.

        Args:
            line: Zero-based line number
            keepends: Keep the trailing "\\n" or "\\r\\n"

        Raises:
            io.UnsupportedOperation: If the source is not seekable
            LineOutOfRange: If the line lies beyond the last line of the stream
        """
        if not self._reader.seekable():
            raise io.UnsupportedOperation("Reading line content requires a seekable source")

        start, end = self.line_span(line)

        cursor = self._reader.tell()
        parts = []
        try:
            self._reader.seek(self._origin + start)
            remaining = end - start
            while remaining > 0:
                part = self._reader.reread(remaining)
                if not part:
                    break
                parts.append(part)
                remaining -= len(part)
        finally:
            self._reader.seek(cursor)

        data = b"".join(parts)

        if not keepends:
            if data.endswith(b"\r\n"):
                data = data[:-2]
            elif data.endswith(b"\n"):
                data = data[:-1]

        return data

    def read(self, size: int = -1) -> bytes:
        """
        Read from the source, indexing whatever is returned.

        Args:
            size: Maximum bytes to read; negative reads to end of data

        Returns:
            Bytes read, b"" at end of data
        """
        if self._exhausted:
            return b""

        if size < 0:
            # Every chunk taken from the source is indexed before the next read.
            parts = []
            while True:
                chunk = self._pull()
                if not chunk:
                    break
                parts.append(chunk)
            return b"".join(parts)

        base = self._index.high_water_mark
        data = self._reader.read(size)

        if data:
            self._index.extend(data, base)
        elif size > 0:
            self._exhausted = True

        return data

    def drain(self) -> int:
        """
        Index the rest of the source.

        Returns:
            Total stream length
        """
        while self._pull():
            pass
        return self._index.high_water_mark

    def line_count(self) -> int:
        """Index the rest of the source and return its number of lines."""
        self.drain()
        return self._index.line_count

    def close(self) -> None:
        """Close the underlying source."""
        self._reader.close()

    def __enter__(self) -> "IndexedStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"IndexedStream(lines={self._index.line_count}, "
            f"read_len={self._index.high_water_mark}, "
            f"exhausted={self._exhausted})"
        )
