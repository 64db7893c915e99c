"""
Incremental line index over a byte stream.

The index keeps a table of line-start offsets that only ever grows. Bytes are
fed in stream order, and queries that reach past the bytes seen so far raise
NeedsMoreData so the caller can pull another chunk and try again.
"""

from bisect import bisect_right
from typing import List, Tuple, Union

from streamlocate.core.errors import ContiguityError
from streamlocate.core.location import Location, Offset
from streamlocate.utils.logging import get_logger

logger = get_logger(__name__)

LINE_FEED = b"\n"

ByteChunk = Union[bytes, bytearray, memoryview]


class NeedsMoreData(Exception):
    """
    Raised when a query cannot be answered from the bytes indexed so far.

    Attributes:
        high_water_mark: Number of bytes indexed when the query was made
    """

    def __init__(self, high_water_mark: int):
        self.high_water_mark = high_water_mark
        super().__init__(f"Index covers only {high_water_mark} byte(s)")


class LineIndex:
    """
    Append-only table of line-start offsets.

    Line terminators are "\\n" and "\\r\\n". A lone "\\r" is ordinary content:
    it counts as a column and does not start a new line. Because the line
    start is recorded after the "\\n", a "\\r\\n" pair split across two chunks
    needs no special handling.

    The table always holds offset 0 for the first line, even for an empty
    stream, and is complete for every byte below high_water_mark.
    """

    def __init__(self) -> None:
        self._line_starts: List[int] = [0]
        self._high_water_mark = 0

    @property
    def high_water_mark(self) -> int:
        """Number of bytes indexed so far."""
        return self._high_water_mark

    @property
    def line_count(self) -> int:
        """Number of lines whose start is known."""
        return len(self._line_starts)

    @property
    def line_starts(self) -> Tuple[int, ...]:
        """Snapshot of the line-start table."""
        return tuple(self._line_starts)

    def __len__(self) -> int:
        return len(self._line_starts)

    def extend(self, data: ByteChunk, base_offset: Union[Offset, int]) -> int:
        """
        Index the next contiguous chunk of the stream.

        Args:
            data: Bytes read from the stream
            base_offset: Stream offset of data[0]; must equal high_water_mark

        Returns:
            Number of new line starts recorded

        Raises:
            ContiguityError: If the chunk does not start where the last one ended
        """
        base = int(base_offset)
        if base != self._high_water_mark:
            raise ContiguityError(self._high_water_mark, base)

        if isinstance(data, memoryview):
            data = data.tobytes()

        added = 0
        idx = data.find(LINE_FEED)
        while idx != -1:
            self._line_starts.append(base + idx + 1)
            added += 1
            idx = data.find(LINE_FEED, idx + 1)

        self._high_water_mark = base + len(data)

        logger.debug(
            "Extended line index",
            base_offset=base,
            chunk_size=len(data),
            new_lines=added,
            total_lines=len(self._line_starts),
            high_water_mark=self._high_water_mark,
        )

        return added

    def line_start_offset(self, line_number: int) -> Offset:
        """
        Get the offset at which a line begins.

        Raises:
            ValueError: If line_number is negative
            NeedsMoreData: If the line has not been reached yet
        """
        if line_number < 0:
            raise ValueError(f"Line number must be non-negative, got {line_number}")
        if line_number >= len(self._line_starts):
            raise NeedsMoreData(self._high_water_mark)
        return Offset(self._line_starts[line_number])

    def is_line_complete(self, line_number: int) -> bool:
        """Whether the terminator ending this line has been indexed."""
        return 0 <= line_number < len(self._line_starts) - 1

    def line_of(self, offset: Union[Offset, int]) -> int:
        """
        Get the zero-based line containing an offset.

        Raises:
            NeedsMoreData: If the offset lies beyond high_water_mark
        """
        target = Offset.coerce(offset).value
        if target > self._high_water_mark:
            raise NeedsMoreData(self._high_water_mark)
        # An offset equal to a line start belongs to that line (column 0).
        return bisect_right(self._line_starts, target) - 1

    def locate(self, offset: Union[Offset, int]) -> Location:
        """
        Convert an offset to a zero-based location.

        Raises:
            NeedsMoreData: If the offset lies beyond high_water_mark
        """
        target = Offset.coerce(offset).value
        line = self.line_of(target)
        return Location(line, target - self._line_starts[line])

    def resolve(self, location: Union[Location, Tuple[int, int]]) -> Offset:
        """
        Convert a zero-based location to an offset.

        A column past the end of its line is not rejected: the length of a
        line is only known once its terminator has been indexed.

        Raises:
            NeedsMoreData: If the line has not been reached yet
        """
        loc = Location.coerce(location)
        start = self.line_start_offset(loc.line)
        return Offset(start.value + loc.column)

    def __repr__(self) -> str:
        return (
            f"LineIndex(lines={len(self._line_starts)}, "
            f"high_water_mark={self._high_water_mark})"
        )
