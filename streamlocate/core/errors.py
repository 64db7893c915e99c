"""
Exceptions raised by streamlocate.

Errors raised by the underlying byte source (OSError and friends) are not
wrapped here: they propagate to the caller unchanged.
"""

from typing import Optional


class StreamLocateError(Exception):
    """Base class for streamlocate errors."""
    pass


class OffsetOutOfRange(StreamLocateError, IndexError):
    """Raised when an offset lies beyond the end of an exhausted stream."""

    def __init__(self, offset: int, stream_length: int):
        self.offset = offset
        self.stream_length = stream_length
        super().__init__(
            f"Offset {offset} exceeds stream length {stream_length}"
        )


class LineOutOfRange(StreamLocateError, IndexError):
    """Raised when a line number lies beyond the last line of an exhausted stream."""

    def __init__(self, line: int, line_count: int, column: Optional[int] = None):
        self.line = line
        self.line_count = line_count
        self.column = column
        where = f"({line}, {column})" if column is not None else str(line)
        super().__init__(
            f"Line {where} out of range: stream has {line_count} line(s)"
        )


class ContiguityError(StreamLocateError, ValueError):
    """Raised when bytes are fed to a line index out of stream order."""

    def __init__(self, expected_offset: int, base_offset: int):
        self.expected_offset = expected_offset
        self.base_offset = base_offset
        super().__init__(
            f"Chunk at offset {base_offset} is not contiguous with "
            f"indexed data ending at {expected_offset}"
        )
