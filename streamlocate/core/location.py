"""
Value types for the two addressing schemes of a byte stream.

An Offset is a zero-based byte position. A Location is a zero-based
(line, column) pair where the column counts bytes, not characters.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True, order=True)
class Offset:
    """
    Zero-based byte offset into a stream.

    Attributes:
        value: Number of bytes from the start of the stream
    """
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Offset must be an int, got {type(self.value).__name__}")
        if self.value < 0:
            raise ValueError(f"Offset must be non-negative, got {self.value}")

    @classmethod
    def new(cls, raw: int) -> "Offset":
        return cls(raw)

    @classmethod
    def coerce(cls, value: Union["Offset", int]) -> "Offset":
        """Accept either an Offset or a plain int."""
        if isinstance(value, Offset):
            return value
        return cls(value)

    def raw(self) -> int:
        return self.value

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"Offset({self.value})"


@dataclass(frozen=True, order=True)
class Location:
    """
    Zero-based (line, column) position in a stream.

    Most diagnostic tools print one-based positions; use one_based() for that
    view and from_one_based() to come back.

    Attributes:
        line: Zero-based line number
        column: Zero-based byte column within the line
    """
    line: int
    column: int

    def __post_init__(self) -> None:
        for name in ("line", "column"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_one_based(cls, line: int, column: int) -> "Location":
        """
        Build a Location from one-based line and column numbers.

        Raises:
            ValueError: If either number is less than 1
        """
        if line < 1 or column < 1:
            raise ValueError(
                f"One-based line and column must be >= 1, got ({line}, {column})"
            )
        return cls(line - 1, column - 1)

    @classmethod
    def coerce(cls, value: Union["Location", Tuple[int, int]]) -> "Location":
        """Accept either a Location or a (line, column) tuple."""
        if isinstance(value, Location):
            return value
        line, column = value
        return cls(line, column)

    def raw(self) -> Tuple[int, int]:
        return (self.line, self.column)

    def one_based(self) -> Tuple[int, int]:
        """Get one-based line and column numbers."""
        return (self.line + 1, self.column + 1)

    def __repr__(self) -> str:
        return f"Location(line={self.line}, column={self.column})"
