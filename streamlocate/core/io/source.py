"""
Byte source abstraction.

Anything with a binary read(size) method can back an IndexedStream: files
opened in binary mode, io.BytesIO, socket.makefile("rb"), pipes. Sources
that also provide readinto() are read into a reusable buffer.
"""

import io
from typing import Optional, Protocol, runtime_checkable

from streamlocate.utils.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ByteSource(Protocol):
    """Minimal readable byte stream: read(size) returns b"" at end of data."""

    def read(self, size: int = -1) -> Optional[bytes]:
        ...


class ChunkReader:
    """
    Pulls fixed-size chunks from a byte source.

    Errors raised by the source propagate unchanged. Nothing is retried.

    Attributes:
        source: Underlying byte source
        chunk_size: Maximum bytes returned per read_chunk() call
        reads: Number of read calls issued to the source
        bytes_read: Total bytes returned by the source
    """

    def __init__(self, source: ByteSource, chunk_size: int):
        """
        Initialize chunk reader.

        Args:
            source: Readable binary source
            chunk_size: Bytes requested per read

        Raises:
            ValueError: If chunk_size is not positive
            TypeError: If source has no read() method
        """
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        if not callable(getattr(source, "read", None)):
            raise TypeError(f"Source must provide read(), got {type(source).__name__}")

        self.source = source
        self.chunk_size = chunk_size
        self.reads = 0
        self.bytes_read = 0

        readinto = getattr(source, "readinto", None)
        self._readinto = readinto if callable(readinto) else None
        self._buffer: Optional[bytearray] = None
        if self._readinto is not None:
            self._buffer = bytearray(chunk_size)

    def read_chunk(self) -> bytes:
        """
        Read the next chunk.

        Returns:
            Up to chunk_size bytes, or b"" at end of data

        Raises:
            BlockingIOError: If a non-blocking source has no data available
            TypeError: If the source returns text instead of bytes
        """
        if self._readinto is not None and self._buffer is not None:
            view = memoryview(self._buffer)
            n = self._readinto(view)
            self.reads += 1
            if n is None:
                raise BlockingIOError("Source has no data available")
            chunk = bytes(view[:n])
        else:
            chunk = self._read(self.chunk_size)
            self.reads += 1

        self.bytes_read += len(chunk)
        return chunk

    def read(self, size: int) -> bytes:
        """
        Read up to size bytes with a single call to the source.

        Returns:
            Bytes read, b"" at end of data

        Raises:
            ValueError: If size is negative
        """
        if size < 0:
            raise ValueError(f"Read size must be non-negative, got {size}")
        if size == 0:
            return b""

        chunk = self._read(size)
        self.reads += 1
        self.bytes_read += len(chunk)
        return chunk

    def reread(self, size: int) -> bytes:
        """
        Read up to size bytes that were already counted, after seeking back.

        The reads and bytes_read counters are left untouched.
        """
        if size <= 0:
            return b""
        return self._read(size)

    def _read(self, size: int) -> bytes:
        data = self.source.read(size)
        if data is None:
            raise BlockingIOError("Source has no data available")
        if isinstance(data, str):
            raise TypeError("Source must be opened in binary mode")
        return bytes(data)

    def seekable(self) -> bool:
        seekable = getattr(self.source, "seekable", None)
        if not callable(seekable):
            return False
        return bool(seekable())

    def tell(self) -> int:
        if not self.seekable():
            raise io.UnsupportedOperation("Source is not seekable")
        return self.source.tell()  # type: ignore[attr-defined]

    def seek(self, position: int) -> int:
        if not self.seekable():
            raise io.UnsupportedOperation("Source is not seekable")
        return self.source.seek(position, io.SEEK_SET)  # type: ignore[attr-defined]

    def close(self) -> None:
        close = getattr(self.source, "close", None)
        if callable(close):
            close()
            logger.debug("Closed source", source=type(self.source).__name__)

    def __repr__(self) -> str:
        return (
            f"ChunkReader(source={type(self.source).__name__}, "
            f"chunk_size={self.chunk_size}, bytes_read={self.bytes_read})"
        )
