"""
Byte source adapters.
"""

from streamlocate.core.io.source import ByteSource, ChunkReader

__all__ = ["ByteSource", "ChunkReader"]
