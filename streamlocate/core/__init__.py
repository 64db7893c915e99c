"""Core components for offset and line-column conversion."""

from streamlocate.core import errors, index, io, location, stream

__all__ = ["errors", "index", "io", "location", "stream"]
