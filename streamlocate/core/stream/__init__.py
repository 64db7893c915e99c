"""
Lazily indexed byte streams.
"""

from streamlocate.core.stream.indexed_stream import IndexedStream, QueryState

__all__ = ["IndexedStream", "QueryState"]
