"""
Line indexing for offset and (line, column) conversion.

The index records line starts as bytes are fed to it, so lookups are a
binary search over the table instead of a rescan of the stream.
"""

from streamlocate.core.index.line_index import LineIndex, NeedsMoreData

__all__ = ["LineIndex", "NeedsMoreData"]
