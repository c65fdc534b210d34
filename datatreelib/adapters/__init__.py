"""Content adapters for specific source formats.

Adapters implement the ContentAdapter interface for MAT files, HDF5 files
and directories, so one viewer can browse all of them.
"""

from .filesystem import FileSystemAdapter
from .structured import StructuredFileAdapter, StructArray
from .hierarchical import (
    HierarchicalFileAdapter,
    GroupInfo,
    DatasetInfo,
    AttributeInfo,
)

__all__ = [
    "FileSystemAdapter",
    "StructuredFileAdapter",
    "StructArray",
    "HierarchicalFileAdapter",
    "GroupInfo",
    "DatasetInfo",
    "AttributeInfo",
]
