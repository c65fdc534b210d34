"""Adapter selection for DataTreeLib.

The factory maps a locator to the adapter that can read it. The extension
table below drives both ``create_adapter`` and ``supported_extensions``, so
the two cannot drift apart.
"""

import os
from typing import Dict, List, Tuple, Type

from .adapters.filesystem import FileSystemAdapter
from .adapters.hierarchical import HierarchicalFileAdapter
from .adapters.structured import StructuredFileAdapter
from .core.adapter import ContentAdapter
from .errors import UnsupportedTypeError

# Pseudo-extension reported for directories
DIRECTORY_EXTENSION = "folder"

_EXTENSION_ADAPTERS: Dict[str, Type[ContentAdapter]] = {
    '.mat': StructuredFileAdapter,      # MATLAB data files
    '.h5': HierarchicalFileAdapter,     # HDF5 files
    '.hdf5': HierarchicalFileAdapter,   # HDF5 files
    '.nwb': HierarchicalFileAdapter,    # Neurodata Without Borders (HDF5-based)
}


def create_adapter(locator, **options) -> ContentAdapter:
    """Create the adapter for a file or directory.

    The adapter is returned unopened; call ``open(locator)`` on it.

    Args:
        locator: Path to a file or directory
        **options: Keyword arguments for the adapter's constructor

    Returns:
        ContentAdapter instance

    Raises:
        UnsupportedTypeError: If no adapter handles the locator

    Example:
        >>> adapter = create_adapter('data.mat')
        >>> adapter.open('data.mat')
    """
    path = os.fspath(locator)
    if os.path.isdir(path):
        return FileSystemAdapter(**options)

    extension = os.path.splitext(path)[1].lower()
    adapter_class = _EXTENSION_ADAPTERS.get(extension)
    if adapter_class is None:
        raise UnsupportedTypeError(path, extension)
    return adapter_class(**options)


def supported_extensions(include_directories: bool = False) -> List[str]:
    """Get the recognized file extensions, lowercase with leading dot.

    Args:
        include_directories: Append the ``"folder"`` pseudo-extension

    Returns:
        Ordered list of extensions
    """
    extensions = list(_EXTENSION_ADAPTERS)
    if include_directories:
        extensions.append(DIRECTORY_EXTENSION)
    return extensions


def available_adapters() -> List[Type[ContentAdapter]]:
    """List the adapter classes the factory can create."""
    adapters: List[Type[ContentAdapter]] = []
    for adapter_class in list(_EXTENSION_ADAPTERS.values()) + [FileSystemAdapter]:
        if adapter_class not in adapters:
            adapters.append(adapter_class)
    return adapters


def file_dialog_filters() -> List[Tuple[str, str]]:
    """Build (pattern, description) pairs for a file picker.

    Returns:
        One pair per supported extension followed by an all-files entry
    """
    filters = [(f"*{ext}", f"*{ext} files") for ext in supported_extensions()]
    filters.append(("*.*", "All files"))
    return filters
