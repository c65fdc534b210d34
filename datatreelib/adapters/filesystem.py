"""Filesystem adapter for DataTreeLib.

This adapter presents a directory as a tree: the directory itself is the
single root, its entries are the children, and files are classified by
their extension.
"""

import os
import stat
from datetime import datetime
from typing import Any, Dict, Iterator, List

from loguru import logger

from ..core.adapter import ContentAdapter
from ..core.node import Node
from ..errors import OpenError, ReadError

DIRECTORY_TYPE = "directory"
FILE_TYPE = "file"


class FileSystemAdapter(ContentAdapter):
    """Adapter for browsing a directory tree.

    Node payloads are path strings; metadata is only gathered when
    ``get_node_data`` is called for a node.
    """

    def __init__(self,
                 include_hidden: bool = True,
                 follow_symlinks: bool = True):
        """Initialize filesystem adapter.

        Args:
            include_hidden: Whether to include dot-files and dot-directories
            follow_symlinks: Whether to list symbolic links; when False they
                are skipped entirely
        """
        super().__init__()
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks

    def open(self, locator) -> None:
        """Bind the adapter to a directory."""
        path = os.fspath(locator)
        if not os.path.isdir(path):
            raise OpenError(path, "path is not a directory")
        self._locator = path
        logger.debug(f"Opened directory {path}")

    def get_root(self) -> List[Node]:
        """Return the bound directory as the single root node."""
        if self._locator is None:
            return []

        path = self._locator
        name = os.path.basename(os.path.normpath(path))
        if not name:
            # Filesystem roots ("/", "C:\\") have no final component
            name = path

        return [Node(name=name, path=path, type=DIRECTORY_TYPE, payload=path)]

    def get_children(self, node: Node) -> List[Node]:
        """List the immediate entries of a directory node, sorted by name."""
        if node.type != DIRECTORY_TYPE:
            return []

        entries = sorted(self._scan(node.path), key=lambda entry: entry.name)
        return [self._make_node(node.path, entry) for entry in entries]

    def has_children(self, node: Node) -> bool:
        """Check for at least one listed entry without reading the rest."""
        if node.type != DIRECTORY_TYPE:
            return False

        for _ in self._scan(node.path):
            return True
        return False

    def get_node_data(self, node: Node) -> Any:
        """Return filesystem metadata for the entry, or None if unreadable."""
        try:
            return self._read_metadata(node.path)
        except ReadError as e:
            logger.warning(f"No data for {node.path}: {e.reason}")
            return None

    def close(self) -> None:
        """Forget the bound directory."""
        if self._locator is not None:
            logger.debug(f"Closed directory {self._locator}")
        self._locator = None

    def _scan(self, directory: str) -> Iterator[os.DirEntry]:
        """Yield the entries of a directory that pass the listing options."""
        try:
            with os.scandir(directory) as it:
                for entry in it:
                    if not self.include_hidden and entry.name.startswith('.'):
                        continue
                    if not self.follow_symlinks and entry.is_symlink():
                        continue
                    yield entry
        except OSError as e:
            # Unreadable directories are shown as empty
            logger.warning(f"Cannot list directory {directory}: {e}")

    def _make_node(self, parent_path: str, entry: os.DirEntry) -> Node:
        path = os.path.join(parent_path, entry.name)
        return Node(name=entry.name, path=path, type=_entry_type(entry), payload=path)

    def _read_metadata(self, path: str) -> Dict[str, Any]:
        """Compute metadata for a path from os.stat."""
        try:
            st = os.stat(path)
        except OSError as e:
            raise ReadError(path, str(e)) from e

        mode = st.st_mode
        metadata = {
            'name': os.path.basename(os.path.normpath(path)) or path,
            'path': path,
            'size': st.st_size,
            'mtime': st.st_mtime,
            'mtime_dt': datetime.fromtimestamp(st.st_mtime),
            'ctime': st.st_ctime,
            'ctime_dt': datetime.fromtimestamp(st.st_ctime),
            'atime': st.st_atime,
            'atime_dt': datetime.fromtimestamp(st.st_atime),
            'mode': mode,
            'is_file': stat.S_ISREG(mode),
            'is_dir': stat.S_ISDIR(mode),
            'is_link': os.path.islink(path),
        }

        if metadata['is_file']:
            metadata['extension'] = os.path.splitext(path)[1]

        return metadata


def _entry_type(entry: os.DirEntry) -> str:
    """Classify an entry as a directory, its lowercase extension, or "file"."""
    try:
        is_dir = entry.is_dir()
    except OSError:
        # Entries that cannot be stat'ed are classified by name
        is_dir = False

    if is_dir:
        return DIRECTORY_TYPE

    extension = os.path.splitext(entry.name)[1]
    if not extension:
        return FILE_TYPE
    return extension[1:].lower()
