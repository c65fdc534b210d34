"""ContentAdapter abstraction for DataTreeLib.

The ContentAdapter is what makes DataTreeLib format-agnostic. Each adapter
binds to one source (a MAT file, an HDF5 file, a directory) and knows how
to project it into Nodes, one level at a time.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .node import Node


class ContentAdapter(ABC):
    """Abstract adapter for reading nested content from a single source.

    An adapter is stateful: ``open`` binds it to a source and ``close``
    releases it. Between the two, the query methods compute nodes on
    demand from the stored payload of the node being expanded. Adapters are
    not thread-safe; callers serialize ``open``/``close``/query calls.

    Adapters can be used as context managers, which closes the source on
    exit::

        with StructuredFileAdapter() as adapter:
            adapter.open("data.mat")
            roots = adapter.get_root()
    """

    def __init__(self):
        self._locator: Optional[str] = None

    @property
    def locator(self) -> Optional[str]:
        """Path of the currently bound source, or None."""
        return self._locator

    @property
    def is_open(self) -> bool:
        """Check if a source is currently bound."""
        return self._locator is not None

    @abstractmethod
    def open(self, locator) -> None:
        """Bind the adapter to a source, replacing any previous one.

        Args:
            locator: Path of the file or directory to open

        Raises:
            OpenError: If the source cannot be read or parsed. The previous
                binding (if any) is kept.
        """
        pass

    @abstractmethod
    def get_root(self) -> List[Node]:
        """Get the top-level nodes of the open source.

        Returns:
            Ordered list of root nodes; empty if nothing is open
        """
        pass

    @abstractmethod
    def get_children(self, node: Node) -> List[Node]:
        """Get the direct children of a node.

        Children are computed when requested and never cached.

        Args:
            node: The parent node

        Returns:
            Ordered list of child nodes; empty for leaves
        """
        pass

    @abstractmethod
    def has_children(self, node: Node) -> bool:
        """Check whether ``get_children`` would return anything.

        Implementations answer without materializing children where they
        can, so a viewer can draw an expand affordance cheaply.

        Args:
            node: Node to check

        Returns:
            True if the node has at least one child
        """
        pass

    @abstractmethod
    def get_node_data(self, node: Node) -> Any:
        """Resolve a node's payload to the value it stands for.

        Read failures are logged as warnings and reported as None; they
        never propagate.

        Args:
            node: Node to resolve

        Returns:
            The node's value, or None if it could not be read
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the open source. Safe to call when nothing is open."""
        pass

    def __enter__(self) -> 'ContentAdapter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(locator={self._locator!r})"
