"""TreeNodeProvider: the model a tree viewer talks to.

The provider binds one adapter and forwards the query surface to it, so a
viewer can be re-pointed at a different adapter without restructuring its
own state. It also offers the two whole-tree operations a viewer needs:
eager expansion and re-locating a node after the tree was rebuilt.
"""

from typing import Any, Iterator, List, Optional, Tuple

from loguru import logger

from .core.adapter import ContentAdapter
from .core.node import Node
from .core.traverser import DepthFirstPreOrderTraverser
from .errors import NoAdapterError
from .factory import create_adapter


class TreeNodeProvider:
    """Delegating model bound to a single ContentAdapter.

    Example:
        provider = TreeNodeProvider(StructuredFileAdapter())
        provider.adapter.open('data.mat')
        for root in provider.get_root():
            if provider.has_children(root):
                children = provider.get_children(root)
    """

    def __init__(self, adapter: Optional[ContentAdapter] = None):
        """Initialize the provider.

        Args:
            adapter: ContentAdapter to bind (optional)
        """
        self._adapter = adapter

    @property
    def adapter(self) -> Optional[ContentAdapter]:
        """The bound adapter, or None."""
        return self._adapter

    @adapter.setter
    def adapter(self, adapter: Optional[ContentAdapter]) -> None:
        self._adapter = adapter

    def _require_adapter(self) -> ContentAdapter:
        if self._adapter is None:
            raise NoAdapterError()
        return self._adapter

    def get_root(self) -> List[Node]:
        """Get root nodes from the adapter."""
        return self._require_adapter().get_root()

    def get_children(self, node: Node) -> List[Node]:
        """Get children of a node from the adapter."""
        return self._require_adapter().get_children(node)

    def has_children(self, node: Node) -> bool:
        """Check if a node has children."""
        return self._require_adapter().has_children(node)

    def get_node_data(self, node: Node) -> Any:
        """Get the data behind a node, or None if it cannot be read."""
        return self._require_adapter().get_node_data(node)

    def load(self, locator, adapter: Optional[ContentAdapter] = None) -> List[Node]:
        """Open a source and return its root nodes.

        Without an explicit adapter the factory picks one from the locator.
        A previously bound adapter is closed only once the new source has
        opened, so a failed load leaves the provider bound as it was.

        Args:
            locator: Path to a file or directory
            adapter: Adapter to use instead of the factory's choice

        Returns:
            Root nodes of the newly opened source

        Raises:
            UnsupportedTypeError: If the factory has no adapter for locator
            OpenError: If the adapter cannot open the source
        """
        if adapter is None:
            adapter = create_adapter(locator)

        adapter.open(locator)
        if self._adapter is not None and self._adapter is not adapter:
            self._adapter.close()
        self._adapter = adapter
        logger.debug(f"Loaded {locator} with {adapter.__class__.__name__}")
        return adapter.get_root()

    def expand_all(self,
                   node: Optional[Node] = None,
                   max_depth: Optional[int] = None) -> Iterator[Tuple[Node, int]]:
        """Expand a subtree, or every root, eagerly.

        This is repeated ``get_children`` calls in pre-order, the order a
        fully expanded tree view shows its rows.

        Args:
            node: Subtree root; None expands every root node
            max_depth: Maximum depth below the starting node(s)

        Yields:
            Tuples of (node, depth)
        """
        self._require_adapter()
        traverser = DepthFirstPreOrderTraverser(self)
        starts = [node] if node is not None else self.get_root()
        for start in starts:
            yield from traverser.traverse(start, max_depth=max_depth)

    def find_node(self, target: Node, max_depth: Optional[int] = None) -> Optional[Node]:
        """Re-locate a node by structural equality.

        Args:
            target: A node obtained earlier, possibly before re-expansion
            max_depth: Maximum depth to search below the roots

        Returns:
            The equal node currently reachable from the roots, or None
        """
        for node, _ in self.expand_all(max_depth=max_depth):
            if node == target:
                return node
        return None

    def close(self) -> None:
        """Close the bound adapter. Does nothing without one."""
        if self._adapter is not None:
            self._adapter.close()

    def __enter__(self) -> 'TreeNodeProvider':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"TreeNodeProvider(adapter={self._adapter!r})"
