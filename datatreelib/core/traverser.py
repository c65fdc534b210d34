"""Tree traversal strategies for DataTreeLib.

Traversers perform eager expansion: they are nothing more than repeated
demand-driven ``get_children`` calls applied recursively. They work with any
ContentAdapter (or a TreeNodeProvider, which exposes the same queries).
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Iterator, Optional, Set, Tuple

from .adapter import ContentAdapter
from .node import Node


class TreeTraverser(ABC):
    """Abstract base class for traversal strategies.

    Traversers are independent of the source format, working through the
    adapter's ``has_children``/``get_children`` queries.
    """

    def __init__(self, adapter: ContentAdapter):
        """Initialize traverser with an adapter.

        Args:
            adapter: ContentAdapter (or provider) answering child queries
        """
        self.adapter = adapter

    @abstractmethod
    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        """Traverse the tree starting from root.

        Args:
            root: Starting node for traversal
            max_depth: Maximum depth to expand (None = unlimited)
            min_depth: Minimum depth before yielding nodes

        Yields:
            Tuples of (node, depth) where depth is relative to root
        """
        pass

    def _should_yield(self, depth: int, min_depth: int, max_depth: Optional[int]) -> bool:
        if depth < min_depth:
            return False
        if max_depth is not None and depth > max_depth:
            return False
        return True

    def _should_explore(self, node: Node, depth: int, max_depth: Optional[int]) -> bool:
        if max_depth is not None and depth >= max_depth:
            return False
        return self.adapter.has_children(node)


class BreadthFirstTraverser(TreeTraverser):
    """Breadth-first traversal strategy.

    Visits all nodes at depth N before visiting nodes at depth N+1.
    """

    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        """Traverse tree breadth-first using a queue."""
        queue: Deque[Tuple[Node, int]] = deque([(root, 0)])
        visited: Set[str] = set()

        while queue:
            node, depth = queue.popleft()

            node_id = node.identifier()
            if node_id in visited:
                continue
            visited.add(node_id)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if self._should_explore(node, depth, max_depth):
                for child in self.adapter.get_children(node):
                    queue.append((child, depth + 1))


class DepthFirstPreOrderTraverser(TreeTraverser):
    """Depth-first pre-order traversal strategy.

    Visits parent before children, which is the order in which a fully
    expanded tree view lists its rows.
    """

    def traverse(self,
                 root: Node,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Node, int]]:
        """Traverse tree depth-first, pre-order."""
        visited: Set[str] = set()

        def _traverse_recursive(node: Node, depth: int) -> Iterator[Tuple[Node, int]]:
            node_id = node.identifier()
            if node_id in visited:
                return
            visited.add(node_id)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if self._should_explore(node, depth, max_depth):
                for child in self.adapter.get_children(node):
                    yield from _traverse_recursive(child, depth + 1)

        yield from _traverse_recursive(root, 0)


def create_traverser(strategy: str, adapter: ContentAdapter) -> TreeTraverser:
    """Create a traverser instance by strategy name.

    Args:
        strategy: Name of traversal strategy (bfs, dfs_pre)
        adapter: ContentAdapter for the tree structure

    Returns:
        TreeTraverser instance

    Raises:
        ValueError: If strategy name is not recognized
    """
    strategies = {
        'bfs': BreadthFirstTraverser,
        'breadth_first': BreadthFirstTraverser,
        'dfs': DepthFirstPreOrderTraverser,
        'dfs_pre': DepthFirstPreOrderTraverser,
        'depth_first_pre': DepthFirstPreOrderTraverser,
    }

    strategy_lower = strategy.lower()
    if strategy_lower not in strategies:
        raise ValueError(
            f"Unknown traversal strategy: {strategy}. "
            f"Choose from: {', '.join(strategies.keys())}"
        )

    return strategies[strategy_lower](adapter)
