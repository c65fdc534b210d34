"""High-level API for DataTreeLib.

This module provides simple, functional interfaces for common operations on
a content tree. These functions wrap the provider, factory and traversers
for ease of use in simple cases.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from .config import DepthConfig, TraversalConfig, TraversalStrategy
from .core.node import Node
from .core.traverser import create_traverser
from .factory import create_adapter
from .provider import TreeNodeProvider


def open_tree(locator, **options) -> TreeNodeProvider:
    """Open a file or directory and return a provider bound to it.

    The adapter is chosen by the factory from the locator.

    Args:
        locator: Path to a ``.mat``/``.h5``/``.hdf5``/``.nwb`` file or a
            directory
        **options: Keyword arguments for the adapter's constructor

    Returns:
        TreeNodeProvider with an open adapter

    Example:
        >>> with open_tree('session.nwb') as provider:
        ...     for node in traverse_tree(provider, max_depth=2):
        ...         print(node.path)
    """
    provider = TreeNodeProvider()
    provider.load(locator, adapter=create_adapter(locator, **options))
    return provider


def traverse_tree(
    provider: TreeNodeProvider,
    strategy: Union[TraversalStrategy, str] = TraversalStrategy.DEPTH_FIRST_PRE,
    max_depth: Optional[int] = None,
    min_depth: int = 0,
    include_filter: Optional[Callable[[Node], bool]] = None,
) -> Iterator[Node]:
    """Simple interface for eager expansion.

    Every root of the provider is expanded in turn.

    Args:
        provider: Provider with an open adapter
        strategy: Traversal strategy (bfs, dfs_pre)
        max_depth: Maximum depth to expand below each root
        min_depth: Minimum depth before yielding nodes
        include_filter: Function to determine if node should be yielded

    Yields:
        Nodes that match the criteria

    Raises:
        ValueError: If the strategy or depth limits are invalid

    Example:
        >>> provider = open_tree('data.mat')
        >>> for node in traverse_tree(provider, max_depth=1):
        ...     print(node.identifier())
    """
    config = TraversalConfig(
        strategy=_parse_strategy(strategy),
        depth=DepthConfig(min_depth=min_depth, max_depth=max_depth),
        include_filter=include_filter,
    )
    errors = config.validate()
    if errors:
        raise ValueError("; ".join(errors))

    traverser = create_traverser(config.strategy.value, provider)
    for root in provider.get_root():
        for node, _ in traverser.traverse(root,
                                          max_depth=config.depth.max_depth,
                                          min_depth=config.depth.min_depth):
            if config.include_filter is None or config.include_filter(node):
                yield node


def find_node(
    provider: TreeNodeProvider,
    predicate: Callable[[Node], bool],
    **kwargs
) -> Optional[Node]:
    """Find the first node that matches a predicate.

    Args:
        provider: Provider with an open adapter
        predicate: Function that returns True for the wanted node
        **kwargs: Traversal options (see traverse_tree)

    Returns:
        The first matching node, or None

    Example:
        >>> node = find_node(provider, lambda n: n.type == 'dataset')
    """
    for node in traverse_tree(provider, include_filter=predicate, **kwargs):
        return node
    return None


def count_nodes(provider: TreeNodeProvider, **kwargs) -> int:
    """Count nodes in a tree that match criteria.

    Args:
        provider: Provider with an open adapter
        **kwargs: Traversal options (see traverse_tree)

    Returns:
        Number of nodes that match criteria
    """
    count = 0
    for _ in traverse_tree(provider, **kwargs):
        count += 1
    return count


def get_leaf_nodes(provider: TreeNodeProvider, **kwargs) -> List[Node]:
    """Get all leaf nodes in a tree.

    Args:
        provider: Provider with an open adapter
        **kwargs: Traversal options (see traverse_tree)

    Returns:
        Nodes without children, in traversal order
    """
    return [
        node for node in traverse_tree(provider, **kwargs)
        if not provider.has_children(node)
    ]


def get_tree_stats(provider: TreeNodeProvider, **kwargs) -> Dict[str, Any]:
    """Get statistics about a tree.

    Args:
        provider: Provider with an open adapter
        **kwargs: ``strategy`` and ``max_depth`` (see traverse_tree)

    Returns:
        Dictionary with tree statistics

    Example:
        >>> stats = get_tree_stats(open_tree('/home/user/data'), max_depth=2)
        >>> print(f"Total nodes: {stats['total_nodes']}")
        >>> print(f"Leaf nodes: {stats['leaf_nodes']}")
    """
    stats = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'max_depth': 0,
        'depths': {},
        'types': {},
    }

    strategy = _parse_strategy(kwargs.get('strategy', TraversalStrategy.DEPTH_FIRST_PRE))
    traverser = create_traverser(strategy.value, provider)

    for root in provider.get_root():
        for node, depth in traverser.traverse(root, max_depth=kwargs.get('max_depth')):
            stats['total_nodes'] += 1

            if not provider.has_children(node):
                stats['leaf_nodes'] += 1

            stats['max_depth'] = max(stats['max_depth'], depth)
            stats['depths'][depth] = stats['depths'].get(depth, 0) + 1
            stats['types'][node.type] = stats['types'].get(node.type, 0) + 1

    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']
    return stats


# Helper functions

def _parse_strategy(strategy: Union[TraversalStrategy, str]) -> TraversalStrategy:
    """Parse strategy from string or enum.

    Args:
        strategy: Strategy as enum or string

    Returns:
        TraversalStrategy enum value
    """
    if isinstance(strategy, TraversalStrategy):
        return strategy

    strategy_map = {
        'bfs': TraversalStrategy.BREADTH_FIRST,
        'breadth_first': TraversalStrategy.BREADTH_FIRST,
        'dfs': TraversalStrategy.DEPTH_FIRST_PRE,
        'dfs_pre': TraversalStrategy.DEPTH_FIRST_PRE,
        'depth_first_pre': TraversalStrategy.DEPTH_FIRST_PRE,
    }

    strategy_lower = strategy.lower() if isinstance(strategy, str) else str(strategy)
    if strategy_lower in strategy_map:
        return strategy_map[strategy_lower]

    raise ValueError(f"Unknown traversal strategy: {strategy}")
