"""Core abstractions for DataTreeLib.

This module contains the node value record, the abstract ContentAdapter
and the traversers used for eager expansion.
"""

from .node import Node, payloads_equal
from .adapter import ContentAdapter
from .traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
    create_traverser,
)

__all__ = [
    "Node",
    "payloads_equal",
    "ContentAdapter",
    "TreeTraverser",
    "BreadthFirstTraverser",
    "DepthFirstPreOrderTraverser",
    "create_traverser",
]
