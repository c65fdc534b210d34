"""DataTreeLib - Lazy content trees for scientific data files.

DataTreeLib presents the nested contents of MAT files, HDF5 files (including
NWB) and directories as one uniform, lazily expanded tree of nodes, so a
viewer can browse any of them without knowing the format.

Quick start:
    from datatreelib import open_tree, traverse_tree

    with open_tree('recording.nwb') as provider:
        for node in traverse_tree(provider, max_depth=2):
            print(node.path, node.type)
"""

__version__ = "0.1.0"

# Core components
from .core.node import Node
from .core.adapter import ContentAdapter
from .core.traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
)

# Adapters
from .adapters import (
    FileSystemAdapter,
    StructuredFileAdapter,
    HierarchicalFileAdapter,
)

# Configuration and errors
from .config import StructuredFileConfig, TraversalConfig, TraversalStrategy, DepthConfig
from .errors import (
    DataTreeError,
    OpenError,
    UnsupportedTypeError,
    ReadError,
    NoAdapterError,
)

# Factory and provider
from .factory import (
    create_adapter,
    supported_extensions,
    available_adapters,
    file_dialog_filters,
)
from .provider import TreeNodeProvider

# High-level API
from .api import (
    open_tree,
    traverse_tree,
    find_node,
    count_nodes,
    get_leaf_nodes,
    get_tree_stats,
)

__all__ = [
    "__version__",
    # Core
    'Node',
    'ContentAdapter',
    'TreeTraverser',
    'BreadthFirstTraverser',
    'DepthFirstPreOrderTraverser',
    # Adapters
    'FileSystemAdapter',
    'StructuredFileAdapter',
    'HierarchicalFileAdapter',
    # Configuration
    'StructuredFileConfig',
    'TraversalConfig',
    'TraversalStrategy',
    'DepthConfig',
    # Errors
    'DataTreeError',
    'OpenError',
    'UnsupportedTypeError',
    'ReadError',
    'NoAdapterError',
    # Factory and provider
    'create_adapter',
    'supported_extensions',
    'available_adapters',
    'file_dialog_filters',
    'TreeNodeProvider',
    # High-level API
    'open_tree',
    'traverse_tree',
    'find_node',
    'count_nodes',
    'get_leaf_nodes',
    'get_tree_stats',
]
