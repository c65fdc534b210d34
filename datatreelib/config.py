"""Configuration system for DataTreeLib.

This module defines the knobs that shape how sources are projected into
trees (struct-array handling for MAT files) and how eager expansion walks
them (strategy and depth limits).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Callable, Any, List


class TraversalStrategy(Enum):
    """Order in which eager expansion visits nodes."""
    BREADTH_FIRST = "bfs"           # Level by level
    DEPTH_FIRST_PRE = "dfs_pre"     # Parent before children (tree-view order)


@dataclass
class StructuredFileConfig:
    """Options for projecting MAT-style structures into nodes.

    A struct array with at most ``struct_array_split_limit`` elements is
    shown element by element (``s_1``, ``s_2``, ...). Larger arrays, or all
    arrays when splitting is disabled, are shown as one struct whose fields
    hold the per-element values. A limit of 0 never splits.
    """

    split_struct_arrays: bool = True
    struct_array_split_limit: int = 5

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise ValueError("; ".join(errors))

    def should_split(self, element_count: int) -> bool:
        """Check whether a struct array of this size is shown per element.

        Args:
            element_count: Number of elements in the struct array

        Returns:
            True if each element becomes its own child node
        """
        if not self.split_struct_arrays:
            return False
        return 0 < element_count <= self.struct_array_split_limit

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.struct_array_split_limit < 0:
            errors.append("struct_array_split_limit cannot be negative")
        return errors


@dataclass
class DepthConfig:
    """Configuration for depth-limited expansion."""

    min_depth: int = 0                # Minimum depth to yield
    max_depth: Optional[int] = None   # Maximum depth to expand


@dataclass
class TraversalConfig:
    """Complete configuration for an eager expansion."""

    strategy: TraversalStrategy = TraversalStrategy.DEPTH_FIRST_PRE
    depth: DepthConfig = field(default_factory=DepthConfig)
    include_filter: Optional[Callable[[Any], bool]] = None

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.depth.min_depth < 0:
            errors.append("min_depth cannot be negative")

        if self.depth.max_depth is not None:
            if self.depth.max_depth < 0:
                errors.append("max_depth cannot be negative")
            if self.depth.max_depth < self.depth.min_depth:
                errors.append("max_depth cannot be less than min_depth")

        return errors
