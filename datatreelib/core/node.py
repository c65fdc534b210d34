"""Node abstraction for DataTreeLib.

The Node is intentionally kept simple - it's a value record. Navigation
logic is delegated to the ContentAdapter, which is what lets one viewer
browse MAT files, HDF5 files and directories without knowing the format.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping

import numpy as np


@dataclass(frozen=True, eq=False)
class Node:
    """A single entry of a content tree.

    Nodes are immutable snapshots created on demand when a parent is
    expanded. Because re-expansion regenerates equivalent nodes, equality is
    structural: two nodes are equal when name, path, type and payload are
    equal.

    Attributes:
        name: Display label
        path: Locator within the source, derived from the parent's path
        type: Type tag ("directory", "group", "dataset", "float64", ...)
        payload: The in-memory value, or a descriptor used to fetch it
    """

    name: str
    path: str
    type: str
    payload: Any = None

    def identifier(self) -> str:
        """Return the node's path, unique within one source."""
        return self.path

    def metadata(self) -> Dict[str, Any]:
        """Return the lightweight description of this node."""
        return {
            'name': self.name,
            'path': self.path,
            'type': self.type,
        }

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, path={self.path!r}, type={self.type!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.name == other.name
            and self.path == other.path
            and self.type == other.type
            and payloads_equal(self.payload, other.payload)
        )

    def __hash__(self) -> int:
        # Payloads may be unhashable arrays; equal nodes still share this hash.
        return hash((self.name, self.path, self.type))


def payloads_equal(left: Any, right: Any) -> bool:
    """Compare two payloads, treating arrays and containers element-wise.

    Args:
        left: First payload
        right: Second payload

    Returns:
        True if both payloads hold the same value
    """
    if left is right:
        return True

    if isinstance(left, np.ndarray) or isinstance(right, np.ndarray):
        return _arrays_equal(left, right)

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if list(left.keys()) != list(right.keys()):
            return False
        return all(payloads_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if type(left) is not type(right) or len(left) != len(right):
            return False
        return all(payloads_equal(a, b) for a, b in zip(left, right))

    try:
        result = left == right
    except (TypeError, ValueError):
        return False

    if isinstance(result, (bool, np.bool_)):
        return bool(result) or (_is_nan(left) and _is_nan(right))

    # Sparse matrices and other objects without a scalar truth value
    return False


def _arrays_equal(left: Any, right: Any) -> bool:
    if not (isinstance(left, np.ndarray) and isinstance(right, np.ndarray)):
        return False
    if type(left) is not type(right):
        return False
    if left.shape != right.shape or left.dtype != right.dtype:
        return False
    if left.dtype == object:
        return all(payloads_equal(a, b) for a, b in zip(left.flat, right.flat))
    try:
        return bool(np.array_equal(left, right, equal_nan=True))
    except TypeError:
        # equal_nan is only defined for numeric dtypes
        return bool(np.array_equal(left, right))


def _is_nan(value: Any) -> bool:
    try:
        return math.isnan(value)
    except (TypeError, ValueError):
        return False
