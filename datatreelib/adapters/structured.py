"""MAT file adapter for DataTreeLib.

A MAT file is loaded completely into memory when it is opened. From then on
every node carries its literal value as payload, and children are derived
purely from the runtime shape of that value:

- mappings (MATLAB structs) expand into their fields
- struct arrays expand into their elements, or into their fields when the
  array is too large to show element by element
- cell-like collections expand into their elements, addressed with MATLAB
  brace indexing (``c{2}``, ``c{1,3}``, ``c{1,2,2}``)
- non-scalar arrays expand into two informational leaves, ``Size`` and
  ``Class``
- everything else is a leaf
"""

import os
from collections.abc import Mapping
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from scipy.io import loadmat
from scipy.io.matlab import mat_struct

from ..config import StructuredFileConfig
from ..core.adapter import ContentAdapter
from ..core.node import Node
from ..errors import OpenError

SIZE_TYPE = "size"
CLASS_TYPE = "class"
# Informational leaves attached to non-scalar arrays
_INFO_TYPES = frozenset((SIZE_TYPE, CLASS_TYPE))

# Keys loadmat adds next to the stored variables
_MAT_METADATA_KEYS = frozenset(('__header__', '__version__', '__globals__'))


class StructArray(np.ndarray):
    """Object array of mappings loaded from a MATLAB struct array.

    A cell array whose elements all happen to be structs normalizes to the
    same object array of dicts; this subclass is what tells the two apart.
    Build one from a plain object array with ``array.view(StructArray)``.
    """


class ValueKind(Enum):
    """How a value is projected into child nodes."""
    MAPPING = "mapping"
    STRUCT_ARRAY = "struct_array"
    CELL = "cell"
    ARRAY = "array"
    SCALAR = "scalar"


class StructuredFileAdapter(ContentAdapter):
    """Adapter for MAT files.

    Example:
        adapter = StructuredFileAdapter()
        adapter.open('data.mat')
        for node in adapter.get_root():
            print(node.name, node.type)
    """

    def __init__(self, config: Optional[StructuredFileConfig] = None):
        """Initialize the adapter.

        Args:
            config: Struct-array display options (defaults apply if None)
        """
        super().__init__()
        self.config = config or StructuredFileConfig()
        self._data: Optional[dict] = None

    def open(self, locator) -> None:
        """Load every variable of a MAT file into memory."""
        path = os.fspath(locator)
        try:
            contents = loadmat(
                path,
                struct_as_record=False,
                squeeze_me=False,
                chars_as_strings=True,
            )
        except NotImplementedError as e:
            raise OpenError(
                path,
                "MAT v7.3 files are HDF5 containers, open them with HierarchicalFileAdapter",
            ) from e
        except Exception as e:
            raise OpenError(path, f"error loading MAT file: {e}") from e

        self._data = {
            name: normalize_mat_value(value)
            for name, value in contents.items()
            if name not in _MAT_METADATA_KEYS
        }
        self._locator = path
        logger.debug(f"Loaded {len(self._data)} variables from {path}")

    def get_root(self) -> List[Node]:
        """Return one node per top-level variable, in file order."""
        if self._data is None:
            return []

        # Roots hand out copies so consumers cannot reach the loaded data
        return [
            _make_node(name, name, _snapshot(value))
            for name, value in self._data.items()
        ]

    def get_children(self, node: Node) -> List[Node]:
        """Derive the children of a node from its payload."""
        if node.type in _INFO_TYPES:
            return []

        value = node.payload
        kind = classify(value)

        if kind is ValueKind.MAPPING:
            return _field_children(node.path, value)

        if kind is ValueKind.STRUCT_ARRAY:
            elements = value.reshape(-1, order='F')
            if self.config.should_split(elements.size):
                return [
                    _make_node(f"{node.name}_{i}", f"{node.path}({i})", element)
                    for i, element in enumerate(elements, start=1)
                ]
            return _field_children(node.path, collect_fields(value))

        if kind is ValueKind.CELL:
            shape, elements = _cell_layout(value)
            children = []
            for i, element in enumerate(elements):
                index = cell_index(i, shape)
                children.append(_make_node(index, node.path + index, element))
            return children

        if kind is ValueKind.ARRAY:
            return [
                Node(name='Size', path=f"{node.path}.size", type=SIZE_TYPE,
                     payload=tuple(int(n) for n in value.shape)),
                Node(name='Class', path=f"{node.path}.class", type=CLASS_TYPE,
                     payload=np.dtype(value.dtype).name),
            ]

        return []

    def has_children(self, node: Node) -> bool:
        """Answer from the payload's shape without building child nodes."""
        if node.type in _INFO_TYPES:
            return False

        value = node.payload
        kind = classify(value)

        if kind is ValueKind.MAPPING:
            return len(value) > 0
        if kind is ValueKind.STRUCT_ARRAY:
            return self.config.should_split(value.size) or bool(field_names(value))
        if kind is ValueKind.CELL:
            return len(_cell_layout(value)[1]) > 0
        return kind is ValueKind.ARRAY

    def get_node_data(self, node: Node) -> Any:
        """Return the node's value; MAT payloads are already in memory."""
        return node.payload

    def close(self) -> None:
        """Drop the loaded variables."""
        if self._locator is not None:
            logger.debug(f"Closed MAT file {self._locator}")
        self._data = None
        self._locator = None


def classify(value: Any) -> ValueKind:
    """Decide how a value expands.

    Works for normalized MAT data as well as plain Python values: dicts are
    structs, lists and tuples are 1-D cells, ``StructArray`` instances are
    struct arrays and any other object array is a cell.
    """
    if isinstance(value, Mapping):
        return ValueKind.MAPPING

    if isinstance(value, (list, tuple)):
        return ValueKind.CELL

    if isinstance(value, np.ndarray) and value.dtype == object:
        if isinstance(value, StructArray):
            return ValueKind.STRUCT_ARRAY
        return ValueKind.CELL

    if isinstance(value, np.generic):
        return ValueKind.SCALAR

    if hasattr(value, 'shape') and hasattr(value, 'dtype'):
        if int(np.prod(value.shape)) != 1:
            return ValueKind.ARRAY

    return ValueKind.SCALAR


def type_name(value: Any) -> str:
    """Return the type tag for a value: its runtime type name."""
    return type(value).__name__


def cell_index(linear: int, shape: Sequence[int]) -> str:
    """Format a 0-based linear position as a 1-based MATLAB brace index.

    Elements are numbered in column-major order. Vectors (including
    1-by-N and N-by-1 matrices) use a single index, matrices use
    ``{row,col}`` and higher-dimensional arrays list every subscript.

    Args:
        linear: 0-based position in column-major order
        shape: Shape of the collection

    Returns:
        Index string such as ``{3}``, ``{2,1}`` or ``{1,2,2}``
    """
    if len(shape) <= 1 or (len(shape) == 2 and (shape[0] == 1 or shape[1] == 1)):
        return f"{{{linear + 1}}}"

    subscripts = np.unravel_index(linear, tuple(shape), order='F')
    return "{" + ",".join(str(int(s) + 1) for s in subscripts) + "}"


def field_names(struct_array: np.ndarray) -> List[str]:
    """Return the ordered union of field names across a struct array."""
    names: List[str] = []
    seen = set()
    for element in struct_array.flat:
        for name in element:
            if name not in seen:
                seen.add(name)
                names.append(name)
    return names


def collect_fields(struct_array: np.ndarray) -> dict:
    """View a struct array as one struct whose fields hold per-element values.

    Each field maps to an object array with the struct array's shape.
    Elements that lack a field contribute None.
    """
    collected = {}
    for name in field_names(struct_array):
        column = np.empty(struct_array.shape, dtype=object)
        for index in np.ndindex(struct_array.shape):
            column[index] = struct_array[index].get(name)
        collected[name] = column
    return collected


def normalize_mat_value(value: Any) -> Any:
    """Convert loadmat output into plain dicts, object arrays and scalars.

    - a scalar struct becomes a dict, a struct array a ``StructArray`` of
      dicts
    - a cell array becomes a plain object array of normalized elements, even
      when every element is a struct
    - single-element numeric arrays become numpy scalars and single char
      rows become str
    - remaining arrays are marked read-only
    """
    if isinstance(value, mat_struct):
        return {
            name: normalize_mat_value(getattr(value, name))
            for name in value._fieldnames
        }

    if not isinstance(value, np.ndarray):
        return value

    if value.dtype == object:
        # Cell elements arrive wrapped in arrays, struct array elements do not
        is_struct_array = value.size > 0 and all(
            isinstance(item, mat_struct) for item in value.flat)
        if is_struct_array and value.size == 1:
            return normalize_mat_value(value.flat[0])

        normalized = np.empty(value.shape, dtype=object)
        for index in np.ndindex(value.shape):
            normalized[index] = normalize_mat_value(value[index])
        if is_struct_array:
            return normalized.view(StructArray)
        return normalized

    if value.dtype.kind == 'U':
        if value.size == 0:
            return ""
        if value.size == 1:
            return str(value.flat[0])
    elif value.size == 1 and value.dtype.names is None:
        return value.flat[0]

    value.setflags(write=False)
    return value


def _make_node(name: str, path: str, value: Any) -> Node:
    return Node(name=name, path=path, type=type_name(value), payload=value)


def _field_children(parent_path: str, mapping: Mapping) -> List[Node]:
    return [
        _make_node(str(name), f"{parent_path}.{name}", value)
        for name, value in mapping.items()
    ]


def _cell_layout(value: Any) -> Tuple[Tuple[int, ...], Sequence[Any]]:
    """Return (shape, elements in column-major order) of a cell-like value."""
    if isinstance(value, np.ndarray):
        return value.shape, value.reshape(-1, order='F')
    return (len(value),), value


def _snapshot(value: Any) -> Any:
    """Copy the containers of a value, sharing read-only leaf data."""
    if isinstance(value, Mapping):
        return {name: _snapshot(item) for name, item in value.items()}
    if isinstance(value, list):
        return [_snapshot(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_snapshot(item) for item in value)
    if isinstance(value, np.ndarray) and value.dtype == object:
        copy = np.empty(value.shape, dtype=object).view(type(value))
        for index in np.ndindex(value.shape):
            copy[index] = _snapshot(value[index])
        return copy
    return value
