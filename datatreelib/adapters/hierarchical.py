"""HDF5 file adapter for DataTreeLib.

The file is opened read-only and kept open until ``close``. Nodes carry
small frozen metadata records (member names, shapes, dtypes) as payload;
dataset and attribute values are only read when ``get_node_data`` asks for
them.

Paths follow HDF5 conventions: ``/`` is the root group, members are joined
with ``/`` and attributes are addressed as ``<owner path>#<attribute>``.
"""

import os
import posixpath
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

import h5py
from loguru import logger

from ..core.adapter import ContentAdapter
from ..core.node import Node
from ..errors import OpenError, ReadError

GROUP_TYPE = "group"
DATASET_TYPE = "dataset"
ATTRIBUTE_TYPE = "attribute"
ROOT_PATH = "/"


@dataclass(frozen=True)
class AttributeInfo:
    """Structural metadata of one attribute (no value)."""
    name: str
    shape: Optional[Tuple[int, ...]]
    dtype: str


@dataclass(frozen=True)
class DatasetInfo:
    """Structural metadata of a dataset."""
    name: str
    shape: Optional[Tuple[int, ...]]
    dtype: str
    attributes: Tuple[AttributeInfo, ...] = ()


@dataclass(frozen=True)
class GroupInfo:
    """Structural metadata of a group, one level deep.

    ``groups`` and ``datasets`` hold member names; members are described
    when the group is expanded.
    """
    name: str
    groups: Tuple[str, ...] = ()
    datasets: Tuple[str, ...] = ()
    attributes: Tuple[AttributeInfo, ...] = ()


class HierarchicalFileAdapter(ContentAdapter):
    """Adapter for HDF5 files and HDF5-based formats such as NWB.

    Example:
        with HierarchicalFileAdapter() as adapter:
            adapter.open('recording.nwb')
            root = adapter.get_root()[0]
            for child in adapter.get_children(root):
                print(child.path, child.type)
    """

    def __init__(self):
        super().__init__()
        self._file: Optional[h5py.File] = None
        self._root_info: Optional[GroupInfo] = None

    def open(self, locator) -> None:
        """Open an HDF5 file read-only and describe its root group."""
        path = os.fspath(locator)
        try:
            handle = h5py.File(path, 'r')
        except (OSError, ValueError) as e:
            raise OpenError(path, f"error opening HDF5 file: {e}") from e

        try:
            root_info = describe_group(handle, ROOT_PATH)
        except (OSError, KeyError, ValueError) as e:
            handle.close()
            raise OpenError(path, f"error reading HDF5 structure: {e}") from e

        self._release()
        self._file = handle
        self._root_info = root_info
        self._locator = path
        logger.debug(f"Opened HDF5 file {path}")

    def get_root(self) -> List[Node]:
        """Return the root group as the single root node."""
        if self._root_info is None:
            return []
        return [Node(name=ROOT_PATH, path=ROOT_PATH, type=GROUP_TYPE, payload=self._root_info)]

    def get_children(self, node: Node) -> List[Node]:
        """List groups, then datasets, then attributes of a group.

        Datasets only have attribute children; attributes have none.
        """
        if node.type == DATASET_TYPE:
            return _attribute_nodes(node.path, node.payload.attributes)
        if node.type != GROUP_TYPE:
            return []

        info: GroupInfo = node.payload
        if self._file is None:
            logger.warning(f"Cannot expand {node.path}: no HDF5 file is open")
            return []

        children = [self._describe_member(node.path, name, GROUP_TYPE) for name in info.groups]
        children.extend(self._describe_member(node.path, name, DATASET_TYPE)
                        for name in info.datasets)
        children.extend(_attribute_nodes(node.path, info.attributes))
        return children

    def has_children(self, node: Node) -> bool:
        """Answer from the metadata record without touching the file.

        Groups have no children once the file is closed.
        """
        if node.type == GROUP_TYPE:
            if self._file is None:
                return False
            info: GroupInfo = node.payload
            return bool(info.groups or info.datasets or info.attributes)
        if node.type == DATASET_TYPE:
            return bool(node.payload.attributes)
        return False

    def get_node_data(self, node: Node) -> Any:
        """Read a dataset or attribute value; groups return their metadata.

        Read failures are logged and reported as None.
        """
        try:
            if node.type == DATASET_TYPE:
                return self._read_dataset(node.path)
            if node.type == ATTRIBUTE_TYPE:
                return self._read_attribute(node.path)
        except ReadError as e:
            logger.warning(f"No data for {node.path}: {e.reason}")
            return None
        return node.payload

    def close(self) -> None:
        """Close the HDF5 file."""
        if self._locator is not None:
            logger.debug(f"Closed HDF5 file {self._locator}")
        self._release()
        self._locator = None

    def _release(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._root_info = None

    def _describe_member(self, parent_path: str, name: str, kind: str) -> Node:
        path = posixpath.join(parent_path, name)
        try:
            member = self._file[path]
            if kind == GROUP_TYPE:
                info = describe_group(member, path)
            else:
                info = describe_dataset(member, path)
        except (KeyError, OSError, ValueError) as e:
            # Listed by the parent, so it stays in the tree as an empty leaf
            logger.warning(f"Cannot describe {path}: {e}")
            if kind == GROUP_TYPE:
                info = GroupInfo(name=path)
            else:
                info = DatasetInfo(name=path, shape=None, dtype="unknown")
        return Node(name=name, path=path, type=kind, payload=info)

    def _require_file(self, path: str) -> h5py.File:
        if self._file is None:
            raise ReadError(path, "no HDF5 file is open")
        return self._file

    def _read_dataset(self, path: str) -> Any:
        handle = self._require_file(path)
        try:
            return handle[path][()]
        except (KeyError, OSError, ValueError, TypeError) as e:
            raise ReadError(path, f"error reading dataset: {e}") from e

    def _read_attribute(self, path: str) -> Any:
        handle = self._require_file(path)
        parent_path, _, attr_name = path.partition('#')

        if parent_path == ROOT_PATH:
            parent_info = self._root_info
        else:
            try:
                parent_info = describe(handle[parent_path], parent_path)
            except (KeyError, OSError, ValueError) as e:
                raise ReadError(path, f"cannot resolve parent {parent_path}: {e}") from e

        if attr_name not in {attribute.name for attribute in parent_info.attributes}:
            raise ReadError(path, "attribute not found")

        try:
            return handle[parent_path].attrs[attr_name]
        except (KeyError, OSError, ValueError, TypeError) as e:
            raise ReadError(path, f"error reading attribute: {e}") from e


def describe(obj: Union[h5py.Group, h5py.Dataset], path: str) -> Union[GroupInfo, DatasetInfo]:
    """Describe a group or dataset found at ``path``."""
    if isinstance(obj, h5py.Group):
        return describe_group(obj, path)
    if isinstance(obj, h5py.Dataset):
        return describe_dataset(obj, path)
    raise ValueError(f"{path} is neither a group nor a dataset")


def describe_group(group: h5py.Group, path: str) -> GroupInfo:
    """Describe a group one level deep: member names and attributes.

    Members that cannot be resolved (dangling soft or external links) and
    committed datatypes are skipped.
    """
    groups = []
    datasets = []
    for name in group:
        try:
            member = group[name]
        except (KeyError, OSError) as e:
            logger.warning(f"Skipping unresolvable member {posixpath.join(path, name)}: {e}")
            continue

        if isinstance(member, h5py.Group):
            groups.append(name)
        elif isinstance(member, h5py.Dataset):
            datasets.append(name)
        else:
            logger.warning(f"Skipping {posixpath.join(path, name)}: not a group or dataset")

    return GroupInfo(
        name=path,
        groups=tuple(groups),
        datasets=tuple(datasets),
        attributes=describe_attributes(group),
    )


def describe_dataset(dataset: h5py.Dataset, path: str) -> DatasetInfo:
    """Describe a dataset's shape, dtype and attributes without reading it."""
    return DatasetInfo(
        name=path,
        shape=_as_shape(dataset.shape),
        dtype=str(dataset.dtype),
        attributes=describe_attributes(dataset),
    )


def describe_attributes(obj: Union[h5py.Group, h5py.Dataset]) -> Tuple[AttributeInfo, ...]:
    """Describe the attributes attached to an object without reading values."""
    infos = []
    for name in obj.attrs:
        try:
            attr_id = obj.attrs.get_id(name)
            infos.append(AttributeInfo(name=name, shape=_as_shape(attr_id.shape),
                                       dtype=str(attr_id.dtype)))
        except (KeyError, OSError, TypeError) as e:
            # Still listed; reading the value reports the failure
            logger.warning(f"Cannot describe attribute {name!r}: {e}")
            infos.append(AttributeInfo(name=name, shape=None, dtype="unknown"))
    return tuple(infos)


def _attribute_nodes(owner_path: str, attributes: Tuple[AttributeInfo, ...]) -> List[Node]:
    return [
        Node(name=f"@{attribute.name}", path=f"{owner_path}#{attribute.name}",
             type=ATTRIBUTE_TYPE, payload=attribute)
        for attribute in attributes
    ]


def _as_shape(shape) -> Optional[Tuple[int, ...]]:
    if shape is None:
        return None
    return tuple(int(n) for n in shape)
