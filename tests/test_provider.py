"""Tests for TreeNodeProvider."""

import shutil
import tempfile
import unittest
from pathlib import Path

from datatreelib import (
    FileSystemAdapter,
    NoAdapterError,
    Node,
    OpenError,
    StructuredFileAdapter,
    TreeNodeProvider,
    UnsupportedTypeError,
)


class TestProviderWithoutAdapter(unittest.TestCase):
    """Queries before an adapter is bound."""

    def setUp(self):
        self.provider = TreeNodeProvider()
        self.node = Node(name="x", path="x", type="int", payload=1)

    def test_queries_raise(self):
        with self.assertRaises(NoAdapterError):
            self.provider.get_root()
        with self.assertRaises(NoAdapterError):
            self.provider.get_children(self.node)
        with self.assertRaises(NoAdapterError):
            self.provider.has_children(self.node)
        with self.assertRaises(NoAdapterError):
            self.provider.get_node_data(self.node)

    def test_expand_all_raises(self):
        with self.assertRaises(NoAdapterError):
            list(self.provider.expand_all())

    def test_close_is_noop(self):
        self.provider.close()
        self.assertIsNone(self.provider.adapter)

    def test_adapter_property(self):
        adapter = StructuredFileAdapter()
        self.provider.adapter = adapter
        self.assertIs(self.provider.adapter, adapter)
        self.assertEqual(self.provider.get_children(Node("s", "s", "dict", {'a': 1}))[0].path, "s.a")


class TestProviderWithDirectory(unittest.TestCase):
    """Loading and expanding a directory tree."""

    def setUp(self):
        # test_dir/
        #   a/
        #     b.txt
        #   c.txt
        self.test_dir = tempfile.mkdtemp()
        base = Path(self.test_dir)
        (base / "a").mkdir()
        (base / "a" / "b.txt").write_text("b")
        (base / "c.txt").write_text("c")
        self.provider = TreeNodeProvider()

    def tearDown(self):
        self.provider.close()
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_load_uses_factory(self):
        roots = self.provider.load(self.test_dir)

        self.assertIsInstance(self.provider.adapter, FileSystemAdapter)
        self.assertEqual(len(roots), 1)
        self.assertEqual(roots[0].path, self.test_dir)

    def test_load_with_explicit_adapter(self):
        adapter = FileSystemAdapter(include_hidden=False)
        self.provider.load(self.test_dir, adapter=adapter)
        self.assertIs(self.provider.adapter, adapter)

    def test_load_closes_previous_adapter(self):
        first = FileSystemAdapter()
        self.provider.load(self.test_dir, adapter=first)
        second = FileSystemAdapter()
        self.provider.load(self.test_dir, adapter=second)

        self.assertFalse(first.is_open)
        self.assertTrue(second.is_open)

    def test_reload_same_adapter(self):
        adapter = FileSystemAdapter()
        self.provider.load(self.test_dir, adapter=adapter)
        self.provider.load(self.test_dir, adapter=adapter)
        self.assertTrue(adapter.is_open)

    def test_load_unsupported(self):
        with self.assertRaises(UnsupportedTypeError):
            self.provider.load(Path(self.test_dir) / "c.txt")

    def test_load_failure_propagates(self):
        with self.assertRaises(OpenError):
            self.provider.load(Path(self.test_dir) / "missing.mat")

    def test_failed_load_keeps_previous_source(self):
        self.provider.load(self.test_dir)
        corrupt = Path(self.test_dir) / "corrupt.mat"
        corrupt.write_bytes(b"this is not a MAT file at all" * 10)

        with self.assertRaises(OpenError):
            self.provider.load(corrupt)

        self.assertIsInstance(self.provider.adapter, FileSystemAdapter)
        self.assertTrue(self.provider.adapter.is_open)
        self.assertEqual(self.provider.get_root()[0].path, self.test_dir)

    def test_delegation(self):
        root = self.provider.load(self.test_dir)[0]

        self.assertTrue(self.provider.has_children(root))
        names = [child.name for child in self.provider.get_children(root)]
        self.assertEqual(names, ["a", "c.txt"])
        self.assertTrue(self.provider.get_node_data(root)['is_dir'])

    def test_expand_all_pre_order(self):
        self.provider.load(self.test_dir)
        rows = [(node.name, depth) for node, depth in self.provider.expand_all()]

        root_name = Path(self.test_dir).name
        self.assertEqual(rows, [(root_name, 0), ("a", 1), ("b.txt", 2), ("c.txt", 1)])

    def test_expand_all_from_node_with_depth_limit(self):
        root = self.provider.load(self.test_dir)[0]
        a = self.provider.get_children(root)[0]

        self.assertEqual([n.name for n, _ in self.provider.expand_all(a)], ["a", "b.txt"])
        self.assertEqual([n.name for n, _ in self.provider.expand_all(max_depth=1)],
                         [root.name, "a", "c.txt"])

    def test_find_node_after_reexpansion(self):
        root = self.provider.load(self.test_dir)[0]
        a = self.provider.get_children(root)[0]
        target = self.provider.get_children(a)[0]

        self.provider.load(self.test_dir)
        found = self.provider.find_node(target)

        self.assertIsNotNone(found)
        self.assertIsNot(found, target)
        self.assertEqual(found.path, target.path)

    def test_find_node_absent(self):
        self.provider.load(self.test_dir)
        ghost = Node(name="ghost", path="/nowhere/ghost", type="txt", payload="/nowhere/ghost")
        self.assertIsNone(self.provider.find_node(ghost))

    def test_context_manager_closes(self):
        with TreeNodeProvider() as provider:
            provider.load(self.test_dir)
            adapter = provider.adapter
            self.assertTrue(adapter.is_open)
        self.assertFalse(adapter.is_open)

    def test_close_twice(self):
        self.provider.load(self.test_dir)
        self.provider.close()
        self.provider.close()
        self.assertFalse(self.provider.adapter.is_open)


if __name__ == '__main__':
    unittest.main()
