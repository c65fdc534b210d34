"""Tests for adapter selection."""

import shutil
import tempfile
import unittest

from datatreelib import (
    FileSystemAdapter,
    HierarchicalFileAdapter,
    StructuredFileAdapter,
    StructuredFileConfig,
    UnsupportedTypeError,
    available_adapters,
    create_adapter,
    file_dialog_filters,
    supported_extensions,
)


class TestCreateAdapter(unittest.TestCase):
    """create_adapter picks the adapter by locator."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_extension_table(self):
        """Test every known extension maps to its adapter."""
        self.assertIsInstance(create_adapter("data.mat"), StructuredFileAdapter)
        self.assertIsInstance(create_adapter("data.h5"), HierarchicalFileAdapter)
        self.assertIsInstance(create_adapter("data.hdf5"), HierarchicalFileAdapter)
        self.assertIsInstance(create_adapter("session.nwb"), HierarchicalFileAdapter)

    def test_case_insensitive(self):
        """Test extensions match regardless of case."""
        self.assertIsInstance(create_adapter("DATA.MAT"), StructuredFileAdapter)
        self.assertIsInstance(create_adapter("Session.NWB"), HierarchicalFileAdapter)

    def test_directory(self):
        """Test directories get the filesystem adapter."""
        self.assertIsInstance(create_adapter(self.test_dir), FileSystemAdapter)

    def test_adapter_is_unopened(self):
        """Test the factory does not open the source."""
        self.assertFalse(create_adapter(self.test_dir).is_open)

    def test_unknown_extension(self):
        """Test unknown extensions raise UnsupportedTypeError."""
        with self.assertRaises(UnsupportedTypeError) as ctx:
            create_adapter("notes.txt")
        self.assertEqual(ctx.exception.extension, ".txt")
        self.assertIn(".txt", str(ctx.exception))

    def test_missing_extension(self):
        """Test extensionless files name '(none)'."""
        with self.assertRaises(UnsupportedTypeError) as ctx:
            create_adapter("README")
        self.assertEqual(ctx.exception.extension, "(none)")

    def test_unsupported_is_value_error(self):
        """Test callers can catch ValueError."""
        with self.assertRaises(ValueError):
            create_adapter("archive.zip")

    def test_options_passed_to_constructor(self):
        """Test keyword options reach the adapter."""
        adapter = create_adapter(self.test_dir, include_hidden=False)
        self.assertFalse(adapter.include_hidden)

        config = StructuredFileConfig(struct_array_split_limit=1)
        self.assertIs(create_adapter("data.mat", config=config).config, config)


class TestExtensionQueries(unittest.TestCase):
    """Listing what the factory supports."""

    def test_supported_extensions(self):
        self.assertEqual(supported_extensions(), ['.mat', '.h5', '.hdf5', '.nwb'])

    def test_supported_extensions_with_directories(self):
        self.assertEqual(supported_extensions(include_directories=True),
                         ['.mat', '.h5', '.hdf5', '.nwb', 'folder'])

    def test_every_supported_extension_creates_an_adapter(self):
        for extension in supported_extensions():
            self.assertIsNotNone(create_adapter(f"file{extension}"))

    def test_available_adapters(self):
        adapters = available_adapters()
        self.assertEqual(len(adapters), 3)
        self.assertEqual(set(adapters),
                         {StructuredFileAdapter, HierarchicalFileAdapter, FileSystemAdapter})

    def test_file_dialog_filters(self):
        filters = file_dialog_filters()
        self.assertEqual(filters[0], ("*.mat", "*.mat files"))
        self.assertEqual(filters[-1], ("*.*", "All files"))
        self.assertEqual(len(filters), len(supported_extensions()) + 1)


if __name__ == '__main__':
    unittest.main()
