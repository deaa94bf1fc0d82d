import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from parmove.errors import ConfigError
from parmove.extensions import (
    DEFAULT_CATEGORIES,
    ExtensionIndex,
    load_blacklist,
    load_categories,
    normalize_extension,
    parse_categories,
    split_extension,
)


class TestNormalization(unittest.TestCase):
    def test_normalize_extension(self):
        self.assertEqual(normalize_extension("txt"), "txt")
        self.assertEqual(normalize_extension(" .TXT "), "txt")
        self.assertEqual(normalize_extension("Tar.GZ"), "tar.gz")
        self.assertIsNone(normalize_extension("   "))
        self.assertIsNone(normalize_extension("."))

    def test_split_extension(self):
        self.assertEqual(split_extension("a.txt"), "txt")
        self.assertEqual(split_extension("b.TXT"), "txt")
        self.assertEqual(split_extension("archive.tar.gz"), "gz")
        self.assertIsNone(split_extension("c"))
        self.assertIsNone(split_extension(".bashrc"))
        self.assertIsNone(split_extension("notes."))


class TestBlacklist(unittest.TestCase):
    def test_inline_tokens_are_normalized(self):
        blacklist = load_blacklist(" txt, .LOG,,tmp ,")
        self.assertEqual(blacklist, frozenset({"txt", "log", "tmp"}))

    def test_file_and_inline_are_merged(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "blacklist.txt"
            path.write_text("# temporary files\n.bak\n\n  PART  \n#iso\n", encoding="utf-8")

            blacklist = load_blacklist("txt", path)

        self.assertEqual(blacklist, frozenset({"txt", "bak", "part"}))

    def test_unreadable_file_is_config_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ConfigError):
                load_blacklist(None, Path(tmpdir) / "missing.txt")

    def test_no_sources_means_empty(self):
        self.assertEqual(load_blacklist(), frozenset())


class TestExtensionIndex(unittest.TestCase):
    def test_is_blacklisted_ignores_case_and_dot(self):
        for token in ("txt", ".txt", "TXT", ".Txt"):
            index = ExtensionIndex(blacklist=load_blacklist(token))
            self.assertTrue(index.is_blacklisted(Path("dir/a.txt")))
            self.assertTrue(index.is_blacklisted(Path("dir/b.TXT")))
            self.assertFalse(index.is_blacklisted(Path("dir/c.md")))

    def test_extensionless_files_are_never_blacklisted(self):
        index = ExtensionIndex(blacklist=frozenset({"txt"}))
        self.assertFalse(index.is_blacklisted(Path("Makefile")))
        self.assertFalse(index.is_blacklisted(Path(".txt")))

    def test_empty_blacklist_does_not_inspect_path(self):
        index = ExtensionIndex()
        # Not a path at all; only the fast path can answer this
        self.assertFalse(index.is_blacklisted(object()))

    def test_category_for(self):
        index = ExtensionIndex(categories={"Documents": {"txt", "pdf"}, "Images": {"png"}})
        self.assertEqual(index.category_for("txt"), "Documents")
        self.assertEqual(index.category_for(".PDF"), "Documents")
        self.assertEqual(index.category_for("png"), "Images")
        self.assertIsNone(index.category_for("xyz"))
        self.assertIsNone(index.category_for(""))

    def test_duplicate_extension_takes_first_category(self):
        index = ExtensionIndex(categories={"First": {"txt"}, "Second": {"txt", "md"}})
        self.assertEqual(index.category_for("txt"), "First")
        self.assertEqual(index.category_for("md"), "Second")

    def test_index_is_read_only(self):
        index = ExtensionIndex(categories={"Documents": {"txt"}})
        with self.assertRaises(TypeError):
            index.categories["Images"] = frozenset({"png"})
        with self.assertRaises(Exception):
            index.blacklist = frozenset({"txt"})


class TestCategoryLoading(unittest.TestCase):
    def test_defaults_when_no_path(self):
        categories = load_categories(None)
        self.assertEqual(list(categories), list(DEFAULT_CATEGORIES))
        self.assertIn("jpg", categories["Images"])

    def test_valid_document(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "categories.json"
            path.write_text(json.dumps({"Photos": [".JPG", "png"], "Text": ["txt"]}), encoding="utf-8")

            categories = load_categories(path)

        self.assertEqual(list(categories), ["Photos", "Text"])
        self.assertEqual(categories["Photos"], frozenset({"jpg", "png"}))

    def test_missing_file_falls_back_with_warning(self):
        log = MagicMock()
        with tempfile.TemporaryDirectory() as tmpdir:
            categories = load_categories(Path(tmpdir) / "nope.json", log)

        self.assertEqual(list(categories), list(DEFAULT_CATEGORIES))
        log.warning.assert_called_once()
        self.assertIn("default categories", log.warning.call_args[0][0])

    def test_malformed_json_is_config_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "categories.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_categories(path)

    def test_wrong_shapes_are_config_errors(self):
        bad_shapes = (
            [["txt"]],
            {"Docs": "txt"},
            {"Docs": ["txt", 3]},
            {"": ["txt"]},
            {"/tmp/elsewhere": ["txt"]},
            {"..": ["txt"]},
            {".": ["txt"]},
            {"../up": ["txt"]},
            {"Docs/Nested": ["txt"]},
        )
        for bad in bad_shapes:
            with self.subTest(bad=bad):
                with self.assertRaises(ConfigError):
                    parse_categories(bad)


if __name__ == '__main__':
    unittest.main()
