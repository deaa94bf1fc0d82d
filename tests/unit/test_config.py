import argparse
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from parmove.config import (
    DEFAULT_OUTPUT_DIR,
    build_config,
    prepare_output_dir,
    resolve_max_depth,
    resolve_workers,
)
from parmove.errors import ConfigError
from parmove.transfer import TransferMode


def sort_args(**overrides):
    values = dict(
        root=None, output_dir=None, move=False, blacklist=None, blacklist_file=None,
        threads=None, max_depth=None, categories=None, follow_symlinks=False,
        notify=False, verbose=False, report_out=None, index=False,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestResolvers(unittest.TestCase):
    @patch("parmove.config.os.cpu_count", return_value=6)
    def test_default_workers_is_cpu_count(self, _):
        self.assertEqual(resolve_workers(None), 6)

    @patch("parmove.config.os.cpu_count", return_value=None)
    def test_default_workers_without_cpu_count(self, _):
        self.assertEqual(resolve_workers(None), 1)

    def test_invalid_workers(self):
        for bad in (0, -1, "0", "many", True):
            with self.subTest(bad=bad):
                with self.assertRaises(ConfigError):
                    resolve_workers(bad)

    def test_workers_from_string(self):
        self.assertEqual(resolve_workers("3"), 3)

    def test_max_depth(self):
        self.assertIsNone(resolve_max_depth(None))
        self.assertEqual(resolve_max_depth(0), 0)
        self.assertEqual(resolve_max_depth("2"), 2)
        with self.assertRaises(ConfigError):
            resolve_max_depth(-1)

    def test_prepare_output_dir_failure(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            blocker = Path(tmpdir) / "file"
            blocker.write_text("not a directory")
            with self.assertRaises(ConfigError):
                prepare_output_dir(blocker / "out")

    def test_prepare_output_dir_creates(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out = prepare_output_dir(Path(tmpdir) / "a" / "b")
            self.assertTrue(out.is_dir())


class TestBuildConfig(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_defaults(self):
        config = build_config(sort_args(root=self.root, threads=2), environ={})
        self.assertEqual(config.root, self.root.resolve())
        self.assertEqual(config.output_dir, Path.cwd() / DEFAULT_OUTPUT_DIR)
        self.assertIs(config.mode, TransferMode.COPY)
        self.assertEqual(config.workers, 2)
        self.assertFalse(config.workers_is_default)
        self.assertIsNone(config.max_depth)

    def test_environment_fills_missing_flags(self):
        env = {
            "PARMOVE_OUTPUT_DIR": str(self.root / "env-out"),
            "PARMOVE_THREADS": "5",
            "PARMOVE_MAX_DEPTH": "1",
            "PARMOVE_BLACKLIST": "tmp",
            "PARMOVE_CATEGORIES": "cats.json",
        }
        config = build_config(sort_args(root=self.root), environ=env)
        self.assertEqual(config.output_dir, self.root / "env-out")
        self.assertEqual(config.workers, 5)
        self.assertEqual(config.max_depth, 1)
        self.assertEqual(config.blacklist, "tmp")
        self.assertEqual(config.categories_file, Path("cats.json"))

    def test_flags_override_environment(self):
        env = {"PARMOVE_THREADS": "5", "PARMOVE_BLACKLIST": "tmp"}
        config = build_config(sort_args(root=self.root, threads=3, blacklist="log", move=True), environ=env)
        self.assertEqual(config.workers, 3)
        self.assertEqual(config.blacklist, "log")
        self.assertIs(config.mode, TransferMode.MOVE)

    def test_zero_threads_is_rejected(self):
        with self.assertRaises(ConfigError):
            build_config(sort_args(root=self.root, threads=0), environ={})

    def test_missing_root_is_rejected(self):
        with self.assertRaises(ConfigError):
            build_config(sort_args(root=self.root / "missing"), environ={})

    def test_config_is_immutable(self):
        config = build_config(sort_args(root=self.root, threads=1), environ={})
        with self.assertRaises(Exception):
            config.workers = 4


if __name__ == '__main__':
    unittest.main()
