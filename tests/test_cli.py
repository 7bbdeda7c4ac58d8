"""Command-line subcommands (list / preview / apply)."""

import contextlib
import io
import os
import tempfile
import unittest
from pathlib import Path

from cli import cli_entry


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = os.path.realpath(self._tmp.name)
        for name in ("a.txt", "b.jpg"):
            Path(self.root, name).write_text(name, encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_cli(self, *argv: str):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = cli_entry.main(list(argv))
        return code, out.getvalue()


class ListCommandTests(CliTestCase):
    def test_lists_entries(self) -> None:
        code, output = self.run_cli("list", self.root)
        self.assertEqual(code, 0)
        self.assertIn("a.txt", output)
        self.assertIn("Total: 2 entries", output)

    def test_missing_directory(self) -> None:
        code, output = self.run_cli("list", os.path.join(self.root, "missing"))
        self.assertEqual(code, 1)
        self.assertIn("Error", output)


class PreviewCommandTests(CliTestCase):
    def test_preview_shows_new_names_without_renaming(self) -> None:
        code, output = self.run_cli("preview", self.root, "--case", "upper")
        self.assertEqual(code, 0)
        self.assertIn("A.TXT", output)
        self.assertIn("B.JPG", output)
        self.assertTrue(Path(self.root, "a.txt").exists())

    def test_select_glob(self) -> None:
        code, output = self.run_cli("preview", self.root, "--select", "*.jpg", "--prefix", "x_")
        self.assertEqual(code, 0)
        self.assertIn("x_b.jpg", output)
        self.assertNotIn("x_a.txt", output)

    def test_invalid_option_value(self) -> None:
        code, output = self.run_cli("preview", self.root, "--number", "suffix", "--number-base", "1")
        self.assertEqual(code, 1)
        self.assertIn("Error", output)


class ApplyCommandTests(CliTestCase):
    def test_apply_renames_selected(self) -> None:
        code, _ = self.run_cli("apply", self.root, "--select", "a.txt", "--prefix", "new_", "--yes")
        self.assertEqual(code, 0)
        self.assertTrue(Path(self.root, "new_a.txt").exists())
        self.assertTrue(Path(self.root, "b.jpg").exists())

    def test_dry_run(self) -> None:
        code, output = self.run_cli("apply", self.root, "--suffix", "_x", "--dry-run")
        self.assertEqual(code, 0)
        self.assertIn("a_x.txt", output)
        self.assertTrue(Path(self.root, "a.txt").exists())

    def test_conflict_error_policy(self) -> None:
        code, output = self.run_cli(
            "apply", self.root, "--select", "a.txt", "--regex", r"a\.txt", "--sub", "b.jpg",
            "--regex-ext", "--on-conflict", "error", "--yes",
        )
        self.assertEqual(code, 1)
        self.assertIn("collision", output)


if __name__ == "__main__":
    unittest.main()
