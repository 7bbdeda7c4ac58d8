"""Helpers behind the commit step: name validation, pre-flight checks, conflict resolution."""

import tempfile
import unittest
from pathlib import Path

from core import ConflictResolver, check_rename_op, is_valid_filename
from core.exec_rename import RenameResult, original_name_of, temp_path_for
from core.models_fs import RenameOp
from core.text_match import map_stem, replace_text, split_hidden


class ReplaceTextTests(unittest.TestCase):
    def test_replace_all_and_first(self) -> None:
        self.assertEqual(replace_text("a-b-c", "-", "_"), "a_b_c")
        self.assertEqual(replace_text("a-b-c", "-", "_", count=1), "a_b-c")

    def test_case_insensitive_keeps_replacement_literal(self) -> None:
        self.assertEqual(replace_text("IMG img", "img", r"p\1", case_sensitive=False), r"p\1 p\1")

    def test_empty_pattern_is_noop(self) -> None:
        self.assertEqual(replace_text("abc", "", "x"), "abc")


class StemSplitTests(unittest.TestCase):
    def test_split_hidden_separates_leading_dot(self) -> None:
        self.assertEqual(split_hidden(".bashrc"), (".", "bashrc", ""))
        self.assertEqual(split_hidden(".config.json"), (".", "config", "json"))
        self.assertEqual(split_hidden("a.tar.gz"), ("", "a.tar", "gz"))

    def test_map_stem_keeps_dot_and_extension(self) -> None:
        self.assertEqual(map_stem(".config.json", str.upper), ".CONFIG.json")
        self.assertEqual(map_stem("notes", lambda s: "x" + s), "xnotes")


class FilenameValidationTests(unittest.TestCase):
    def test_valid(self) -> None:
        self.assertEqual(is_valid_filename("report 2020.txt"), (True, None))

    def test_invalid(self) -> None:
        for name in ("", ".", "..", "a/b", "a:b", "trailing.", "trailing ", "CON.txt", "x" * 256):
            with self.subTest(name=name):
                valid, error = is_valid_filename(name)
                self.assertFalse(valid)
                self.assertTrue(error)


class CheckRenameOpTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "a.txt").write_text("a", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_ok(self) -> None:
        self.assertEqual(check_rename_op(self.root / "a.txt", self.root / "b.txt"), (True, None))

    def test_missing_source(self) -> None:
        ok, error = check_rename_op(self.root / "nope.txt", self.root / "b.txt")
        self.assertFalse(ok)
        self.assertIn("does not exist", error)

    def test_other_directory(self) -> None:
        ok, error = check_rename_op(self.root / "a.txt", self.root / "sub" / "b.txt")
        self.assertFalse(ok)
        self.assertIn("outside", error)


class ConflictResolverTests(unittest.TestCase):
    def test_free_name_is_claimed_as_is(self) -> None:
        names = ConflictResolver(["a.txt"], case_insensitive=False)
        self.assertEqual(names.resolve("b.txt"), ("b.txt", False))
        self.assertTrue(names.is_taken("b.txt"))

    def test_taken_name_gets_numbered(self) -> None:
        names = ConflictResolver(["a.txt", "a_1.txt"], case_insensitive=False)
        self.assertEqual(names.resolve("a.txt"), ("a_2.txt", True))

    def test_case_insensitive(self) -> None:
        names = ConflictResolver(["Photo.JPG"], case_insensitive=True)
        self.assertTrue(names.is_taken("photo.jpg"))
        names.release(["PHOTO.jpg"])
        self.assertFalse(names.is_taken("photo.jpg"))

    def test_hidden_name_keeps_dot(self) -> None:
        names = ConflictResolver([".env"], case_insensitive=False)
        self.assertEqual(names.resolve(".env"), (".env_1", True))


class TempNameTests(unittest.TestCase):
    def test_temp_name_round_trip(self) -> None:
        temp = temp_path_for(Path("/d/my__file.txt"))
        self.assertEqual(temp.parent, Path("/d"))
        self.assertEqual(original_name_of(temp.name), "my__file.txt")

    def test_not_a_temp_name(self) -> None:
        self.assertIsNone(original_name_of("plain.txt"))


class RenameResultTests(unittest.TestCase):
    def test_summary_lists_limited_failures(self) -> None:
        result = RenameResult()
        for i in range(3):
            result.failed.append((RenameOp(Path(f"/d/{i}"), Path(f"/d/x{i}")), "boom"))
        text = result.summary(limit=2)
        self.assertIn("failed 3", text)
        self.assertIn("1 more", text)

    def test_to_dict(self) -> None:
        result = RenameResult(success=[RenameOp(Path("/d/a"), Path("/d/b"))])
        self.assertEqual(result.to_dict()["success"], [{"src": "/d/a", "dst": "/d/b"}])


if __name__ == "__main__":
    unittest.main()
