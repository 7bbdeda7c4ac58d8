"""Word splitting and case conversion helpers."""

import unittest

from core import text_case


class SplitWordsTests(unittest.TestCase):
    def test_splits_on_separators(self) -> None:
        self.assertEqual(text_case.split_words("my file-name_here"), ["my", "file", "name", "here"])

    def test_splits_lower_to_upper_boundary(self) -> None:
        self.assertEqual(text_case.split_words("MyFile Name"), ["My", "File", "Name"])

    def test_keeps_acronym_together(self) -> None:
        self.assertEqual(text_case.split_words("XMLFile"), ["XML", "File"])

    def test_digits_stay_with_preceding_word(self) -> None:
        self.assertEqual(text_case.split_words("file2Name"), ["file2", "Name"])

    def test_only_separators_gives_no_words(self) -> None:
        self.assertEqual(text_case.split_words("-_ ."), [])


class CaseConversionTests(unittest.TestCase):
    def test_snake_case(self) -> None:
        self.assertEqual(text_case.to_snake_case("MyFile Name"), "my_file_name")

    def test_shouty_snake_case(self) -> None:
        self.assertEqual(text_case.to_shouty_snake_case("my file"), "MY_FILE")

    def test_kebab_and_shouty_kebab(self) -> None:
        self.assertEqual(text_case.to_kebab_case("My File"), "my-file")
        self.assertEqual(text_case.to_shouty_kebab_case("My File"), "MY-FILE")

    def test_train_case(self) -> None:
        self.assertEqual(text_case.to_train_case("my file"), "My-File")

    def test_title_case(self) -> None:
        self.assertEqual(text_case.to_title_case("hello_world"), "Hello World")

    def test_camel_cases(self) -> None:
        self.assertEqual(text_case.to_upper_camel_case("my file name"), "MyFileName")
        self.assertEqual(text_case.to_lower_camel_case("my file name"), "myFileName")

    def test_extension_dot_is_a_word_boundary(self) -> None:
        self.assertEqual(text_case.to_snake_case("Report.TXT"), "report_txt")

    def test_empty_input(self) -> None:
        self.assertEqual(text_case.to_snake_case(""), "")


if __name__ == "__main__":
    unittest.main()
