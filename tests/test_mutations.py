"""Behavior of the individual filename mutations."""

import unittest
from datetime import datetime, timezone

from core import (
    AddConfig, AddMutation, AutoDateConfig, AutoDateMutation, CaseConfig,
    CaseMutation, CaseType, DatePosition, DateType, Entry, EntryKind,
    NumberingConfig, NumberingMode, NumberingMutation,
    RegexConfig, RegexMutation, RemoveConfig, RemoveMutation, ReplaceConfig,
    ReplaceMutation,
)
from core.mutations import format_number


class RegexMutationTests(unittest.TestCase):
    def _regex(self, pattern: str, substitution: str, **kwargs) -> RegexMutation:
        return RegexMutation(RegexConfig(enabled=True, pattern=pattern, substitution=substitution, **kwargs))

    def test_substitutes_on_stem_and_keeps_extension(self) -> None:
        self.assertEqual(self._regex("report", "X").mutate("report.txt"), "X.txt")

    def test_does_not_touch_extension_by_default(self) -> None:
        self.assertEqual(self._regex("txt", "md").mutate("txt.txt"), "md.txt")

    def test_hidden_file_without_extension_gets_trailing_dot(self) -> None:
        self.assertEqual(self._regex("bashrc", "X").mutate(".bashrc"), "X.")

    def test_including_extension_matches_whole_name(self) -> None:
        self.assertEqual(self._regex(r"\.txt$", ".md", including_extension=True).mutate("a.txt"), "a.md")

    def test_numbered_group_reference(self) -> None:
        mutation = self._regex(r"IMG_(\d+)", "photo_$1")
        self.assertEqual(mutation.mutate("IMG_0042.jpg"), "photo_0042.jpg")

    def test_named_group_reference(self) -> None:
        mutation = self._regex(r"(?P<n>\d+)", "${n}x")
        self.assertEqual(mutation.mutate("a12.txt"), "a12x.txt")

    def test_dollar_escape_and_literal_backslash(self) -> None:
        self.assertEqual(self._regex("x", "$$1").mutate("x.txt"), "$1.txt")
        self.assertEqual(self._regex("x", r"a\b").mutate("x.txt"), r"a\b.txt")

    def test_python_group_syntax_is_literal(self) -> None:
        self.assertEqual(self._regex("(x)", r"\g<1>-$1").mutate("x.txt"), r"\g<1>-x.txt")

    def test_missing_group_expands_to_empty(self) -> None:
        self.assertEqual(self._regex("(a)", "${2}b").mutate("a.txt"), "b.txt")

    def test_invalid_pattern_is_identity(self) -> None:
        mutation = self._regex("(", "X")
        self.assertEqual(mutation.mutate("report.txt"), "report.txt")
        self.assertIsNotNone(mutation.pattern_error)
        self.assertFalse(mutation.is_active)

    def test_empty_pattern_is_identity(self) -> None:
        self.assertEqual(self._regex("", "X").mutate("report.txt"), "report.txt")

    def test_disabled_is_identity(self) -> None:
        mutation = RegexMutation(RegexConfig(enabled=False, pattern="report", substitution="X"))
        self.assertEqual(mutation.mutate("report.txt"), "report.txt")


class ReplaceMutationTests(unittest.TestCase):
    def test_case_insensitive_replace_all_by_default(self) -> None:
        mutation = ReplaceMutation(ReplaceConfig(enabled=True, match="foo", replace_with="bar"))
        self.assertEqual(mutation.mutate("Foo foo.foo"), "bar bar.foo")

    def test_first_only(self) -> None:
        mutation = ReplaceMutation(ReplaceConfig(enabled=True, match="foo", replace_with="bar", first_only=True))
        self.assertEqual(mutation.mutate("Foo foo.foo"), "bar foo.foo")

    def test_case_sensitive(self) -> None:
        mutation = ReplaceMutation(ReplaceConfig(enabled=True, match="foo", replace_with="bar", case_sensitive=True))
        self.assertEqual(mutation.mutate("Foo foo.foo"), "Foo bar.foo")

    def test_hidden_file_keeps_leading_dot(self) -> None:
        mutation = ReplaceMutation(ReplaceConfig(enabled=True, match="bash", replace_with="zsh"))
        self.assertEqual(mutation.mutate(".bashrc"), ".zshrc")

    def test_replacing_dots_leaves_hidden_marker(self) -> None:
        mutation = ReplaceMutation(ReplaceConfig(enabled=True, match=".", replace_with="_"))
        self.assertEqual(mutation.mutate(".bashrc"), ".bashrc")
        self.assertEqual(mutation.mutate(".my.conf.txt"), ".my_conf.txt")


class CaseMutationTests(unittest.TestCase):
    def _case(self, case_type: CaseType) -> CaseMutation:
        return CaseMutation(CaseConfig(enabled=True, case_type=case_type))

    def test_snake_case(self) -> None:
        self.assertEqual(self._case(CaseType.SNAKE).mutate("MyFile Name"), "my_file_name")

    def test_upper_applies_to_extension_and_is_idempotent(self) -> None:
        mutation = self._case(CaseType.UPPER)
        once = mutation.mutate("abc.txt")
        self.assertEqual(once, "ABC.TXT")
        self.assertEqual(mutation.mutate(once), once)

    def test_kebab_renders_capitalized_words(self) -> None:
        self.assertEqual(self._case(CaseType.KEBAB).mutate("my file"), "My-File")

    def test_none_is_identity(self) -> None:
        self.assertEqual(self._case(CaseType.NONE).mutate("My File.txt"), "My File.txt")

    def test_disabled_is_identity(self) -> None:
        mutation = CaseMutation(CaseConfig(enabled=False, case_type=CaseType.UPPER))
        self.assertEqual(mutation.mutate("abc.txt"), "abc.txt")


class RemoveMutationTests(unittest.TestCase):
    def _remove(self, **kwargs) -> RemoveMutation:
        return RemoveMutation(RemoveConfig(enabled=True, **kwargs))

    def test_first_and_last_n(self) -> None:
        self.assertEqual(self._remove(first_n=2).mutate("abcdef.txt"), "cdef.txt")
        self.assertEqual(self._remove(last_n=2).mutate("abcdef.txt"), "abcd.txt")
        self.assertEqual(self._remove(first_n=1, last_n=1).mutate("abcdef.txt"), "bcde.txt")

    def test_last_n_longer_than_stem_empties_it(self) -> None:
        self.assertEqual(self._remove(last_n=10).mutate("abc.txt"), ".txt")

    def test_range_is_one_based_and_inclusive(self) -> None:
        self.assertEqual(self._remove(from_pos=2, to_pos=3).mutate("abcdef.txt"), "adef.txt")

    def test_open_ended_range(self) -> None:
        self.assertEqual(self._remove(from_pos=3).mutate("abcdef.txt"), "ab.txt")

    def test_chars(self) -> None:
        self.assertEqual(self._remove(chars="-_").mutate("a-b_c.txt"), "abc.txt")

    def test_whole_words_only(self) -> None:
        mutation = self._remove(words=("the",), trim=True)
        self.assertEqual(mutation.mutate("the cat the.txt"), "cat.txt")
        self.assertEqual(mutation.mutate("theme the.txt"), "theme.txt")

    def test_digits_leave_extension_alone(self) -> None:
        self.assertEqual(self._remove(digits=True).mutate("a1b2.mp3"), "ab.mp3")

    def test_accents(self) -> None:
        self.assertEqual(self._remove(accents=True).mutate("café.txt"), "cafe.txt")

    def test_hidden_file_keeps_leading_dot(self) -> None:
        self.assertEqual(self._remove(first_n=1).mutate(".bashrc"), ".ashrc")


class AddMutationTests(unittest.TestCase):
    def test_prefix_and_suffix_with_word_space(self) -> None:
        mutation = AddMutation(AddConfig(enabled=True, prefix="new", suffix="end", word_space=True))
        self.assertEqual(mutation.mutate("photo.jpg"), "new photo end.jpg")

    def test_insert_positions(self) -> None:
        def insert_at(pos: int) -> str:
            return AddMutation(AddConfig(enabled=True, insert="X", at_position=pos)).mutate("abcd.txt")

        self.assertEqual(insert_at(2), "abXcd.txt")
        self.assertEqual(insert_at(-1), "abcXd.txt")
        self.assertEqual(insert_at(99), "abcdX.txt")

    def test_hidden_file_prefix_goes_after_dot(self) -> None:
        mutation = AddMutation(AddConfig(enabled=True, prefix="new_", insert="X", at_position=0))
        self.assertEqual(mutation.mutate(".bashrc"), ".new_Xbashrc")
        self.assertEqual(mutation.mutate(".config.json"), ".new_Xconfig.json")

    def test_disabled_is_identity(self) -> None:
        mutation = AddMutation(AddConfig(enabled=False, prefix="new"))
        self.assertEqual(mutation.mutate("photo.jpg"), "photo.jpg")


class AutoDateMutationTests(unittest.TestCase):
    def _entry(self, modified_at=None, created_at=None) -> Entry:
        return Entry(
            name="a.txt", absolute_path="/tmp/a.txt", kind=EntryKind.FILE,
            modified_at=modified_at, created_at=created_at,
        )

    def test_current_date_suffix_uses_clock(self) -> None:
        config = AutoDateConfig(enabled=True, date_type=DateType.CURRENT)
        mutation = AutoDateMutation(config, clock=lambda: datetime(2024, 1, 2, 3, 4, 5))
        self.assertEqual(mutation.mutate("a.txt"), "a_2024-01-02.txt")

    def test_current_date_prefix(self) -> None:
        config = AutoDateConfig(
            enabled=True, date_type=DateType.CURRENT, position=DatePosition.PREFIX,
            date_format="%Y%m%d", separator="-",
        )
        mutation = AutoDateMutation(config, clock=lambda: datetime(2024, 1, 2))
        self.assertEqual(mutation.mutate("a.txt"), "20240102-a.txt")
        self.assertEqual(mutation.mutate(".bashrc"), ".20240102-bashrc")

    def test_modified_date_comes_from_entry(self) -> None:
        config = AutoDateConfig(enabled=True, date_type=DateType.MODIFIED, date_format="%Y")
        mutation = AutoDateMutation(config)
        entry = self._entry(modified_at=datetime(2023, 6, 15, 12, 0, tzinfo=timezone.utc))
        self.assertEqual(mutation.mutate("a.txt", entry), "a_2023.txt")

    def test_missing_timestamp_is_identity(self) -> None:
        mutation = AutoDateMutation(AutoDateConfig(enabled=True, date_type=DateType.CREATED))
        self.assertEqual(mutation.mutate("a.txt"), "a.txt")
        self.assertEqual(mutation.mutate("a.txt", self._entry()), "a.txt")


class NumberingMutationTests(unittest.TestCase):
    def _numbering(self, **kwargs) -> NumberingMutation:
        return NumberingMutation(NumberingConfig(enabled=True, **kwargs))

    def test_padded_suffix_counts_per_name(self) -> None:
        mutation = self._numbering(pad=3)
        self.assertEqual(mutation.mutate("a.txt"), "a_001.txt")
        self.assertEqual(mutation.mutate("b.txt"), "b_002.txt")

    def test_break_after_restarts_counter(self) -> None:
        mutation = self._numbering(mode=NumberingMode.PREFIX, break_after=2, separator="")
        names = [mutation.mutate(n) for n in ("a", "b", "c", "d", "e")]
        self.assertEqual(names, ["1a", "2b", "1c", "2d", "1e"])

    def test_negative_increment(self) -> None:
        mutation = self._numbering(start=3, increment=-1)
        self.assertEqual([mutation.mutate("x") for _ in range(3)], ["x_3", "x_2", "x_1"])

    def test_reset_starts_over(self) -> None:
        mutation = self._numbering()
        mutation.mutate("a")
        mutation.reset()
        self.assertEqual(mutation.mutate("a"), "a_1")

    def test_insert_and_prefix_suffix_modes(self) -> None:
        self.assertEqual(self._numbering(mode=NumberingMode.INSERT, at_position=1).mutate("ab.txt"), "a1b.txt")
        self.assertEqual(
            self._numbering(mode=NumberingMode.PREFIX_SUFFIX, separator="-").mutate("a.txt"), "1-a-1.txt"
        )

    def test_hidden_file_number_goes_after_dot(self) -> None:
        self.assertEqual(self._numbering(mode=NumberingMode.PREFIX).mutate(".bashrc"), ".1_bashrc")
        self.assertEqual(self._numbering(mode=NumberingMode.INSERT, at_position=0).mutate(".env"), ".1env")
        self.assertEqual(self._numbering().mutate(".env"), ".env_1")

    def test_base_and_uppercase(self) -> None:
        mutation = self._numbering(start=10, base=16, uppercase=True)
        self.assertEqual(mutation.mutate("a"), "a_A")

    def test_mode_none_is_identity_and_does_not_count(self) -> None:
        mutation = self._numbering(mode=NumberingMode.NONE)
        self.assertEqual(mutation.mutate("a.txt"), "a.txt")
        self.assertEqual(mutation._count, 0)

    def test_format_number(self) -> None:
        self.assertEqual(format_number(255, base=16), "ff")
        self.assertEqual(format_number(255, base=16, pad=4, uppercase=True), "00FF")
        self.assertEqual(format_number(5, base=2), "101")
        self.assertEqual(format_number(-5, pad=2), "-05")
        self.assertEqual(format_number(0), "0")


if __name__ == "__main__":
    unittest.main()
