"""Display helpers for the entry table."""

import unittest
from datetime import datetime, timezone

from core import Entry, EntryKind
from core.formatting import format_size, format_timestamp, glyph_for, mime_hint_for


class FormatSizeTests(unittest.TestCase):
    def test_bytes(self) -> None:
        self.assertEqual(format_size(0), "0.0B")
        self.assertEqual(format_size(1023), "1023.0B")

    def test_larger_units(self) -> None:
        self.assertEqual(format_size(1536), "1.5KB")
        self.assertEqual(format_size(3 * 1024 ** 3), "3.0GB")


class FormatTimestampTests(unittest.TestCase):
    def test_missing_timestamp_is_blank(self) -> None:
        self.assertEqual(format_timestamp(None), "")

    def test_local_time_format(self) -> None:
        value = datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc)
        expected = value.astimezone().strftime("%d %b %Y at %I:%M %p")
        self.assertEqual(format_timestamp(value), expected)


class MimeHintTests(unittest.TestCase):
    def test_known_extension(self) -> None:
        self.assertEqual(mime_hint_for("notes.txt"), "text/plain")

    def test_no_extension_is_unknown(self) -> None:
        self.assertEqual(mime_hint_for("README"), "Unknown")
        self.assertEqual(mime_hint_for(".bashrc"), "Unknown")

    def test_unrecognised_extension_is_unknown(self) -> None:
        self.assertEqual(mime_hint_for("data.zzqqx"), "Unknown")


class EntryLabelTests(unittest.TestCase):
    def test_glyphs(self) -> None:
        self.assertEqual(glyph_for("unknown"), "*")
        self.assertEqual(glyph_for("bogus"), "*")
        self.assertNotEqual(glyph_for("folder"), glyph_for("file"))

    def test_degraded_entry_labels(self) -> None:
        entry = Entry(name="x", absolute_path="/x")
        self.assertEqual(entry.size_label, "--")
        self.assertEqual(entry.modified_label, "")
        self.assertEqual(entry.kind_label, "")
        self.assertEqual(entry.glyph, "*")

    def test_file_and_folder_labels(self) -> None:
        file_entry = Entry(name="a.txt", absolute_path="/a.txt", size_bytes=2048,
                           kind=EntryKind.FILE, mime_hint="text/plain")
        folder = Entry(name="sub", absolute_path="/sub", kind=EntryKind.FOLDER)
        self.assertEqual(file_entry.size_label, "2.0KB")
        self.assertEqual(file_entry.kind_label, "text/plain")
        self.assertEqual(folder.kind_label, "Folder")
        self.assertTrue(folder.is_folder)


if __name__ == "__main__":
    unittest.main()
