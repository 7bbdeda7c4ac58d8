"""
formatting.py - Display Formatting

Human-readable sizes, timestamps, MIME hints and type glyphs for the entry table
"""

import mimetypes
from datetime import datetime
from typing import Optional


SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]
TIMESTAMP_FORMAT = "%d %b %Y at %I:%M %p"

# Keyed by EntryKind value
GLYPHS = {
    "folder": "\U0001F4C1",
    "file": "\U0001F4C4",
    "symlink": "\U0001F517",
    "unknown": "*",
}


def format_size(size: int) -> str:
    """
    Format byte count as a short string

    Args:
        size: Size in bytes

    Returns:
        e.g. "0.0B", "1.5KB", "3.2GB"
    """
    value = float(size)
    i = 0
    while value >= 1024.0 and i < len(SIZE_UNITS) - 1:
        value /= 1024.0
        i += 1
    return f"{value:.1f}{SIZE_UNITS[i]}"


def format_timestamp(value: Optional[datetime]) -> str:
    """Format timestamp in local time, empty string when missing"""
    if value is None:
        return ""
    return value.astimezone().strftime(TIMESTAMP_FORMAT)


def mime_hint_for(name: str) -> str:
    """
    Guess MIME type from the file extension

    Args:
        name: Filename

    Returns:
        MIME type, or "Unknown" when the extension is missing or unrecognised
    """
    if "." not in name.lstrip("."):
        return "Unknown"
    mime_type, _ = mimetypes.guess_type(name, strict=False)
    return mime_type or "Unknown"


def glyph_for(kind_value: str) -> str:
    """Single-character glyph for the path type column"""
    return GLYPHS.get(kind_value, "*")
