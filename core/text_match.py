"""
text_match.py - Text Matching Tools

Provides filename splitting, literal replacement and filename validation
"""

from typing import Callable, Optional, Tuple
import re


def split_filename(filename: str) -> Tuple[str, str]:
    """
    Split filename into stem and extension at the last dot

    A leading dot marks a hidden file and is not a separator; it is dropped
    from the stem, so ".bashrc" gives ("bashrc", "").

    Args:
        filename: Filename

    Returns:
        (stem, extension without the dot)
    """
    if filename.startswith('.'):
        filename = filename[1:]

    index = filename.rfind('.')
    if index == -1:
        return filename, ""
    return filename[:index], filename[index + 1:]


def split_hidden(filename: str) -> Tuple[str, str, str]:
    """
    Split into (leading dot, stem, extension)

    The stem never starts with a hidden file's dot, so stem edits cannot
    remove it or push text in front of it.
    """
    dot = "." if filename.startswith('.') else ""
    stem, ext = split_filename(filename)
    return dot, stem, ext


def map_stem(filename: str, function: Callable[[str], str]) -> str:
    """Rewrite the stem with function; the leading dot and extension are kept"""
    dot, stem, ext = split_hidden(filename)
    return join_filename(dot + function(stem), ext)


def join_filename(stem: str, extension: str) -> str:
    """Join stem and extension, omitting the dot when there is no extension"""
    if extension:
        return f"{stem}.{extension}"
    return stem


def replace_text(text: str, old: str, new: str, case_sensitive: bool = True, count: int = 0) -> str:
    """Replace literal occurrences of old; count=0 replaces all of them"""
    if not old:
        return text
    if case_sensitive:
        return text.replace(old, new, count or -1)
    # lambda keeps backslashes in new literal
    return re.sub(re.escape(old), lambda _m: new, text, count=count, flags=re.IGNORECASE)


FORBIDDEN_CHARS = '<>:"/\\|?*\0'

RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

MAX_NAME_LENGTH = 255


def is_valid_filename(name: str) -> Tuple[bool, Optional[str]]:
    """
    Whether name can be used as a file name on every supported platform

    The rules are the union of the POSIX ones (no "/", no NUL) and the
    Windows ones (forbidden characters, reserved device names, no trailing
    space or dot).

    Returns:
        (is_valid, error_reason)
    """
    error = None
    if not name:
        error = "Filename cannot be empty"
    elif name in (".", ".."):
        error = f"Filename is reserved: {name}"
    elif len(name) > MAX_NAME_LENGTH:
        error = f"Filename exceeds {MAX_NAME_LENGTH} characters"
    elif name[-1] in " .":
        error = "Filename cannot end with space or dot"
    else:
        bad = next((c for c in name if c in FORBIDDEN_CHARS), None)
        device = name.split(".")[0].upper()
        if bad is not None:
            error = f"Filename contains invalid character: {bad!r}"
        elif device in RESERVED_NAMES:
            error = f"Filename is a Windows reserved name: {device}"
    return error is None, error
