"""
safety_checks.py - Pre-flight Checks

Each check takes the source and destination of one rename and returns an
error message, or None when the rename passes.
"""

from pathlib import Path
from typing import Callable, List, Optional, Tuple
import os
import platform

from .text_match import is_valid_filename


WINDOWS_MAX_PATH = 260

Check = Callable[[Path, Path], Optional[str]]


def source_exists(src: Path, dst: Path) -> Optional[str]:
    if not os.path.lexists(src):
        return f"Source does not exist: {src}"
    return None


def same_directory(src: Path, dst: Path) -> Optional[str]:
    if src.parent != dst.parent:
        return f"Destination is outside the source directory: {dst}"
    return None


def valid_name(src: Path, dst: Path) -> Optional[str]:
    return is_valid_filename(dst.name)[1]


def path_length(src: Path, dst: Path, max_length: int = WINDOWS_MAX_PATH) -> Optional[str]:
    if platform.system() != "Windows":
        return None
    length = len(str(dst))
    if length > max_length:
        return f"Path is {length} characters, the limit is {max_length}: {dst}"
    return None


def directory_writable(src: Path, dst: Path) -> Optional[str]:
    # renaming needs write access to the containing directory, not the entry
    parent = src.parent
    if not parent.is_dir():
        return f"Parent directory does not exist: {parent}"
    if not os.access(parent, os.W_OK):
        return f"Directory is not writable: {parent}"
    return None


RENAME_CHECKS: List[Check] = [
    source_exists,
    same_directory,
    valid_name,
    path_length,
    directory_writable,
]


def check_rename_op(src: Path, dst: Path) -> Tuple[bool, Optional[str]]:
    """Run RENAME_CHECKS in order; (True, None) or (False, first error)"""
    for check in RENAME_CHECKS:
        error = check(src, dst)
        if error:
            return False, error
    return True, None
