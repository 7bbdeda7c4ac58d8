"""
navigation.py - Directory Navigation

Path validation shared by every way of changing the browsed directory:
row activation (child folder), going up, path edits and folder pickers.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .errors import InvalidPathError
from .models_fs import join_path


class NavigationState(Enum):
    """Navigation protocol states"""
    IDLE = "idle"
    NAVIGATION_REQUESTED = "navigation_requested"
    SNAPSHOT_REBUILDING = "snapshot_rebuilding"


def canonicalize_directory(path: Union[str, Path]) -> str:
    """
    Canonicalize a directory path

    Args:
        path: Raw path ("~" is expanded)

    Returns:
        Absolute path with symlinks and ".." resolved

    Raises:
        InvalidPathError: Path does not exist or is not a directory
    """
    raw = str(path).strip()
    if not raw:
        raise InvalidPathError(raw, "Empty path")
    try:
        resolved = Path(raw).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(raw, f"Cannot resolve path ({e})") from e
    if not resolved.is_dir():
        raise InvalidPathError(str(resolved), "Not a directory")
    return str(resolved)


def try_canonicalize(path: Union[str, Path]) -> Optional[str]:
    """canonicalize_directory, returning None instead of raising"""
    try:
        return canonicalize_directory(path)
    except InvalidPathError as e:
        logger.info(f"Rejected path: {e}")
        return None


def resolve_child(current_directory: str, leaf_name: str) -> Optional[str]:
    """
    Resolve a child folder of the current directory

    Args:
        current_directory: Directory being browsed
        leaf_name: Name of the activated folder entry

    Returns:
        Canonical path, or None when it does not exist
    """
    return try_canonicalize(join_path(current_directory, leaf_name))


def resolve_parent(current_directory: str) -> Optional[str]:
    """Canonical parent directory ("..") or None"""
    return try_canonicalize(join_path(current_directory, ".."))


def home_directory() -> str:
    return str(Path.home())
