"""
scan_files.py - Directory Snapshot Builder

Enumerates the immediate children of one directory into a DirectorySnapshot
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union
import os
import stat

from loguru import logger

from .errors import SnapshotError
from .formatting import mime_hint_for
from .models_fs import DirectorySnapshot, Entry, EntryKind, join_path


def _to_datetime(timestamp: Optional[float]) -> Optional[datetime]:
    if timestamp is None:
        return None
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _is_representable(name: str) -> bool:
    """Names holding undecodable bytes (surrogate escapes) are dropped"""
    try:
        name.encode("utf-8")
        return True
    except UnicodeEncodeError:
        return False


def read_entry(directory_path: str, name: str) -> Entry:
    """
    Build one Entry, degrading to placeholders when metadata cannot be read

    Args:
        directory_path: Parent directory (canonical)
        name: Leaf name

    Returns:
        Entry (kind UNKNOWN, size 0, no timestamps if stat failed)
    """
    absolute_path = join_path(directory_path, name)

    try:
        st = os.stat(absolute_path)
    except OSError as e:
        # Broken symlinks fail stat() but still lstat() as links
        try:
            lst = os.lstat(absolute_path)
        except OSError:
            lst = None
        if lst is not None and stat.S_ISLNK(lst.st_mode):
            return Entry(
                name=name,
                absolute_path=absolute_path,
                size_bytes=lst.st_size,
                kind=EntryKind.SYMLINK,
                modified_at=_to_datetime(lst.st_mtime),
            )
        logger.warning(f"Cannot read metadata for {absolute_path}: {e}")
        return Entry(name=name, absolute_path=absolute_path)

    if stat.S_ISDIR(st.st_mode):
        kind = EntryKind.FOLDER
    elif stat.S_ISREG(st.st_mode):
        kind = EntryKind.FILE
    else:
        kind = EntryKind.UNKNOWN

    return Entry(
        name=name,
        absolute_path=absolute_path,
        size_bytes=st.st_size,
        kind=kind,
        modified_at=_to_datetime(st.st_mtime),
        created_at=_to_datetime(getattr(st, "st_birthtime", None)),
        mime_hint=mime_hint_for(name) if kind == EntryKind.FILE else "",
    )


def build_snapshot(directory_path: Union[str, Path]) -> DirectorySnapshot:
    """
    Enumerate immediate children (non-recursive) in filesystem order

    Args:
        directory_path: Directory to list

    Returns:
        New snapshot

    Raises:
        SnapshotError: Directory missing, not a directory, or unreadable
    """
    directory_path = str(directory_path)
    entries: List[Entry] = []

    try:
        with os.scandir(directory_path) as it:
            names = [item.name for item in it]
    except OSError as e:
        logger.error(f"Cannot enumerate {directory_path}: {e}")
        raise SnapshotError(directory_path, e) from e

    for name in names:
        if not _is_representable(name):
            logger.debug(f"Skipping unrepresentable name in {directory_path}: {name!r}")
            continue
        entries.append(read_entry(directory_path, name))

    logger.debug(f"Snapshot of {directory_path}: {len(entries)} entries")
    return DirectorySnapshot(directory_path=directory_path, entries=tuple(entries))


def directory_has_entries(directory_path: Union[str, Path]) -> bool:
    """
    Check whether a directory has at least one child build_snapshot would list (staleness guard)

    Returns:
        False when empty, unreadable, or holding only unrepresentable names
    """
    try:
        with os.scandir(str(directory_path)) as it:
            return any(_is_representable(item.name) for item in it)
    except OSError:
        return False
