"""
models_fs.py - Core Data Structure Definitions

Contains:
- Entry: One filesystem object inside a directory snapshot
- DirectorySnapshot: Point-in-time listing of one directory
- SelectionSet / RenameMapping: Path-keyed name mappings exchanged between components
- RenameOp: Single rename operation
- RenamePlan: Batch rename plan
- RenameOptions: Commit options configuration
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
from enum import Enum
import platform

from .formatting import format_size, format_timestamp, glyph_for


# absolute_path -> original name
SelectionSet = Dict[str, str]

# absolute_path -> proposed new name
RenameMapping = Dict[str, str]


class EntryKind(Enum):
    """Entry kind enumeration"""
    FILE = "file"
    FOLDER = "folder"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"


class ConflictPolicy(Enum):
    """Conflict handling policy"""
    SUFFIX_NUMBER = "suffix_number"  # Add _1, _2, _3...
    SKIP = "skip"                    # Skip
    ERROR = "error"                  # Refuse the whole plan


def join_path(directory_path: str, name: str) -> str:
    """Absolute path of a leaf name inside a directory ("dir" + "/" + "name")"""
    return f"{directory_path.rstrip('/')}/{name}" if directory_path != "/" else f"/{name}"


@dataclass(frozen=True)
class Entry:
    """Entry information data class"""
    name: str                           # On-disk leaf name
    absolute_path: str                  # directory_path + "/" + name
    size_bytes: int = 0
    kind: EntryKind = EntryKind.UNKNOWN
    modified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    mime_hint: str = "Unknown"          # Only meaningful for files

    @property
    def is_folder(self) -> bool:
        return self.kind == EntryKind.FOLDER

    @property
    def glyph(self) -> str:
        return glyph_for(self.kind.value)

    @property
    def size_label(self) -> str:
        if self.kind == EntryKind.UNKNOWN and self.size_bytes == 0:
            return "--"
        return format_size(self.size_bytes)

    @property
    def modified_label(self) -> str:
        return format_timestamp(self.modified_at)

    @property
    def created_label(self) -> str:
        return format_timestamp(self.created_at)

    @property
    def kind_label(self) -> str:
        """Kind column text: MIME hint for files, kind name otherwise"""
        if self.kind == EntryKind.FILE:
            return self.mime_hint
        if self.kind == EntryKind.FOLDER:
            return "Folder"
        if self.kind == EntryKind.SYMLINK:
            return "symlink"
        return ""


@dataclass(frozen=True)
class DirectorySnapshot:
    """Immutable listing of one directory's immediate children"""
    directory_path: str
    entries: Tuple[Entry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def by_path(self) -> Dict[str, Entry]:
        """Entries keyed by absolute path"""
        return {e.absolute_path: e for e in self.entries}

    def get(self, absolute_path: str) -> Optional[Entry]:
        for e in self.entries:
            if e.absolute_path == absolute_path:
                return e
        return None

    def find_by_name(self, name: str) -> Optional[Entry]:
        for e in self.entries:
            if e.name == name:
                return e
        return None

    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def selection_of(self, paths) -> SelectionSet:
        """
        Build a selection set from marked paths

        Args:
            paths: Collection of absolute paths the user has marked

        Returns:
            absolute_path -> name, in snapshot order, limited to entries present
        """
        marked = set(paths)
        return {e.absolute_path: e.name for e in self.entries if e.absolute_path in marked}


@dataclass
class RenameOp:
    """One entry moving to a new name in the same directory"""
    src: Path
    dst: Path
    note: str = ""
    # dst was bumped to a numbered variant because the wanted name was taken
    conflict: bool = False

    @property
    def is_same(self) -> bool:
        return self.src == self.dst


@dataclass
class RenameOptions:
    """Commit options"""
    conflict_policy: ConflictPolicy = ConflictPolicy.SUFFIX_NUMBER
    # Windows and macOS filesystems are case-insensitive by default
    case_insensitive_detect: bool = field(default_factory=lambda: platform.system() in ("Windows", "Darwin"))
    dry_run: bool = False
    log_dir: Optional[Path] = None


@dataclass
class RenamePlan:
    """
    Renames to perform, plus what planning had to say about them

    Warnings describe entries left out of the plan. Errors make the whole
    plan non-executable.
    """
    ops: List[RenameOp] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    options: RenameOptions = field(default_factory=RenameOptions)

    @property
    def valid_ops(self) -> List[RenameOp]:
        return [op for op in self.ops if not op.is_same]

    @property
    def conflict_count(self) -> int:
        return sum(1 for op in self.ops if op.conflict)

    @property
    def total_count(self) -> int:
        return len(self.valid_ops)

    @property
    def is_executable(self) -> bool:
        return not self.errors and bool(self.valid_ops)

    def add_op(self, src: Path, dst: Path, note: str = "", conflict: bool = False) -> None:
        self.ops.append(RenameOp(src=src, dst=dst, note=note, conflict=conflict))

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def summary(self) -> str:
        return (
            f"{self.total_count} renames planned, {self.conflict_count} renumbered, "
            f"{len(self.warnings)} skipped, {len(self.errors)} errors"
        )


def normalize_for_comparison(name: str, case_insensitive: bool) -> str:
    """Normalize filename for comparison"""
    if case_insensitive:
        return name.casefold()
    return name
