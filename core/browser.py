"""
browser.py - File Browser Component

Owns the directory snapshot and the user's marks, and runs the browsing side
of each refresh cycle:

1. apply at most one pending navigation message
2. rebuild the snapshot when the path changed, on first load, or when the
   snapshot is empty while the directory is not
3. recompute the selection set from the marks
4. publish the selection set
5. pick up the latest proposed names, if any

Row activation only *requests* navigation (through the navigation channel);
the snapshot is replaced at the top of the next cycle, never while rows of
the current snapshot are being iterated.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from loguru import logger

from .channels import SlotChannel
from .errors import SnapshotError
from .models_fs import DirectorySnapshot, Entry, EntryKind, RenameMapping, SelectionSet
from .navigation import (
    NavigationState, canonicalize_directory, home_directory, resolve_child,
    resolve_parent, try_canonicalize,
)
from .scan_files import build_snapshot, directory_has_entries


@dataclass(frozen=True)
class BrowserRow:
    """Display values for one table row"""
    entry: Entry
    glyph: str
    name: str
    new_name: str
    size: str
    modified: str
    created: str
    kind: str
    selected: bool

    @property
    def changed(self) -> bool:
        return self.new_name != self.name


class FileBrowser:
    """Directory browser with multi-selection"""

    def __init__(
        self,
        directory_path: Optional[str] = None,
        selection_tx: Optional[SlotChannel[SelectionSet]] = None,
        names_rx: Optional[SlotChannel[RenameMapping]] = None,
    ):
        """
        Args:
            directory_path: Starting directory (home directory by default)
            selection_tx: Channel the selection set is published on
            names_rx: Channel proposed names arrive on

        Raises:
            InvalidPathError: Starting directory does not exist
        """
        start = canonicalize_directory(directory_path or home_directory())
        self.directory_path = start
        self.working_path = start
        self.path_changed = False
        self.is_first_load = True

        self.snapshot = DirectorySnapshot(directory_path=start)
        self.marked: Set[str] = set()
        self.selected_files: SelectionSet = {}
        self.new_names: RenameMapping = {}
        self.last_error: Optional[str] = None

        self.navigation_state = NavigationState.IDLE
        self.navigation_channel: SlotChannel[str] = SlotChannel("navigation", copy_values=False)
        self.selection_tx = selection_tx
        self.names_rx = names_rx
        self.cycle = 0

    # ---- refresh cycle -------------------------------------------------

    def refresh(self) -> SelectionSet:
        """
        Run one browsing cycle

        Returns:
            Copy of the selection set published this cycle
        """
        self.cycle += 1

        target = self.navigation_channel.try_recv()
        if target is not None:
            logger.debug(f"Navigation message received: {target}")
            self._accept_path(target)
            self.navigation_state = NavigationState.SNAPSHOT_REBUILDING

        if (not self.path_changed and not self.is_first_load
                and self.snapshot.is_empty and directory_has_entries(self.directory_path)):
            logger.debug(f"Snapshot of {self.directory_path} is stale, reloading")
            self.is_first_load = True

        if self.path_changed or self.is_first_load:
            self.rebuild()

        self.selected_files = self.snapshot.selection_of(self.marked)
        if self.selection_tx is not None:
            self.selection_tx.send(dict(self.selected_files))

        self.receive_new_names()
        return dict(self.selected_files)

    def rebuild(self) -> bool:
        """
        Replace the snapshot with a fresh enumeration of directory_path

        On failure the previous snapshot (and its path) is kept and
        last_error is set.

        Returns:
            Whether the snapshot was replaced
        """
        try:
            snapshot = build_snapshot(self.directory_path)
        except SnapshotError as e:
            self.last_error = str(e)
            self.directory_path = self.snapshot.directory_path
            self.working_path = self.directory_path
            replaced = False
        else:
            if snapshot.directory_path != self.snapshot.directory_path:
                self.new_names = {}
            self.snapshot = snapshot
            self.marked &= set(snapshot.by_path())
            self.last_error = None
            replaced = True

        self.path_changed = False
        self.is_first_load = False
        self.navigation_state = NavigationState.IDLE
        return replaced

    def reload(self) -> None:
        """Rebuild the snapshot on the next refresh (e.g. after renaming)"""
        self.is_first_load = True

    def receive_new_names(self) -> bool:
        """Take the latest proposed-name mapping, if one is waiting"""
        if self.names_rx is None:
            return False
        mapping = self.names_rx.try_recv()
        if mapping is None:
            return False
        self.new_names = mapping
        return True

    # ---- navigation ------------------------------------------------------

    def _accept_path(self, path: str) -> None:
        self.directory_path = path
        self.working_path = path
        self.path_changed = True

    def _reject_path(self) -> bool:
        self.working_path = self.directory_path
        return False

    def activate(self, entry: Entry) -> bool:
        """
        Handle double activation of a row

        Only folders navigate. The target is validated now and delivered
        through the navigation channel, to be applied on the next refresh.

        Returns:
            Whether a navigation message was sent
        """
        if entry.kind != EntryKind.FOLDER:
            return False
        target = resolve_child(self.directory_path, entry.name)
        if target is None:
            logger.info(f"Navigation to {entry.name!r} rejected, target does not exist")
            return False
        self.navigation_channel.send(target)
        self.navigation_state = NavigationState.NAVIGATION_REQUESTED
        return True

    def go_up(self) -> bool:
        """Navigate to the parent directory immediately"""
        target = resolve_parent(self.directory_path)
        if target is None:
            return self._reject_path()
        self._accept_path(target)
        return True

    def set_working_path(self, text: str) -> None:
        """Update the editable path field without committing it"""
        self.working_path = text

    def commit_path_edit(self, text: Optional[str] = None) -> bool:
        """
        Commit the edited path (e.g. Enter pressed in the path bar)

        Args:
            text: New path; working_path when omitted

        Returns:
            Whether the path was accepted; on rejection working_path is reset
        """
        if text is not None:
            self.working_path = text
        target = try_canonicalize(self.working_path)
        if target is None:
            return self._reject_path()
        self._accept_path(target)
        return True

    def pick_directory(self, path: Optional[str]) -> bool:
        """Apply a folder picker result (None means the dialog was cancelled)"""
        if not path:
            logger.debug("Directory picker cancelled")
            return False
        return self.commit_path_edit(path)

    # ---- selection -------------------------------------------------------

    def _known(self, path: str) -> bool:
        return self.snapshot.get(path) is not None

    def select(self, path: str) -> None:
        if self._known(path):
            self.marked.add(path)

    def deselect(self, path: str) -> None:
        self.marked.discard(path)

    def toggle(self, path: str) -> None:
        if path in self.marked:
            self.marked.discard(path)
        else:
            self.select(path)

    def set_marked(self, paths: Iterable[str]) -> None:
        """Replace the marks (unknown paths are ignored)"""
        known = set(self.snapshot.by_path())
        self.marked = {p for p in paths if p in known}

    def select_all(self) -> None:
        self.marked = set(self.snapshot.by_path())

    def clear_selection(self) -> None:
        self.marked = set()

    # ---- presentation ----------------------------------------------------

    def new_name_for(self, entry: Entry) -> str:
        return self.new_names.get(entry.absolute_path, entry.name)

    def rows(self) -> List[BrowserRow]:
        """Display rows for the current snapshot, in enumeration order"""
        return [
            BrowserRow(
                entry=e,
                glyph=e.glyph,
                name=e.name,
                new_name=self.new_name_for(e),
                size=e.size_label,
                modified=e.modified_label,
                created=e.created_label,
                kind=e.kind_label,
                selected=e.absolute_path in self.marked,
            )
            for e in self.snapshot
        ]
