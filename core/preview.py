"""
preview.py - Rename Preview Orchestration

Contains:
- compute_preview: Pure selection -> proposed names function
- PreviewOrchestrator: Channel-driven consumer of selection sets
- PreviewSession: Browser + orchestrator wired over single-slot channels
"""

from typing import Callable, Optional

from loguru import logger

from .browser import FileBrowser
from .channels import SlotChannel
from .models_fs import DirectorySnapshot, RenameMapping, SelectionSet
from .mutation_config import MutationConfig
from .mutation_pipeline import apply_to_selection, build_pipeline


def compute_preview(
    selection: SelectionSet,
    config: MutationConfig,
    snapshot: Optional[DirectorySnapshot] = None,
) -> RenameMapping:
    """
    Compute proposed names for a selection

    A fresh pipeline is built for every call, so numbering always starts over.

    Args:
        selection: absolute_path -> original name
        config: Configuration snapshot
        snapshot: Snapshot supplying entry metadata for date stamping

    Returns:
        absolute_path -> proposed new name
    """
    pipeline = build_pipeline(config)
    return apply_to_selection(pipeline, selection, snapshot)


class PreviewOrchestrator:
    """Consumes selection sets, publishes proposed rename mappings"""

    def __init__(
        self,
        config_provider: Callable[[], MutationConfig],
        selection_rx: SlotChannel[SelectionSet],
        names_tx: SlotChannel[RenameMapping],
        snapshot_provider: Optional[Callable[[], Optional[DirectorySnapshot]]] = None,
    ):
        """
        Args:
            config_provider: Returns the current configuration (read every step)
            selection_rx: Channel selection sets arrive on
            names_tx: Channel proposed names are published on
            snapshot_provider: Returns the snapshot used for entry metadata
        """
        self.config_provider = config_provider
        self.selection_rx = selection_rx
        self.names_tx = names_tx
        self.snapshot_provider = snapshot_provider
        self.last_mapping: Optional[RenameMapping] = None

    def step(self) -> Optional[RenameMapping]:
        """
        Drain at most one selection set and publish its proposed names

        Returns:
            The published mapping, or None when no selection set was waiting
        """
        selection = self.selection_rx.try_recv()
        if selection is None:
            return None

        snapshot = self.snapshot_provider() if self.snapshot_provider else None
        mapping = compute_preview(selection, self.config_provider(), snapshot)
        self.names_tx.send(dict(mapping))
        self.last_mapping = mapping
        return mapping


class PreviewSession:
    """One browser and one orchestrator exchanging values every cycle"""

    def __init__(
        self,
        directory_path: Optional[str] = None,
        config: Optional[MutationConfig] = None,
    ):
        """
        Raises:
            InvalidPathError: Starting directory does not exist
        """
        self.config = config or MutationConfig()
        self.selection_channel: SlotChannel[SelectionSet] = SlotChannel("selection")
        self.names_channel: SlotChannel[RenameMapping] = SlotChannel("new-names")
        self.browser = FileBrowser(
            directory_path,
            selection_tx=self.selection_channel,
            names_rx=self.names_channel,
        )
        self.orchestrator = PreviewOrchestrator(
            config_provider=lambda: self.config,
            selection_rx=self.selection_channel,
            names_tx=self.names_channel,
            snapshot_provider=lambda: self.browser.snapshot,
        )

    def update_config(self, config: MutationConfig) -> None:
        """Replace the configuration used from the next cycle on"""
        self.config = config

    def run_cycle(self) -> RenameMapping:
        """
        Browser refresh, orchestrator step, browser pick-up of the result

        Returns:
            Proposed names for the current selection
        """
        self.browser.refresh()
        self.orchestrator.step()
        self.browser.receive_new_names()
        logger.debug(
            f"Cycle {self.browser.cycle}: {len(self.browser.selected_files)} selected in {self.browser.directory_path}"
        )
        return dict(self.browser.new_names)

    @property
    def snapshot(self) -> DirectorySnapshot:
        return self.browser.snapshot

    @property
    def directory_path(self) -> str:
        return self.browser.directory_path

    @property
    def last_error(self) -> Optional[str]:
        return self.browser.last_error

    @property
    def proposed_names(self) -> RenameMapping:
        """Proposed names for the selected entries only"""
        selected = self.browser.selected_files
        return {path: self.browser.new_names.get(path, name) for path, name in selected.items()}
