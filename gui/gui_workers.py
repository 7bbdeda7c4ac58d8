"""
gui_workers.py - Commit Step Threads

Planning and executing renames touch the disk, so they run on QThreads and
report back through signals. The preview cycle itself stays on the UI timer.
"""

from typing import Optional

from loguru import logger
from PySide6.QtCore import QObject, QThread, Signal

from core import (
    RenameMapping, RenameOptions, RenamePlan, execute_rename, plan_from_mapping,
)


class CommitWorker(QThread):
    """Runs work() once; emits done(result) or failed(message)"""

    done = Signal(object)
    failed = Signal(str)

    errors = (OSError,)
    description = "Commit step"

    def work(self):
        raise NotImplementedError

    def run(self):
        try:
            result = self.work()
        except self.errors as e:
            logger.exception(f"{self.description} failed")
            self.failed.emit(str(e))
            return
        self.done.emit(result)


class PlanWorker(CommitWorker):
    """Builds a RenamePlan from the current preview mapping"""

    errors = (OSError, RuntimeError)
    description = "Planning renames"

    def __init__(
        self,
        mapping: RenameMapping,
        options: Optional[RenameOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        # snapshot; the session keeps publishing new mappings meanwhile
        self.mapping = dict(mapping)
        self.options = options or RenameOptions()

    def work(self) -> RenamePlan:
        return plan_from_mapping(self.mapping, self.options)


class RenameWorker(CommitWorker):
    """Executes a confirmed plan"""

    progress = Signal(int, int, str)

    errors = (OSError, ValueError)
    description = "Rename execution"

    def __init__(
        self,
        plan: RenamePlan,
        dry_run: bool = False,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.plan = plan
        self.dry_run = dry_run

    def work(self):
        return execute_rename(self.plan, dry_run=self.dry_run, progress_callback=self.progress.emit)
