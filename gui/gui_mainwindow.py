"""
gui_mainwindow.py - GUI Main Window

Contains:
1. BrowserPanel: path bar and directory table (Name / New Name columns)
2. MutationPanel: one tab per mutation with free-text form fields
3. MainWindow: drives the preview session from a timer, commits renames
"""

from enum import Enum
from typing import Dict, List, Optional

from loguru import logger
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QSplitter,
    QTabWidget, QLabel, QLineEdit, QPushButton, QCheckBox, QComboBox,
    QTableWidget, QTableWidgetItem, QProgressBar, QFileDialog, QMessageBox,
    QHeaderView, QAbstractItemView,
)
from PySide6.QtCore import Qt, QItemSelectionModel, QTimer, Slot
from PySide6.QtGui import QAction, QColor

from core import (
    ConfigError, ConflictPolicy, DirectorySnapshot, Entry, InvalidPathError,
    MutationConfig, PreviewSession, RenameOptions, RenamePlan, RenameResult,
    load_mutation_config, parse_form_int,
)
from core.mutation_config import CASE_LABELS, SECTIONS
from .gui_workers import PlanWorker, RenameWorker


REFRESH_INTERVAL_MS = 100

COLUMNS = ["", "Name", "New Name", "Size", "Date Modified", "Date Created", "Kind"]
NEW_NAME_COLUMN = 2

SECTION_TITLES = {
    "regex": "Regex",
    "replace": "Replace",
    "case": "Case",
    "remove": "Remove",
    "add": "Add",
    "auto_date": "Auto Date",
    "numbering": "Numbering",
}

# (field, label) per section; widget type follows the field's default value
SECTION_FORMS = {
    "regex": [
        ("pattern", "Pattern:"),
        ("substitution", "Substitution:"),
        ("including_extension", "Include extension"),
    ],
    "replace": [
        ("match", "Find:"),
        ("replace_with", "Replace with:"),
        ("case_sensitive", "Case sensitive"),
        ("first_only", "First occurrence only"),
    ],
    "case": [
        ("case_type", "Case:"),
    ],
    "remove": [
        ("first_n", "First N:"),
        ("last_n", "Last N:"),
        ("from_pos", "From:"),
        ("to_pos", "To:"),
        ("chars", "Characters:"),
        ("words", "Words:"),
        ("digits", "Digits"),
        ("accents", "Accents"),
        ("trim", "Trim"),
    ],
    "add": [
        ("prefix", "Prefix:"),
        ("insert", "Insert:"),
        ("at_position", "At position:"),
        ("suffix", "Suffix:"),
        ("word_space", "Word space"),
    ],
    "auto_date": [
        ("date_type", "Date:"),
        ("position", "Position:"),
        ("date_format", "Format:"),
        ("separator", "Separator:"),
    ],
    "numbering": [
        ("mode", "Mode:"),
        ("at_position", "At position:"),
        ("start", "Start:"),
        ("increment", "Increment:"),
        ("pad", "Padding:"),
        ("separator", "Separator:"),
        ("break_after", "Break after:"),
        ("base", "Base:"),
        ("uppercase", "Uppercase digits"),
    ],
}


def _enum_label(member) -> str:
    if member in CASE_LABELS:
        return CASE_LABELS[member]
    return member.value.replace("_", " ").title()


class MutationPanel(QTabWidget):
    """Mutation settings, one tab per mutation"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets: Dict[str, Dict[str, QWidget]] = {}
        defaults = MutationConfig()

        for name, form in SECTION_FORMS.items():
            page = QWidget()
            layout = QFormLayout(page)
            section_default = getattr(defaults, name)
            widgets: Dict[str, QWidget] = {}

            enabled = QCheckBox("Enabled")
            layout.addRow(enabled)
            widgets["enabled"] = enabled

            for field_name, label in form:
                value = getattr(section_default, field_name)
                if isinstance(value, bool):
                    widget = QCheckBox(label)
                    layout.addRow(widget)
                elif isinstance(value, Enum):
                    widget = QComboBox()
                    for member in type(value):
                        widget.addItem(_enum_label(member), member.value)
                    layout.addRow(label, widget)
                else:
                    widget = QLineEdit()
                    layout.addRow(label, widget)
                widgets[field_name] = widget

            self.widgets[name] = widgets
            self.addTab(page, SECTION_TITLES[name])

        self.set_config(defaults)

    def set_config(self, config: MutationConfig) -> None:
        """Show a configuration in the form"""
        for name, widgets in self.widgets.items():
            section = getattr(config, name)
            for field_name, widget in widgets.items():
                value = getattr(section, field_name)
                if isinstance(widget, QCheckBox):
                    widget.setChecked(value)
                elif isinstance(widget, QComboBox):
                    widget.setCurrentIndex(widget.findData(value.value))
                elif isinstance(value, tuple):
                    widget.setText(" ".join(value))
                else:
                    widget.setText(str(value))

    def config(self) -> MutationConfig:
        """
        Read the form into a configuration

        Raises:
            ConfigError: A field holds an invalid value
        """
        sections = {}
        defaults = MutationConfig()
        for name, widgets in self.widgets.items():
            section_default = getattr(defaults, name)
            values = {}
            for field_name, widget in widgets.items():
                default = getattr(section_default, field_name)
                if isinstance(widget, QCheckBox):
                    values[field_name] = widget.isChecked()
                elif isinstance(widget, QComboBox):
                    values[field_name] = widget.currentData()
                elif isinstance(default, int):
                    values[field_name] = parse_form_int(
                        widget.text(), f"{SECTION_TITLES[name]} {field_name}", default=default
                    )
                else:
                    values[field_name] = widget.text()
            sections[name] = SECTIONS[name](**values)
        return MutationConfig(**sections)


class BrowserPanel(QWidget):
    """Path bar plus directory table"""

    def __init__(self, session: PreviewSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.row_entries: List[Entry] = []
        self.shown_snapshot: Optional[DirectorySnapshot] = None
        self.shown_names: Optional[dict] = None

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        path_layout = QHBoxLayout()
        self.up_btn = QPushButton("Up")
        self.up_btn.clicked.connect(self._go_up)
        path_layout.addWidget(self.up_btn)
        self.path_edit = QLineEdit()
        self.path_edit.returnPressed.connect(self._commit_path)
        path_layout.addWidget(self.path_edit, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_directory)
        path_layout.addWidget(self.browse_btn)
        layout.addLayout(path_layout)

        self.table = QTableWidget()
        self.table.setColumnCount(len(COLUMNS))
        self.table.setHorizontalHeaderLabels(COLUMNS)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.Stretch)
        for column in range(3, len(COLUMNS)):
            header.setSectionResizeMode(column, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.table.cellDoubleClicked.connect(self._on_double_click)
        layout.addWidget(self.table, 1)

        self.summary_label = QLabel("")
        layout.addWidget(self.summary_label)

    @property
    def browser(self):
        return self.session.browser

    def _go_up(self):
        if not self.browser.go_up():
            self.window().statusBar().showMessage("Already at the top", 3000)

    def _commit_path(self):
        if not self.browser.commit_path_edit(self.path_edit.text().strip()):
            self.window().statusBar().showMessage(f"Directory does not exist: {self.path_edit.text()}", 5000)
            self.path_edit.setText(self.browser.working_path)

    def _browse_directory(self):
        """Browse and select directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Directory", self.browser.directory_path)
        self.browser.pick_directory(directory or None)

    @Slot()
    def _on_selection_changed(self):
        rows = {index.row() for index in self.table.selectionModel().selectedRows()}
        self.browser.set_marked(self.row_entries[r].absolute_path for r in rows if r < len(self.row_entries))

    @Slot(int, int)
    def _on_double_click(self, row: int, column: int):
        if 0 <= row < len(self.row_entries):
            self.browser.activate(self.row_entries[row])

    def sync(self) -> None:
        """Bring the widgets up to date with the browser after a cycle"""
        browser = self.browser
        if not self.path_edit.hasFocus() and self.path_edit.text() != browser.working_path:
            self.path_edit.setText(browser.working_path)

        if browser.snapshot is not self.shown_snapshot:
            self._fill_table()
        elif browser.new_names is not self.shown_names:
            self._update_new_names()

        self.summary_label.setText(
            f"{len(browser.selected_files)} of {len(browser.snapshot)} selected"
        )

    def _fill_table(self):
        browser = self.browser
        rows = browser.rows()
        self.row_entries = [row.entry for row in rows]
        self.shown_snapshot = browser.snapshot

        self.table.blockSignals(True)
        self.table.clearSelection()
        self.table.setRowCount(len(rows))
        for i, row in enumerate(rows):
            values = [row.glyph, row.name, "", row.size, row.modified, row.created, row.kind]
            for column, value in enumerate(values):
                item = QTableWidgetItem(value)
                if column == 3:
                    item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
                self.table.setItem(i, column, item)
            if row.selected:
                self.table.selectionModel().select(
                    self.table.model().index(i, 0),
                    QItemSelectionModel.SelectionFlag.Select | QItemSelectionModel.SelectionFlag.Rows,
                )
        self.table.blockSignals(False)
        self.table.scrollToTop()
        self._update_new_names()

    def _update_new_names(self):
        browser = self.browser
        self.shown_names = browser.new_names
        for i, entry in enumerate(self.row_entries):
            item = self.table.item(i, NEW_NAME_COLUMN)
            if item is None:
                continue
            selected = entry.absolute_path in browser.marked
            new_name = browser.new_name_for(entry) if selected else ""
            item.setText(new_name)
            if selected and new_name != entry.name:
                item.setBackground(QColor(255, 255, 200))
            else:
                item.setData(Qt.ItemDataRole.BackgroundRole, None)


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self, directory: Optional[str] = None):
        super().__init__()
        self.setWindowTitle("Batch Rename Tool")
        self.setMinimumSize(1000, 650)

        try:
            self.session = PreviewSession(directory)
        except InvalidPathError as e:
            logger.warning(f"{e}, starting in the home directory")
            self.session = PreviewSession()

        self.config_error: Optional[str] = None
        self.plan: Optional[RenamePlan] = None
        self.plan_worker: Optional[PlanWorker] = None
        self.rename_worker: Optional[RenameWorker] = None

        self._init_ui()
        self._init_menu()

        self.timer = QTimer(self)
        self.timer.timeout.connect(self._on_tick)
        self.timer.start(REFRESH_INTERVAL_MS)
        self._on_tick()

    def _init_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.mutation_panel = MutationPanel()
        self.browser_panel = BrowserPanel(self.session)
        splitter.addWidget(self.mutation_panel)
        splitter.addWidget(self.browser_panel)
        splitter.setStretchFactor(1, 1)
        layout.addWidget(splitter, 1)

        bottom_layout = QHBoxLayout()
        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        bottom_layout.addWidget(QLabel("On conflict:"))
        self.policy_combo = QComboBox()
        self.policy_combo.addItem("Add _1, _2...", ConflictPolicy.SUFFIX_NUMBER.value)
        self.policy_combo.addItem("Skip", ConflictPolicy.SKIP.value)
        self.policy_combo.addItem("Refuse", ConflictPolicy.ERROR.value)
        bottom_layout.addWidget(self.policy_combo)

        self.execute_btn = QPushButton("Rename Selected")
        self.execute_btn.clicked.connect(self._do_plan)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)
        layout.addLayout(bottom_layout)

        self.statusBar().showMessage("Ready")

    def _init_menu(self):
        file_menu = self.menuBar().addMenu("File")

        load_action = QAction("Load Settings...", self)
        load_action.triggered.connect(self._load_settings)
        file_menu.addAction(load_action)

        file_menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    # ---- refresh cycle -----------------------------------------------------

    @Slot()
    def _on_tick(self):
        try:
            config = self.mutation_panel.config()
        except ConfigError as e:
            if str(e) != self.config_error:
                self.statusBar().showMessage(f"Invalid setting: {e}")
            self.config_error = str(e)
        else:
            if self.config_error is not None:
                self.statusBar().showMessage("Ready")
            self.config_error = None
            self.session.update_config(config)

        previous_error = self.session.last_error
        self.session.run_cycle()
        if self.session.last_error and self.session.last_error != previous_error:
            self.statusBar().showMessage(self.session.last_error, 5000)
        self.browser_panel.sync()

    # ---- settings file ------------------------------------------------------

    def _load_settings(self):
        path, _ = QFileDialog.getOpenFileName(self, "Load Settings", "", "JSON (*.json)")
        if not path:
            return
        try:
            self.mutation_panel.set_config(load_mutation_config(path))
        except ConfigError as e:
            QMessageBox.warning(self, "Warning", str(e))

    # ---- commit --------------------------------------------------------------

    def _set_busy(self, busy: bool):
        self.execute_btn.setEnabled(not busy)
        self.execute_btn.setText("Executing..." if busy else "Rename Selected")
        self.mutation_panel.setEnabled(not busy)
        self.progress_bar.setVisible(busy)

    def _do_plan(self):
        """Generate a rename plan for the selected entries"""
        if self.config_error:
            QMessageBox.warning(self, "Warning", f"Invalid setting: {self.config_error}")
            return
        mapping = self.session.proposed_names
        if not mapping:
            QMessageBox.warning(self, "Warning", "Please select entries to rename first")
            return

        options = RenameOptions(conflict_policy=ConflictPolicy(self.policy_combo.currentData()))
        self._set_busy(True)
        self.progress_bar.setRange(0, 0)  # Indeterminate progress

        self.plan_worker = PlanWorker(mapping, options)
        self.plan_worker.done.connect(self._on_plan_finished)
        self.plan_worker.failed.connect(self._on_worker_error)
        self.plan_worker.start()

    @Slot(object)
    def _on_plan_finished(self, plan: RenamePlan):
        self.plan = plan
        if plan.errors or not plan.valid_ops:
            self._set_busy(False)
            if plan.errors:
                QMessageBox.warning(self, "Cannot Rename", "\n".join(plan.errors[:20]))
            else:
                QMessageBox.information(self, "Nothing To Do", "No names need changing")
            return

        lines = [f"Rename {plan.total_count} entries? This cannot be undone.", "", plan.summary()]
        lines.extend(f"skipped: {w}" for w in plan.warnings[:10])
        answer = QMessageBox.question(
            self, "Confirm Rename", "\n".join(lines),
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if answer != QMessageBox.StandardButton.Yes:
            self._set_busy(False)
            return

        self.progress_bar.setRange(0, plan.total_count * 2)
        self.rename_worker = RenameWorker(plan)
        self.rename_worker.progress.connect(self._on_rename_progress)
        self.rename_worker.done.connect(self._on_rename_finished)
        self.rename_worker.failed.connect(self._on_worker_error)
        self.rename_worker.start()

    @Slot(int, int, str)
    def _on_rename_progress(self, current: int, total: int, msg: str):
        self.progress_bar.setValue(current)
        self.statusBar().showMessage(msg)

    @Slot(object)
    def _on_rename_finished(self, result: RenameResult):
        self._set_busy(False)
        show = QMessageBox.warning if result.failed_count else QMessageBox.information
        show(self, "Rename Finished", result.summary(limit=5))

        self.plan = None
        self.session.browser.clear_selection()
        self.session.browser.reload()
        self.statusBar().showMessage("Complete", 3000)

    @Slot(str)
    def _on_worker_error(self, error: str):
        self._set_busy(False)
        QMessageBox.critical(self, "Error", f"Execution failed: {error}")

    def closeEvent(self, event):
        self.timer.stop()
        super().closeEvent(event)
