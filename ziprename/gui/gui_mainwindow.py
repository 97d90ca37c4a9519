"""
gui_mainwindow.py - GUI Main Window

Contains two tabs:
1. Rename (rule groups, preview, write renamed archive)
2. Analysis (pre-flight cross-platform report)
"""

from pathlib import Path
from typing import Optional, List

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QTabWidget, QLabel, QLineEdit, QPushButton, QCheckBox, QComboBox,
    QTableWidget, QTableWidgetItem, QTextEdit, QProgressBar,
    QFileDialog, QMessageBox, QHeaderView, QGroupBox
)
from PySide6.QtCore import Slot
from PySide6.QtGui import QColor

from ..core import (
    ArchiveEntry, ArchiveOptions, AnalysisReport, RenamePlan, RenameResult, RuleGroup,
    Severity, template_names, load_template, load_rule_file, default_output_path,
)
from .gui_workers import ScanWorker, AnalyzeWorker, PlanWorker, RenameWorker

ARCHIVE_FILTER = "ZIP archives (*.zip);;JSON listings (*.json);;All files (*)"

SEVERITY_COLORS = {
    Severity.CRITICAL: QColor(200, 0, 0),
    Severity.HIGH: QColor(220, 100, 0),
    Severity.MEDIUM: QColor(200, 150, 0),
    Severity.LOW: QColor(0, 120, 200),
    Severity.NONE: QColor(0, 150, 0),
}


class ArchivePicker(QWidget):
    """Archive path field with browse button"""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.edit = QLineEdit()
        self.edit.setPlaceholderText("Select a ZIP archive...")
        layout.addWidget(self.edit, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse)
        layout.addWidget(self.browse_btn)

    def _browse(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select Archive", "", ARCHIVE_FILTER)
        if path:
            self.edit.setText(path)

    def path(self) -> Optional[Path]:
        text = self.edit.text().strip()
        return Path(text) if text else None


class RenameTab(QWidget):
    """Rule-based Rename Tab"""

    def __init__(self, options: ArchiveOptions, parent=None):
        super().__init__(parent)
        self.options = options
        self.archive: Optional[Path] = None
        self.entries: List[ArchiveEntry] = []
        self.groups: List[RuleGroup] = []
        self.plan: Optional[RenamePlan] = None
        self.scan_worker: Optional[ScanWorker] = None
        self.plan_worker: Optional[PlanWorker] = None
        self.rename_worker: Optional[RenameWorker] = None

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Archive group
        archive_group = QGroupBox("Archive")
        archive_layout = QGridLayout(archive_group)
        self.picker = ArchivePicker()
        archive_layout.addWidget(self.picker, 0, 0)
        self.open_btn = QPushButton("Open")
        self.open_btn.clicked.connect(self._do_open)
        archive_layout.addWidget(self.open_btn, 0, 1)
        layout.addWidget(archive_group)

        # Rules group
        rules_group = QGroupBox("Rules")
        rules_layout = QGridLayout(rules_group)

        rules_layout.addWidget(QLabel("Template:"), 0, 0)
        self.template_combo = QComboBox()
        self.template_combo.addItem("(none)")
        self.template_combo.addItems(template_names())
        rules_layout.addWidget(self.template_combo, 0, 1)

        self.load_rules_btn = QPushButton("Load Rules JSON...")
        self.load_rules_btn.clicked.connect(self._load_rules)
        rules_layout.addWidget(self.load_rules_btn, 0, 2)

        self.rules_label = QLabel("No rule file loaded")
        rules_layout.addWidget(self.rules_label, 1, 0, 1, 3)

        self.top_level_check = QCheckBox("Also rename top-level folders")
        rules_layout.addWidget(self.top_level_check, 2, 0, 1, 3)

        self.preview_btn = QPushButton("Preview")
        self.preview_btn.clicked.connect(self._do_preview)
        self.preview_btn.setEnabled(False)
        rules_layout.addWidget(self.preview_btn, 3, 0, 1, 3)

        layout.addWidget(rules_group)

        # Results table
        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Original Path", "New Path", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        layout.addWidget(self.table, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.execute_btn = QPushButton("Save Renamed Archive...")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setEnabled(False)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def _load_rules(self):
        """Load rule groups from a JSON file"""
        path, _ = QFileDialog.getOpenFileName(self, "Load Rules", "", "JSON files (*.json)")
        if not path:
            return

        notes: List[str] = []
        try:
            self.groups = load_rule_file(Path(path), notes)
        except ValueError as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        self.template_combo.setCurrentIndex(0)
        self.rules_label.setText(f"{Path(path).name}: {len(self.groups)} rule groups")
        if notes:
            QMessageBox.warning(self, "Warning", "\n".join(notes))

    def _selected_groups(self) -> List[RuleGroup]:
        if self.template_combo.currentIndex() > 0:
            return load_template(self.template_combo.currentText())
        return self.groups

    def _do_open(self):
        """List the archive"""
        archive = self.picker.path()
        if archive is None:
            QMessageBox.warning(self, "Warning", "Please select an archive first")
            return
        if not archive.is_file():
            QMessageBox.warning(self, "Warning", f"File does not exist: {archive}")
            return

        self.archive = archive
        self.open_btn.setEnabled(False)
        self.preview_btn.setEnabled(False)
        self.execute_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)  # Indeterminate progress

        self.scan_worker = ScanWorker(archive, self.options)
        self.scan_worker.progress.connect(self._on_scan_progress)
        self.scan_worker.finished.connect(self._on_scan_finished)
        self.scan_worker.error.connect(self._on_scan_error)
        self.scan_worker.start()

    @Slot(str)
    def _on_scan_progress(self, msg: str):
        self.status_label.setText(msg[-80:] if len(msg) > 80 else msg)

    @Slot(list)
    def _on_scan_finished(self, entries: List[ArchiveEntry]):
        self.entries = entries
        self.plan = None
        self.open_btn.setEnabled(True)
        self.progress_bar.setVisible(False)

        self.table.setRowCount(len(entries[:self.options.preview_limit]))
        for row, entry in enumerate(entries[:self.options.preview_limit]):
            self.table.setItem(row, 0, QTableWidgetItem(entry.path))
            self.table.setItem(row, 1, QTableWidgetItem(""))
            self.table.setItem(row, 2, QTableWidgetItem("Directory" if entry.is_directory else ""))

        self.preview_btn.setEnabled(bool(entries))
        self.status_label.setText(f"{len(entries)} entries" if entries else "Archive is empty")

    @Slot(str)
    def _on_scan_error(self, error: str):
        self.open_btn.setEnabled(True)
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Cannot open archive: {error}")

    def _do_preview(self):
        """Compute the rename plan"""
        groups = self._selected_groups()
        if not groups:
            QMessageBox.warning(self, "Warning", "Choose a template or load a rule file")
            return

        self.options.preserve_top_level = not self.top_level_check.isChecked()
        self.preview_btn.setEnabled(False)
        self.preview_btn.setText("Generating...")

        self.plan_worker = PlanWorker(self.entries, groups, self.options)
        self.plan_worker.finished.connect(self._on_plan_finished)
        self.plan_worker.error.connect(self._on_plan_error)
        self.plan_worker.start()

    @Slot(object, list)
    def _on_plan_finished(self, plan: RenamePlan, errors: List[str]):
        self.plan = plan
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")

        items = plan.items[:self.options.preview_limit]
        self.table.setRowCount(len(items))
        for row, item in enumerate(items):
            self.table.setItem(row, 0, QTableWidgetItem(item.original_path))
            new_item = QTableWidgetItem(item.final_path)
            status = QTableWidgetItem()
            if item.is_same:
                status.setText("Unchanged")
                status.setForeground(QColor(150, 150, 150))
            else:
                status.setText("Rename")
                status.setForeground(QColor(0, 150, 0))
                new_item.setBackground(QColor(255, 255, 200))
            self.table.setItem(row, 1, new_item)
            self.table.setItem(row, 2, status)

        if errors:
            QMessageBox.warning(self, "Warning", "\n".join(errors))
        elif plan.notes:
            QMessageBox.information(self, "Notes", "\n".join(plan.notes))

        can_write = not errors and plan.total_count > 0 and self.archive.suffix.lower() != ".json"
        self.execute_btn.setEnabled(can_write)
        self.status_label.setText(f"{plan.total_count} of {len(plan.items)} entries will be renamed")

    @Slot(str)
    def _on_plan_error(self, error: str):
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")
        QMessageBox.critical(self, "Error", f"Failed to generate preview: {error}")

    def _do_execute(self):
        """Write the renamed archive"""
        if not self.plan or not self.plan.changed:
            return

        output, _ = QFileDialog.getSaveFileName(
            self, "Save Renamed Archive", str(default_output_path(self.archive)), "ZIP archives (*.zip)"
        )
        if not output:
            return

        self.execute_btn.setEnabled(False)
        self.execute_btn.setText("Writing...")
        self.preview_btn.setEnabled(False)
        self.open_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, len(self.plan.items))

        self.rename_worker = RenameWorker(self.archive, self.plan, Path(output), self.options)
        self.rename_worker.progress.connect(self._on_rename_progress)
        self.rename_worker.finished.connect(self._on_rename_finished)
        self.rename_worker.error.connect(self._on_rename_error)
        self.rename_worker.start()

    @Slot(int, int, str)
    def _on_rename_progress(self, current: int, total: int, msg: str):
        self.progress_bar.setValue(current)
        self.status_label.setText(msg)

    @Slot(object)
    def _on_rename_finished(self, result: RenameResult):
        self.execute_btn.setText("Save Renamed Archive...")
        self.execute_btn.setEnabled(True)
        self.preview_btn.setEnabled(True)
        self.open_btn.setEnabled(True)
        self.progress_bar.setVisible(False)

        msg = (f"Archive written!\n\nWritten: {result.success_count}\n"
               f"Failed: {result.failed_count}\nSkipped: {result.skipped_count}")
        QMessageBox.information(self, "Complete", msg)
        self.status_label.setText(f"Saved {result.output}")

    @Slot(str)
    def _on_rename_error(self, error: str):
        self.execute_btn.setText("Save Renamed Archive...")
        self.execute_btn.setEnabled(True)
        self.preview_btn.setEnabled(True)
        self.open_btn.setEnabled(True)
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Execution failed: {error}")


class AnalysisTab(QWidget):
    """Pre-flight Analysis Tab"""

    def __init__(self, options: ArchiveOptions, parent=None):
        super().__init__(parent)
        self.options = options
        self.scan_worker: Optional[ScanWorker] = None
        self.analyze_worker: Optional[AnalyzeWorker] = None

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        top_layout = QHBoxLayout()
        self.picker = ArchivePicker()
        top_layout.addWidget(self.picker, 1)
        self.analyze_btn = QPushButton("Analyze")
        self.analyze_btn.clicked.connect(self._do_analyze)
        top_layout.addWidget(self.analyze_btn)
        layout.addLayout(top_layout)

        self.severity_label = QLabel("")
        self.severity_label.setStyleSheet("QLabel { font-weight: bold; font-size: 14px; }")
        layout.addWidget(self.severity_label)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Category", "Path", "Details"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.Stretch)
        layout.addWidget(self.table, 1)

        self.stats_text = QTextEdit()
        self.stats_text.setReadOnly(True)
        self.stats_text.setMaximumHeight(120)
        layout.addWidget(self.stats_text)

    def _do_analyze(self):
        archive = self.picker.path()
        if archive is None or not archive.is_file():
            QMessageBox.warning(self, "Warning", "Please select an existing archive")
            return

        self.analyze_btn.setEnabled(False)
        self.analyze_btn.setText("Analyzing...")

        self.scan_worker = ScanWorker(archive, self.options)
        self.scan_worker.finished.connect(self._on_scan_finished)
        self.scan_worker.error.connect(self._on_error)
        self.scan_worker.start()

    @Slot(list)
    def _on_scan_finished(self, entries: List[ArchiveEntry]):
        self.analyze_worker = AnalyzeWorker(entries)
        self.analyze_worker.finished.connect(self._on_analysis_finished)
        self.analyze_worker.error.connect(self._on_error)
        self.analyze_worker.start()

    @Slot(object)
    def _on_analysis_finished(self, report: AnalysisReport):
        self.analyze_btn.setEnabled(True)
        self.analyze_btn.setText("Analyze")

        color = SEVERITY_COLORS[report.severity]
        self.severity_label.setText(f"Severity: {report.severity.value.upper()}")
        self.severity_label.setStyleSheet(
            f"QLabel {{ font-weight: bold; font-size: 14px; color: {color.name()}; }}"
        )

        warnings = report.warnings
        rows = []
        for c in warnings.rename_conflicts:
            rows.append(("Case conflict", c.directory, f"{', '.join(c.conflicting_files)} -> {c.result_name}"))
        for w in warnings.path_too_long:
            rows.append(("Path too long", w.path, f"{w.os}: {w.length} > {w.limit} bytes"))
        for d in warnings.duplicate_names:
            rows.append(("Duplicate name", d.directory, f"{d.filename} x{d.count}"))
        for w in warnings.invalid_chars:
            rows.append(("Invalid characters", w.path, f"{w.os}: {' '.join(w.invalid_chars)}"))
        for w in warnings.unicode_issues:
            rows.append(("Unicode", w.path, f"{w.issue}: {w.details}"))
        for s in warnings.system_files:
            rows.append(("System file", s.path, s.type))

        self.table.setRowCount(len(rows))
        for row, values in enumerate(rows):
            for col, value in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(value))

        self.stats_text.setPlainText(report.summary())

    @Slot(str)
    def _on_error(self, error: str):
        self.analyze_btn.setEnabled(True)
        self.analyze_btn.setText("Analyze")
        QMessageBox.critical(self, "Error", f"Analysis failed: {error}")


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("ZIP Rename Tool")
        self.setMinimumSize(800, 600)
        self.options = ArchiveOptions()

        # Create central widget
        central = QWidget()
        self.setCentralWidget(central)

        layout = QVBoxLayout(central)

        # Create tabs
        self.tabs = QTabWidget()
        self.rename_tab = RenameTab(self.options)
        self.analysis_tab = AnalysisTab(self.options)

        self.tabs.addTab(self.rename_tab, "Rename")
        self.tabs.addTab(self.analysis_tab, "Analysis")

        layout.addWidget(self.tabs)

        # Status bar
        self.statusBar().showMessage("Ready")
