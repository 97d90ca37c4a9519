"""
gui_workers.py - GUI Worker Threads

Provides background execution of long tasks to avoid blocking UI
"""

from pathlib import Path
from typing import List, Optional
import logging

from PySide6.QtCore import QThread, Signal, QObject

from ..core import (
    ArchiveEntry, ArchiveOptions, RenamePlan, RuleGroup,
    scan_archive, load_listing, analyze_archive, rename_entries, check_plan,
    execute_rename,
)

logger = logging.getLogger(__name__)


class ScanWorker(QThread):
    """Archive listing worker thread"""

    # Signals
    progress = Signal(str)          # Progress message
    finished = Signal(list)         # Complete, returns entry list
    error = Signal(str)             # Error message

    def __init__(
        self,
        archive: Path,
        options: Optional[ArchiveOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.archive = archive
        self.options = options or ArchiveOptions()
        self._cancelled = False

    def cancel(self):
        """Cancel scan"""
        self._cancelled = True

    def run(self):
        try:
            def progress_callback(msg: str):
                if self._cancelled:
                    raise InterruptedError("Scan cancelled")
                self.progress.emit(msg)

            if self.archive.suffix.lower() == ".json":
                entries = load_listing(self.archive)
            else:
                entries = scan_archive(self.archive, progress_callback=progress_callback)
            self.options.check_entry_count(len(entries))

            if not self._cancelled:
                self.finished.emit(entries)
        except InterruptedError:
            self.finished.emit([])
        except (ValueError, OSError) as e:
            logger.warning("Scan of %s failed: %s", self.archive, e)
            self.error.emit(str(e))


class AnalyzeWorker(QThread):
    """Archive analysis worker thread"""

    # Signals
    finished = Signal(object)       # AnalysisReport
    error = Signal(str)             # Error message

    def __init__(self, entries: List[ArchiveEntry], parent: Optional[QObject] = None):
        super().__init__(parent)
        self.entries = entries

    def run(self):
        try:
            self.finished.emit(analyze_archive(self.entries))
        except Exception as e:
            logger.exception("Analysis failed")
            self.error.emit(str(e))


class PlanWorker(QThread):
    """Rename plan generation worker thread"""

    # Signals
    progress = Signal(str)              # Progress message
    finished = Signal(object, list)     # RenamePlan, collision errors
    error = Signal(str)                 # Error message

    def __init__(
        self,
        entries: List[ArchiveEntry],
        groups: List[RuleGroup],
        options: Optional[ArchiveOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.entries = entries
        self.groups = groups
        self.options = options or ArchiveOptions()

    def run(self):
        try:
            self.progress.emit("Generating rename plan...")
            plan = rename_entries(
                self.entries,
                self.groups,
                preserve_top_level=self.options.preserve_top_level,
            )
            errors = check_plan(plan, self.options.case_insensitive_detect)
            self.finished.emit(plan, errors)
        except Exception as e:
            logger.exception("Planning failed")
            self.error.emit(str(e))


class RenameWorker(QThread):
    """Rename execution worker thread"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # RenameResult
    error = Signal(str)                 # Error message

    def __init__(
        self,
        archive: Path,
        plan: RenamePlan,
        output: Optional[Path] = None,
        options: Optional[ArchiveOptions] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.archive = archive
        self.plan = plan
        self.output = output
        self.options = options or ArchiveOptions()

    def run(self):
        try:
            def progress_callback(current: int, total: int, msg: str):
                self.progress.emit(current, total, msg)

            log_dir = None
            if self.options.backup_log:
                log_dir = Path(self.options.log_dir) if self.options.log_dir else self.archive.parent / "rename_logs"

            result = execute_rename(
                self.archive,
                self.plan,
                self.output,
                dry_run=self.options.dry_run,
                progress_callback=progress_callback,
                log_dir=log_dir,
            )

            self.finished.emit(result)
        except (ValueError, OSError) as e:
            logger.warning("Rename of %s failed: %s", self.archive, e)
            self.error.emit(str(e))
