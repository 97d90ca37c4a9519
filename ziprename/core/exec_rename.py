"""
exec_rename.py - Rename Execution Module

Responsibilities:
- Write a renamed copy of an archive from a rename plan
- Write to a temporary file first, move into place only when complete
- One rename at a time per archive
- dry_run support and JSON plan/result logs
"""

from pathlib import Path
from typing import Dict, List, Tuple, Optional, Callable
from dataclasses import dataclass, field
from datetime import datetime
import json
import logging
import os
import threading
import uuid
import weakref
import zipfile

from .models_archive import RenamePlan, RenamedPath
from .path_parts import normalize_path

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
# key: resolved archive path, value: lock held while that archive is rewritten (dropped once unused)
_archive_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()


@dataclass
class RenameResult:
    """Rename execution result"""
    success: List[RenamedPath] = field(default_factory=list)
    failed: List[Tuple[RenamedPath, str]] = field(default_factory=list)    # (item, error_msg)
    skipped: List[Tuple[RenamedPath, str]] = field(default_factory=list)   # (item, reason)
    output: Optional[Path] = None

    @property
    def success_count(self) -> int:
        return len(self.success)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Execution Result:",
            f"  - Written: {self.success_count}",
            f"  - Failed: {self.failed_count}",
            f"  - Skipped: {self.skipped_count}",
        ]
        if self.output:
            lines.append(f"  - Output: {self.output}")
        if self.failed:
            lines.append("Failure Details:")
            for item, error in self.failed[:10]:  # Show at most 10
                lines.append(f"  - {item.original_path} -> {item.final_path}: {error}")
            if len(self.failed) > 10:
                lines.append(f"  ... and {len(self.failed) - 10} more failures")
        return "\n".join(lines)


def archive_lock(archive: Path) -> threading.Lock:
    """Lock serializing renames of one archive"""
    key = str(Path(archive).resolve())
    with _locks_guard:
        lock = _archive_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _archive_locks[key] = lock
        return lock


def _generate_temp_name(target: Path) -> Path:
    """Generate temporary filename"""
    unique_id = uuid.uuid4().hex[:8]
    return target.parent / f".__tmp_rename__{unique_id}__{target.name}"


def default_output_path(archive: Path) -> Path:
    """photos.zip -> photos_renamed.zip"""
    archive = Path(archive)
    return archive.with_name(f"{archive.stem}_renamed{archive.suffix or '.zip'}")


def _copy_info(info: zipfile.ZipInfo, name: str) -> zipfile.ZipInfo:
    new_info = zipfile.ZipInfo(name, date_time=info.date_time)
    new_info.compress_type = info.compress_type
    new_info.external_attr = info.external_attr
    new_info.comment = info.comment
    return new_info


def execute_rename(
    archive: Path,
    plan: RenamePlan,
    output: Optional[Path] = None,
    dry_run: bool = False,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
    log_dir: Optional[Path] = None
) -> RenameResult:
    """
    Write a renamed copy of an archive

    Every plan item is carried over by its original path. Directories become
    empty entries; an item whose final path was already written is skipped.

    Args:
        archive: Source ZIP archive
        plan: Rename plan computed from the archive's listing
        output: Destination archive (default: <name>_renamed.zip next to the source)
        dry_run: Whether to preview only
        progress_callback: Progress callback (current, total, message)
        log_dir: Log directory (for saving plan/result logs)

    Returns:
        Execution result
    """
    archive = Path(archive)
    output = Path(output) if output else default_output_path(archive)
    result = RenameResult(output=None if dry_run else output)
    items = plan.items
    total = len(items)

    if log_dir and not dry_run:
        save_plan_log(plan, log_dir)

    if dry_run:
        # Preview mode only
        for i, item in enumerate(items):
            if progress_callback:
                progress_callback(i + 1, total, f"[Preview] {item.original_path} -> {item.final_path}")
            result.success.append(item)
        return result

    with archive_lock(archive):
        temp_path = _generate_temp_name(output)
        try:
            _write_archive(archive, items, temp_path, result, progress_callback)
            os.replace(temp_path, output)
        finally:
            if temp_path.exists():
                temp_path.unlink()

    logger.info("Wrote %s (%d written, %d failed, %d skipped)",
                output, result.success_count, result.failed_count, result.skipped_count)

    if log_dir:
        save_result_log(result, log_dir)

    return result


def _write_archive(
    archive: Path,
    items: List[RenamedPath],
    temp_path: Path,
    result: RenameResult,
    progress_callback: Optional[Callable[[int, int, str], None]]
) -> None:
    total = len(items)
    written = set()

    with zipfile.ZipFile(archive) as src, zipfile.ZipFile(temp_path, "w", zipfile.ZIP_DEFLATED) as dst:
        # key: normalized entry name, value: ZipInfo list in listing order
        infos: Dict[str, List[zipfile.ZipInfo]] = {}
        for info in src.infolist():
            infos.setdefault(normalize_path(info.filename), []).append(info)

        for i, item in enumerate(items):
            if progress_callback:
                progress_callback(i + 1, total, f"{item.original_path} -> {item.final_path}")

            if not item.final_path:
                result.skipped.append((item, "Empty destination path"))
                continue
            if item.final_path in written:
                result.skipped.append((item, "Destination already written"))
                continue

            candidates = infos.get(item.original_path)
            if not candidates:
                result.failed.append((item, "Entry not found in archive"))
                continue
            info = candidates.pop(0) if len(candidates) > 1 else candidates[0]

            try:
                if item.is_directory:
                    dst.writestr(_copy_info(info, item.final_path), b"")
                else:
                    dst.writestr(_copy_info(info, item.final_path), src.read(info))
            except (OSError, RuntimeError, zipfile.BadZipFile) as e:
                result.failed.append((item, f"Write failed: {e}"))
                continue

            written.add(item.final_path)
            result.success.append(item)


def save_plan_log(plan: RenamePlan, log_dir: Path) -> Path:
    """Save execution plan log"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"rename_plan_{timestamp}.json"

    data = {
        "timestamp": timestamp,
        "total_ops": plan.total_count,
        "operations": [item.to_dict() for item in plan.changed],
        "notes": plan.notes,
    }

    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return log_file


def save_result_log(result: RenameResult, log_dir: Path) -> Path:
    """Save execution result log"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"rename_result_{timestamp}.json"

    data = {
        "timestamp": timestamp,
        "output": str(result.output) if result.output else None,
        "success_count": result.success_count,
        "failed_count": result.failed_count,
        "skipped_count": result.skipped_count,
        "failed": [
            {**item.to_dict(), "error": error}
            for item, error in result.failed
        ],
        "skipped": [
            {**item.to_dict(), "reason": reason}
            for item, reason in result.skipped
        ]
    }

    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return log_file
