"""
models_archive.py - Archive Data Structure Definitions

Contains:
- ArchiveEntry: One listed item (file or directory) of an archive
- RenamedPath: Original and final path of one entry
- RenamePlan: Ordered rename result for a whole archive
- ArchiveOptions: Options configuration
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
import logging
import platform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveEntry:
    """One listed item of an archive (read-only snapshot)"""
    path: str                       # "/"-normalized, trailing slash for directories
    size: int = 0                   # Size in bytes (files only)
    is_directory: bool = False      # Whether the entry is a directory

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "ArchiveEntry":
        """
        Create ArchiveEntry from a JSON-shaped record

        Args:
            record: {"path": str, "size": int, "isDirectory": bool}

        Returns:
            Archive entry

        Raises:
            ValueError: The record has no usable path
        """
        path = record.get("path")
        if not isinstance(path, str) or not path:
            raise ValueError(f"Entry has no path: {record!r}")

        path = path.replace("\\", "/")
        is_directory = record.get("isDirectory")
        if is_directory is None:
            is_directory = path.endswith("/")

        try:
            size = max(int(record.get("size") or 0), 0)
        except (TypeError, ValueError):
            size = 0

        return cls(path=path, size=0 if is_directory else size, is_directory=bool(is_directory))

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "size": self.size, "isDirectory": self.is_directory}


def parse_entries(records: Iterable[Dict[str, Any]]) -> List[ArchiveEntry]:
    """
    Convert caller-supplied records to entries, keeping listing order

    Records without a path are dropped (they never reach the engine or the analyzer).

    Args:
        records: Entry records

    Returns:
        Entry list
    """
    entries: List[ArchiveEntry] = []
    for i, record in enumerate(records):
        if isinstance(record, ArchiveEntry):
            entries.append(record)
            continue
        if not isinstance(record, dict):
            logger.warning("Dropping entry #%d: not a record", i)
            continue
        try:
            entries.append(ArchiveEntry.from_dict(record))
        except ValueError as e:
            logger.warning("Dropping entry #%d: %s", i, e)
    return entries


@dataclass(frozen=True)
class RenamedPath:
    """Rename result of a single entry"""
    original_path: str              # Path as listed in the archive
    final_path: str                 # Path after all rule groups
    is_directory: bool = False

    @property
    def is_same(self) -> bool:
        """Whether original and final path are the same"""
        return self.original_path == self.final_path

    def to_dict(self) -> Dict[str, Any]:
        return {"originalPath": self.original_path, "finalPath": self.final_path}


@dataclass
class RenamePlan:
    """Rename result for a whole archive, in listing order"""
    items: List[RenamedPath] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)      # Dropped groups, skipped rules

    @property
    def changed(self) -> List[RenamedPath]:
        """Entries whose path changes"""
        return [item for item in self.items if not item.is_same]

    @property
    def total_count(self) -> int:
        return len(self.changed)

    def add(self, original_path: str, final_path: str, is_directory: bool = False) -> None:
        self.items.append(RenamedPath(original_path, final_path, is_directory))

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.items]

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Rename Plan Summary:",
            f"  - Entries: {len(self.items)}",
            f"  - Renamed: {self.total_count}",
            f"  - Notes: {len(self.notes)}",
        ]
        return "\n".join(lines)


@dataclass
class ArchiveOptions:
    """Options configuration"""
    # Work bound enforced by callers before invoking the core
    max_entries: int = 50000

    # Rows shown in previews
    preview_limit: int = 500

    # Case-insensitive collision detection (Windows/macOS default to insensitive)
    case_insensitive_detect: bool = field(default_factory=lambda: platform.system() in ("Windows", "Darwin"))

    # Top-level directories are never renamed
    preserve_top_level: bool = True

    # Execution options
    dry_run: bool = False           # Preview only, do not write the archive
    backup_log: bool = True         # Whether to save plan/result logs
    log_dir: Optional[str] = None   # Where logs go (None: next to the output archive)

    def check_entry_count(self, count: int) -> None:
        """
        Raise if an archive is larger than the configured bound

        Raises:
            ValueError: count exceeds max_entries
        """
        if self.max_entries and count > self.max_entries:
            raise ValueError(f"Archive has {count} entries, limit is {self.max_entries}")
