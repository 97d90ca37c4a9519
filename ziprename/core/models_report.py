"""
models_report.py - Analysis Report Definitions

Contains:
- Severity: Coarse risk level
- One warning dataclass per analyzer category
- ArchiveStats / AnalysisReport
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class Severity(Enum):
    """Risk level, highest first"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


@dataclass
class PathLengthWarning:
    path: str
    length: int                     # UTF-8 bytes
    os: str
    limit: int

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "length": self.length, "os": self.os, "limit": self.limit}


@dataclass
class InvalidCharsWarning:
    path: str
    invalid_chars: List[str]        # Offending characters, or ["RESERVED_NAME"]
    os: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "invalidChars": list(self.invalid_chars), "os": self.os}


@dataclass
class UnicodeWarning:
    path: str
    issue: str                      # "nfc_nfd_mismatch" or "invalid_sequence"
    details: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "issue": self.issue, "details": self.details}


@dataclass
class DuplicateNameWarning:
    directory: str
    filename: str
    count: int
    paths: List[str]                # First 10 original paths

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directory": self.directory,
            "filename": self.filename,
            "count": self.count,
            "paths": list(self.paths),
        }


@dataclass
class SystemFileWarning:
    path: str
    type: str                       # Name of the matching pattern

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "type": self.type}


@dataclass
class RenameConflict:
    directory: str
    conflicting_files: List[str]
    result_name: str
    count: int
    type: str = "case_sensitivity"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directory": self.directory,
            "conflictingFiles": list(self.conflicting_files),
            "resultName": self.result_name,
            "count": self.count,
            "type": self.type,
        }


@dataclass
class ArchiveWarnings:
    """All analyzer warnings, one list per category"""
    rename_conflicts: List[RenameConflict] = field(default_factory=list)
    path_too_long: List[PathLengthWarning] = field(default_factory=list)
    duplicate_names: List[DuplicateNameWarning] = field(default_factory=list)
    invalid_chars: List[InvalidCharsWarning] = field(default_factory=list)
    unicode_issues: List[UnicodeWarning] = field(default_factory=list)
    system_files: List[SystemFileWarning] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return sum(len(v) for v in vars(self).values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "renameConflicts": [w.to_dict() for w in self.rename_conflicts],
            "pathTooLong": [w.to_dict() for w in self.path_too_long],
            "duplicateNames": [w.to_dict() for w in self.duplicate_names],
            "invalidChars": [w.to_dict() for w in self.invalid_chars],
            "unicodeIssues": [w.to_dict() for w in self.unicode_issues],
            "systemFiles": [w.to_dict() for w in self.system_files],
        }


@dataclass
class ArchiveStats:
    total_files: int = 0
    total_directories: int = 0
    total_size: int = 0
    max_depth: int = 0
    largest_file_path: str = ""
    largest_file_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "totalDirectories": self.total_directories,
            "totalSize": self.total_size,
            "maxDepth": self.max_depth,
            "largestFile": {"path": self.largest_file_path, "size": self.largest_file_size},
        }


@dataclass
class AnalysisReport:
    """Pre-flight analysis of one archive listing"""
    stats: ArchiveStats
    warnings: ArchiveWarnings
    severity: Severity
    timestamp: str                  # UTC ISO-8601

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "warnings": self.warnings.to_dict(),
            "severity": self.severity.value,
            "timestamp": self.timestamp,
        }

    def summary(self) -> str:
        """Generate summary"""
        w = self.warnings
        lines = [
            f"Archive Analysis ({self.severity.value}):",
            f"  - Files: {self.stats.total_files}",
            f"  - Directories: {self.stats.total_directories}",
            f"  - Total size: {self.stats.total_size} bytes",
            f"  - Max depth: {self.stats.max_depth}",
            f"  - Rename conflicts: {len(w.rename_conflicts)}",
            f"  - Paths too long: {len(w.path_too_long)}",
            f"  - Duplicate names: {len(w.duplicate_names)}",
            f"  - Invalid characters: {len(w.invalid_chars)}",
            f"  - Unicode issues: {len(w.unicode_issues)}",
            f"  - System files: {len(w.system_files)}",
        ]
        return "\n".join(lines)
