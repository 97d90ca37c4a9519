"""
analysis.py - Archive Analysis

Runs every safety detector over an archive listing and reduces the result
to a single severity level. A report is always computed from scratch.
"""

from datetime import datetime, timezone
from typing import Any, Iterable, List
import logging

from .models_archive import ArchiveEntry, parse_entries
from .models_report import AnalysisReport, ArchiveStats, ArchiveWarnings, Severity, UnicodeWarning
from .path_parts import normalize_path
from .safety_checks import (
    check_path_length, check_invalid_chars, check_unicode,
    find_duplicate_names, find_system_files, simulate_rename_conflicts,
)

logger = logging.getLogger(__name__)

# More than this many path length / invalid character warnings is a high risk
HIGH_WARNING_COUNT = 5


def calculate_stats(entries: List[ArchiveEntry]) -> ArchiveStats:
    """
    Count files and directories, sum sizes, find the deepest path and the largest file

    The first of several equally large files wins.
    """
    stats = ArchiveStats()
    largest = None

    for entry in entries:
        if entry.is_directory:
            stats.total_directories += 1
        else:
            stats.total_files += 1
            stats.total_size += entry.size
            if largest is None or entry.size > largest.size:
                largest = entry

        depth = len(normalize_path(entry.path).split("/")) - 1
        stats.max_depth = max(stats.max_depth, depth)

    if largest is not None:
        stats.largest_file_path = largest.path
        stats.largest_file_size = largest.size
    return stats


def calculate_severity(warnings: ArchiveWarnings) -> Severity:
    """Strict priority, first match wins"""
    # Critical: rename conflicts (data loss risk)
    if warnings.rename_conflicts:
        return Severity.CRITICAL

    # High: many path/char issues
    if len(warnings.path_too_long) > HIGH_WARNING_COUNT or len(warnings.invalid_chars) > HIGH_WARNING_COUNT:
        return Severity.HIGH

    # Medium: duplicates, unicode issues
    if warnings.duplicate_names or warnings.unicode_issues:
        return Severity.MEDIUM

    # Low: only system files
    if warnings.system_files:
        return Severity.LOW

    return Severity.NONE


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def analyze_archive(entries: Iterable[Any]) -> AnalysisReport:
    """
    Analyze an archive listing

    Args:
        entries: ArchiveEntry objects or {"path", "size", "isDirectory"} records

    Returns:
        Analysis report
    """
    entries = parse_entries(entries)
    warnings = ArchiveWarnings()

    for entry in entries:
        if entry.is_directory:
            continue
        try:
            warnings.path_too_long.extend(check_path_length(entry))
            warnings.invalid_chars.extend(check_invalid_chars(entry))
            warnings.unicode_issues.extend(check_unicode(entry))
        except (UnicodeError, ValueError) as e:
            # A path the detectors cannot handle is itself a finding
            logger.warning("Could not analyze %r: %s", entry.path, e)
            warnings.unicode_issues.append(UnicodeWarning(path=entry.path, issue="invalid_sequence", details=str(e)))

    warnings.duplicate_names = find_duplicate_names(entries)
    warnings.system_files = find_system_files(entries)
    warnings.rename_conflicts = simulate_rename_conflicts(entries)

    report = AnalysisReport(
        stats=calculate_stats(entries),
        warnings=warnings,
        severity=calculate_severity(warnings),
        timestamp=_utc_timestamp(),
    )
    logger.debug("Analyzed %d entries: severity %s, %d warnings",
                 len(entries), report.severity.value, warnings.total_count)
    return report
