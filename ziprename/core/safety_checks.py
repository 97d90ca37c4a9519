"""
safety_checks.py - Safety Check Module

Detectors for cross-platform hazards in an archive listing. Each detector
looks at the raw entry list on its own; none of them knows about rename rules.
"""

from typing import Dict, List, Tuple
import re
import unicodedata

from .models_archive import ArchiveEntry
from .models_report import (
    PathLengthWarning, InvalidCharsWarning, UnicodeWarning,
    DuplicateNameWarning, SystemFileWarning, RenameConflict,
)
from .path_parts import normalize_path, split_path
from .text_match import describe_char, is_reserved_name


OS_PATH_LIMITS: Dict[str, int] = {
    "windows": 260,
    "linux": 4096,
    "macos": 1024,
}

INVALID_CHARS: Dict[str, "re.Pattern[str]"] = {
    "windows": re.compile(r'[<>:"|?*\x00-\x1f]'),
    "macos": re.compile(r"[:/\x00]"),
    "linux": re.compile(r"\x00"),
}

# Ordered, first match wins
SYSTEM_FILE_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("__MACOSX", re.compile(r"(^|/)__MACOSX/")),
    (".DS_Store", re.compile(r"(^|/)\.DS_Store$")),
    ("Thumbs.db", re.compile(r"(^|/)Thumbs\.db$", re.IGNORECASE)),
    ("desktop.ini", re.compile(r"(^|/)desktop\.ini$", re.IGNORECASE)),
    (".git", re.compile(r"(^|/)\.git/")),
]

RESERVED_NAME = "RESERVED_NAME"
MAX_DUPLICATE_PATHS = 10
MAX_SYSTEM_FILES = 20
MAX_CONFLICTS = 10


def utf8_length(path: str) -> int:
    """UTF-8 byte length (lone surrogates count as one 3-byte character)"""
    return len(path.encode("utf-8", "surrogatepass"))


def check_path_length(entry: ArchiveEntry) -> List[PathLengthWarning]:
    """
    Check a path against every OS path length limit

    Args:
        entry: Archive entry

    Returns:
        One warning per exceeded limit
    """
    length = utf8_length(entry.path)
    return [
        PathLengthWarning(path=entry.path, length=length, os=os_name, limit=limit)
        for os_name, limit in OS_PATH_LIMITS.items()
        if length > limit
    ]


def check_invalid_chars(entry: ArchiveEntry) -> List[InvalidCharsWarning]:
    """
    Check every path segment against each OS's forbidden characters

    Windows reserved device names (CON, PRN, COM1...) are reported separately
    with invalid_chars == ["RESERVED_NAME"].

    Args:
        entry: Archive entry

    Returns:
        Warning list
    """
    warnings = []
    names = [n for n in normalize_path(entry.path).split("/") if n]

    for os_name, regex in INVALID_CHARS.items():
        found: List[str] = []
        for name in names:
            for char in regex.findall(name):
                shown = describe_char(char)
                if shown not in found:
                    found.append(shown)
        if found:
            warnings.append(InvalidCharsWarning(path=entry.path, invalid_chars=found, os=os_name))

    parts = split_path(entry.path, entry.is_directory)
    if is_reserved_name(parts.stem):
        warnings.append(InvalidCharsWarning(path=entry.path, invalid_chars=[RESERVED_NAME], os="windows"))

    return warnings


def check_unicode(entry: ArchiveEntry) -> List[UnicodeWarning]:
    """
    Check normalization form and encodability of a path

    Args:
        entry: Archive entry

    Returns:
        Warning list
    """
    warnings = []
    path = entry.path

    nfc = unicodedata.normalize("NFC", path)
    nfd = unicodedata.normalize("NFD", path)
    if nfc != nfd and path != nfc:
        warnings.append(UnicodeWarning(
            path=path,
            issue="nfc_nfd_mismatch",
            details="Filename uses NFD normalization, may cause issues on Windows/Linux",
        ))

    try:
        path.encode("utf-8").decode("utf-8")
    except UnicodeError:
        warnings.append(UnicodeWarning(
            path=path,
            issue="invalid_sequence",
            details="Invalid UTF-8 encoding detected",
        ))

    return warnings


def _group_by_name(entries: List[ArchiveEntry]) -> Dict[Tuple[str, str], List[ArchiveEntry]]:
    """Group files by (parent directory, case-folded base name), first appearance order"""
    groups: Dict[Tuple[str, str], List[ArchiveEntry]] = {}
    for entry in entries:
        if entry.is_directory:
            continue
        parts = split_path(entry.path)
        groups.setdefault((parts.parent, parts.base.casefold()), []).append(entry)
    return groups


def find_duplicate_names(entries: List[ArchiveEntry]) -> List[DuplicateNameWarning]:
    """
    Find files in one directory whose names differ only by case

    Args:
        entries: Entry list

    Returns:
        One warning per group with more than one distinct spelling
    """
    duplicates = []
    for (directory, _), group in _group_by_name(entries).items():
        if len({e.path for e in group}) < 2:
            continue
        duplicates.append(DuplicateNameWarning(
            directory=directory or "/",
            filename=split_path(group[0].path).base,
            count=len(group),
            paths=[e.path for e in group][:MAX_DUPLICATE_PATHS],
        ))
    return duplicates


def find_system_files(entries: List[ArchiveEntry], limit: int = MAX_SYSTEM_FILES) -> List[SystemFileWarning]:
    """
    Find OS metadata and version control noise

    Args:
        entries: Entry list
        limit: Maximum number of matches reported

    Returns:
        Warning list
    """
    found = []
    for entry in entries:
        path = normalize_path(entry.path)
        for kind, pattern in SYSTEM_FILE_PATTERNS:
            if pattern.search(path):
                found.append(SystemFileWarning(path=entry.path, type=kind))
                break
        if len(found) >= limit:
            break
    return found


def simulate_rename_conflicts(entries: List[ArchiveEntry], limit: int = MAX_CONFLICTS) -> List[RenameConflict]:
    """
    Find names that are distinct today but collide when case is ignored

    Args:
        entries: Entry list
        limit: Maximum number of conflicts reported

    Returns:
        Conflict list
    """
    conflicts = []
    for (directory, _), group in _group_by_name(entries).items():
        names = [split_path(e.path).base for e in group]
        if len(names) < 2 or len(set(names)) < 2:
            continue
        conflicts.append(RenameConflict(
            directory=directory or "/",
            conflicting_files=names,
            result_name=names[0].lower(),
            count=len(names),
            type="case_sensitivity",
        ))
        if len(conflicts) >= limit:
            break
    return conflicts
