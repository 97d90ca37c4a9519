"""
scope_match.py - Rule Group Scope Matching

Decides whether a rule group applies to an archive entry.
"""

from .models_archive import ArchiveEntry
from .models_rules import RuleGroup, Scope
from .path_parts import extension_of, normalize_path, path_segments


def normalize_extension(value: str) -> str:
    """Lowercase with a leading dot: "JPG" -> ".jpg" """
    value = value.strip().lower()
    if value and not value.startswith("."):
        value = "." + value
    return value


def is_top_level_directory(entry: ArchiveEntry) -> bool:
    """Directory with no parent segment ("Photos/")"""
    return entry.is_directory and len(path_segments(entry.path)) <= 1


def matches_extension(entry: ArchiveEntry, scope_value: str, exclude: bool = False) -> bool:
    if entry.is_directory:
        return False
    matched = extension_of(entry.path).lower() == normalize_extension(scope_value)
    return not matched if exclude else matched


def matches_folder(entry: ArchiveEntry, scope_value: str) -> bool:
    return normalize_path(entry.path).startswith(normalize_path(scope_value))


def matches_scope(entry: ArchiveEntry, group: RuleGroup, preserve_top_level: bool = True) -> bool:
    """
    Check whether a rule group applies to an entry

    Args:
        entry: Archive entry
        group: Rule group
        preserve_top_level: Top-level directories never match

    Returns:
        Whether the group applies
    """
    if preserve_top_level and is_top_level_directory(entry):
        return False

    if group.scope == Scope.GLOBAL:
        return not entry.is_directory
    if group.scope == Scope.FOLDERS:
        return entry.is_directory
    if group.scope == Scope.EXTENSION:
        return matches_extension(entry, group.scope_value, group.exclude)
    if group.scope == Scope.FOLDER:
        return matches_folder(entry, group.scope_value)
    return False
