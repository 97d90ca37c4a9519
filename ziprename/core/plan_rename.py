"""
plan_rename.py - Rename Plan Generation Module

Responsibilities:
- Apply scoped, ordered rule groups to every archive entry
- Keep one counter per rule group id for the whole run
- Rename directories first, then rewrite file paths under renamed directories
- Detect final paths reached by more than one entry
"""

from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from .models_archive import ArchiveEntry, RenamePlan, parse_entries
from .models_report import RenameConflict
from .models_rules import RuleGroup, Scope, parse_rule_groups
from .path_parts import join_path, normalize_path, path_segments, split_extension
from .rule_eval import RuleContext, apply_rules
from .scope_match import matches_scope

logger = logging.getLogger(__name__)


class GroupRunner:
    """Applies rule groups to names, one counter per group id"""

    def __init__(self, groups: List[RuleGroup], today: str, preserve_top_level: bool = True,
                 notes: Optional[List[str]] = None):
        self.groups = groups
        self.today = today
        self.preserve_top_level = preserve_top_level
        self.notes = notes if notes is not None else []
        # key: group id, value: next zero-based index
        self.counters: Dict[str, int] = defaultdict(int)

    def next_index(self, group_id: str) -> int:
        index = self.counters[group_id]
        self.counters[group_id] += 1
        return index

    def rename(self, entry: ArchiveEntry, parent_segments: List[str], stem: str, extension: str) -> str:
        """
        Run every matching group over one name

        Args:
            entry: Entry being renamed (scope matching uses its listed path)
            parent_segments: Original parent segments
            stem: Starting stem
            extension: Starting extension ("" for directories)

        Returns:
            New base name
        """
        for group in self.groups:
            if not group.rules:
                continue
            if not matches_scope(entry, group, self.preserve_top_level):
                continue

            ctx = RuleContext(
                index=self.next_index(group.id),
                parent_name=parent_segments[-1] if parent_segments else "",
                depth=len(parent_segments),
                today=self.today,
                fold_extension=group.scope == Scope.EXTENSION and not group.exclude,
            )
            stem, extension = apply_rules(group.rules, stem, extension, ctx, self.notes)
        return stem + extension


def _clean_name(new_name: str, old_name: str) -> str:
    """Keep only the last segment of a rule result; fall back to the old name if nothing usable is left"""
    name = normalize_path(new_name).rsplit("/", 1)[-1]
    if name in ("", ".", ".."):
        return old_name
    return name


def _as_entries(entries: Iterable[Any]) -> List[ArchiveEntry]:
    entries = list(entries)
    if all(isinstance(e, ArchiveEntry) for e in entries):
        return entries
    return parse_entries(entries)


def rename_entries(
    entries: Iterable[Any],
    rule_groups: Any = None,
    preserve_top_level: bool = True,
    today: Optional[str] = None
) -> RenamePlan:
    """
    Compute the final path of every entry

    Phase 1 renames directories and records old -> new directory names.
    Phase 2 rewrites every file's parent path through those records (so files
    inherit every ancestor rename) and then renames the file itself.
    Counters are shared across both phases.

    Args:
        entries: ArchiveEntry objects or {"path", "size", "isDirectory"} records, in listing order
        rule_groups: RuleGroup objects, group records, or a {"ruleGroups"/"rules": ...} payload
        preserve_top_level: Never rename top-level directories
        today: ISO date used by {date} (defaults to the current date)

    Returns:
        Rename plan, in listing order
    """
    plan = RenamePlan()
    entries = _as_entries(entries)
    groups = parse_rule_groups(rule_groups, plan.notes)
    runner = GroupRunner(groups, today or date.today().isoformat(), preserve_top_level, plan.notes)

    # key: cleaned directory path, value: new directory name
    dir_names: Dict[str, str] = {}
    final_paths: Dict[int, str] = {}

    # Phase 1: directory names
    for entry in entries:
        if not entry.is_directory:
            continue
        segments = path_segments(entry.path)
        if not segments:
            continue
        key = "/".join(segments)
        if key in dir_names:
            # First registration is authoritative and the repeat uses no counter value
            logger.debug("Directory listed twice, keeping first rename: %s", key)
            continue
        dir_names[key] = _clean_name(runner.rename(entry, segments[:-1], segments[-1], ""), segments[-1])

    def rebuild(segments: Sequence[str]) -> List[str]:
        rebuilt = []
        for i, segment in enumerate(segments):
            rebuilt.append(dir_names.get("/".join(segments[:i + 1]), segment))
        return rebuilt

    for i, entry in enumerate(entries):
        if entry.is_directory:
            trailing = "/" if normalize_path(entry.path).endswith("/") else ""
            final_paths[i] = join_path(rebuild(path_segments(entry.path)), trailing)

    # Phase 2: files
    for i, entry in enumerate(entries):
        if entry.is_directory:
            continue
        segments = path_segments(entry.path)
        if not segments:
            final_paths[i] = ""
            continue
        parent, base = segments[:-1], segments[-1]
        stem, extension = split_extension(base)
        new_name = _clean_name(runner.rename(entry, parent, stem, extension), base)
        final_paths[i] = join_path(rebuild(parent) + [new_name])

    for i, entry in enumerate(entries):
        plan.add(entry.path, final_paths[i], entry.is_directory)

    logger.debug("Renamed %d of %d entries with %d groups", plan.total_count, len(entries), len(groups))
    return plan


def find_rename_collisions(plan: RenamePlan, case_insensitive: bool = True) -> List[RenameConflict]:
    """
    Find final file paths reached by more than one entry

    Args:
        plan: Rename plan
        case_insensitive: Treat paths differing only by case as the same

    Returns:
        One conflict per colliding final path
    """
    # key: final path (normalized), value: (original paths, final paths)
    groups: Dict[str, Tuple[List[str], List[str]]] = {}
    for item in plan.items:
        if item.is_directory:
            continue
        key = item.final_path.casefold() if case_insensitive else item.final_path
        originals, finals = groups.setdefault(key, ([], []))
        originals.append(item.original_path)
        finals.append(item.final_path)

    conflicts = []
    for originals, finals in groups.values():
        if len(set(originals)) < 2:
            continue
        directory, _, name = finals[0].rpartition("/")
        conflicts.append(RenameConflict(
            directory=directory or "/",
            conflicting_files=originals,
            result_name=name,
            count=len(originals),
            type="rename_collision" if len(set(finals)) == 1 else "case_sensitivity",
        ))
    return conflicts


def check_plan(plan: RenamePlan, case_insensitive: bool = True) -> List[str]:
    """
    Validate rename plan

    Args:
        plan: Rename plan
        case_insensitive: Treat paths differing only by case as the same

    Returns:
        Error list
    """
    errors = []
    for conflict in find_rename_collisions(plan, case_insensitive):
        target = conflict.result_name if conflict.directory == "/" else f"{conflict.directory}/{conflict.result_name}"
        errors.append(f"Multiple files have the same destination: {conflict.conflicting_files} -> {target}")
    return errors
