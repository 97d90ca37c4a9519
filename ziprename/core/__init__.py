"""
core - Archive Rename Core Module

Provides the rename rule engine, the archive analyzer, and archive reading/writing.
"""

from .models_archive import (
    ArchiveEntry,
    RenamedPath,
    RenamePlan,
    ArchiveOptions,
    parse_entries,
)

from .models_rules import (
    Scope,
    Rule,
    RuleGroup,
    InvalidRuleError,
    InvalidRuleGroupError,
    parse_rule,
    parse_rule_groups,
)

from .models_report import (
    Severity,
    AnalysisReport,
    ArchiveStats,
    ArchiveWarnings,
    RenameConflict,
)

from .path_parts import (
    PathParts,
    split_path,
    path_segments,
)

from .scope_match import matches_scope

from .rule_eval import (
    RuleContext,
    apply_rule,
    apply_rules,
)

from .plan_rename import (
    rename_entries,
    find_rename_collisions,
    check_plan,
)

from .analysis import (
    analyze_archive,
    calculate_stats,
    calculate_severity,
)

from .scan_archive import (
    scan_archive,
    load_listing,
    filter_entries,
    list_suffixes,
    list_folders,
)

from .exec_rename import (
    execute_rename,
    RenameResult,
    default_output_path,
)

from .templates import (
    template_names,
    template_records,
    load_template,
    load_rule_file,
)

__all__ = [
    # Data models
    "ArchiveEntry",
    "RenamedPath",
    "RenamePlan",
    "ArchiveOptions",
    "Scope",
    "Rule",
    "RuleGroup",
    "InvalidRuleError",
    "InvalidRuleGroupError",
    "Severity",
    "AnalysisReport",
    "ArchiveStats",
    "ArchiveWarnings",
    "RenameConflict",
    "RenameResult",
    "PathParts",
    "RuleContext",

    # Parsing
    "parse_entries",
    "parse_rule",
    "parse_rule_groups",
    "split_path",
    "path_segments",

    # Renaming
    "matches_scope",
    "apply_rule",
    "apply_rules",
    "rename_entries",
    "find_rename_collisions",
    "check_plan",

    # Analysis
    "analyze_archive",
    "calculate_stats",
    "calculate_severity",

    # Archives
    "scan_archive",
    "load_listing",
    "filter_entries",
    "list_suffixes",
    "list_folders",
    "execute_rename",
    "default_output_path",

    # Rule sources
    "template_names",
    "template_records",
    "load_template",
    "load_rule_file",
]
