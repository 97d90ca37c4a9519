"""
Rename engine behavior.

Covers:
1. Identity and determinism
2. Scope, ordering and per-group counters
3. Directory renames propagating to descendants
4. Malformed input and traversal segments
5. Post-rule collision detection
"""

import pytest

from ziprename.core.models_archive import ArchiveEntry
from ziprename.core.plan_rename import check_plan, find_rename_collisions, rename_entries


TODAY = "2024-05-01"


def finals(plan):
    return [item.final_path for item in plan.items]


def numbering(**fields):
    return {"type": "numbering", **fields}


@pytest.fixture
def tree():
    return [
        {"path": "Photos/", "isDirectory": True},
        {"path": "Photos/Trip/", "isDirectory": True},
        {"path": "Photos/Trip/a.jpg", "size": 1},
        {"path": "Photos/b.jpg", "size": 2},
        {"path": "readme.md", "size": 3},
    ]


# ============================================================================
# IDENTITY AND DETERMINISM
# ============================================================================

def test_no_groups_is_identity(tree):
    plan = rename_entries(tree, [])
    assert finals(plan) == [e["path"] for e in tree]
    assert plan.changed == []


def test_directory_without_trailing_slash_keeps_its_spelling():
    plan = rename_entries([{"path": "a/b", "isDirectory": True}, {"path": "a/b/c.txt"}], [])
    assert finals(plan) == ["a/b", "a/b/c.txt"]
    assert plan.changed == []


def test_same_input_same_output(tree):
    groups = [{"id": "g", "scope": "global", "rules": [numbering(), {"type": "pattern", "pattern": "{date}_{name}"}]}]
    first = rename_entries(tree, groups, today=TODAY)
    second = rename_entries(tree, groups, today=TODAY)
    assert first.to_list() == second.to_list()


def test_output_keeps_listing_order(tree):
    plan = rename_entries(tree, [{"id": "g", "scope": "global", "rules": [{"type": "uppercase"}]}])
    assert [item.original_path for item in plan.items] == [e["path"] for e in tree]


def test_accepts_entry_objects():
    plan = rename_entries([ArchiveEntry("a.txt", 1)], [{"id": "g", "rules": [{"type": "suffix", "text": "_x"}]}])
    assert finals(plan) == ["a_x.txt"]


# ============================================================================
# REFERENCE EXAMPLES
# ============================================================================

def test_extension_scope_folds_case():
    groups = [{"id": "g", "scope": "extension", "scopeValue": ".txt", "rules": [{"type": "lowercase"}]}]
    assert finals(rename_entries([{"path": "a.TXT"}], groups)) == ["a.txt"]


def test_directory_rename_propagates_to_files():
    entries = [{"path": "Photos/", "isDirectory": True}, {"path": "Photos/img.jpg"}]
    groups = [{"id": "g", "scope": "folders", "rules": [{"type": "prefix", "text": "new_"}]}]

    plan = rename_entries(entries, groups, preserve_top_level=False)
    assert finals(plan) == ["new_Photos/", "new_Photos/img.jpg"]

    # Top-level folders stay put by default
    assert finals(rename_entries(entries, groups)) == ["Photos/", "Photos/img.jpg"]


def test_numbering_counts_matching_files():
    entries = [{"path": "a.jpg"}, {"path": "b.jpg"}]
    groups = [{"id": "g", "scope": "global",
               "rules": [numbering(start=1, padding=3, separator="_", position="end")]}]
    assert finals(rename_entries(entries, groups)) == ["a_001.jpg", "b_002.jpg"]


# ============================================================================
# PROPAGATION AND COUNTERS
# ============================================================================

def test_nested_directories_inherit_ancestor_renames():
    entries = [
        {"path": "root/", "isDirectory": True},
        {"path": "root/a/", "isDirectory": True},
        {"path": "root/a/b/", "isDirectory": True},
        {"path": "root/a/b/file.txt"},
    ]
    groups = [{"id": "g", "scope": "folders", "rules": [{"type": "uppercase"}]}]
    assert finals(rename_entries(entries, groups)) == ["root/", "root/A/", "root/A/B/", "root/A/B/file.txt"]


def test_files_under_unlisted_directories_keep_parent():
    groups = [{"id": "g", "scope": "folders", "rules": [{"type": "uppercase"}]}]
    assert finals(rename_entries([{"path": "x/y/z.txt"}], groups)) == ["x/y/z.txt"]


def test_counter_is_shared_across_directories_and_files(tree):
    groups = [{"id": "g", "scope": "folder", "scopeValue": "Photos/", "rules": [numbering(separator="_")]}]
    plan = rename_entries(tree, groups)
    assert finals(plan) == [
        "Photos/",
        "Photos/Trip_1/",
        "Photos/Trip_1/a_2.jpg",
        "Photos/b_3.jpg",
        "readme.md",
    ]


def test_each_group_id_has_its_own_counter():
    entries = [{"path": "a.jpg"}, {"path": "b.png"}, {"path": "c.jpg"}]
    groups = [
        {"id": "jpg", "scope": "extension", "scopeValue": "jpg", "rules": [numbering()]},
        {"id": "png", "scope": "extension", "scopeValue": "png", "rules": [numbering()]},
    ]
    assert finals(rename_entries(entries, groups)) == ["a-1.jpg", "b-1.png", "c-2.jpg"]


def test_groups_sharing_an_id_share_a_counter():
    entries = [{"path": "a.jpg"}, {"path": "b.png"}, {"path": "c.jpg"}]
    groups = [
        {"id": "shared", "scope": "extension", "scopeValue": "jpg", "rules": [numbering()]},
        {"id": "shared", "scope": "extension", "scopeValue": "png", "rules": [numbering()]},
    ]
    assert finals(rename_entries(entries, groups)) == ["a-1.jpg", "b-2.png", "c-3.jpg"]


def test_groups_apply_in_order():
    groups = [
        {"id": "one", "rules": [{"type": "prefix", "text": "x_"}]},
        {"id": "two", "rules": [{"type": "uppercase"}]},
    ]
    assert finals(rename_entries([{"path": "a.txt"}], groups)) == ["X_A.txt"]


def test_first_listing_of_a_directory_wins():
    entries = [
        {"path": "a/", "isDirectory": True},
        {"path": "a/b/", "isDirectory": True},
        {"path": "a/b/", "isDirectory": True},
        {"path": "a/b/c.txt"},
    ]
    groups = [{"id": "g", "scope": "folders", "rules": [numbering()]}]
    assert finals(rename_entries(entries, groups)) == ["a/", "a/b-1/", "a/b-1/", "a/b-1/c.txt"]


def test_repeated_directory_uses_no_counter_value():
    entries = [
        {"path": "r/", "isDirectory": True},
        {"path": "r/a/", "isDirectory": True},
        {"path": "r/a/", "isDirectory": True},
        {"path": "r/b/", "isDirectory": True},
    ]
    groups = [{"id": "g", "scope": "folders", "rules": [numbering()]}]
    assert finals(rename_entries(entries, groups)) == ["r/", "r/a-1/", "r/a-1/", "r/b-2/"]


# ============================================================================
# MALFORMED INPUT
# ============================================================================

def test_traversal_segments_are_dropped():
    plan = rename_entries([{"path": "../evil/./x.txt"}], [])
    assert finals(plan) == ["evil/x.txt"]


def test_entries_without_path_are_excluded():
    plan = rename_entries([{"size": 3}, {"path": "a.txt"}, "junk"], [])
    assert finals(plan) == ["a.txt"]


def test_slashes_in_rule_output_never_create_directories():
    groups = [{"id": "g", "rules": [{"type": "replace", "find": "-", "replace": "/"}]}]
    assert finals(rename_entries([{"path": "a-b.txt"}], groups)) == ["b.txt"]


def test_empty_directory_name_falls_back_to_original():
    entries = [{"path": "P/", "isDirectory": True}, {"path": "P/Trip/", "isDirectory": True}]
    groups = [{"id": "g", "scope": "folders", "rules": [{"type": "replace", "find": "Trip", "replace": ""}]}]
    assert finals(rename_entries(entries, groups)) == ["P/", "P/Trip/"]


def test_invalid_regex_is_noted_once():
    entries = [{"path": "a.txt"}, {"path": "b.txt"}]
    groups = [{"id": "g", "rules": [{"type": "regex", "pattern": "[", "replace": ""}, {"type": "suffix", "text": "!"}]}]
    plan = rename_entries(entries, groups)
    assert finals(plan) == ["a!.txt", "b!.txt"]
    assert len(plan.notes) == 1


def test_malformed_group_is_noted():
    groups = [{"id": "x", "scope": "extension", "rules": [{"type": "lowercase"}]}]
    plan = rename_entries([{"path": "A.txt"}], groups)
    assert finals(plan) == ["A.txt"]
    assert any("Dropped" in note for note in plan.notes)


def test_legacy_payload():
    plan = rename_entries([{"path": "a.txt"}], {"rules": [{"type": "suffix", "text": "_v2"}]})
    assert finals(plan) == ["a_v2.txt"]


def test_date_placeholder_uses_run_date():
    groups = [{"id": "g", "rules": [{"type": "pattern", "pattern": "{date}_{name}"}]}]
    assert finals(rename_entries([{"path": "a.txt"}], groups, today=TODAY)) == ["2024-05-01_a.txt"]


# ============================================================================
# COLLISIONS
# ============================================================================

def test_rules_that_merge_names_are_reported():
    entries = [{"path": "docs/A.txt"}, {"path": "docs/a.txt"}]
    plan = rename_entries(entries, [{"id": "g", "rules": [{"type": "lowercase"}]}])

    conflicts = find_rename_collisions(plan)
    assert len(conflicts) == 1
    assert conflicts[0].type == "rename_collision"
    assert conflicts[0].directory == "docs"
    assert conflicts[0].conflicting_files == ["docs/A.txt", "docs/a.txt"]
    assert conflicts[0].result_name == "a.txt"

    errors = check_plan(plan)
    assert len(errors) == 1 and "docs/a.txt" in errors[0]


def test_case_only_differences_depend_on_mode():
    plan = rename_entries([{"path": "X.txt"}, {"path": "x.txt"}], [])
    conflicts = find_rename_collisions(plan, case_insensitive=True)
    assert [c.type for c in conflicts] == ["case_sensitivity"]
    assert conflicts[0].directory == "/"
    assert find_rename_collisions(plan, case_insensitive=False) == []


def test_distinct_destinations_are_clean(tree):
    plan = rename_entries(tree, [{"id": "g", "rules": [numbering()]}])
    assert check_plan(plan) == []
