"""Rule group scope matching."""

import pytest

from ziprename.core.models_archive import ArchiveEntry
from ziprename.core.models_rules import RuleGroup, Scope
from ziprename.core.scope_match import matches_scope, normalize_extension


FILE = ArchiveEntry("Photos/a.TXT", 3)
NESTED_DIR = ArchiveEntry("Photos/Trip/", is_directory=True)
TOP_DIR = ArchiveEntry("Photos/", is_directory=True)
TOP_FILE = ArchiveEntry("readme.md", 1)


def group(scope, value="", exclude=False):
    return RuleGroup(id="g", scope=scope, scope_value=value, exclude=exclude)


def test_global_matches_files_only():
    assert matches_scope(FILE, group(Scope.GLOBAL))
    assert matches_scope(TOP_FILE, group(Scope.GLOBAL))
    assert not matches_scope(NESTED_DIR, group(Scope.GLOBAL))


def test_folders_matches_directories_only():
    assert matches_scope(NESTED_DIR, group(Scope.FOLDERS))
    assert not matches_scope(FILE, group(Scope.FOLDERS))


@pytest.mark.parametrize("value", [".txt", "txt", ".TXT", " TXT "])
def test_extension_is_case_insensitive(value):
    assert matches_scope(FILE, group(Scope.EXTENSION, value))


def test_extension_exclude_inverts_file_match():
    assert not matches_scope(FILE, group(Scope.EXTENSION, ".txt", exclude=True))
    assert matches_scope(FILE, group(Scope.EXTENSION, ".jpg", exclude=True))


def test_extension_never_matches_directories():
    assert not matches_scope(NESTED_DIR, group(Scope.EXTENSION, ".jpg"))
    assert not matches_scope(NESTED_DIR, group(Scope.EXTENSION, ".jpg", exclude=True))


def test_folder_prefix_matches_files_and_directories():
    scope = group(Scope.FOLDER, "Photos/")
    assert matches_scope(FILE, scope)
    assert matches_scope(NESTED_DIR, scope)
    assert not matches_scope(ArchiveEntry("Other/a.txt"), scope)


def test_top_level_directories_are_preserved():
    assert not matches_scope(TOP_DIR, group(Scope.FOLDERS))
    assert matches_scope(TOP_DIR, group(Scope.FOLDERS), preserve_top_level=False)


def test_normalize_extension():
    assert normalize_extension("JPG") == ".jpg"
    assert normalize_extension("") == ""
