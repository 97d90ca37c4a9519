"""Archive path decomposition."""

from ziprename.core.path_parts import (
    extension_of, join_path, path_segments, split_extension, split_path,
)


def test_split_file_path():
    parts = split_path("docs/guides/readme.md")
    assert parts.parent == "docs/guides"
    assert parts.base == "readme.md"
    assert parts.stem == "readme"
    assert parts.extension == ".md"
    assert parts.parent_name == "guides"
    assert parts.depth == 2
    assert not parts.is_top_level


def test_backslashes_are_separators():
    parts = split_path("a\\b\\c.tar.gz")
    assert parts.parent == "a/b"
    assert parts.stem == "c.tar"
    assert parts.extension == ".gz"


def test_leading_dot_is_not_an_extension():
    assert split_extension(".bashrc") == (".bashrc", "")
    assert split_extension(".env.local") == (".env", ".local")
    assert split_extension("Makefile") == ("Makefile", "")


def test_directory_keeps_whole_name_as_stem():
    parts = split_path("Photos/v1.2/", is_directory=True)
    assert parts.stem == "v1.2"
    assert parts.extension == ""
    assert parts.trailing_slash == "/"
    assert parts.parent == "Photos"


def test_top_level_file():
    parts = split_path("a.txt")
    assert parts.parent == ""
    assert parts.parent_name == ""
    assert parts.is_top_level


def test_path_segments_drop_traversal():
    assert path_segments("a/./../b//c") == ["a", "b", "c"]
    assert path_segments("/") == []


def test_join_path():
    assert join_path(["a", "b"], "/") == "a/b/"
    assert join_path([], "/") == ""
    assert extension_of("x/y.JPG") == ".JPG"
