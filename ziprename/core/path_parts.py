"""
path_parts.py - Archive Path Decomposition

Archive paths are plain strings, never filesystem paths: "/" separated,
trailing slash for directories.
"""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class PathParts:
    """Pieces of one archive path"""
    parent: str                     # Everything before the last "/" ("" at the root)
    base: str                       # Last segment, without trailing slash
    stem: str                       # Base without extension (whole base for directories)
    extension: str                  # Including the dot, "" if none
    trailing_slash: str = ""        # "/" for directories that had one

    @property
    def parent_segments(self) -> List[str]:
        return path_segments(self.parent)

    @property
    def parent_name(self) -> str:
        """Immediate parent segment name ("" if none)"""
        segments = self.parent_segments
        return segments[-1] if segments else ""

    @property
    def depth(self) -> int:
        """Number of parent path segments"""
        return len(self.parent_segments)

    @property
    def is_top_level(self) -> bool:
        return not self.parent_segments


def normalize_path(path: str) -> str:
    """Use "/" as the only separator"""
    return path.replace("\\", "/")


def path_segments(path: str) -> List[str]:
    """
    Split a path into segments, dropping empty, "." and ".." segments

    Args:
        path: Archive path

    Returns:
        Segment list
    """
    return [p for p in normalize_path(path).split("/") if p and p not in (".", "..")]


def split_extension(base: str) -> Tuple[str, str]:
    """
    Split a file name at its last dot

    A dot at position 0 is part of the stem (".bashrc" has no extension).

    Returns:
        (stem, extension)
    """
    dot = base.rfind(".")
    if dot <= 0:
        return base, ""
    return base[:dot], base[dot:]


def split_path(path: str, is_directory: bool = False) -> PathParts:
    """
    Decompose an archive path

    Args:
        path: Archive path
        is_directory: Directories keep their whole base name as stem

    Returns:
        Path parts
    """
    path = normalize_path(path)

    trailing = ""
    if is_directory and path.endswith("/"):
        trailing = "/"
        path = path.rstrip("/")

    slash = path.rfind("/")
    parent, base = (path[:slash], path[slash + 1:]) if slash != -1 else ("", path)

    if is_directory:
        stem, extension = base, ""
    else:
        stem, extension = split_extension(base)

    return PathParts(parent=parent, base=base, stem=stem, extension=extension, trailing_slash=trailing)


def extension_of(path: str) -> str:
    """Extension of a file path ("" if none)"""
    return split_path(path).extension


def join_path(segments: List[str], trailing_slash: str = "") -> str:
    """Join segments back into an archive path"""
    joined = "/".join(segments)
    return joined + trailing_slash if joined else ""
