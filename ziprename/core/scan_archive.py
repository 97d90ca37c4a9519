"""
scan_archive.py - Archive Listing Module

Reads the entry list of a ZIP archive (or a JSON listing) in container order
"""

from pathlib import Path
from typing import Callable, List, Optional
import json
import logging
import zipfile

from .models_archive import ArchiveEntry, parse_entries
from .path_parts import extension_of, normalize_path, path_segments
from .text_match import contains

logger = logging.getLogger(__name__)


def scan_archive(
    archive: Path,
    progress_callback: Optional[Callable[[str], None]] = None
) -> List[ArchiveEntry]:
    """
    List every entry of a ZIP archive, in listing order (never sorted)

    Args:
        archive: ZIP file
        progress_callback: Progress callback function

    Returns:
        Entry list

    Raises:
        ValueError: The file does not exist or is not a ZIP archive
    """
    archive = Path(archive)
    if not archive.is_file():
        raise ValueError(f"Archive does not exist: {archive}")
    if not zipfile.is_zipfile(archive):
        raise ValueError(f"Not a ZIP archive: {archive}")

    entries: List[ArchiveEntry] = []
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            if progress_callback:
                progress_callback(info.filename)
            entries.append(ArchiveEntry(
                path=normalize_path(info.filename),
                size=0 if info.is_dir() else info.file_size,
                is_directory=info.is_dir(),
            ))

    logger.debug("Scanned %d entries from %s", len(entries), archive)
    return entries


def load_listing(path: Path) -> List[ArchiveEntry]:
    """
    Load entries from a ZIP archive or a JSON listing

    A JSON listing is an array of {"path", "size", "isDirectory"} records,
    or an object with such an array under "files".

    Raises:
        ValueError: Unreadable listing
    """
    path = Path(path)
    if path.suffix.lower() != ".json":
        return scan_archive(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read listing {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("files", [])
    if not isinstance(data, list):
        raise ValueError(f"Listing must be an array of entries: {path}")
    return parse_entries(data)


def filter_entries(entries: List[ArchiveEntry], keyword: str = "", case_sensitive: bool = True) -> List[ArchiveEntry]:
    """Entries whose path contains keyword"""
    return [e for e in entries if contains(e.path, keyword, case_sensitive)]


def list_suffixes(entries: List[ArchiveEntry]) -> List[str]:
    """
    List all file suffixes in the archive

    Args:
        entries: Entry list

    Returns:
        Suffix list (deduplicated, lowercase, sorted)
    """
    suffixes = set()
    for entry in entries:
        if entry.is_directory:
            continue
        suffix = extension_of(entry.path)
        if suffix:
            suffixes.add(suffix.lower())
    return sorted(suffixes)


def list_folders(entries: List[ArchiveEntry], top_level_only: bool = True) -> List[str]:
    """
    List folder prefixes usable as a folder scope

    Folders implied by file paths count even when the archive does not list them.

    Args:
        entries: Entry list
        top_level_only: Only the first path segment

    Returns:
        Folder prefixes with trailing slash (deduplicated, sorted)
    """
    folders = set()
    for entry in entries:
        segments = path_segments(entry.path)
        dir_segments = segments if entry.is_directory else segments[:-1]
        if not dir_segments:
            continue
        if top_level_only:
            folders.add(dir_segments[0] + "/")
        else:
            for i in range(1, len(dir_segments) + 1):
                folders.add("/".join(dir_segments[:i]) + "/")
    return sorted(folders)
