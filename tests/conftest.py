"""Shared fixtures: small ZIP archives and JSON listings built in tmp_path."""

import json
import zipfile
from pathlib import Path

import pytest


def build_zip(path: Path, members) -> Path:
    """Write (name, data) pairs in order; names ending in "/" become directory entries."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members:
            zf.writestr(name, data)
    return path


@pytest.fixture
def photos_zip(tmp_path: Path) -> Path:
    """A nested archive with one top-level folder."""
    return build_zip(tmp_path / "photos.zip", [
        ("Photos/", b""),
        ("Photos/Trip/", b""),
        ("Photos/Trip/Beach Day.JPG", b"beach"),
        ("Photos/notes.txt", b"hello"),
    ])


@pytest.fixture
def listing_json(tmp_path: Path) -> Path:
    """A JSON listing with a case conflict at the root."""
    path = tmp_path / "listing.json"
    path.write_text(json.dumps([
        {"path": "File.txt", "size": 3},
        {"path": "file.txt", "size": 4},
    ]), encoding="utf-8")
    return path


@pytest.fixture
def rules_json(tmp_path: Path) -> Path:
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"ruleGroups": [
        {
            "id": "clean",
            "scope": "global",
            "rules": [
                {"type": "lowercase"},
                {"type": "replace", "find": " ", "replace": "-"},
            ],
        },
    ]}), encoding="utf-8")
    return path
