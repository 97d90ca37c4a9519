"""Command-line interface, driven through main(argv)."""

import json
import zipfile

from ziprename.cli import cli_interactive
from ziprename.cli.cli_entry import main

from conftest import build_zip


def test_list(photos_zip, capsys):
    assert main(["list", str(photos_zip)]) == 0
    out = capsys.readouterr().out
    assert "Found 4 entries" in out
    assert "Photos/Trip/Beach Day.JPG" in out


def test_analyze_json(listing_json, capsys):
    assert main(["analyze", str(listing_json), "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["severity"] == "critical"
    assert report["stats"]["totalFiles"] == 2


def test_analyze_text(listing_json, capsys):
    assert main(["analyze", str(listing_json)]) == 0
    out = capsys.readouterr().out
    assert "critical" in out
    assert "File.txt, file.txt" in out


def test_preview_template(photos_zip, capsys):
    assert main(["preview", str(photos_zip), "--template", "seo"]) == 0
    out = capsys.readouterr().out
    assert "Photos/Trip/beach-day.JPG" in out


def test_preview_json_with_rule_file(photos_zip, rules_json, capsys):
    assert main(["preview", str(photos_zip), "--rules", str(rules_json), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert len(data["files"]) == 4
    assert data["files"][2] == {
        "originalPath": "Photos/Trip/Beach Day.JPG",
        "finalPath": "Photos/Trip/beach-day.JPG",
    }
    assert data["errors"] == []


def test_rename_writes_output(photos_zip, rules_json, tmp_path, capsys):
    output = tmp_path / "clean.zip"
    assert main(["rename", str(photos_zip), "--rules", str(rules_json), "--output", str(output), "--yes"]) == 0
    with zipfile.ZipFile(output) as zf:
        assert "Photos/Trip/beach-day.JPG" in zf.namelist()
    assert "Written: 4" in capsys.readouterr().out


def test_rename_dry_run(photos_zip, rules_json, tmp_path):
    output = tmp_path / "clean.zip"
    assert main(["rename", str(photos_zip), "--rules", str(rules_json), "--output", str(output), "--dry-run"]) == 0
    assert not output.exists()


def test_rename_refuses_collisions(tmp_path, rules_json, capsys):
    archive = build_zip(tmp_path / "clash.zip", [("A.txt", b"1"), ("a.txt", b"2")])
    assert main(["rename", str(archive), "--rules", str(rules_json), "--yes"]) == 1
    assert "same destination" in capsys.readouterr().out
    assert not (tmp_path / "clash_renamed.zip").exists()


def test_rename_cancelled(photos_zip, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt="": "n")
    assert main(["rename", str(photos_zip), "--template", "seo"]) == 0
    assert "Cancelled" in capsys.readouterr().out


def test_errors_are_reported(tmp_path, photos_zip, capsys):
    assert main(["analyze", str(tmp_path / "missing.zip")]) == 1
    assert "Error:" in capsys.readouterr().out

    assert main(["--max-entries", "2", "list", str(photos_zip)]) == 1
    assert "limit is 2" in capsys.readouterr().out


def test_no_subcommand_starts_interactive_mode(monkeypatch, capsys):
    answers = iter(["x", "", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    monkeypatch.setattr(cli_interactive, "clear_screen", lambda: None)
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Invalid choice" in out
    assert "Goodbye!" in out
