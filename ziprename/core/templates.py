"""
templates.py - Rule Group Sources

Built-in templates and JSON rule files
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import copy
import json

from .models_rules import RuleGroup, parse_rule_groups


def _global(*rules: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [{"id": "template", "scope": "global", "scopeValue": "", "exclude": False, "rules": list(rules)}]


TEMPLATES: Dict[str, List[Dict[str, Any]]] = {
    # Lowercase, dash-separated, no special characters
    "seo": _global(
        {"type": "lowercase"},
        {"type": "replace", "find": " ", "replace": "-"},
        {"type": "remove_special"},
    ),
    "photo": _global(
        {"type": "prefix", "text": "2024_"},
        {"type": "numbering", "start": 1, "padding": 3, "separator": "_", "position": "end"},
    ),
    "cms": _global(
        {"type": "lowercase"},
        {"type": "replace", "find": " ", "replace": "-"},
        {"type": "remove_special"},
    ),
    "code": _global(
        {"type": "prefix", "text": "asset_"},
        {"type": "lowercase"},
        {"type": "replace", "find": " ", "replace": "_"},
    ),
    "print": _global(
        {"type": "pattern", "pattern": "{parent}_{index}_{name}"},
    ),
}


def template_names() -> List[str]:
    return sorted(TEMPLATES)


def template_records(name: str) -> List[Dict[str, Any]]:
    """
    Rule group records of a template (a copy, safe to edit)

    Raises:
        ValueError: Unknown template
    """
    if name not in TEMPLATES:
        raise ValueError(f"Unknown template: {name} (available: {', '.join(template_names())})")
    return copy.deepcopy(TEMPLATES[name])


def load_template(name: str) -> List[RuleGroup]:
    """Rule groups of a template"""
    return parse_rule_groups(template_records(name))


def load_rule_file(path: Path, notes: Optional[List[str]] = None) -> List[RuleGroup]:
    """
    Load rule groups from a JSON file

    The file holds a list of group records, {"ruleGroups": [...]}, or the
    legacy {"rules": [...]} shape.

    Args:
        path: JSON file
        notes: Optional list collecting messages for dropped groups and skipped rules

    Raises:
        ValueError: Unreadable file
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read rule file {path}: {e}") from e
    return parse_rule_groups(data, notes)
