"""
models_rules.py - Rename Rule Definitions

Contains:
- Scope: Which entries a rule group touches
- Rule variants: One dataclass per rule type
- RuleGroup: Scoped, ordered list of rules
- parse_rule / parse_rule_groups: Build the above from JSON-shaped records
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type
import logging

logger = logging.getLogger(__name__)


class InvalidRuleError(ValueError):
    """A rule record is missing a field or carries an unusable value"""


class InvalidRuleGroupError(ValueError):
    """A rule group record cannot be used at all"""


class Scope(Enum):
    """Rule group scope enumeration"""
    GLOBAL = "global"          # All files
    FOLDERS = "folders"        # All directories
    EXTENSION = "extension"    # Files with one extension (or all but one, with exclude)
    FOLDER = "folder"          # Anything under one path prefix


def _text(record: Dict[str, Any], key: str, required: bool = False, default: str = "") -> str:
    value = record.get(key)
    if value is None:
        if required:
            raise InvalidRuleError(f"'{record.get('type')}' rule requires '{key}'")
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise InvalidRuleError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _int(record: Dict[str, Any], key: str, default: int) -> int:
    value = record.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidRuleError(f"'{key}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRuleError(f"'{key}' must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class Rule:
    """Base class of all rule variants"""
    type: ClassVar[str] = ""

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Rule":
        return cls()


@dataclass(frozen=True)
class ReplaceRule(Rule):
    """Literal substitution of every occurrence of find"""
    type: ClassVar[str] = "replace"
    find: str = ""
    replace: str = ""
    case_sensitive: bool = True

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "ReplaceRule":
        return cls(
            find=_text(record, "find", required=True),
            replace=_text(record, "replace"),
            case_sensitive=bool(record.get("caseSensitive", True)),
        )


@dataclass(frozen=True)
class RegexRule(Rule):
    """User-supplied regular expression substitution"""
    type: ClassVar[str] = "regex"
    pattern: str = ""
    replace: str = ""
    flags: str = "g"

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "RegexRule":
        return cls(
            pattern=_text(record, "pattern", required=True),
            replace=_text(record, "replace"),
            flags=_text(record, "flags", default="g"),
        )


@dataclass(frozen=True)
class PrefixRule(Rule):
    type: ClassVar[str] = "prefix"
    text: str = ""

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "PrefixRule":
        return cls(text=_text(record, "text", required=True))


@dataclass(frozen=True)
class SuffixRule(Rule):
    type: ClassVar[str] = "suffix"
    text: str = ""

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "SuffixRule":
        return cls(text=_text(record, "text", required=True))


@dataclass(frozen=True)
class LowercaseRule(Rule):
    type: ClassVar[str] = "lowercase"


@dataclass(frozen=True)
class UppercaseRule(Rule):
    type: ClassVar[str] = "uppercase"


@dataclass(frozen=True)
class RemoveSpecialRule(Rule):
    type: ClassVar[str] = "remove_special"


@dataclass(frozen=True)
class TrimRule(Rule):
    type: ClassVar[str] = "trim"


@dataclass(frozen=True)
class NormalizeSpaceRule(Rule):
    type: ClassVar[str] = "normalize_space"


@dataclass(frozen=True)
class KebabCaseRule(Rule):
    type: ClassVar[str] = "kebab_case"


@dataclass(frozen=True)
class NumberingRule(Rule):
    """Scoped sequence number at the start or end of the stem"""
    type: ClassVar[str] = "numbering"
    start: int = 1
    padding: int = 1
    separator: str = "-"
    position: str = "end"           # "start" or "end"

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "NumberingRule":
        position = record.get("position")
        return cls(
            start=_int(record, "start", 1),
            padding=max(_int(record, "padding", 1), 1),
            separator=_text(record, "separator", default="-"),
            position="start" if position == "start" else "end",
        )


@dataclass(frozen=True)
class PatternRule(Rule):
    """Template that replaces the whole stem ({name}, {index}, {ext}, {parent}, {date}, {depth})"""
    type: ClassVar[str] = "pattern"
    pattern: str = ""

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "PatternRule":
        return cls(pattern=_text(record, "pattern", required=True))

    @property
    def owns_extension(self) -> bool:
        return "{ext}" in self.pattern


@dataclass(frozen=True)
class NoOpRule(Rule):
    """Stand-in for an unknown or malformed rule record"""
    type: ClassVar[str] = "noop"
    kind: str = ""
    reason: str = ""


RULE_TYPES: Dict[str, Type[Rule]] = {
    cls.type: cls
    for cls in (
        ReplaceRule, RegexRule, PrefixRule, SuffixRule,
        LowercaseRule, UppercaseRule, RemoveSpecialRule,
        TrimRule, NormalizeSpaceRule, KebabCaseRule,
        NumberingRule, PatternRule,
    )
}


def parse_rule(record: Any, notes: Optional[List[str]] = None) -> Rule:
    """
    Build a rule from a record; never raises

    Unknown types and malformed records become NoOpRule.

    Args:
        record: {"type": ..., **fields}
        notes: Optional list collecting a message for every NoOpRule

    Returns:
        Rule variant
    """
    if isinstance(record, Rule):
        return record

    kind = record.get("type") if isinstance(record, dict) else None
    rule_cls = RULE_TYPES.get(kind) if isinstance(kind, str) else None
    if rule_cls is None:
        # Unknown types are silent no-ops
        logger.debug("Unknown rule type: %r", kind)
        return NoOpRule(kind=str(kind), reason="unknown rule type")

    try:
        return rule_cls.from_dict(record)
    except InvalidRuleError as e:
        logger.warning("Skipping malformed %s rule: %s", kind, e)
        if notes is not None:
            notes.append(f"Skipped {kind} rule: {e}")
        return NoOpRule(kind=kind, reason=str(e))


@dataclass
class RuleGroup:
    """Scoped, ordered list of rules sharing one counter"""
    id: str
    scope: Scope = Scope.GLOBAL
    scope_value: str = ""
    exclude: bool = False           # Inverts the extension match only
    rules: List[Rule] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.scope, Scope):
            try:
                self.scope = Scope(self.scope)
            except ValueError:
                raise InvalidRuleGroupError(f"Unknown scope: {self.scope!r}") from None
        if self.scope in (Scope.EXTENSION, Scope.FOLDER) and not self.scope_value:
            raise InvalidRuleGroupError(f"Scope '{self.scope.value}' requires a scope value")

    @classmethod
    def from_dict(cls, record: Dict[str, Any], position: int = 0,
                  notes: Optional[List[str]] = None) -> "RuleGroup":
        """
        Create RuleGroup from a record

        Args:
            record: {"id", "scope", "scopeValue", "exclude", "rules"}
            position: Index of the group, used as id when the record has none
            notes: Optional list collecting messages for skipped rules

        Raises:
            InvalidRuleGroupError: The group cannot be used
        """
        if not isinstance(record, dict):
            raise InvalidRuleGroupError("Rule group must be an object")

        rules = record.get("rules", [])
        if not isinstance(rules, list):
            raise InvalidRuleGroupError("'rules' must be a list")

        group_id = record.get("id")
        if group_id is None or group_id == "":
            group_id = f"group-{position}"

        scope_value = record.get("scopeValue") or ""
        if not isinstance(scope_value, str):
            raise InvalidRuleGroupError("'scopeValue' must be a string")

        return cls(
            id=str(group_id),
            scope=record.get("scope") or Scope.GLOBAL,
            scope_value=scope_value.replace("\\", "/"),
            exclude=bool(record.get("exclude", False)),
            rules=[parse_rule(r, notes) for r in rules],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "scope": self.scope.value,
            "scopeValue": self.scope_value,
            "exclude": self.exclude,
            "rules": [rule_to_dict(r) for r in self.rules if not isinstance(r, NoOpRule)],
        }


_RULE_KEYS: Dict[str, str] = {"case_sensitive": "caseSensitive"}


def rule_to_dict(rule: Rule) -> Dict[str, Any]:
    """Serialize a rule back to its record shape"""
    data: Dict[str, Any] = {"type": rule.type}
    for name, value in vars(rule).items():
        data[_RULE_KEYS.get(name, name)] = value
    return data


def parse_rule_groups(data: Any, notes: Optional[List[str]] = None) -> List[RuleGroup]:
    """
    Build rule groups from a request payload

    Accepts a list of group records, {"ruleGroups": [...]}, or the legacy
    {"rules": [...]} shape, which becomes one global group with id "default".
    Unusable groups are dropped.

    Args:
        data: Payload
        notes: Optional list collecting messages for dropped groups and skipped rules

    Returns:
        Rule groups in payload order
    """
    if notes is None:
        notes = []

    if data is None:
        return []

    if isinstance(data, dict):
        records = data.get("ruleGroups")
        if not records and isinstance(data.get("rules"), list) and data["rules"]:
            records = [{"id": "default", "scope": "global", "rules": data["rules"]}]
        data = records or []

    if not isinstance(data, list):
        raise InvalidRuleGroupError("Rule groups must be a list")

    groups: List[RuleGroup] = []
    for i, record in enumerate(data):
        if isinstance(record, RuleGroup):
            groups.append(record)
            continue
        try:
            groups.append(RuleGroup.from_dict(record, position=i, notes=notes))
        except InvalidRuleGroupError as e:
            logger.warning("Dropping rule group #%d: %s", i, e)
            notes.append(f"Dropped rule group #{i}: {e}")
    return groups
