"""
rule_eval.py - Rule Evaluation

Applies rename rules to one name. Rules only ever see the stem (and the
extension, which only the pattern rule and extension-scoped case rules touch);
the parent path is handled by the rename engine.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple, Type
import logging
import re

from .models_rules import (
    Rule, ReplaceRule, RegexRule, PrefixRule, SuffixRule,
    LowercaseRule, UppercaseRule, RemoveSpecialRule,
    TrimRule, NormalizeSpaceRule, KebabCaseRule,
    NumberingRule, PatternRule, NoOpRule,
)
from .text_match import (
    replace_text, regex_replace, remove_special_chars,
    normalize_space, to_kebab_case, format_number,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{(name|index|ext|parent|date|depth)\}")


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may read besides the name itself"""
    index: int = 0                  # Zero-based scoped counter value
    parent_name: str = ""           # Immediate parent segment
    depth: int = 0                  # Number of parent segments
    today: str = ""                 # ISO date, fixed for one run
    fold_extension: bool = False    # Case rules also fold the extension

    @property
    def date_text(self) -> str:
        return self.today or date.today().isoformat()


Name = Tuple[str, str]              # (stem, extension)


def _replace(rule: ReplaceRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return replace_text(stem, rule.find, rule.replace, rule.case_sensitive), ext


def _regex(rule: RegexRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    if not rule.pattern:
        return stem, ext
    return regex_replace(stem, rule.pattern, rule.replace, rule.flags), ext


def _prefix(rule: PrefixRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return rule.text + stem, ext


def _suffix(rule: SuffixRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return stem + rule.text, ext


def _lowercase(rule: LowercaseRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return stem.lower(), ext.lower() if ctx.fold_extension else ext


def _uppercase(rule: UppercaseRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return stem.upper(), ext.upper() if ctx.fold_extension else ext


def _remove_special(rule: RemoveSpecialRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return remove_special_chars(stem), ext


def _trim(rule: TrimRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return stem.strip(), ext


def _normalize_space(rule: NormalizeSpaceRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return normalize_space(stem), ext


def _kebab_case(rule: KebabCaseRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return to_kebab_case(stem), ext


def _numbering(rule: NumberingRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    num = format_number(ctx.index + rule.start, rule.padding)
    if rule.position == "start":
        return num + rule.separator + stem, ext
    return stem + rule.separator + num, ext


def _pattern(rule: PatternRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    if not rule.pattern:
        return stem, ext

    values = {
        "name": stem,
        "index": format_number(ctx.index + 1, 3),
        "ext": ext[1:] if ext.startswith(".") else ext,
        "parent": ctx.parent_name,
        "date": ctx.date_text,
        "depth": str(ctx.depth),
    }
    result = PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], rule.pattern)

    # {ext} in the template means the pattern owns the whole name
    return result, "" if rule.owns_extension else ext


def _noop(rule: NoOpRule, stem: str, ext: str, ctx: RuleContext) -> Name:
    return stem, ext


RULE_HANDLERS: Dict[Type[Rule], Callable[..., Name]] = {
    ReplaceRule: _replace,
    RegexRule: _regex,
    PrefixRule: _prefix,
    SuffixRule: _suffix,
    LowercaseRule: _lowercase,
    UppercaseRule: _uppercase,
    RemoveSpecialRule: _remove_special,
    TrimRule: _trim,
    NormalizeSpaceRule: _normalize_space,
    KebabCaseRule: _kebab_case,
    NumberingRule: _numbering,
    PatternRule: _pattern,
    NoOpRule: _noop,
}


def apply_rule(rule: Rule, stem: str, extension: str = "", ctx: Optional[RuleContext] = None) -> Name:
    """
    Apply a single rule

    Args:
        rule: Rule variant
        stem: Current stem
        extension: Current extension (with dot)
        ctx: Scoped index and path facts

    Returns:
        (stem, extension)

    Raises:
        re.error: A regex rule carries an invalid pattern
    """
    if ctx is None:
        ctx = RuleContext()

    handler = RULE_HANDLERS.get(type(rule))
    if handler is None:
        return stem, extension
    return handler(rule, stem, extension, ctx)


def apply_rules(
    rules: List[Rule],
    stem: str,
    extension: str = "",
    ctx: Optional[RuleContext] = None,
    notes: Optional[List[str]] = None
) -> Name:
    """
    Apply rules in order, each consuming the previous result

    A rule whose user-supplied pattern is invalid is skipped; the others still run.

    Args:
        rules: Ordered rules
        stem: Starting stem
        extension: Starting extension
        ctx: Scoped index and path facts
        notes: Optional list collecting messages for skipped rules

    Returns:
        (stem, extension)
    """
    for rule in rules:
        try:
            stem, extension = apply_rule(rule, stem, extension, ctx)
        except re.error as e:
            msg = f"Skipped {rule.type} rule: {e}"
            if notes is None or msg not in notes:
                logger.warning("Skipping %s rule with invalid pattern: %s", rule.type, e)
            if notes is not None and msg not in notes:
                notes.append(msg)
    return stem, extension
