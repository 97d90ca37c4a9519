"""Rule records, rule groups and single-rule evaluation."""

import re

import pytest

from ziprename.core.models_rules import (
    InvalidRuleGroupError, KebabCaseRule, LowercaseRule, NoOpRule, NormalizeSpaceRule,
    NumberingRule, PatternRule, PrefixRule, RegexRule, RemoveSpecialRule, ReplaceRule,
    RuleGroup, Scope, SuffixRule, TrimRule, UppercaseRule, parse_rule, parse_rule_groups,
)
from ziprename.core.rule_eval import RuleContext, apply_rule, apply_rules


# ============================================================================
# PARSING
# ============================================================================

def test_unknown_rule_type_is_noop():
    rule = parse_rule({"type": "rot13"})
    assert isinstance(rule, NoOpRule)
    assert apply_rule(rule, "name", ".txt") == ("name", ".txt")


def test_missing_required_field_is_noop_with_note():
    notes = []
    rule = parse_rule({"type": "prefix"}, notes)
    assert isinstance(rule, NoOpRule)
    assert len(notes) == 1 and "prefix" in notes[0]


def test_numbering_defaults_and_bounds():
    rule = parse_rule({"type": "numbering"})
    assert rule == NumberingRule(start=1, padding=1, separator="-", position="end")

    rule = parse_rule({"type": "numbering", "start": 0, "padding": 0, "separator": "", "position": "start"})
    assert rule == NumberingRule(start=0, padding=1, separator="", position="start")


def test_replace_is_case_sensitive_by_default():
    assert parse_rule({"type": "replace", "find": "a"}).case_sensitive
    assert not parse_rule({"type": "replace", "find": "a", "caseSensitive": False}).case_sensitive


def test_legacy_rules_payload_becomes_default_group():
    groups = parse_rule_groups({"rules": [{"type": "lowercase"}]})
    assert len(groups) == 1
    assert groups[0].id == "default"
    assert groups[0].scope == Scope.GLOBAL
    assert groups[0].rules == [LowercaseRule()]


def test_group_defaults():
    groups = parse_rule_groups([
        {"id": "first", "rules": []},
        {"rules": [{"type": "uppercase"}]},
    ])
    assert [g.id for g in groups] == ["first", "group-1"]
    assert groups[1].scope == Scope.GLOBAL


def test_unusable_groups_are_dropped():
    notes = []
    groups = parse_rule_groups([
        {"id": "no-value", "scope": "extension", "rules": [{"type": "lowercase"}]},
        {"id": "bad-scope", "scope": "everywhere", "rules": []},
        {"id": "ok", "scope": "folder", "scopeValue": "Photos\\", "rules": []},
    ], notes)
    assert [g.id for g in groups] == ["ok"]
    assert groups[0].scope_value == "Photos/"
    assert len(notes) == 2


def test_payload_shapes():
    assert parse_rule_groups(None) == []
    assert parse_rule_groups({}) == []
    with pytest.raises(InvalidRuleGroupError):
        parse_rule_groups("lowercase")
    with pytest.raises(ValueError):
        RuleGroup(id="x", scope="extension")


def test_group_to_dict_uses_record_keys():
    group = RuleGroup(id="g", scope=Scope.GLOBAL, rules=[ReplaceRule("a", "b", False), NoOpRule("x")])
    assert group.to_dict() == {
        "id": "g",
        "scope": "global",
        "scopeValue": "",
        "exclude": False,
        "rules": [{"type": "replace", "find": "a", "replace": "b", "caseSensitive": False}],
    }


# ============================================================================
# EVALUATION
# ============================================================================

def test_replace_is_literal():
    assert apply_rule(ReplaceRule("a.b", "-"), "aXb a.b") == ("aXb -", "")
    assert apply_rule(ReplaceRule("(1)", "1"), "pic (1)") == ("pic 1", "")
    assert apply_rule(ReplaceRule("", "x"), "name") == ("name", "")


def test_replace_case_insensitive():
    rule = ReplaceRule("IMG", "photo\\1", case_sensitive=False)
    assert apply_rule(rule, "img_1 IMG") == ("photo\\1_1 photo\\1", "")


def test_prefix_suffix_touch_stem_only():
    assert apply_rule(PrefixRule("new_"), "a", ".txt") == ("new_a", ".txt")
    assert apply_rule(SuffixRule("_v2"), "a", ".txt") == ("a_v2", ".txt")


def test_case_rules_keep_extension_unless_folding():
    assert apply_rule(LowercaseRule(), "HELLO", ".TXT") == ("hello", ".TXT")
    assert apply_rule(UppercaseRule(), "hello", ".txt") == ("HELLO", ".txt")
    folding = RuleContext(fold_extension=True)
    assert apply_rule(LowercaseRule(), "HELLO", ".TXT", folding) == ("hello", ".txt")


def test_text_cleanup_rules():
    assert apply_rule(RemoveSpecialRule(), "my file (1)!")[0] == "my file 1"
    assert apply_rule(TrimRule(), "  a b  ")[0] == "a b"
    assert apply_rule(NormalizeSpaceRule(), "a   b\tc")[0] == "a b c"
    assert apply_rule(KebabCaseRule(), "MyHoliday photo_2")[0] == "my-holiday-photo-2"


def test_numbering():
    ctx = RuleContext(index=0)
    assert apply_rule(NumberingRule(start=1, padding=3, separator="_"), "a", ".jpg", ctx) == ("a_001", ".jpg")
    assert apply_rule(NumberingRule(padding=3, separator="_", position="start"), "a", "", ctx)[0] == "001_a"
    # Padding never truncates
    assert apply_rule(NumberingRule(padding=2), "a", "", RuleContext(index=122))[0] == "a-123"
    assert apply_rule(NumberingRule(start=0), "a", "", ctx)[0] == "a-0"


def test_pattern_placeholders():
    ctx = RuleContext(index=4, parent_name="Trip", depth=2, today="2024-05-01")
    rule = PatternRule("{parent}_{index}_{name}_{date}_{depth}")
    assert apply_rule(rule, "beach", ".jpg", ctx) == ("Trip_005_beach_2024-05-01_2", ".jpg")


def test_pattern_with_ext_owns_whole_name():
    assert apply_rule(PatternRule("{name}.{ext}.bak"), "beach", ".jpg") == ("beach.jpg.bak", "")


def test_pattern_substitutes_in_one_pass():
    assert apply_rule(PatternRule("{name}"), "{index}", ".txt") == ("{index}", ".txt")


def test_regex_rule():
    assert apply_rule(RegexRule(r"(\d+)", r"#\1"), "a1b22")[0] == "a#1b#22"
    assert apply_rule(RegexRule(r"\d", "", flags=""), "a1b2")[0] == "ab2"
    assert apply_rule(RegexRule("IMG", "pic", flags="gi"), "img_IMG")[0] == "pic_pic"


def test_invalid_regex_raises_from_apply_rule():
    with pytest.raises(re.error):
        apply_rule(RegexRule("(", "x"), "name")


def test_invalid_regex_is_skipped_once():
    notes = []
    rules = [RegexRule("(", "x"), SuffixRule("_ok")]
    assert apply_rules(rules, "a", ".txt", RuleContext(), notes) == ("a_ok", ".txt")
    apply_rules(rules, "b", ".txt", RuleContext(), notes)
    assert len(notes) == 1


def test_rules_run_in_order():
    rules = [PrefixRule("x_"), UppercaseRule(), SuffixRule("_y")]
    assert apply_rules(rules, "a", ".txt") == ("X_A_y", ".txt")
