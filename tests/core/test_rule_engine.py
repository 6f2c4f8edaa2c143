from __future__ import annotations

from design_drift.core.config import EnforceRule, IgnoreRule, PromoteRule
from design_drift.core.drift_models import Severity
from design_drift.core.rule_engine import (
    apply_enforce_rules,
    apply_ignore_rules,
    apply_promote_rules,
    apply_severity_overrides,
    calculate_drift_summary,
    filter_by_severity,
    filter_by_type,
    filter_excluded_types,
    has_drifts_above_threshold,
    rule_matches,
    sort_by_severity,
)


# --- matching ---------------------------------------------------------------

def test_rule_without_dimensions_matches_nothing(make_signal) -> None:
    signal = make_signal()
    assert rule_matches(signal, IgnoreRule()) is False
    assert rule_matches(signal, {"reason": "only a reason"}) is False


def test_all_populated_dimensions_must_match(make_signal) -> None:
    signal = make_signal(type="hardcoded-value", location="src/icons/Arrow.tsx:4")
    assert rule_matches(signal, {"type": "hardcoded-value", "file": "src/icons/**"})
    assert not rule_matches(signal, {"type": "hardcoded-value", "file": "src/components/**"})
    assert not rule_matches(signal, {"type": "unused-token", "file": "src/icons/**"})


def test_severity_dimension_is_exact(make_signal) -> None:
    signal = make_signal(severity="info")
    assert rule_matches(signal, {"severity": "info"})
    assert not rule_matches(signal, {"severity": "warning"})


def test_file_glob_ignores_line_suffix(make_signal) -> None:
    signal = make_signal(location="src/components/Button.test.tsx:120")
    assert rule_matches(signal, {"file": "**/*.test.tsx"})


def test_value_regex_tests_stringified_actual(make_signal) -> None:
    assert rule_matches(make_signal(actual=16), {"value": "^16$"})
    assert rule_matches(make_signal(actual=None), {"value": "^$"})


def test_invalid_regex_is_non_matching_and_warns(make_signal) -> None:
    warnings = []
    signal = make_signal(entity_name="IconArrow")
    assert rule_matches(signal, {"component": "[unclosed"}, warnings.append) is False
    assert len(warnings) == 1
    assert "[unclosed" in warnings[0]


def test_invalid_glob_is_non_matching_and_warns(make_signal) -> None:
    warnings = []
    assert rule_matches(make_signal(), {"file": "src/[abc"}, warnings.append) is False
    assert warnings


# --- ignore -----------------------------------------------------------------

def test_ignore_by_type_removes_signal(make_signal) -> None:
    signal = make_signal(type="naming-inconsistency")
    assert apply_ignore_rules([signal], [{"type": signal.type}]) == []


def test_ignore_with_no_rules_is_identity(make_signal) -> None:
    signals = [make_signal(id="a"), make_signal(id="b")]
    result = apply_ignore_rules(signals, [])
    assert result == signals
    assert result is not signals


def test_ignore_by_file_glob(make_signal) -> None:
    signals = [
        make_signal(id="icon", location="src/icons/ArrowIcon.tsx"),
        make_signal(id="button", location="src/components/Button.tsx"),
    ]
    result = apply_ignore_rules(signals, [{"file": "src/icons/**"}])
    assert [s.id for s in result] == ["button"]


def test_component_rule_skips_token_entities(make_signal) -> None:
    signals = [
        make_signal(id="token", entity_type="token", entity_name="IconColor"),
        make_signal(id="component", entity_type="component", entity_name="IconArrow"),
    ]
    result = apply_ignore_rules(signals, [{"component": "^Icon"}])
    assert [s.id for s in result] == ["token"]


def test_token_rule_skips_component_entities(make_signal) -> None:
    signals = [
        make_signal(id="component", entity_type="component", entity_name="LegacyButton"),
        make_signal(id="token", entity_type="token", entity_name="legacy-spacing"),
    ]
    result = apply_ignore_rules(signals, [{"token": "legacy"}])
    assert [s.id for s in result] == ["component"]


def test_ignore_rules_are_ored(make_signal) -> None:
    signals = [
        make_signal(id="black", actual="#000000"),
        make_signal(id="red", actual="#ff0000"),
        make_signal(id="px", actual="16px"),
    ]
    rules = [IgnoreRule(value="#000000"), IgnoreRule(value=r"\d+px")]
    assert [s.id for s in apply_ignore_rules(signals, rules)] == ["red"]
    assert [s.id for s in apply_ignore_rules(signals, list(reversed(rules)))] == ["red"]


def test_bad_ignore_rule_does_not_stop_other_rules(make_signal) -> None:
    warnings = []
    signals = [make_signal(id="a", entity_name="IconArrow"), make_signal(id="b", entity_name="Card")]
    rules = [{"component": "(("}, {"component": "^Icon"}]
    result = apply_ignore_rules(signals, rules, warnings.append)
    assert [s.id for s in result] == ["b"]
    assert warnings


# --- promote / enforce -------------------------------------------------------

def test_promote_first_match_wins(make_signal) -> None:
    signal = make_signal(type="x", severity="info")
    rules = [
        {"type": "x", "to": "warning"},
        {"type": "x", "to": "critical"},
    ]
    [result] = apply_promote_rules([signal], rules)
    assert result.severity == Severity.WARNING


def test_promote_never_lowers_severity(make_signal) -> None:
    signal = make_signal(severity="critical")
    [result] = apply_promote_rules([signal], [PromoteRule(type="hardcoded-value", to=Severity.INFO)])
    assert result.severity == Severity.CRITICAL


def test_promote_leaves_unmatched_signals_and_inputs_untouched(make_signal) -> None:
    matched = make_signal(id="m", entity_name="Button", severity="info")
    other = make_signal(id="o", entity_name="Card", severity="info")
    result = apply_promote_rules([matched, other], [PromoteRule(component="^Button$", to=Severity.CRITICAL)])
    assert [s.severity for s in result] == [Severity.CRITICAL, Severity.INFO]
    assert matched.severity == Severity.INFO


def test_enforce_sets_critical(make_signal) -> None:
    signals = [make_signal(id="a", type="accessibility-issue", severity="info"), make_signal(id="b")]
    result = apply_enforce_rules(signals, [EnforceRule(type="accessibility-issue", reason="a11y")])
    assert [s.severity for s in result] == [Severity.CRITICAL, Severity.WARNING]


def test_enforce_with_empty_rules_is_identity(make_signal) -> None:
    signals = [make_signal()]
    assert apply_enforce_rules(signals, []) == signals


# --- overrides and filters ---------------------------------------------------

def test_severity_overrides_replace_outright(make_signal) -> None:
    signals = [
        make_signal(id="n", type="naming-inconsistency", severity="critical"),
        make_signal(id="h", type="hardcoded-value", severity="warning"),
    ]
    result = apply_severity_overrides(signals, {"naming-inconsistency": "info"})
    assert [s.severity for s in result] == [Severity.INFO, Severity.WARNING]


def test_filters(make_signal) -> None:
    signals = [
        make_signal(id="i", severity="info", type="unused-token"),
        make_signal(id="w", severity="warning"),
        make_signal(id="c", severity="critical", type="accessibility-issue"),
    ]
    assert [s.id for s in filter_by_severity(signals, "warning")] == ["w", "c"]
    assert [s.id for s in filter_by_type(signals, "unused-token")] == ["i"]
    assert [s.id for s in filter_excluded_types(signals, ["unused-token"])] == ["w", "c"]


def test_sort_summary_and_threshold(make_signal) -> None:
    signals = [
        make_signal(id="i", severity="info"),
        make_signal(id="c", severity="critical"),
        make_signal(id="w", severity="warning"),
    ]
    assert [s.id for s in sort_by_severity(signals)] == ["c", "w", "i"]
    assert calculate_drift_summary(signals) == {"total": 3, "critical": 1, "warning": 1, "info": 1}
    assert has_drifts_above_threshold(signals, "critical")
    assert not has_drifts_above_threshold(signals[:1], "warning")
    assert not has_drifts_above_threshold(signals, "none")
