"""
Rule evaluation for drift signals.

Every function here is pure: it returns a new list and never mutates the
signals it is given. Malformed rule patterns never abort a run; the
offending rule is treated as non-matching for that signal and a warning is
reported.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Type, Union

from design_drift.core.config import DriftRuleFilter, EnforceRule, IgnoreRule, PromoteRule
from design_drift.core.drift_models import DriftSignal, Severity
from design_drift.core.utils import match_glob, strip_line_suffix

logger = logging.getLogger(__name__)

WarningCallback = Optional[Callable[[str], None]]
RuleLike = Union[DriftRuleFilter, Mapping[str, Any]]


def _warn(message: str, on_warning: WarningCallback) -> None:
    logger.warning(message)
    if on_warning is not None:
        on_warning(message)


def _coerce_rules(rules: Optional[Iterable[RuleLike]], model: Type[DriftRuleFilter]) -> List[DriftRuleFilter]:
    coerced = []
    for rule in rules or []:
        if isinstance(rule, DriftRuleFilter):
            coerced.append(rule)
        else:
            coerced.append(model.model_validate(dict(rule)))
    return coerced


def _regex_matches(pattern: str, text: str, label: str, on_warning: WarningCallback) -> bool:
    try:
        return re.search(pattern, text) is not None
    except re.error as exc:
        _warn(f'Invalid regex pattern "{pattern}" in {label} rule, skipping: {exc}', on_warning)
        return False


def rule_matches(signal: DriftSignal, rule: RuleLike, on_warning: WarningCallback = None) -> bool:
    """
    Check whether ``rule`` matches ``signal``.

    All populated dimensions must match. A rule with nothing populated
    never matches.
    """
    if not isinstance(rule, DriftRuleFilter):
        rule = DriftRuleFilter.model_validate(dict(rule))
    if not rule.has_dimensions():
        return False

    if rule.type is not None and rule.type != signal.type:
        return False

    if rule.severity is not None and rule.severity != signal.severity:
        return False

    if rule.file is not None:
        file_path = strip_line_suffix(signal.source.location)
        try:
            if not match_glob(file_path, rule.file):
                return False
        except (ValueError, re.error) as exc:
            _warn(f'Invalid glob pattern "{rule.file}" in file rule, skipping: {exc}', on_warning)
            return False

    if rule.component is not None:
        if signal.source.entity_type != "component":
            return False
        if not _regex_matches(rule.component, signal.source.entity_name, "component", on_warning):
            return False

    if rule.token is not None:
        if signal.source.entity_type != "token":
            return False
        if not _regex_matches(rule.token, signal.source.entity_name, "token", on_warning):
            return False

    if rule.value is not None:
        actual = signal.details.get("actual")
        text = "" if actual is None else str(actual)
        if not _regex_matches(rule.value, text, "value", on_warning):
            return False

    return True


def _first_match(signal: DriftSignal, rules: Sequence[DriftRuleFilter], on_warning: WarningCallback) -> Optional[DriftRuleFilter]:
    for rule in rules:
        if rule_matches(signal, rule, on_warning):
            return rule
    return None


def apply_ignore_rules(
    signals: Sequence[DriftSignal],
    rules: Optional[Iterable[RuleLike]],
    on_warning: WarningCallback = None,
) -> List[DriftSignal]:
    """Drop every signal matched by at least one ignore rule."""
    ignore_rules = _coerce_rules(rules, IgnoreRule)
    if not ignore_rules:
        return list(signals)
    kept = [s for s in signals if _first_match(s, ignore_rules, on_warning) is None]
    logger.debug("Ignore rules removed %d of %d signals", len(signals) - len(kept), len(signals))
    return kept


def apply_promote_rules(
    signals: Sequence[DriftSignal],
    rules: Optional[Iterable[RuleLike]],
    on_warning: WarningCallback = None,
) -> List[DriftSignal]:
    """
    Raise severities with promote rules.

    The first matching rule decides; later rules are not consulted even if
    they would promote further. A rule never lowers a severity.
    """
    promote_rules = _coerce_rules(rules, PromoteRule)
    if not promote_rules:
        return list(signals)

    result: List[DriftSignal] = []
    for signal in signals:
        rule = _first_match(signal, promote_rules, on_warning)
        if rule is not None and rule.to.rank > signal.severity.rank:
            result.append(signal.with_severity(rule.to))
        else:
            result.append(signal)
    return result


def apply_enforce_rules(
    signals: Sequence[DriftSignal],
    rules: Optional[Iterable[RuleLike]],
    on_warning: WarningCallback = None,
) -> List[DriftSignal]:
    """Force matching signals to critical."""
    enforce_rules = _coerce_rules(rules, EnforceRule)
    if not enforce_rules:
        return list(signals)

    result: List[DriftSignal] = []
    for signal in signals:
        rule = _first_match(signal, enforce_rules, on_warning)
        if rule is not None and signal.severity != Severity.CRITICAL:
            result.append(signal.with_severity(Severity.CRITICAL))
        else:
            result.append(signal)
    return result


def apply_severity_overrides(
    signals: Sequence[DriftSignal],
    overrides: Optional[Mapping[str, Union[Severity, str]]],
) -> List[DriftSignal]:
    """Replace the severity of every signal whose type has an override."""
    if not overrides:
        return list(signals)
    result: List[DriftSignal] = []
    for signal in signals:
        override = overrides.get(signal.type)
        result.append(signal.with_severity(override) if override else signal)
    return result


def filter_by_severity(signals: Sequence[DriftSignal], min_severity: Union[Severity, str]) -> List[DriftSignal]:
    min_rank = Severity(min_severity).rank
    return [s for s in signals if s.severity.rank >= min_rank]


def filter_by_type(signals: Sequence[DriftSignal], drift_type: str) -> List[DriftSignal]:
    return [s for s in signals if s.type == drift_type]


def filter_excluded_types(signals: Sequence[DriftSignal], excluded: Optional[Iterable[str]]) -> List[DriftSignal]:
    excluded_set = set(excluded or [])
    if not excluded_set:
        return list(signals)
    return [s for s in signals if s.type not in excluded_set]


def sort_by_severity(signals: Sequence[DriftSignal]) -> List[DriftSignal]:
    """Critical first; input order kept within a severity."""
    return sorted(signals, key=lambda s: -s.severity.rank)


def has_drifts_above_threshold(signals: Sequence[DriftSignal], fail_on: Union[Severity, str]) -> bool:
    if fail_on == "none":
        return False
    threshold = Severity(fail_on).rank
    return any(s.severity.rank >= threshold for s in signals)


def calculate_drift_summary(signals: Sequence[DriftSignal]) -> Dict[str, int]:
    counts = Counter(s.severity.value for s in signals)
    return {
        "total": len(signals),
        "critical": counts.get("critical", 0),
        "warning": counts.get("warning", 0),
        "info": counts.get("info", 0),
    }
