"""Derive health metrics and suggestion context from filtered drift signals."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from design_drift.core.drift_config import (
    COMPONENT_FILE_EXTENSIONS,
    DS_LIBRARY_NAMES,
    DS_WITH_STYLING,
    HIGH_DENSITY_FILE_SIGNALS,
    UTILITY_FRAMEWORK_NAMES,
    VENDORED_COMPONENT_FILES,
)
from design_drift.core.drift_models import (
    DriftSignal,
    DriftType,
    FileIssue,
    HealthMetrics,
    Severity,
    TopValue,
)
from design_drift.core.utils import strip_line_suffix

_VENDORED_DIR = re.compile(r"/(ui|primitives|registry|ds)\b")
_SCRIPT_EXTENSION = re.compile(r"\.(tsx|jsx|ts|js)$")


@dataclass(frozen=True)
class SuggestionContext:
    top_hardcoded_color: Optional[TopValue] = None
    worst_file: Optional[FileIssue] = None
    unique_spacing_values: Optional[int] = None
    vendored_drift_count: int = 0
    high_density_file_count: int = 0


def is_vendored_file(file_path: str) -> bool:
    """True for copied-in UI kit files such as ``components/ui/dialog.tsx``."""
    basename = _SCRIPT_EXTENSION.sub("", file_path.rsplit("/", 1)[-1])
    if basename not in VENDORED_COMPONENT_FILES:
        return False
    return bool(_VENDORED_DIR.search(file_path)) or "/components/" in file_path


def is_component_file(file_path: str) -> bool:
    return any(file_path.endswith(ext) for ext in COMPONENT_FILE_EXTENSIONS)


def _values_after_colon(message: str) -> list:
    # Messages look like 'Component "X" has 3 hardcoded colors: #fff, #000, #333'
    idx = message.rfind(":")
    if idx == -1:
        return []
    return [v.strip() for v in message[idx + 1:].split(",") if v.strip()]


def compute_suggestion_context(signals: Sequence[DriftSignal]) -> SuggestionContext:
    color_counts: Counter = Counter()
    spacing_values = set()
    file_counts: Counter = Counter()
    vendored = 0

    for signal in signals:
        is_hardcoded = signal.type == DriftType.HARDCODED_VALUE.value
        if is_hardcoded and "color" in signal.message:
            for value in _values_after_colon(signal.message):
                if value.startswith("#") or value.startswith("rgb"):
                    color_counts[value] += 1
        if is_hardcoded and "size value" in signal.message:
            spacing_values.update(_values_after_colon(signal.message))

        file_path = strip_line_suffix(signal.source.location)
        if not file_path:
            continue
        if is_vendored_file(file_path):
            if is_hardcoded:
                vendored += 1
            continue
        if is_component_file(file_path):
            file_counts[file_path] += 1

    top_color = None
    if color_counts:
        value, count = color_counts.most_common(1)[0]
        top_color = TopValue(value=value, count=count)

    worst_file = None
    if file_counts:
        path, count = file_counts.most_common(1)[0]
        worst_file = FileIssue(path=path, issue_count=count)

    return SuggestionContext(
        top_hardcoded_color=top_color,
        worst_file=worst_file,
        unique_spacing_values=len(spacing_values) or None,
        vendored_drift_count=vendored,
        high_density_file_count=sum(1 for c in file_counts.values() if c >= HIGH_DENSITY_FILE_SIGNALS),
    )


def detect_framework_flags(framework_names: Iterable[str]) -> Tuple[bool, bool]:
    """Return (has_utility_framework, has_design_system_library)."""
    names = {name.lower() for name in framework_names}
    has_utility = bool(names & set(UTILITY_FRAMEWORK_NAMES)) or bool(names & set(DS_WITH_STYLING))
    has_library = bool(names & set(DS_LIBRARY_NAMES))
    return has_utility, has_library


def build_health_metrics(
    signals: Sequence[DriftSignal],
    component_count: int,
    token_count: int,
    detected_frameworks: Iterable[str] = (),
) -> HealthMetrics:
    frameworks = tuple(detected_frameworks)
    by_type = Counter(s.type for s in signals)
    has_utility, has_library = detect_framework_flags(frameworks)
    context = compute_suggestion_context(signals)

    return HealthMetrics(
        component_count=component_count,
        token_count=token_count,
        hardcoded_value_count=by_type[DriftType.HARDCODED_VALUE.value],
        unused_token_count=by_type[DriftType.UNUSED_TOKEN.value],
        naming_inconsistency_count=by_type[DriftType.NAMING_INCONSISTENCY.value],
        critical_count=sum(1 for s in signals if s.severity == Severity.CRITICAL),
        has_utility_framework=has_utility,
        has_design_system_library=has_library,
        total_drift_count=len(signals),
        unused_component_count=by_type[DriftType.UNUSED_COMPONENT.value],
        orphaned_component_count=by_type[DriftType.ORPHANED_COMPONENT.value],
        repeated_pattern_count=by_type[DriftType.REPEATED_PATTERN.value],
        semantic_mismatch_count=by_type[DriftType.SEMANTIC_MISMATCH.value],
        deprecated_pattern_count=by_type[DriftType.DEPRECATED_PATTERN.value],
        high_density_file_count=context.high_density_file_count,
        vendored_drift_count=context.vendored_drift_count,
        top_hardcoded_color=context.top_hardcoded_color,
        worst_file=context.worst_file,
        unique_spacing_values=context.unique_spacing_values,
        detected_frameworks=frameworks,
    )
