"""
Group drift signals into actionable issues.

Each signal is claimed by the first strategy, in priority order, that can
produce a key for it. Signals sharing a (strategy, key) pair form a
candidate group; candidates smaller than ``min_group_size`` are left
ungrouped and are not offered to lower-priority strategies.
"""

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from design_drift.core.drift_config import DEFAULT_AGGREGATION_STRATEGIES, DEFAULT_MIN_GROUP_SIZE
from design_drift.core.drift_models import (
    AggregationResult,
    DriftGroup,
    DriftSignal,
    DriftType,
    GroupingKey,
)
from design_drift.core.utils import ancestor_directories, match_glob, parent_directory, strip_line_suffix

logger = logging.getLogger(__name__)

_SUGGESTION_TOKEN = re.compile(r"→\s*(.+?)\s+\(")
_SUGGESTION_TOKEN_BARE = re.compile(r"→\s*([^\s(]+)")


class BuiltInStrategy(str, Enum):
    VALUE = "value"
    SUGGESTION = "suggestion"
    PATH = "path"
    ENTITY = "entity"


@dataclass(frozen=True)
class CustomStrategy:
    """Caller-supplied grouping strategy."""
    get_key: Callable[[DriftSignal], Optional[str]]
    summarize: Callable[[List[DriftSignal], str], str]
    name: str = "custom"


StrategySpec = Union[str, BuiltInStrategy, CustomStrategy]


def _distinct_types(signals: Sequence[DriftSignal]) -> List[str]:
    return list(dict.fromkeys(s.type for s in signals))


def value_key(signal: DriftSignal) -> Optional[str]:
    if signal.type != DriftType.HARDCODED_VALUE.value:
        return None
    actual = signal.details.get("actual")
    if actual is None:
        return None
    return str(actual)


def suggestion_key(signal: DriftSignal) -> Optional[str]:
    suggestions = signal.details.get("tokenSuggestions") or []
    if not suggestions:
        return None
    first = str(suggestions[0])
    match = _SUGGESTION_TOKEN.search(first) or _SUGGESTION_TOKEN_BARE.search(first)
    if not match:
        return None
    return match.group(1).strip() or None


def path_key(signal: DriftSignal, patterns: Sequence[str]) -> Optional[str]:
    file_path = strip_line_suffix(signal.source.location)
    directory = parent_directory(file_path)
    if directory is None:
        return None
    candidates = [file_path] + ancestor_directories(file_path)
    for pattern in patterns:
        try:
            if any(match_glob(candidate, pattern) for candidate in candidates):
                return pattern
        except (ValueError, re.error) as exc:
            logger.warning('Invalid path pattern "%s" for aggregation, skipping: %s', pattern, exc)
    return directory


def entity_key(signal: DriftSignal) -> Optional[str]:
    return signal.source.entity_id or None


def summarize_value(signals: List[DriftSignal], key: str) -> str:
    return f"{len(signals)} occurrences of {key}"


def summarize_suggestion(signals: List[DriftSignal], key: str) -> str:
    return f"{len(signals)} issues fixable by using {key}"


def summarize_path(signals: List[DriftSignal], key: str) -> str:
    path = key.rstrip("/")
    return f"{len(signals)} issues in {path}/ ({', '.join(_distinct_types(signals))})"


def summarize_entity(signals: List[DriftSignal], key: str) -> str:
    entity_name = signals[0].source.entity_name if signals else key
    types = _distinct_types(signals)
    if len(types) == 1:
        return f"{len(signals)} {types[0]} issues in {entity_name}"
    return f"{len(signals)} issues in {entity_name} ({', '.join(types)})"


@dataclass(frozen=True)
class _ResolvedStrategy:
    name: str
    get_key: Callable[[DriftSignal], Optional[str]]
    summarize: Callable[[List[DriftSignal], str], str]


def count_by_severity(signals: Sequence[DriftSignal]) -> Dict[str, int]:
    counts = {"critical": 0, "warning": 0, "info": 0}
    for signal in signals:
        counts[signal.severity.value] += 1
    return counts


def pick_representative(signals: Sequence[DriftSignal]) -> DriftSignal:
    """Highest severity wins; the earliest signal wins a tie."""
    best = signals[0]
    for signal in signals[1:]:
        if signal.severity.rank > best.severity.rank:
            best = signal
    return best


def group_id(strategy: str, key: str) -> str:
    digest = hashlib.sha1(f"{strategy}:{key}".encode("utf-8")).hexdigest()[:12]
    return f"group:{strategy}:{digest}"


@dataclass
class DriftAggregator:
    strategies: Optional[List[StrategySpec]] = None
    min_group_size: int = DEFAULT_MIN_GROUP_SIZE
    path_patterns: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.min_group_size < 1:
            raise ValueError("min_group_size must be at least 1")
        specs = self.strategies if self.strategies is not None else list(DEFAULT_AGGREGATION_STRATEGIES)
        self._resolved = [self._resolve_strategy(spec) for spec in specs]

    def _resolve_strategy(self, spec: StrategySpec) -> _ResolvedStrategy:
        if isinstance(spec, CustomStrategy):
            return _ResolvedStrategy(spec.name, spec.get_key, spec.summarize)

        try:
            builtin = BuiltInStrategy(spec)
        except ValueError:
            raise ValueError(f"Unknown strategy: {spec}") from None

        if builtin is BuiltInStrategy.VALUE:
            return _ResolvedStrategy("value", value_key, summarize_value)
        if builtin is BuiltInStrategy.SUGGESTION:
            return _ResolvedStrategy("suggestion", suggestion_key, summarize_suggestion)
        if builtin is BuiltInStrategy.PATH:
            patterns = list(self.path_patterns)
            return _ResolvedStrategy("path", lambda s: path_key(s, patterns), summarize_path)
        return _ResolvedStrategy("entity", entity_key, summarize_entity)

    def aggregate(self, signals: Sequence[DriftSignal]) -> AggregationResult:
        """
        Aggregate signals into groups.

        Returns both grouped and ungrouped signals; together they contain
        every input signal exactly once.
        """
        if not signals:
            return AggregationResult()

        # Buckets keyed by (strategy index, key), in first-appearance order.
        buckets: Dict[Tuple[int, str], List[Tuple[int, DriftSignal]]] = {}
        unclaimed: List[Tuple[int, DriftSignal]] = []

        for position, signal in enumerate(signals):
            claimed = False
            for index, strategy in enumerate(self._resolved):
                key = strategy.get_key(signal)
                if key is None:
                    continue
                buckets.setdefault((index, str(key)), []).append((position, signal))
                claimed = True
                break
            if not claimed:
                unclaimed.append((position, signal))

        groups: List[DriftGroup] = []
        leftover: List[Tuple[int, DriftSignal]] = list(unclaimed)
        for (index, key), members in sorted(buckets.items(), key=lambda item: item[0][0]):
            if len(members) >= self.min_group_size:
                groups.append(self._create_group(self._resolved[index], key, [s for _, s in members]))
            else:
                leftover.extend(members)

        leftover.sort(key=lambda item: item[0])
        ungrouped = [s for _, s in leftover]

        output_count = len(groups) + len(ungrouped)
        result = AggregationResult(
            groups=groups,
            ungrouped=ungrouped,
            total_signals=len(signals),
            total_groups=len(groups),
            reduction_ratio=len(signals) / output_count if output_count else 1.0,
        )
        logger.info(
            "Drift aggregation: signals=%d groups=%d ungrouped=%d ratio=%.2f",
            result.total_signals,
            result.total_groups,
            len(ungrouped),
            result.reduction_ratio,
        )
        return result

    def _create_group(self, strategy: _ResolvedStrategy, key: str, members: List[DriftSignal]) -> DriftGroup:
        logger.debug("Drift aggregation: group strategy=%s key=%s size=%d", strategy.name, key, len(members))
        return DriftGroup(
            id=group_id(strategy.name, key),
            grouping_key=GroupingKey(strategy=strategy.name, value=key),
            summary=strategy.summarize(members, key),
            signals=members,
            total_count=len(members),
            by_severity=count_by_severity(members),
            representative=pick_representative(members),
        )


def aggregate(
    signals: Sequence[DriftSignal],
    strategies: Optional[List[StrategySpec]] = None,
    min_group_size: int = DEFAULT_MIN_GROUP_SIZE,
    path_patterns: Optional[List[str]] = None,
) -> AggregationResult:
    return DriftAggregator(
        strategies=strategies,
        min_group_size=min_group_size,
        path_patterns=list(path_patterns or []),
    ).aggregate(signals)
