"""Ordered rule-engine pipeline over raw drift signals."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from design_drift.core.config import DriftConfig
from design_drift.core.drift_models import DriftSignal
from design_drift.core.ignore_list import IgnoreList, filter_ignored
from design_drift.core.rule_engine import (
    apply_enforce_rules,
    apply_ignore_rules,
    apply_promote_rules,
    apply_severity_overrides,
    calculate_drift_summary,
    filter_by_severity,
    filter_by_type,
    filter_excluded_types,
)

logger = logging.getLogger(__name__)

Stage = Callable[[List[DriftSignal]], List[DriftSignal]]


@dataclass
class PipelineResult:
    signals: List[DriftSignal]
    ignored_count: int
    summary: Dict[str, int]
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "signals": [s.to_dict() for s in self.signals],
            "ignored_count": self.ignored_count,
            "summary": dict(self.summary),
            "warnings": list(self.warnings),
        }


@dataclass
class DriftPipeline:
    """
    Apply a run's rule configuration to raw signals.

    Stage order: severity overrides, severity threshold, type filter,
    excluded types, promote rules, enforce rules, ignore rules, ignore list.
    """
    config: DriftConfig
    ignore_list: Optional[IgnoreList] = None
    on_warning: Optional[Callable[[str], None]] = None

    def stages(self, warnings: List[str]) -> List[Tuple[str, Stage]]:
        cfg = self.config

        def warn(message: str) -> None:
            warnings.append(message)
            if self.on_warning is not None:
                self.on_warning(message)

        stages: List[Tuple[str, Stage]] = [
            ("severity_overrides", lambda s: apply_severity_overrides(s, cfg.severity)),
        ]
        if cfg.min_severity is not None:
            stages.append(("min_severity", lambda s: filter_by_severity(s, cfg.min_severity)))
        if cfg.filter_type:
            stages.append(("filter_type", lambda s: filter_by_type(s, cfg.filter_type)))
        stages.extend([
            ("exclude", lambda s: filter_excluded_types(s, cfg.exclude)),
            ("promote", lambda s: apply_promote_rules(s, cfg.promote, warn)),
            ("enforce", lambda s: apply_enforce_rules(s, cfg.enforce, warn)),
            ("ignore", lambda s: apply_ignore_rules(s, cfg.ignore, warn)),
        ])
        return stages

    def run(self, signals: Sequence[DriftSignal]) -> PipelineResult:
        warnings: List[str] = []
        current = list(signals)
        for name, stage in self.stages(warnings):
            before = len(current)
            current = stage(current)
            logger.debug("Drift pipeline: stage=%s in=%d out=%d", name, before, len(current))

        ignored_count = 0
        if not self.config.include_ignored:
            current, ignored_count = filter_ignored(current, self.ignore_list)
            if ignored_count:
                logger.info("Drift pipeline: filtered out %d ignored drift signals", ignored_count)

        logger.info("Drift pipeline: %d raw signals -> %d kept", len(signals), len(current))
        return PipelineResult(
            signals=current,
            ignored_count=ignored_count,
            summary=calculate_drift_summary(current),
            warnings=warnings,
        )
