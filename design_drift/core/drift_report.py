"""Drift report composition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from design_drift.core.drift_models import AggregationResult, DriftGroup, HealthScoreResult
from design_drift.core.drift_pipeline import PipelineResult


@dataclass
class DriftReportBuilder:
    include_signals: bool = True

    def build_report(
        self,
        pipeline_result: PipelineResult,
        aggregation: AggregationResult,
        health: HealthScoreResult,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return {
            "summary": {
                **pipeline_result.summary,
                "ignored": pipeline_result.ignored_count,
                "groups": aggregation.total_groups,
                "ungrouped": len(aggregation.ungrouped),
                "reduction_ratio": aggregation.reduction_ratio,
                "score": health.score,
                "tier": health.tier,
            },
            "groups": [self._serialize_group(g) for g in aggregation.groups],
            "ungrouped": [s.to_dict() for s in aggregation.ungrouped],
            "health": health.to_dict(),
            "warnings": list(pipeline_result.warnings),
            "meta": dict(meta or {}),
        }

    def _serialize_group(self, group: DriftGroup) -> Dict[str, Any]:
        data = group.to_dict()
        if not self.include_signals:
            data.pop("signals")
        return data
