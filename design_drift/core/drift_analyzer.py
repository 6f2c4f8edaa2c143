"""High-level drift analyzer orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from design_drift.core.config import DesignDriftConfig
from design_drift.core.drift_aggregator import DriftAggregator
from design_drift.core.drift_models import DriftSignal
from design_drift.core.drift_pipeline import DriftPipeline
from design_drift.core.drift_report import DriftReportBuilder
from design_drift.core.health_score import HealthScorer
from design_drift.core.ignore_list import IgnoreList, load_ignore_list
from design_drift.core.suggestion_context import build_health_metrics


@dataclass
class DriftAnalyzer:
    config: DesignDriftConfig
    ignore_list: Optional[IgnoreList] = None

    def analyze(
        self,
        signals: List[DriftSignal],
        component_count: int,
        token_count: int,
        detected_frameworks: Iterable[str] = (),
    ) -> Dict[str, Any]:
        drift_config = self.config.drift

        pipeline = DriftPipeline(config=drift_config, ignore_list=self._resolve_ignore_list())
        pipeline_result = pipeline.run(signals)

        aggregation_config = drift_config.aggregation
        aggregator = DriftAggregator(
            strategies=list(aggregation_config.strategies),
            min_group_size=aggregation_config.min_group_size,
            path_patterns=list(aggregation_config.path_patterns),
        )
        aggregation = aggregator.aggregate(pipeline_result.signals)

        metrics = build_health_metrics(
            pipeline_result.signals,
            component_count=component_count,
            token_count=token_count,
            detected_frameworks=detected_frameworks,
        )
        health = HealthScorer().score(metrics)

        return DriftReportBuilder().build_report(
            pipeline_result=pipeline_result,
            aggregation=aggregation,
            health=health,
            meta={
                "strategies": list(aggregation_config.strategies),
                "min_group_size": aggregation_config.min_group_size,
                "include_ignored": drift_config.include_ignored,
            },
        )

    def _resolve_ignore_list(self) -> Optional[IgnoreList]:
        if self.ignore_list is not None or self.config.drift.include_ignored:
            return self.ignore_list
        if not self.config.project_root:
            return None
        return load_ignore_list(str(self.config.require_project_root()))
