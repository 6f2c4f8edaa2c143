"""
Drift signal processing for design system audits.

The rule engine filters and escalates raw signals, the aggregator groups
what remains into actionable issues, and the health scorer turns the
counts into a single 0-100 score with suggestions.
"""

from .config import (
    AggregationConfig,
    DesignDriftConfig,
    DriftConfig,
    DriftRuleFilter,
    EnforceRule,
    IgnoreRule,
    PromoteRule,
    load_config,
)
from .drift_aggregator import BuiltInStrategy, CustomStrategy, DriftAggregator, aggregate
from .drift_analyzer import DriftAnalyzer
from .drift_models import (
    AggregationResult,
    DriftGroup,
    DriftSignal,
    DriftSource,
    DriftType,
    HealthMetrics,
    HealthPillar,
    HealthScoreResult,
    Severity,
)
from .drift_pipeline import DriftPipeline, PipelineResult
from .health_score import HealthScorer, calculate_health_score_pillar, get_health_tier
from .rule_engine import (
    apply_enforce_rules,
    apply_ignore_rules,
    apply_promote_rules,
    apply_severity_overrides,
    rule_matches,
)
from .suggestion_context import build_health_metrics, compute_suggestion_context
