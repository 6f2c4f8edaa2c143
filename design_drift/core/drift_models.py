"""Data models for drift signals, aggregation output and health scoring."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from design_drift.core.drift_config import SEVERITY_ORDER


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER[self.value]


class DriftType(str, Enum):
    """Known drift signal tags. Signals may carry other tags as well."""
    HARDCODED_VALUE = "hardcoded-value"
    UNUSED_TOKEN = "unused-token"
    UNUSED_COMPONENT = "unused-component"
    ORPHANED_COMPONENT = "orphaned-component"
    ORPHANED_TOKEN = "orphaned-token"
    NAMING_INCONSISTENCY = "naming-inconsistency"
    SEMANTIC_MISMATCH = "semantic-mismatch"
    REPEATED_PATTERN = "repeated-pattern"
    DEPRECATED_PATTERN = "deprecated-pattern"
    VALUE_DIVERGENCE = "value-divergence"
    FRAMEWORK_SPRAWL = "framework-sprawl"
    MISSING_DOCUMENTATION = "missing-documentation"
    ACCESSIBILITY_ISSUE = "accessibility-issue"
    ACCESSIBILITY_CONFLICT = "accessibility-conflict"
    COLOR_CONTRAST = "color-contrast"


@dataclass
class DriftSource:
    entity_type: str  # component | token
    entity_id: str
    entity_name: str
    location: str  # "<path>:<line>" or "<path>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "entity_name": self.entity_name,
            "location": self.location,
        }


@dataclass
class DriftSignal:
    id: str
    type: str
    severity: Severity
    source: DriftSource
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    detected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not isinstance(self.severity, Severity):
            self.severity = Severity(self.severity)
        if isinstance(self.type, DriftType):
            self.type = self.type.value
        if self.details is None:
            self.details = {}

    def with_severity(self, severity: Severity) -> "DriftSignal":
        return replace(self, severity=Severity(severity))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DriftSignal":
        """
        Build a signal from a scanner payload.

        Accepts both the camelCase keys emitted by the upstream scanners
        (``entityType``, ``detectedAt``) and the snake_case keys produced
        by :meth:`to_dict`.
        """
        source = data["source"]
        detected_at = data.get("detectedAt", data.get("detected_at"))
        if isinstance(detected_at, str):
            detected_at = datetime.fromisoformat(detected_at.replace("Z", "+00:00"))
        return cls(
            id=data["id"],
            type=data["type"],
            severity=Severity(data["severity"]),
            source=DriftSource(
                entity_type=source.get("entityType", source.get("entity_type", "component")),
                entity_id=source.get("entityId", source.get("entity_id", "")),
                entity_name=source.get("entityName", source.get("entity_name", "")),
                location=source.get("location", ""),
            ),
            message=data.get("message", ""),
            details=dict(data.get("details") or {}),
            detected_at=detected_at or datetime.now(timezone.utc),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "severity": self.severity.value,
            "source": self.source.to_dict(),
            "message": self.message,
            "details": self.details,
            "detected_at": self.detected_at.isoformat(),
        }


@dataclass
class GroupingKey:
    strategy: str
    value: str


@dataclass
class DriftGroup:
    id: str
    grouping_key: GroupingKey
    summary: str
    signals: List[DriftSignal] = field(default_factory=list)
    total_count: int = 0
    by_severity: Dict[str, int] = field(default_factory=dict)
    representative: Optional[DriftSignal] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "grouping_key": {
                "strategy": self.grouping_key.strategy,
                "value": self.grouping_key.value,
            },
            "summary": self.summary,
            "signals": [s.to_dict() for s in self.signals],
            "total_count": self.total_count,
            "by_severity": dict(self.by_severity),
            "representative": self.representative.to_dict() if self.representative else None,
        }


@dataclass
class AggregationResult:
    groups: List[DriftGroup] = field(default_factory=list)
    ungrouped: List[DriftSignal] = field(default_factory=list)
    total_signals: int = 0
    total_groups: int = 0
    reduction_ratio: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "ungrouped": [s.to_dict() for s in self.ungrouped],
            "total_signals": self.total_signals,
            "total_groups": self.total_groups,
            "reduction_ratio": self.reduction_ratio,
        }


@dataclass(frozen=True)
class TopValue:
    value: str
    count: int


@dataclass(frozen=True)
class FileIssue:
    path: str
    issue_count: int


@dataclass(frozen=True)
class HealthMetrics:
    """Counts and flags from a completed scan, consumed by the health scorer."""
    component_count: int
    token_count: int
    hardcoded_value_count: int = 0
    unused_token_count: int = 0
    naming_inconsistency_count: int = 0
    critical_count: int = 0
    has_utility_framework: bool = False
    has_design_system_library: bool = False
    # Optional context. total_drift_count=None means "not measured".
    total_drift_count: Optional[int] = None
    unused_component_count: int = 0
    orphaned_component_count: int = 0
    repeated_pattern_count: int = 0
    semantic_mismatch_count: int = 0
    deprecated_pattern_count: int = 0
    high_density_file_count: int = 0
    vendored_drift_count: int = 0
    top_hardcoded_color: Optional[TopValue] = None
    worst_file: Optional[FileIssue] = None
    unique_spacing_values: Optional[int] = None
    detected_frameworks: tuple = ()

    @property
    def effective_drift_count(self) -> int:
        if self.total_drift_count is not None:
            return self.total_drift_count
        return self.hardcoded_value_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component_count": self.component_count,
            "token_count": self.token_count,
            "hardcoded_value_count": self.hardcoded_value_count,
            "unused_token_count": self.unused_token_count,
            "naming_inconsistency_count": self.naming_inconsistency_count,
            "critical_count": self.critical_count,
            "has_utility_framework": self.has_utility_framework,
            "has_design_system_library": self.has_design_system_library,
            "total_drift_count": self.total_drift_count,
            "unused_component_count": self.unused_component_count,
            "orphaned_component_count": self.orphaned_component_count,
            "repeated_pattern_count": self.repeated_pattern_count,
            "semantic_mismatch_count": self.semantic_mismatch_count,
            "deprecated_pattern_count": self.deprecated_pattern_count,
            "high_density_file_count": self.high_density_file_count,
            "vendored_drift_count": self.vendored_drift_count,
            "top_hardcoded_color": (
                {"value": self.top_hardcoded_color.value, "count": self.top_hardcoded_color.count}
                if self.top_hardcoded_color else None
            ),
            "worst_file": (
                {"path": self.worst_file.path, "issue_count": self.worst_file.issue_count}
                if self.worst_file else None
            ),
            "unique_spacing_values": self.unique_spacing_values,
            "detected_frameworks": list(self.detected_frameworks),
        }


@dataclass
class HealthPillar:
    name: str
    score: int
    max_score: int
    description: str

    @property
    def ratio(self) -> float:
        return self.score / self.max_score if self.max_score else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "max_score": self.max_score,
            "description": self.description,
        }


@dataclass
class HealthScoreResult:
    score: Optional[int]
    tier: str
    pillars: Dict[str, HealthPillar]
    suggestions: List[str] = field(default_factory=list)
    metrics: Optional[HealthMetrics] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "tier": self.tier,
            "pillars": {key: pillar.to_dict() for key, pillar in self.pillars.items()},
            "suggestions": list(self.suggestions),
            "metrics": self.metrics.to_dict() if self.metrics else None,
        }
