"""
Four-pillar design system health score.

Pillars:
- Value Discipline (0-60): hardcoded values and dead code per component
- Token Health (0-20): token system existence and adoption
- Consistency (0-10): naming convention adherence
- Critical Issues (0-10): accessibility, deprecated patterns, hot spots

Tiers: 80-100 Great, 60-79 Good, 40-59 OK, 20-39 Bad, 0-19 Terrible.
A codebase with no components, tokens or drift gets no score at all.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from design_drift.core.drift_config import (
    CONSISTENCY_MAX,
    CRITICAL_ISSUES_MAX,
    CRITICAL_PENALTY,
    DEAD_CODE_SUGGESTION_MIN,
    DEAD_CODE_WEIGHT,
    HEALTH_TIER_FLOOR,
    HEALTH_TIER_NONE,
    HEALTH_TIERS,
    MODERATE_DENSITY,
    NAMING_RATE_FLOOR,
    REPEATED_PATTERN_SUGGESTION_MIN,
    SEVERE_DENSITY,
    SMALL_SAMPLE_COMPONENTS,
    SPACING_SPRAWL_LIMIT,
    TOKEN_COVERAGE_TARGET,
    TOKEN_HEALTH_MAX,
    TOTAL_DRIFT_WEIGHT,
    UNUSED_TOKEN_SUGGESTION_PCT,
    VALUE_DISCIPLINE_MAX,
)
from design_drift.core.drift_models import HealthMetrics, HealthPillar, HealthScoreResult
from design_drift.core.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

PILLAR_ORDER = ("value_discipline", "token_health", "consistency", "critical_issues")

PILLAR_INFO = {
    "value_discipline": ("Value Discipline", VALUE_DISCIPLINE_MAX, "Hardcoded values per component"),
    "token_health": ("Token Health", TOKEN_HEALTH_MAX, "Token system adoption"),
    "consistency": ("Consistency", CONSISTENCY_MAX, "Naming convention adherence"),
    "critical_issues": ("Critical Issues", CRITICAL_ISSUES_MAX, "Accessibility and critical failures"),
}

PILLAR_HINTS = {
    "value_discipline": "replace hardcoded values with design tokens",
    "token_health": "define design tokens and wire them into your components",
    "consistency": "standardize component and prop naming",
    "critical_issues": "resolve critical issues and migrate deprecated patterns",
}


def get_health_tier(score: Optional[int]) -> str:
    if score is None:
        return HEALTH_TIER_NONE
    for floor, tier in HEALTH_TIERS:
        if score >= floor:
            return tier
    return HEALTH_TIER_FLOOR


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _pillar(key: str, score: int) -> HealthPillar:
    name, max_score, description = PILLAR_INFO[key]
    return HealthPillar(name=name, score=score, max_score=max_score, description=description)


@dataclass
class HealthScorer:
    """Pure scorer: the same metrics always produce the same result."""

    def score(self, metrics: HealthMetrics) -> HealthScoreResult:
        drift_count = metrics.effective_drift_count
        if metrics.component_count == 0 and metrics.token_count == 0 and drift_count == 0:
            return self._unscored(metrics)

        suggestions: List[str] = []
        value_discipline, density = self._value_discipline(metrics, suggestions)
        token_health = self._token_health(metrics, density, suggestions)
        consistency = self._consistency(metrics, suggestions)
        critical = self._critical_issues(metrics, suggestions)

        if metrics.unique_spacing_values and metrics.unique_spacing_values > SPACING_SPRAWL_LIMIT:
            suggestions.append(
                f"{metrics.unique_spacing_values} unique spacing values - consolidate them onto a spacing scale"
            )

        # A near-empty codebase cannot max out the small pillars.
        sample_scale = min(metrics.component_count / SMALL_SAMPLE_COMPONENTS, 1.0)
        consistency = round_half_up(consistency * sample_scale)
        critical = round_half_up(critical * sample_scale)

        total = value_discipline + token_health + consistency + critical
        total, ceiling = self._apply_drift_ceiling(total, metrics)

        pillars = {
            "value_discipline": _pillar("value_discipline", value_discipline),
            "token_health": _pillar("token_health", token_health),
            "consistency": _pillar("consistency", consistency),
            "critical_issues": _pillar("critical_issues", critical),
        }

        if not suggestions:
            suggestions.append(self._fallback_suggestion(total, pillars, ceiling, drift_count))

        logger.debug(
            "Health score: total=%d vd=%d th=%d cons=%d crit=%d ceiling=%s",
            total, value_discipline, token_health, consistency, critical, ceiling,
        )
        return HealthScoreResult(
            score=total,
            tier=get_health_tier(total),
            pillars=pillars,
            suggestions=suggestions,
            metrics=metrics,
        )

    @staticmethod
    def _unscored(metrics: HealthMetrics) -> HealthScoreResult:
        return HealthScoreResult(
            score=None,
            tier=HEALTH_TIER_NONE,
            pillars={key: _pillar(key, 0) for key in PILLAR_ORDER},
            suggestions=[
                "No components, tokens or drift signals found - nothing to evaluate yet. "
                "Point the scan at a directory containing UI code."
            ],
            metrics=metrics,
        )

    @staticmethod
    def _value_discipline(metrics: HealthMetrics, suggestions: List[str]) -> Tuple[int, float]:
        components = max(metrics.component_count, 1)
        user_hardcoded = max(0, metrics.hardcoded_value_count - metrics.vendored_drift_count)
        dead_code = metrics.unused_component_count + metrics.orphaned_component_count

        hardcoded_density = user_hardcoded / components
        dead_code_density = (dead_code + metrics.repeated_pattern_count) / components
        total_drift_density = metrics.effective_drift_count / components
        density = max(
            hardcoded_density + DEAD_CODE_WEIGHT * dead_code_density,
            TOTAL_DRIFT_WEIGHT * total_drift_density,
        )
        score = round_half_up(VALUE_DISCIPLINE_MAX * clamp(1 - density / 2))

        context = ""
        if metrics.top_hardcoded_color is not None:
            color = metrics.top_hardcoded_color
            context += f" Start with {color.value} (used {color.count}x)."
        if metrics.worst_file is not None:
            context += f" Worst file: {metrics.worst_file.path} ({_plural(metrics.worst_file.issue_count, 'issue')})."

        if density > SEVERE_DENSITY:
            suggestions.append(
                f"Severe value drift: {_plural(user_hardcoded, 'hardcoded value')} across "
                f"{_plural(metrics.component_count, 'component')} - introduce design tokens "
                f"for the most repeated values.{context}"
            )
        elif density > MODERATE_DENSITY:
            suggestions.append(
                f"{_plural(user_hardcoded, 'hardcoded value')} across your components - "
                f"extract them to design tokens.{context}"
            )
        elif user_hardcoded > 0:
            suggestions.append(
                f"{_plural(user_hardcoded, 'hardcoded value')} left - replace with existing tokens.{context}"
            )

        if dead_code >= DEAD_CODE_SUGGESTION_MIN:
            suggestions.append(
                f"{_plural(dead_code, 'unused or orphaned component')} - remove them or wire them into the app"
            )
        if metrics.repeated_pattern_count >= REPEATED_PATTERN_SUGGESTION_MIN:
            suggestions.append(
                f"{_plural(metrics.repeated_pattern_count, 'repeated class pattern')} - "
                f"extract them into shared components"
            )
        return score, density

    @staticmethod
    def _token_health(metrics: HealthMetrics, density: float, suggestions: List[str]) -> int:
        has_tokens = metrics.token_count > 0
        bonus = 2 if has_tokens else 0
        utility = 3 + bonus if metrics.has_utility_framework else 0
        library = 3 + bonus if metrics.has_design_system_library else 0
        coverage = 5 * clamp(metrics.token_count / TOKEN_COVERAGE_TARGET)

        if has_tokens:
            used = metrics.token_count - metrics.unused_token_count
            usage = 5 * clamp(used / metrics.token_count)
            unused_pct = round_half_up(100 * metrics.unused_token_count / metrics.token_count)
            if metrics.unused_token_count > 0 and unused_pct > UNUSED_TOKEN_SUGGESTION_PCT:
                suggestions.append(
                    f"{metrics.unused_token_count} of {metrics.token_count} tokens ({unused_pct}%) "
                    f"are defined but unused - wire them into components or remove them"
                )
        elif metrics.has_utility_framework or metrics.has_design_system_library:
            # The framework acts as the token system; credit depends on discipline.
            usage = 5 if density < 0.5 else 3 if density < 1.0 else 1
        elif metrics.total_drift_count and density < 0.1:
            # Measured drift but almost no hardcoding: an implied system.
            # Only granted for drift that was actually counted, so one stray
            # non-hardcoded signal can lift a clean, token-less score by 3.
            usage = 3
        else:
            usage = 0
            if metrics.component_count > 0:
                suggestions.append("No design token system detected - add design tokens or a utility framework")

        return round_half_up(utility + library + coverage + usage)

    @staticmethod
    def _consistency(metrics: HealthMetrics, suggestions: List[str]) -> int:
        inconsistencies = metrics.naming_inconsistency_count + metrics.semantic_mismatch_count
        naming_rate = inconsistencies / max(metrics.component_count, 1)
        score = round_half_up(CONSISTENCY_MAX * clamp(1 - naming_rate / NAMING_RATE_FLOOR))

        label = f"{inconsistencies} naming inconsistenc" + ("y" if inconsistencies == 1 else "ies")
        if naming_rate > 0.15:
            suggestions.append(
                f"{label} across {_plural(metrics.component_count, 'component')} - adopt one naming convention"
            )
        elif naming_rate > 0.05:
            suggestions.append(f"{label} - standardize prop and component conventions")
        return score

    @staticmethod
    def _critical_issues(metrics: HealthMetrics, suggestions: List[str]) -> int:
        effective = (
            metrics.critical_count
            + math.ceil(metrics.deprecated_pattern_count / 2)
            + metrics.high_density_file_count // 3
        )
        score = max(0, CRITICAL_ISSUES_MAX - CRITICAL_PENALTY * effective)

        if metrics.critical_count > 0:
            suggestions.append(
                f"{_plural(metrics.critical_count, 'critical issue')} (accessibility/contrast) - fix immediately"
            )
        if metrics.deprecated_pattern_count > 0:
            suggestions.append(
                f"{_plural(metrics.deprecated_pattern_count, 'deprecated pattern')} still in use - "
                f"migrate to the current APIs"
            )
        return score

    @staticmethod
    def _apply_drift_ceiling(total: int, metrics: HealthMetrics) -> Tuple[int, Optional[int]]:
        """Keep large, noisy codebases out of the top tier."""
        drift_count = metrics.effective_drift_count
        if drift_count <= 0 or metrics.component_count <= 0:
            return total, None

        per_component = drift_count / metrics.component_count
        if drift_count > 200:
            ceiling = 69
        elif drift_count > 100:
            ceiling = round_half_up(74 + (1 - clamp(per_component)) * 10)
        elif drift_count > 50 and per_component > 0.3:
            ceiling = 89
        else:
            return total, None

        if total > ceiling:
            logger.debug("Health score: capping %d at %d (drift=%d)", total, ceiling, drift_count)
            return ceiling, ceiling
        return total, None

    @staticmethod
    def _fallback_suggestion(
        total: int,
        pillars: Dict[str, HealthPillar],
        ceiling: Optional[int],
        drift_count: int,
    ) -> str:
        if total >= 100:
            return "Excellent design system health - nothing to fix right now. Keep it up!"

        key = min(PILLAR_ORDER, key=lambda k: pillars[k].ratio)
        weakest = pillars[key]
        if weakest.score >= weakest.max_score:
            return (
                f"Score is capped at {ceiling if ceiling is not None else total} by drift volume "
                f"({_plural(drift_count, 'drift signal')}) - reduce the total number of signals"
            )

        detail = f"{weakest.name} ({weakest.score}/{weakest.max_score})"
        if total >= 90:
            return f"To reach 100, improve {detail}: {PILLAR_HINTS[key]}"
        return f"Your weakest area is {detail}: {PILLAR_HINTS[key]}"


def calculate_health_score_pillar(metrics: HealthMetrics) -> HealthScoreResult:
    return HealthScorer().score(metrics)
