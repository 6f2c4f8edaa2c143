"""
Pytest configuration and fixtures for drift processing tests.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pytest

from design_drift.core.drift_models import DriftSignal, DriftSource, Severity


def build_signal(
    id: Optional[str] = None,
    type: str = "hardcoded-value",
    severity: str = "warning",
    entity_type: str = "component",
    entity_name: str = "Button",
    entity_id: Optional[str] = None,
    location: str = "src/components/Button.tsx:12",
    actual: Any = "#ff0000",
    message: str = "Hardcoded value detected",
    token_suggestions: Optional[List[str]] = None,
    details: Optional[Dict[str, Any]] = None,
) -> DriftSignal:
    if details is None:
        details = {}
        if actual is not None:
            details["actual"] = actual
        if token_suggestions is not None:
            details["tokenSuggestions"] = token_suggestions
    return DriftSignal(
        id=id or f"drift:{type}:{entity_name}:{location}",
        type=type,
        severity=Severity(severity),
        source=DriftSource(
            entity_type=entity_type,
            entity_id=entity_id or f"{entity_type}:{entity_name}",
            entity_name=entity_name,
            location=location,
        ),
        message=message,
        details=details,
        detected_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_signal() -> Callable[..., DriftSignal]:
    """Factory for drift signals with sensible defaults."""
    return build_signal
