from __future__ import annotations

from design_drift.core.config import DesignDriftConfig
from design_drift.core.drift_aggregator import aggregate
from design_drift.core.drift_analyzer import DriftAnalyzer
from design_drift.core.drift_models import DriftSignal
from design_drift.core.drift_pipeline import DriftPipeline
from design_drift.core.drift_report import DriftReportBuilder
from design_drift.core.health_score import HealthScorer
from design_drift.core.ignore_list import create_ignore_list, save_ignore_list
from design_drift.core.suggestion_context import build_health_metrics


def _make_signals(make_signal):
    return [
        make_signal(id="v1", entity_name="Hero", location="src/features/Hero.tsx:4", actual="#3b82f6"),
        make_signal(id="v2", entity_name="Card", location="src/features/Card.tsx:9", actual="#3b82f6"),
        make_signal(id="n1", type="naming-inconsistency", entity_name="btn", location="src/legacy/btn.tsx"),
        make_signal(id="n2", type="naming-inconsistency", entity_name="lnk", location="src/legacy/lnk.tsx"),
        make_signal(id="doc", type="missing-documentation", severity="info", location="Readme.tsx"),
    ]


def test_analyze_end_to_end(make_signal) -> None:
    config = DesignDriftConfig.model_validate({
        "drift": {
            "exclude": ["missing-documentation"],
            "promote": [{"type": "naming-inconsistency", "to": "critical"}],
        }
    })
    report = DriftAnalyzer(config=config).analyze(
        _make_signals(make_signal),
        component_count=10,
        token_count=0,
        detected_frameworks=["tailwind"],
    )

    summary = report["summary"]
    assert summary["total"] == 4
    assert summary["critical"] == 2
    assert summary["groups"] == 2
    assert summary["ungrouped"] == 0
    assert summary["reduction_ratio"] == 2
    assert [g["grouping_key"]["strategy"] for g in report["groups"]] == ["value", "path"]
    assert report["health"]["score"] == summary["score"]
    assert report["health"]["metrics"]["has_utility_framework"] is True
    assert report["meta"]["strategies"] == ["value", "suggestion", "path", "entity"]


def test_analyze_loads_ignore_list_from_project_root(tmp_path, make_signal) -> None:
    signals = _make_signals(make_signal)
    save_ignore_list(create_ignore_list(signals[:2], reason="known debt"), str(tmp_path))

    config = DesignDriftConfig(project_root=str(tmp_path))
    report = DriftAnalyzer(config=config).analyze(signals, component_count=10, token_count=5)
    assert report["summary"]["ignored"] == 2
    assert report["summary"]["total"] == 3

    config = DesignDriftConfig.model_validate({"project_root": str(tmp_path), "drift": {"include_ignored": True}})
    report = DriftAnalyzer(config=config).analyze(signals, component_count=10, token_count=5)
    assert report["summary"]["ignored"] == 0
    assert report["summary"]["total"] == 5


def test_empty_run_produces_unscored_report() -> None:
    report = DriftAnalyzer(config=DesignDriftConfig()).analyze([], component_count=0, token_count=0)
    assert report["summary"]["total"] == 0
    assert report["summary"]["score"] is None
    assert report["summary"]["tier"] == "N/A"
    assert report["groups"] == []


def test_report_can_omit_group_members(make_signal) -> None:
    config = DesignDriftConfig()
    analyzer = DriftAnalyzer(config=config)
    full = analyzer.analyze(_make_signals(make_signal), component_count=3, token_count=0)
    assert "signals" in full["groups"][0]

    pipeline_result = DriftPipeline(config=config.drift).run(_make_signals(make_signal))
    report = DriftReportBuilder(include_signals=False).build_report(
        pipeline_result,
        aggregate(pipeline_result.signals),
        HealthScorer().score(build_health_metrics(pipeline_result.signals, 3, 0)),
    )
    assert all("signals" not in g for g in report["groups"])
    assert report["groups"][0]["representative"]["id"] == "v1"


def test_signals_accept_scanner_payloads() -> None:
    signal = DriftSignal.from_dict({
        "id": "drift:hardcoded-value:Button:src/Button.tsx:3",
        "type": "hardcoded-value",
        "severity": "warning",
        "source": {
            "entityType": "component",
            "entityId": "component:Button",
            "entityName": "Button",
            "location": "src/Button.tsx:3",
        },
        "message": 'Component "Button" has 1 hardcoded color: #fff',
        "details": {"actual": "#fff"},
        "detectedAt": "2024-05-01T10:00:00Z",
    })
    assert signal.source.entity_name == "Button"
    assert signal.detected_at.year == 2024
    assert DriftSignal.from_dict(signal.to_dict()) == signal
