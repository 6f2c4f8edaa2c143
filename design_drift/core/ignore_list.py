"""Acknowledged drift signals that are hidden from later runs."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, ValidationError

from design_drift.core.drift_config import DEFAULT_DRIFT_DIR, DEFAULT_IGNORE_FILE
from design_drift.core.drift_models import DriftSignal
from design_drift.core.rule_engine import calculate_drift_summary

logger = logging.getLogger(__name__)


class IgnoreEntry(BaseModel):
    reason: str
    created_at: str
    created_by: Optional[str] = None


class IgnoreList(BaseModel):
    version: int = 1
    created_at: str
    updated_at: str
    reason: str
    drift_ids: List[str] = Field(default_factory=list)
    entries: Dict[str, IgnoreEntry] = Field(default_factory=dict)
    summary: Dict[str, int] = Field(default_factory=dict)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_ignore_path(project_root: str = ".") -> Path:
    return Path(project_root) / DEFAULT_DRIFT_DIR / DEFAULT_IGNORE_FILE


def create_ignore_list(signals: Sequence[DriftSignal], reason: str) -> IgnoreList:
    now = _now()
    return IgnoreList(
        created_at=now,
        updated_at=now,
        reason=reason,
        drift_ids=[s.id for s in signals],
        entries={s.id: IgnoreEntry(reason=reason, created_at=now) for s in signals},
        summary=calculate_drift_summary(signals),
    )


def add_to_ignore_list(ignore_list: IgnoreList, signals: Sequence[DriftSignal], reason: str) -> IgnoreList:
    """Return a copy of ``ignore_list`` that also acknowledges ``signals``."""
    now = _now()
    drift_ids = list(ignore_list.drift_ids)
    entries = dict(ignore_list.entries)
    known = set(drift_ids)
    for signal in signals:
        if signal.id in known:
            continue
        known.add(signal.id)
        drift_ids.append(signal.id)
        entries[signal.id] = IgnoreEntry(reason=reason, created_at=now)
    summary = dict(ignore_list.summary)
    summary["total"] = len(drift_ids)
    return ignore_list.model_copy(update={
        "updated_at": now,
        "drift_ids": drift_ids,
        "entries": entries,
        "summary": summary,
    })


def filter_ignored(
    signals: Sequence[DriftSignal],
    ignore_list: Optional[IgnoreList],
) -> Tuple[List[DriftSignal], int]:
    """Split off acknowledged signals. Returns (kept signals, ignored count)."""
    if ignore_list is None:
        return list(signals), 0
    ignored_ids = set(ignore_list.drift_ids)
    kept = [s for s in signals if s.id not in ignored_ids]
    return kept, len(signals) - len(kept)


def load_ignore_list(project_root: str = ".") -> Optional[IgnoreList]:
    path = get_ignore_path(project_root)
    if not path.is_file():
        return None
    try:
        return IgnoreList.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        logger.warning("Failed to read ignore list %s: %s", path, e)
        return None


def save_ignore_list(ignore_list: IgnoreList, project_root: str = ".") -> Path:
    path = get_ignore_path(project_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(ignore_list.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Saved %d ignored drift ids to %s", len(ignore_list.drift_ids), path)
    return path
