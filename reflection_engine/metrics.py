"""Activity metrics summarised for the AI insights feature."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from reflection_engine.config import settings
from reflection_engine.search import resolve_field


def _progress(area: Any) -> float:
    value = resolve_field(area, "progress_percent")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _deadline(area: Any) -> Optional[datetime]:
    value = resolve_field(area, "deadline")
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_utc(now: Optional[datetime]) -> datetime:
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def is_overdue(area: Any, now: Optional[datetime] = None) -> bool:
    """A focus area is overdue once its deadline passed before completion.

    A naive ``now`` is taken as UTC.
    """

    deadline = _deadline(area)
    return deadline is not None and deadline < _as_utc(now) and _progress(area) < 100


def compute_activity_metrics(
    focus_areas: list,
    diary_entries: list,
    assignments: list,
    now: Optional[datetime] = None,
) -> dict:
    """Compute focus-area, diary and questionnaire activity counts."""

    moment = _as_utc(now)

    total = len(focus_areas)
    completed = sum(1 for area in focus_areas if _progress(area) >= 100)
    avg_progress = int(sum(_progress(area) for area in focus_areas) / total + 0.5) if total else 0

    return {
        "total_focus_areas": total,
        "completed_focus_areas": completed,
        "avg_progress": avg_progress,
        "recent_diary_entries": len(diary_entries),
        "submitted_questionnaires": sum(1 for a in assignments if resolve_field(a, "submitted_at")),
        "total_questionnaires": len(assignments),
        "overdue_items": sum(1 for area in focus_areas if is_overdue(area, moment)),
    }


def risk_level(overdue_items: int) -> str:
    """Bucket the overdue count into LOW / MEDIUM / HIGH."""

    if overdue_items > settings.high_risk_overdue_threshold:
        return "HIGH"
    if overdue_items > 0:
        return "MEDIUM"
    return "LOW"


def completion_rate(metrics: dict) -> int:
    total = max(metrics.get("total_focus_areas", 0), 1)
    return int(metrics.get("completed_focus_areas", 0) * 100 / total + 0.5)


def current_quarter(now: Optional[datetime] = None) -> tuple[str, int]:
    moment = now or datetime.now(timezone.utc)
    return f"Q{(moment.month - 1) // 3 + 1}", moment.year
