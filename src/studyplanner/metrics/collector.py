"""Planning metrics collector."""

from __future__ import annotations

from collections import defaultdict
from statistics import mean
from typing import Any

from studyplanner.engine.clock import utc_day_key
from studyplanner.engine.sessions import FINAL_REVIEW_NOTE


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _daily_capacity(result: dict[str, Any]) -> float:
    if result.get("mode") == "spaced":
        return float(result.get("daily_availability", 0.0) or 0.0)
    return float(result.get("study_hours_per_day", 0.0) or 0.0)


def collect_metrics(result: dict[str, Any]) -> dict[str, Any]:
    """Compute session metrics; ratios are clamped in [0,1]."""
    sessions = [item for item in result.get("sessions", []) if isinstance(item, dict)]

    hours_by_day: dict[str, float] = defaultdict(float)
    for session in sessions:
        hours_by_day[utc_day_key(session["date"])] += float(session.get("duration", 0.0))

    total_hours = sum(hours_by_day.values())
    days_used = len(hours_by_day)
    capacity = _daily_capacity(result)
    capacity_utilization = (
        total_hours / (capacity * days_used) if capacity > 0 and days_used > 0 else 0.0
    )

    metrics: dict[str, Any] = {
        "sessions_count": len(sessions),
        "total_hours": round(total_hours, 4),
        "days_used": days_used,
        "max_daily_hours": round(max(hours_by_day.values(), default=0.0), 4),
        "capacity_utilization": round(_clamp01(capacity_utilization), 4),
    }

    if result.get("mode") == "spaced":
        subject = result.get("subject", {}) if isinstance(result.get("subject"), dict) else {}
        subject_hours = float(subject.get("total_hours", 0.0) or 0.0)
        metrics["hours_coverage"] = round(_clamp01(total_hours / subject_hours), 4) if subject_hours > 0 else 0.0
        metrics["final_review_sessions"] = sum(1 for s in sessions if s.get("notes") == FINAL_REVIEW_NOTE)
        return metrics

    tasks = [item for item in result.get("tasks", []) if isinstance(item, dict)]
    focus_levels = [float(s["focus_level"]) for s in sessions if "focus_level" in s]
    metrics["mean_focus_level"] = round(mean(focus_levels), 4) if focus_levels else 0.0
    metrics["task_coverage"] = round(_clamp01(len(sessions) / len(tasks)), 4) if tasks else 0.0
    return metrics
