"""Hour-of-day focus profile built from self-reported focus logs."""

from __future__ import annotations

from typing import Any

HOURS_PER_DAY = 24
DEFAULT_FOCUS_SCORE = 3.0


def _log_hour(log: dict[str, Any]) -> int | None:
    hour = log.get("time_of_day")
    if isinstance(hour, bool) or not isinstance(hour, (int, float)):
        return None
    hour = int(hour)
    if 0 <= hour < HOURS_PER_DAY:
        return hour
    return None


def _hourly_totals(focus_logs: list[dict[str, Any]]) -> tuple[list[float], list[int]]:
    totals = [0.0] * HOURS_PER_DAY
    counts = [0] * HOURS_PER_DAY
    for log in focus_logs:
        hour = _log_hour(log)
        if hour is None:
            continue
        totals[hour] += float(log.get("focus_score", 0.0))
        counts[hour] += 1
    return totals, counts


def build_focus_profile(
    focus_logs: list[dict[str, Any]],
    *,
    default_score: float = DEFAULT_FOCUS_SCORE,
) -> list[float]:
    """Return the 24 hourly mean focus scores.

    Every sample at an hour weighs the same regardless of its date. Hours
    without samples get ``default_score``.
    """

    totals, counts = _hourly_totals(focus_logs)
    return [
        totals[hour] / counts[hour] if counts[hour] else float(default_score)
        for hour in range(HOURS_PER_DAY)
    ]


def summarize_focus_logs(focus_logs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Per-hour average and sample count, only for hours with data."""
    totals, counts = _hourly_totals(focus_logs)
    return [
        {
            "hour": hour,
            "average_focus": totals[hour] / counts[hour],
            "count": counts[hour],
        }
        for hour in range(HOURS_PER_DAY)
        if counts[hour]
    ]


def peak_focus_hour(stats: list[dict[str, Any]]) -> int | None:
    """Hour with the highest average focus; earliest hour wins ties."""
    if not stats:
        return None
    best = min(stats, key=lambda item: (-float(item["average_focus"]), int(item["hour"])))
    return int(best["hour"])
