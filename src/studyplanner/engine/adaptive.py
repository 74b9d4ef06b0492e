"""Adaptive allocation: place prioritized tasks into the best focus hours.

For each day of the horizon the 24 hours are ranked by average focus
(ties by ascending hour) and walked in that order. Each visited hour takes
the next task in priority order until the day's study capacity is used up.
Hours of the first day that start before `now` are skipped.

Rule preserved: a task is consumed by its first placement, even when the
session is shorter than the task's duration.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from studyplanner.reporting.decision_trace import DecisionTraceCollector

from .clock import as_aware
from .focus_profile import DEFAULT_FOCUS_SCORE, HOURS_PER_DAY, build_focus_profile
from .prioritizer import prioritize_tasks
from .sessions import build_task_session

DEFAULT_STUDY_HOURS_PER_DAY = 4.0
DEFAULT_HORIZON_DAYS = 7
MAX_SESSION_HOURS = 2.0


def _start_of_day(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def rank_hours(profile: list[float]) -> list[tuple[int, float]]:
    """Return (hour, focus) pairs by descending focus, ascending hour on ties."""
    pairs = [(hour, float(profile[hour])) for hour in range(HOURS_PER_DAY)]
    return sorted(pairs, key=lambda pair: (-pair[1], pair[0]))


def allocate_sessions(
    *,
    ordered_tasks: list[dict[str, Any]],
    profile: list[float],
    study_hours_per_day: float,
    now: datetime,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    max_session_hours: float = MAX_SESSION_HOURS,
    decision_trace: DecisionTraceCollector | None = None,
) -> list[dict[str, Any]]:
    """Greedy placement of already ordered tasks into ranked hours."""

    now = as_aware(now)
    ranked = rank_hours(profile)
    first_day = _start_of_day(now)
    sessions: list[dict[str, Any]] = []
    task_index = 0

    for offset in range(horizon_days):
        if task_index >= len(ordered_tasks):
            break
        day_start = first_day + timedelta(days=offset)
        hours_allocated = 0.0

        for hour, focus in ranked:
            if hours_allocated >= study_hours_per_day:
                break
            if task_index >= len(ordered_tasks):
                break
            start = day_start + timedelta(hours=hour)
            if start < now:
                continue

            task = ordered_tasks[task_index]
            task_duration = float(task.get("duration", 0.0) or 0.0)
            session_duration = min(task_duration, study_hours_per_day - hours_allocated, max_session_hours)
            if session_duration <= 0:
                continue

            sessions.append(
                build_task_session(task, start=start, duration=session_duration, focus_level=focus)
            )
            hours_allocated += session_duration
            task_index += 1

            if decision_trace is not None:
                rules = ["RULE_BEST_FOCUS_HOUR", "RULE_PRIORITY_ORDER"]
                if session_duration < task_duration:
                    rules.append("RULE_CONSUME_ON_FIRST_PLACEMENT")
                decision_trace.record(
                    day=day_start.date().isoformat(),
                    hour=hour,
                    reference=str(task.get("task_id", "")),
                    duration=session_duration,
                    applied_rules=rules,
                    note=f"Placed at focus {focus:.2f}; day total {hours_allocated:.2f}h.",
                )

    return sessions


def generate_adaptive_schedule(
    tasks: list[dict[str, Any]],
    focus_logs: list[dict[str, Any]],
    preferences: dict[str, Any] | None = None,
    *,
    now: datetime,
    load_weights: dict[str, int] | None = None,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    max_session_hours: float = MAX_SESSION_HOURS,
    default_focus_score: float = DEFAULT_FOCUS_SCORE,
    decision_trace: DecisionTraceCollector | None = None,
) -> list[dict[str, Any]]:
    """Plan sessions for the next ``horizon_days`` days starting today.

    ``preferred_study_time`` in preferences is informational and does not
    influence placement.
    """

    prefs = preferences or {}
    raw_hours = prefs.get("study_hours_per_day")
    study_hours_per_day = DEFAULT_STUDY_HOURS_PER_DAY if raw_hours is None else float(raw_hours)

    if not tasks:
        return []

    profile = build_focus_profile(focus_logs, default_score=default_focus_score)
    ordered_tasks = prioritize_tasks(tasks, load_weights=load_weights)
    return allocate_sessions(
        ordered_tasks=ordered_tasks,
        profile=profile,
        study_hours_per_day=study_hours_per_day,
        now=now,
        horizon_days=horizon_days,
        max_session_hours=max_session_hours,
        decision_trace=decision_trace,
    )
