"""Planning engine runner.

Dispatches a loaded request to the adaptive or spaced planner and wraps the
sessions with the schedule header, per-day grouping, warnings and trace.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from studyplanner.reporting.decision_trace import DecisionTraceCollector
from studyplanner.reporting.warnings import build_warnings_and_suggestions

from .adaptive import DEFAULT_HORIZON_DAYS, MAX_SESSION_HOURS, generate_adaptive_schedule
from .clock import as_aware, parse_instant, utc_day_key
from .errors import EmptyScheduleError, NoPendingTasksError
from .focus_profile import DEFAULT_FOCUS_SCORE, build_focus_profile, peak_focus_hour, summarize_focus_logs
from .prioritizer import prioritize_tasks
from .spaced import (
    DEFAULT_DAILY_AVAILABILITY,
    MAX_DAILY_SESSION_HOURS,
    MIN_SESSION_HOURS,
    TARGET_SESSION_HOURS,
    compute_days_until_exam,
    compute_session_distribution,
    generate_study_sessions,
)


def _extract_list(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = payload.get(key, [])
    if isinstance(items, list):
        return [item for item in items if isinstance(item, dict)]
    return []


def _extract_dict(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key, {})
    return value if isinstance(value, dict) else {}


def resolve_now(payload: dict[str, Any]) -> datetime:
    """Read the injected clock, falling back to a single wall-clock read."""
    parsed = parse_instant(payload.get("now"))
    if parsed is not None:
        return parsed
    return datetime.now(timezone.utc)


def pending_tasks(tasks: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [task for task in tasks if not bool(task.get("completed", False))]


def build_daily_plan(sessions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    daily_plan_map: dict[str, list[dict[str, Any]]] = {}
    for session in sessions:
        daily_plan_map.setdefault(utc_day_key(session["date"]), []).append(session)
    return [
        {
            "date": day,
            "total_hours": round(sum(float(item["duration"]) for item in items), 4),
            "sessions": sorted(items, key=lambda item: item["date"]),
        }
        for day, items in sorted(daily_plan_map.items(), key=lambda entry: entry[0])
    ]


def _total_hours(sessions: list[dict[str, Any]]) -> float:
    return round(sum(float(item.get("duration", 0.0)) for item in sessions), 4)


def _run_adaptive(payload: dict[str, Any], now: datetime, trace: DecisionTraceCollector) -> dict[str, Any]:
    effective = _extract_dict(payload, "effective_config")
    global_config = _extract_dict(effective, "global")
    preferences = _extract_dict(effective, "preferences") or _extract_dict(payload, "preferences")

    tasks = pending_tasks(_extract_list(payload, "tasks"))
    if not tasks:
        raise NoPendingTasksError()
    focus_logs = _extract_list(payload, "focus_logs")

    sessions = generate_adaptive_schedule(
        tasks,
        focus_logs,
        preferences,
        now=now,
        horizon_days=int(global_config.get("horizon_days", DEFAULT_HORIZON_DAYS)),
        max_session_hours=float(global_config.get("max_session_hours", MAX_SESSION_HOURS)),
        default_focus_score=float(global_config.get("default_focus_score", DEFAULT_FOCUS_SCORE)),
        decision_trace=trace,
    )
    if not sessions:
        raise EmptyScheduleError()

    ordered = prioritize_tasks(tasks)
    unscheduled = ordered[len(sessions):]
    focus_stats = summarize_focus_logs(focus_logs)

    return {
        "schedule": {
            "title": f"Generated Schedule - {now.date().isoformat()}",
            "total_hours": _total_hours(sessions),
            "generated_date": now,
        },
        "sessions": sessions,
        "tasks": ordered,
        "unscheduled_task_ids": [task.get("task_id") for task in unscheduled],
        "focus_logs_count": len(focus_logs),
        "focus_stats": focus_stats,
        "peak_focus_hour": peak_focus_hour(focus_stats),
        "study_hours_per_day": float(preferences.get("study_hours_per_day", 4.0)),
    }


def _run_spaced(payload: dict[str, Any], now: datetime, trace: DecisionTraceCollector) -> dict[str, Any]:
    effective = _extract_dict(payload, "effective_config")
    global_config = _extract_dict(effective, "global")
    options = _extract_dict(effective, "options") or _extract_dict(payload, "options")
    subject = _extract_dict(payload, "subject")
    min_session_hours = float(global_config.get("min_session_hours", MIN_SESSION_HOURS))
    target_session_hours = float(global_config.get("target_session_hours", TARGET_SESSION_HOURS))
    max_daily_session_hours = float(global_config.get("max_daily_session_hours", MAX_DAILY_SESSION_HOURS))

    sessions = generate_study_sessions(
        subject,
        options,
        now=now,
        min_session_hours=min_session_hours,
        target_session_hours=target_session_hours,
        max_daily_session_hours=max_daily_session_hours,
        decision_trace=trace,
    )

    exam_date = parse_instant(subject.get("exam_date"))
    assert exam_date is not None
    days_until_exam = compute_days_until_exam(exam_date, now)
    daily_availability = float(options.get("daily_availability", DEFAULT_DAILY_AVAILABILITY))
    distribution = compute_session_distribution(
        total_hours=float(subject.get("total_hours", 0.0)),
        difficulty=subject.get("difficulty"),
        days_until_exam=days_until_exam,
        daily_availability=daily_availability,
        target_session_hours=target_session_hours,
        min_session_hours=min_session_hours,
        max_daily_session_hours=max_daily_session_hours,
    )
    name = str(subject.get("name", subject.get("subject_id", "")))

    return {
        "schedule": {
            "title": f"{name} - Study Plan",
            "total_hours": _total_hours(sessions),
            "generated_date": now,
            "exam_date": exam_date,
        },
        "sessions": sessions,
        "subject": subject,
        "days_until_exam": days_until_exam,
        "daily_availability": daily_availability,
        "distribution": distribution,
    }


def run_planner(payload: dict[str, Any]) -> dict[str, Any]:
    """Run one planning call for ``payload["mode"]``.

    Raises ``PlanningError`` subclasses for conditions the caller has to
    surface (exam in the past, no pending task, empty adaptive schedule).
    """
    mode = str(payload.get("mode", "adaptive"))
    now = as_aware(resolve_now(payload))
    trace = DecisionTraceCollector(start_timestamp=now)

    if mode == "spaced":
        body = _run_spaced(payload, now, trace)
    else:
        mode = "adaptive"
        body = _run_adaptive(payload, now, trace)

    sessions = body["sessions"]
    warnings, suggestions = build_warnings_and_suggestions(mode=mode, result=body)

    return {
        "status": "ok",
        "mode": mode,
        "generated_at": now,
        **body,
        "daily_plan": build_daily_plan(sessions),
        "plan_summary": {
            "sessions_count": len(sessions),
            "total_hours": _total_hours(sessions),
            "first_session": min((s["date"] for s in sessions), default=None),
            "last_session": max((s["date"] for s in sessions), default=None),
        },
        "warnings": warnings,
        "suggestions": suggestions,
        "effective_config": payload.get("effective_config", {}),
        "decision_trace": trace.as_list(),
    }


def run_focus_stats(payload: dict[str, Any]) -> dict[str, Any]:
    """Summarize focus logs per hour without planning anything."""
    effective = _extract_dict(payload, "effective_config")
    global_config = _extract_dict(effective, "global")
    focus_logs = _extract_list(payload, "focus_logs")
    stats = summarize_focus_logs(focus_logs)
    return {
        "status": "ok",
        "mode": "focus_stats",
        "generated_at": as_aware(resolve_now(payload)),
        "focus_logs_count": len(focus_logs),
        "focus_stats": stats,
        "peak_focus_hour": peak_focus_hour(stats),
        "hourly_profile": build_focus_profile(
            focus_logs,
            default_score=float(global_config.get("default_focus_score", DEFAULT_FOCUS_SCORE)),
        ),
    }
