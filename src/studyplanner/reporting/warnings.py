"""Warning and suggestion generation for planning output."""

from __future__ import annotations

from typing import Any

EXAM_IMMINENT_DAYS = 2


def _adaptive_warnings(result: dict[str, Any]) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    warnings: list[dict[str, Any]] = []
    suggestions: list[dict[str, Any]] = []
    sessions = [item for item in result.get("sessions", []) if isinstance(item, dict)]
    tasks_by_id = {
        task.get("task_id"): task for task in result.get("tasks", []) if isinstance(task, dict)
    }

    # (1) Tasks left over after the horizon.
    unscheduled = [tid for tid in result.get("unscheduled_task_ids", [])]
    if unscheduled:
        warnings.append(
            {
                "code": "WARN_TASKS_NOT_SCHEDULED",
                "severity": "warning",
                "message": f"{len(unscheduled)} task(s) did not fit in the planning horizon.",
                "task_ids": unscheduled,
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_INCREASE_STUDY_HOURS",
                "message": "Raise study_hours_per_day or split large tasks into smaller ones.",
            }
        )

    # (2) Sessions shorter than their task (task consumed on first placement).
    for session in sessions:
        task = tasks_by_id.get(session.get("task_id"), {})
        task_duration = float(task.get("duration", 0.0) or 0.0)
        if float(session.get("duration", 0.0)) < task_duration:
            warnings.append(
                {
                    "code": "WARN_TASK_PARTIALLY_PLACED",
                    "severity": "info",
                    "task_id": session.get("task_id"),
                    "message": "Only part of the task duration was scheduled.",
                    "scheduled_hours": float(session["duration"]),
                    "task_hours": task_duration,
                }
            )
            suggestions.append(
                {
                    "code": "SUGGEST_SPLIT_TASK",
                    "task_id": session.get("task_id"),
                    "message": "Split the task so each part fits in a single session of at most 2 hours.",
                }
            )

    # (3) No focus history.
    if int(result.get("focus_logs_count", 0) or 0) == 0:
        warnings.append(
            {
                "code": "WARN_NO_FOCUS_DATA",
                "severity": "info",
                "message": "No focus logs recorded; every hour was treated as average focus.",
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_LOG_FOCUS",
                "message": "Log focus scores at different hours to improve placement.",
            }
        )

    return warnings, suggestions


def _spaced_warnings(result: dict[str, Any]) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    warnings: list[dict[str, Any]] = []
    suggestions: list[dict[str, Any]] = []
    sessions = [item for item in result.get("sessions", []) if isinstance(item, dict)]
    subject = result.get("subject", {}) if isinstance(result.get("subject"), dict) else {}
    distribution = result.get("distribution", {}) if isinstance(result.get("distribution"), dict) else {}

    total_hours = float(subject.get("total_hours", 0.0) or 0.0)
    planned_hours = sum(float(item.get("duration", 0.0)) for item in sessions)
    shortfall = round(max(0.0, total_hours - planned_hours), 4)
    if shortfall > 0:
        warnings.append(
            {
                "code": "WARN_HOURS_SHORTFALL",
                "severity": "warning",
                "subject_id": subject.get("subject_id"),
                "message": "Planned hours are below the subject's total study hours.",
                "shortfall_hours": shortfall,
            }
        )
        suggestions.append(
            {
                "code": "SUGGEST_INCREASE_AVAILABILITY",
                "subject_id": subject.get("subject_id"),
                "message": "Raise daily_availability or reduce total_hours.",
            }
        )

    planned_count = int(distribution.get("session_count", 0) or 0)
    if planned_count > len(sessions):
        warnings.append(
            {
                "code": "WARN_SESSIONS_DROPPED",
                "severity": "info",
                "subject_id": subject.get("subject_id"),
                "message": "Some sessions were dropped for lack of daily capacity or remaining hours.",
                "planned_sessions": planned_count,
                "emitted_sessions": len(sessions),
            }
        )

    days_until_exam = int(result.get("days_until_exam", 0) or 0)
    if 0 < days_until_exam <= EXAM_IMMINENT_DAYS:
        warnings.append(
            {
                "code": "WARN_EXAM_IMMINENT",
                "severity": "warning",
                "subject_id": subject.get("subject_id"),
                "message": f"Exam is {days_until_exam} day(s) away.",
            }
        )

    return warnings, suggestions


def build_warnings_and_suggestions(
    *,
    mode: str,
    result: dict[str, Any],
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Generate warnings and coherent suggestions for one planning result."""
    if mode == "spaced":
        return _spaced_warnings(result)
    return _adaptive_warnings(result)
