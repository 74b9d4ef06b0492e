"""Domain-level validation rules for tasks, focus logs, subject and options."""

from __future__ import annotations

from typing import Any

from studyplanner.engine.clock import parse_instant

from .errors import ValidationReport

_TASK_TYPES = ("Heavy", "Medium", "Light", "Review")
_MIN_TOTAL_HOURS = 0.5
_MAX_TOTAL_HOURS = 1000.0
_MAX_DAILY_HOURS = 24.0
_MAX_HORIZON_DAYS = 366
_CONFIG_HOUR_KEYS = ("max_session_hours", "min_session_hours", "target_session_hours", "max_daily_session_hours")


def validate_domain_inputs(loaded_payload: dict[str, Any]) -> ValidationReport:
    """Validate value ranges, enums and dates of every planning input."""
    report = ValidationReport()
    mode = loaded_payload.get("mode")

    if mode == "adaptive":
        _validate_tasks(loaded_payload.get("tasks", []), report)
    if mode in {"adaptive", "focus_stats"}:
        _validate_focus_logs(loaded_payload.get("focus_logs", []), report)
    if mode == "spaced":
        _validate_subject(loaded_payload.get("subject", {}), report)

    effective = loaded_payload.get("effective_config", {})
    if isinstance(effective, dict):
        _validate_config(effective.get("global", {}), report)
        if mode == "spaced":
            _validate_availability(effective.get("options", {}), report)
        if mode == "adaptive":
            _validate_study_hours(effective.get("preferences", {}), report)

    return report


def _validate_tasks(tasks: Any, report: ValidationReport) -> None:
    if not isinstance(tasks, list):
        return
    task_ids: set[str] = set()
    for idx, task in enumerate(tasks):
        path = f"$.tasks[{idx}]"
        if not isinstance(task, dict):
            report.add_error(code="INVALID_TYPE", message="Task must be an object", field_path=path)
            continue

        task_id = task.get("task_id")
        if task_id is not None:
            if str(task_id) in task_ids:
                report.add_error(
                    code="DUPLICATE_TASK_ID",
                    message=f"Duplicate task_id: {task_id}",
                    field_path=f"{path}.task_id",
                )
            task_ids.add(str(task_id))

        if task.get("task_type") not in _TASK_TYPES:
            report.add_error(
                code="INVALID_TASK_TYPE",
                message=f"Task type {task.get('task_type')!r} is not allowed",
                field_path=f"{path}.task_type",
                suggested_fix=f"Use one of: {', '.join(_TASK_TYPES)}",
            )

        duration = task.get("duration")
        if not _is_number(duration) or duration <= 0:
            report.add_error(
                code="INVALID_TASK_DURATION",
                message="Task duration must be a number of hours > 0",
                field_path=f"{path}.duration",
            )

        deadline = task.get("deadline")
        if deadline not in (None, "") and parse_instant(deadline) is None:
            report.add_error(
                code="INVALID_DATE",
                message="deadline must be an ISO-8601 date or datetime",
                field_path=f"{path}.deadline",
            )


def _validate_focus_logs(focus_logs: Any, report: ValidationReport) -> None:
    if not isinstance(focus_logs, list):
        return
    for idx, log in enumerate(focus_logs):
        path = f"$.focus_logs[{idx}]"
        if not isinstance(log, dict):
            report.add_error(code="INVALID_TYPE", message="Focus log must be an object", field_path=path)
            continue

        score = log.get("focus_score")
        if not _is_number(score) or not 1 <= score <= 5:
            report.add_error(
                code="INVALID_FOCUS_SCORE",
                message="focus_score must be between 1 and 5",
                field_path=f"{path}.focus_score",
            )

        hour = log.get("time_of_day")
        if not isinstance(hour, int) or isinstance(hour, bool) or not 0 <= hour <= 23:
            report.add_error(
                code="INVALID_TIME_OF_DAY",
                message="time_of_day must be an integer hour between 0 and 23",
                field_path=f"{path}.time_of_day",
            )


def _validate_subject(subject: Any, report: ValidationReport) -> None:
    if not isinstance(subject, dict):
        return
    path = "$.subject"

    total_hours = subject.get("total_hours")
    if not _is_number(total_hours) or not _MIN_TOTAL_HOURS <= total_hours <= _MAX_TOTAL_HOURS:
        report.add_error(
            code="INVALID_TOTAL_HOURS",
            message=f"total_hours must be between {_MIN_TOTAL_HOURS} and {_MAX_TOTAL_HOURS:g}",
            field_path=f"{path}.total_hours",
        )

    difficulty = subject.get("difficulty")
    if not isinstance(difficulty, int) or isinstance(difficulty, bool) or not 1 <= difficulty <= 5:
        report.add_error(
            code="INVALID_DIFFICULTY",
            message="difficulty must be an integer between 1 and 5",
            field_path=f"{path}.difficulty",
        )

    if parse_instant(subject.get("exam_date")) is None:
        report.add_error(
            code="INVALID_DATE",
            message="exam_date must be an ISO-8601 date or datetime",
            field_path=f"{path}.exam_date",
        )


def _validate_availability(options: Any, report: ValidationReport) -> None:
    if not isinstance(options, dict):
        return
    availability = options.get("daily_availability")
    if not _is_number(availability) or not 0 < availability <= _MAX_DAILY_HOURS:
        report.add_error(
            code="INVALID_DAILY_AVAILABILITY",
            message="daily_availability must be > 0 and <= 24 hours",
            field_path="$.options.daily_availability",
            suggested_fix="Use a positive number of hours per day.",
        )


def _validate_config(global_config: Any, report: ValidationReport) -> None:
    if not isinstance(global_config, dict):
        return

    horizon = global_config.get("horizon_days")
    if not isinstance(horizon, int) or isinstance(horizon, bool) or not 1 <= horizon <= _MAX_HORIZON_DAYS:
        report.add_error(
            code="INVALID_CONFIG_VALUE",
            message=f"horizon_days must be an integer between 1 and {_MAX_HORIZON_DAYS}",
            field_path="$.config.horizon_days",
        )

    for key in _CONFIG_HOUR_KEYS:
        value = global_config.get(key)
        if not _is_number(value) or not 0 < value <= _MAX_DAILY_HOURS:
            report.add_error(
                code="INVALID_CONFIG_VALUE",
                message=f"{key} must be a number of hours > 0 and <= 24",
                field_path=f"$.config.{key}",
            )

    score = global_config.get("default_focus_score")
    if not _is_number(score) or not 1 <= score <= 5:
        report.add_error(
            code="INVALID_CONFIG_VALUE",
            message="default_focus_score must be between 1 and 5",
            field_path="$.config.default_focus_score",
        )


def _validate_study_hours(preferences: Any, report: ValidationReport) -> None:
    if not isinstance(preferences, dict):
        return
    hours = preferences.get("study_hours_per_day")
    if not _is_number(hours):
        report.add_error(
            code="INVALID_STUDY_HOURS",
            message="study_hours_per_day must be a number",
            field_path="$.preferences.study_hours_per_day",
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
