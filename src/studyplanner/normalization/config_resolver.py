"""Resolve effective planner configuration from layered inputs."""

from __future__ import annotations

from typing import Any

from studyplanner.validation.errors import ValidationReport

DEFAULT_GLOBAL_CONFIG: dict[str, Any] = {
    "horizon_days": 7,
    "max_session_hours": 2.0,
    "default_focus_score": 3.0,
    "min_session_hours": 0.5,
    "target_session_hours": 1.5,
    "max_daily_session_hours": 3.0,
}

DEFAULT_PREFERENCES: dict[str, Any] = {
    "study_hours_per_day": 4.0,
    "preferred_study_time": "morning",
}

DEFAULT_OPTIONS: dict[str, Any] = {
    "daily_availability": 3.0,
    "session_buffer": 0.5,
}

_ALLOWED_GLOBAL_KEYS = set(DEFAULT_GLOBAL_CONFIG)


def resolve_effective_config(loaded_payload: dict[str, Any], validation_report: ValidationReport) -> dict[str, Any]:
    """Build an engine-ready configuration: defaults first, then request values."""
    return {
        "global": _resolve_global_config(loaded_payload.get("config"), validation_report),
        "preferences": _resolve_preferences(loaded_payload.get("preferences"), validation_report),
        "options": _merge(DEFAULT_OPTIONS, loaded_payload.get("options")),
    }


def _merge(defaults: dict[str, Any], source: Any) -> dict[str, Any]:
    merged = dict(defaults)
    if isinstance(source, dict):
        merged.update({key: value for key, value in source.items() if value is not None})
    return merged


def _resolve_global_config(source: Any, validation_report: ValidationReport) -> dict[str, Any]:
    global_config = dict(DEFAULT_GLOBAL_CONFIG)
    if not isinstance(source, dict):
        return global_config

    for key, value in source.items():
        if key in _ALLOWED_GLOBAL_KEYS:
            global_config[key] = value
            continue
        validation_report.add_error(
            code="INVALID_CONFIG_KEY",
            message=f"Config key {key!r} is not allowed",
            field_path=f"$.config.{key}",
            suggested_fix=f"Use one of: {', '.join(sorted(_ALLOWED_GLOBAL_KEYS))}",
        )

    return global_config


def _resolve_preferences(source: Any, validation_report: ValidationReport) -> dict[str, Any]:
    preferences = _merge(DEFAULT_PREFERENCES, source)

    hours = preferences.get("study_hours_per_day")
    if isinstance(hours, (int, float)) and not isinstance(hours, bool):
        clamped = min(24.0, max(0.0, float(hours)))
        if clamped != hours:
            validation_report.add_info(
                code="INFO_CLAMP_STUDY_HOURS_APPLIED",
                message="study_hours_per_day was clamped into [0,24]",
                field_path="$.preferences.study_hours_per_day",
                extra={"applied_value": clamped},
            )
        preferences["study_hours_per_day"] = clamped

    return preferences
