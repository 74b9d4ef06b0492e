"""Validation for the planning request envelope."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .errors import ValidationError

PLAN_MODES = ("adaptive", "spaced", "focus_stats")

_LIST_FIELDS_BY_MODE: dict[str, tuple[tuple[str, bool], ...]] = {
    "adaptive": (("tasks", True), ("focus_logs", False)),
    "spaced": (),
    "focus_stats": (("focus_logs", True),),
}

_DICT_FIELDS_BY_MODE: dict[str, tuple[tuple[str, bool], ...]] = {
    "adaptive": (("preferences", False),),
    "spaced": (("subject", True), ("options", False)),
    "focus_stats": (),
}


def _check_shape(
    payload: dict[str, Any],
    field: str,
    required: bool,
    expected: type,
    label: str,
    errors: list[ValidationError],
) -> None:
    value = payload.get(field)
    if value is None:
        if required:
            errors.append(
                ValidationError(code="missing_field", message=f"Missing required field: {field}", path=f"$.{field}")
            )
        return
    if not isinstance(value, expected):
        errors.append(
            ValidationError(code="invalid_type", message=f"Field must be {label}: {field}", path=f"$.{field}")
        )


def validate_plan_request(payload: dict[str, Any]) -> list[ValidationError]:
    """Validate the request with basic shape checks."""
    errors: list[ValidationError] = []

    mode = payload.get("mode")
    if mode not in PLAN_MODES:
        errors.append(
            ValidationError(
                code="invalid_mode",
                message=f"mode must be one of: {', '.join(PLAN_MODES)}",
                path="$.mode",
            )
        )
        return errors

    for field, required in _LIST_FIELDS_BY_MODE[mode]:
        _check_shape(payload, field, required, list, "a list", errors)
    for field, required in _DICT_FIELDS_BY_MODE[mode]:
        _check_shape(payload, field, required, dict, "an object", errors)

    now = payload.get("now")
    if now is not None:
        valid = isinstance(now, str)
        if valid:
            try:
                datetime.fromisoformat(now.replace("Z", "+00:00"))
            except ValueError:
                valid = False
        if not valid:
            errors.append(
                ValidationError(code="invalid_datetime", message="now must be an ISO-8601 datetime", path="$.now")
            )

    return errors
