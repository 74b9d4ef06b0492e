"""JSON reports written by the CLI."""

from __future__ import annotations

from typing import Any

from studyplanner.validation.errors import ValidationError, ValidationReport

PLAN_OUTPUT_SCHEMA_VERSION = "1.0.0"


def _iso_stamp(moment: Any) -> str:
    raw = moment.isoformat() if hasattr(moment, "isoformat") else str(moment)
    return raw.replace("+00:00", "Z")


def _plan_id(mode: str, stamp: str) -> str:
    compact = stamp.replace(":", "").replace("-", "").replace("T", "-").replace("Z", "")
    return f"{mode}-{compact}"


def build_error_report(errors: list[ValidationError], code: str = "validation_error") -> dict[str, Any]:
    """Error payload; ``code`` names the failure, ``details`` lists each cause."""
    return {
        "status": "error",
        "error": {
            "code": code,
            "count": len(errors),
            "details": [err.as_detail() for err in errors],
        },
    }


def build_error_report_with_validation(
    errors: list[ValidationError],
    validation_report: ValidationReport,
    code: str = "validation_error",
) -> dict[str, Any]:
    return {**build_error_report(errors, code=code), "validation_report": validation_report.as_dict()}


def build_success_report(
    result: dict[str, Any], metrics: dict[str, Any], validation_report: ValidationReport
) -> dict[str, Any]:
    """Wrap a planner result as ``plan_output``.

    The plan id and timestamp come from the run's injected clock, so the
    same request always yields the same report.
    """
    mode = str(result.get("mode", "plan"))
    stamp = _iso_stamp(result.get("generated_at"))
    plan_output = {
        "schema_version": PLAN_OUTPUT_SCHEMA_VERSION,
        "plan_id": _plan_id(mode, stamp),
        "generated_at": stamp,
        "mode": mode,
        "schedule": result.get("schedule", {}),
        "sessions": result.get("sessions", []),
        "plan_summary": result.get("plan_summary", {}),
        "daily_plan": result.get("daily_plan", []),
        "metrics": metrics,
        "warnings": result.get("warnings", []),
        "suggestions": result.get("suggestions", []),
        "decision_trace": result.get("decision_trace", []),
        "effective_config": result.get("effective_config", {}),
        "validation_report": validation_report.as_dict(),
    }
    return {"status": "ok", "metrics": metrics, "plan_output": plan_output}
