"""CLI entrypoint for studyplanner."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from loguru import logger

from studyplanner.engine import PlanningError, run_focus_stats, run_planner
from studyplanner.io import read_json, write_json
from studyplanner.metrics import collect_metrics
from studyplanner.normalization import normalize_request, resolve_effective_config
from studyplanner.reporting import (
    build_error_report,
    build_error_report_with_validation,
    build_success_report,
)
from studyplanner.validation import (
    ValidationError,
    ValidationReport,
    validate_domain_inputs,
    validate_plan_request,
)

_COMMAND_MODES = {
    "adaptive": "adaptive",
    "spaced": "spaced",
    "focus-stats": "focus_stats",
}


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _load_request(request_path: str, mode: str, validation_report: ValidationReport) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
    """Return (loaded_request, error_report); exactly one is not None."""
    try:
        request_payload = read_json(request_path)
    except Exception as exc:  # noqa: BLE001
        logger.error("Cannot read request {}: {}", request_path, exc)
        return None, build_error_report(
            [ValidationError(code="invalid_request", message=str(exc), path="$.request")],
            code="request_read_error",
        )

    request_payload = normalize_request(request_payload, mode=mode)
    errors = validate_plan_request(request_payload)
    if errors:
        logger.warning("Request rejected with {} shape error(s)", len(errors))
        return None, build_error_report(errors)

    loaded = dict(request_payload)
    loaded["effective_config"] = resolve_effective_config(loaded, validation_report)
    validation_report.extend(validate_domain_inputs(loaded))

    if validation_report.errors:
        logger.warning("Request rejected with {} domain error(s)", len(validation_report.errors))
        return None, build_error_report_with_validation(
            validation_report.to_errors(),
            validation_report=validation_report,
            code="validation_error",
        )

    for info in validation_report.infos:
        logger.info("{}: {}", info.code, info.message)
    return loaded, None


def run_plan_command(request_path: str, output_path: str, mode: str) -> int:
    validation_report = ValidationReport()
    loaded, error_report = _load_request(request_path, mode, validation_report)
    if error_report is not None:
        write_json(output_path, error_report)
        return 2
    assert loaded is not None

    if mode == "focus_stats":
        result = run_focus_stats(loaded)
        logger.info("Summarized {} focus log(s)", result["focus_logs_count"])
        write_json(output_path, {**result, "validation_report": validation_report.as_dict()})
        return 0

    try:
        result = run_planner(loaded)
    except PlanningError as exc:
        logger.warning("Planning failed [{}]: {}", exc.code, exc.message)
        write_json(
            output_path,
            build_error_report_with_validation(
                [ValidationError(code=exc.code, message=exc.message, path=exc.path)],
                validation_report=validation_report,
                code=exc.code,
            ),
        )
        return 2

    metrics = collect_metrics(result)
    logger.info(
        "Planned {} session(s), {} hour(s) in {} mode",
        metrics["sessions_count"],
        metrics["total_hours"],
        result["mode"],
    )
    for warning in result.get("warnings", []):
        logger.debug("{}: {}", warning.get("code"), warning.get("message"))
    write_json(output_path, build_success_report(result, metrics, validation_report))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studyplanner", description="Study session planner CLI")
    parser.add_argument("--log-level", default="INFO", help="Log level for stderr output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    adaptive_parser = subparsers.add_parser("adaptive", help="Place pending tasks into best-focus hours")
    spaced_parser = subparsers.add_parser("spaced", help="Space study sessions ahead of a subject's exam")
    stats_parser = subparsers.add_parser("focus-stats", help="Summarize focus logs per hour")
    for sub in (adaptive_parser, spaced_parser, stats_parser):
        sub.add_argument("--request", required=True, help="Path to the request JSON")
        sub.add_argument("--output", required=True, help="Path to the output JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    mode = _COMMAND_MODES.get(args.command)
    if mode is None:
        parser.error("Unknown command")
        return 2
    return run_plan_command(args.request, args.output, mode)


if __name__ == "__main__":
    raise SystemExit(main())
