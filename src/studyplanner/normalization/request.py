"""Normalization for incoming request payloads."""

from __future__ import annotations

from typing import Any


def normalize_request(payload: dict[str, Any], *, mode: str | None = None) -> dict[str, Any]:
    """Return a normalized copy of input request.

    ``mode`` (from the CLI subcommand) wins over the payload's own value.
    """
    normalized = dict(payload)
    if "schema_version" not in normalized:
        normalized["schema_version"] = "1.0"
    if mode is not None:
        normalized["mode"] = mode
    if normalized.get("mode") == "adaptive":
        normalized.setdefault("focus_logs", [])
    return normalized
