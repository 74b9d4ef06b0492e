"""I/O helpers for planner CLI."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any


def read_json(path: str | Path) -> dict[str, Any]:
    """Read a JSON file and return a dictionary payload."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"JSON root must be an object: {path}")
    return payload


def _encode(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat().replace("+00:00", "Z")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(payload: dict[str, Any]) -> str:
    """Serialize with stable formatting; datetimes become ISO-8601 strings."""
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True, default=_encode) + "\n"


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    Path(path).write_text(dumps(payload), encoding="utf-8")
