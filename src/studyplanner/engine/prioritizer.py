"""Task ordering by cognitive load and deadline."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .clock import parse_instant

DEFAULT_LOAD_WEIGHTS: dict[str, int] = {
    "Heavy": 5,
    "Medium": 3,
    "Light": 2,
    "Review": 1,
}

_NO_DEADLINE = datetime.max.replace(tzinfo=timezone.utc)


def parse_deadline(raw: Any) -> datetime | None:
    """Parse a task deadline into an aware datetime, or None."""
    return parse_instant(raw)


def load_requirement(task: dict[str, Any], load_weights: dict[str, int] | None = None) -> int:
    weights = DEFAULT_LOAD_WEIGHTS if load_weights is None else load_weights
    return int(weights.get(str(task.get("task_type", "")), 0))


def priority_key(
    task: dict[str, Any],
    *,
    load_weights: dict[str, int] | None = None,
) -> tuple[int, int, datetime]:
    """Return the placement sort key.

    Order:
    1) higher cognitive-load requirement first
    2) tasks with a deadline before tasks without one
    3) earlier deadline first
    """

    deadline = parse_deadline(task.get("deadline"))
    if deadline is None:
        return (-load_requirement(task, load_weights), 1, _NO_DEADLINE)
    return (-load_requirement(task, load_weights), 0, deadline)


def prioritize_tasks(
    tasks: list[dict[str, Any]],
    *,
    load_weights: dict[str, int] | None = None,
) -> list[dict[str, Any]]:
    """Return a new list of tasks in placement order; ties keep input order."""
    return sorted(tasks, key=lambda task: priority_key(task, load_weights=load_weights))
