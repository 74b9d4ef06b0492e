"""Session descriptor builders shared by both planning modes."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

FINAL_REVIEW_NOTE = "Final review session"
SCHEDULED = "scheduled"


def round_tenth(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(float(value) * 10 + 0.5) / 10


def floor_tenth(value: float) -> float:
    return math.floor(float(value) * 10) / 10


def build_task_session(
    task: dict[str, Any],
    *,
    start: datetime,
    duration: float,
    focus_level: float,
) -> dict[str, Any]:
    return {
        "task_id": task.get("task_id"),
        "title": str(task.get("title", "")),
        "subject": str(task.get("subject", "")),
        "task_type": str(task.get("task_type", "")),
        "date": start,
        "duration": float(duration),
        "focus_level": float(focus_level),
        "status": SCHEDULED,
        "notes": f"Focus Level: {round_tenth(focus_level)}",
    }


def build_subject_session(
    subject: dict[str, Any],
    *,
    index: int,
    start: datetime,
    duration: float,
    final_review: bool,
) -> dict[str, Any]:
    name = str(subject.get("name", subject.get("subject_id", "")))
    return {
        "subject_id": subject.get("subject_id"),
        "title": f"{name} - Study Session {index + 1}",
        "date": start,
        "duration": round_tenth(duration),
        "status": SCHEDULED,
        "notes": FINAL_REVIEW_NOTE if final_review else "",
    }
