"""Decision trace utilities for allocator runtime events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(slots=True)
class DecisionTraceCollector:
    """Collect placement decisions while an allocator runs.

    Timestamps are offsets from ``start_timestamp`` so that two runs with
    the same injected clock produce the same trace.
    """

    start_timestamp: datetime
    _sequence: int = 0
    _items: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.start_timestamp.tzinfo is None:
            self.start_timestamp = self.start_timestamp.replace(tzinfo=timezone.utc)

    def record(
        self,
        *,
        day: str,
        hour: int | None,
        reference: str,
        duration: float,
        applied_rules: list[str],
        note: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self._sequence += 1
        timestamp = self.start_timestamp + timedelta(milliseconds=self._sequence)
        item: dict[str, Any] = {
            "decision_id": f"d-{self._sequence:06d}",
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "date": day,
            "hour": hour,
            "reference": reference,
            "duration": float(duration),
            "applied_rules": list(applied_rules),
            "note": note,
        }
        if extra:
            item.update(extra)
        self._items.append(item)

    def as_list(self) -> list[dict[str, Any]]:
        """Return trace in recording order."""
        return sorted(self._items, key=lambda item: str(item["decision_id"]))
