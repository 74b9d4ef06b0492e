"""Instant parsing and normalization; all engine instants are UTC-aware."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any


def as_aware(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def parse_instant(raw: Any) -> datetime | None:
    """Parse an ISO date/datetime (or date/datetime object) into an aware datetime."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return as_aware(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if isinstance(raw, str):
        try:
            return as_aware(datetime.fromisoformat(raw.strip().replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def utc_day_key(moment: datetime) -> str:
    """Calendar-day key of an instant, taken in UTC."""
    return as_aware(moment).astimezone(timezone.utc).date().isoformat()
