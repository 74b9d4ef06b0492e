"""Spaced planning for a single subject with a fixed exam date.

Pipeline:
1) days until exam (rounded up) and session-count/duration derivation,
2) exponential backward spacing of session offsets from the exam,
3) date correction (past dates pushed forward, one bump for full days),
4) duration capping against remaining hours and daily usage,
5) rounding to 0.1h half-up, or down where half-up would overshoot the
   remaining hours.

Rule preserved: the usage of a bumped session is read and recorded on the
pre-bump day, so a session bumped off a full day is always dropped.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any

from studyplanner.reporting.decision_trace import DecisionTraceCollector

from .clock import as_aware, parse_instant, utc_day_key
from .errors import ExamDateInPastError, InvalidAvailabilityError, PlanningError
from .sessions import build_subject_session, floor_tenth, round_tenth

SECONDS_PER_DAY = 24 * 60 * 60

DEFAULT_DAILY_AVAILABILITY = 3.0
TARGET_SESSION_HOURS = 1.5
MIN_SESSION_HOURS = 0.5
MAX_DAILY_SESSION_HOURS = 3.0
DEFAULT_DIFFICULTY_MULTIPLIER = 1.5

DIFFICULTY_MULTIPLIERS: dict[int, float] = {
    1: 1.0,
    2: 1.2,
    3: 1.5,
    4: 1.8,
    5: 2.2,
}


def compute_days_until_exam(exam_date: datetime, now: datetime) -> int:
    delta = as_aware(exam_date) - as_aware(now)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def difficulty_multiplier(difficulty: Any, multipliers: dict[int, float] | None = None) -> float:
    table = DIFFICULTY_MULTIPLIERS if multipliers is None else multipliers
    if isinstance(difficulty, bool):
        return DEFAULT_DIFFICULTY_MULTIPLIER
    if isinstance(difficulty, float) and difficulty.is_integer():
        difficulty = int(difficulty)
    if not isinstance(difficulty, int):
        return DEFAULT_DIFFICULTY_MULTIPLIER
    return float(table.get(difficulty, DEFAULT_DIFFICULTY_MULTIPLIER))


def compute_session_distribution(
    *,
    total_hours: float,
    difficulty: Any,
    days_until_exam: int,
    daily_availability: float,
    multipliers: dict[int, float] | None = None,
    target_session_hours: float = TARGET_SESSION_HOURS,
    min_session_hours: float = MIN_SESSION_HOURS,
    max_daily_session_hours: float = MAX_DAILY_SESSION_HOURS,
) -> dict[str, Any]:
    """Derive session count and average duration.

    Formulas:
    - base = ceil(total_hours / 1.5)
    - adjusted = ceil(base * difficulty_multiplier)
    - max_possible = floor(days_until_exam * daily_availability / 0.5)
    - min_sessions = max(2, ceil(total_hours / min(3, daily_availability)))
    - session_count = max(min_sessions, min(adjusted, max_possible))
    - avg_duration = min(total_hours / session_count, min(3, daily_availability))

    The lower bound wins when ``min_sessions > max_possible``.
    """

    per_session_cap = min(max_daily_session_hours, daily_availability)
    base_session_count = math.ceil(total_hours / target_session_hours)
    multiplier = difficulty_multiplier(difficulty, multipliers)
    adjusted_session_count = math.ceil(base_session_count * multiplier)
    max_possible_sessions = math.floor(days_until_exam * daily_availability / min_session_hours)
    min_sessions = max(2, math.ceil(total_hours / per_session_cap))
    session_count = max(min_sessions, min(adjusted_session_count, max_possible_sessions))
    avg_duration = min(total_hours / session_count, per_session_cap)

    return {
        "base_session_count": base_session_count,
        "difficulty_multiplier": multiplier,
        "adjusted_session_count": adjusted_session_count,
        "max_possible_sessions": max_possible_sessions,
        "min_sessions": min_sessions,
        "session_count": session_count,
        "avg_duration": avg_duration,
    }


def generate_spaced_intervals(days_until_exam: int, session_count: int) -> list[int]:
    """Offsets in days before the exam, ascending (nearest the exam first)."""
    remaining_days = max(days_until_exam - 1, 1)
    denominator = max(session_count - 1, 1)
    intervals = [
        math.floor(remaining_days * (1 - index / denominator) ** 2)
        for index in range(session_count)
    ]
    return sorted(intervals)


def _subject_total_hours(subject: dict[str, Any]) -> float:
    try:
        return float(subject.get("total_hours", 0.0))
    except (TypeError, ValueError):
        return 0.0


def generate_study_sessions(
    subject: dict[str, Any],
    options: dict[str, Any] | None = None,
    *,
    now: datetime,
    multipliers: dict[int, float] | None = None,
    min_session_hours: float = MIN_SESSION_HOURS,
    target_session_hours: float = TARGET_SESSION_HOURS,
    max_daily_session_hours: float = MAX_DAILY_SESSION_HOURS,
    decision_trace: DecisionTraceCollector | None = None,
) -> list[dict[str, Any]]:
    """Generate backward-spaced study sessions ahead of the subject's exam.

    Raises ``ExamDateInPastError`` when the exam is not strictly in the
    future and ``InvalidAvailabilityError`` when ``daily_availability <= 0``.
    ``session_buffer`` is accepted and ignored by the spacing math.
    """

    opts = options or {}
    raw_availability = opts.get("daily_availability")
    daily_availability = DEFAULT_DAILY_AVAILABILITY if raw_availability is None else float(raw_availability)
    if daily_availability <= 0:
        raise InvalidAvailabilityError(daily_availability)

    now = as_aware(now)
    exam_date = parse_instant(subject.get("exam_date"))
    if exam_date is None:
        raise PlanningError("Subject exam_date is missing or not an ISO date", path="$.subject.exam_date")

    days_until_exam = compute_days_until_exam(exam_date, now)
    if days_until_exam <= 0:
        raise ExamDateInPastError(days_until_exam)

    total_hours = _subject_total_hours(subject)
    distribution = compute_session_distribution(
        total_hours=total_hours,
        difficulty=subject.get("difficulty"),
        days_until_exam=days_until_exam,
        daily_availability=daily_availability,
        multipliers=multipliers,
        target_session_hours=target_session_hours,
        min_session_hours=min_session_hours,
        max_daily_session_hours=max_daily_session_hours,
    )
    session_count = int(distribution["session_count"])
    avg_duration = float(distribution["avg_duration"])
    intervals = generate_spaced_intervals(days_until_exam, session_count)

    sessions: list[dict[str, Any]] = []
    used_hours: dict[str, float] = {}
    emitted_hours = 0.0

    for index in range(session_count):
        rules: list[str] = ["RULE_SPACED_INTERVAL"]
        session_date = exam_date - timedelta(days=intervals[index])
        if session_date < now:
            session_date = now + timedelta(days=index + 1)
            rules.append("RULE_PUSH_PAST_DATE_FORWARD")

        day_key = utc_day_key(session_date)
        day_usage = used_hours.get(day_key, 0.0)
        if day_usage >= daily_availability:
            session_date = session_date + timedelta(days=1)
            rules.append("RULE_BUMP_FULL_DAY")

        remaining_hours = max(0.0, total_hours - emitted_hours)
        session_duration = min(avg_duration, remaining_hours, daily_availability - day_usage)
        is_final = index == session_count - 1

        # Emitted hours never exceed the subject total after rounding.
        rounded_duration = round_tenth(session_duration)
        if rounded_duration > remaining_hours:
            rounded_duration = floor_tenth(session_duration)
            rules.append("RULE_ROUND_DOWN_TO_REMAINING")

        if session_duration >= min_session_hours and rounded_duration >= min_session_hours:
            session = build_subject_session(
                subject,
                index=index,
                start=session_date,
                duration=rounded_duration,
                final_review=is_final,
            )
            sessions.append(session)
            emitted_hours += session["duration"]
            used_hours[day_key] = day_usage + session_duration
            if is_final:
                rules.append("RULE_FINAL_REVIEW")
            note = "Session emitted."
        else:
            rules.append("RULE_DROP_SHORT_SESSION")
            note = f"Dropped: {session_duration:.2f}h is below the {min_session_hours}h minimum."

        if decision_trace is not None:
            decision_trace.record(
                day=utc_day_key(session_date),
                hour=None,
                reference=str(subject.get("subject_id", "")),
                duration=max(0.0, session_duration),
                applied_rules=rules,
                note=note,
                extra={"session_index": index, "days_before_exam": intervals[index]},
            )

    return sessions
