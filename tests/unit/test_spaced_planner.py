from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from studyplanner.engine import (
    ExamDateInPastError,
    InvalidAvailabilityError,
    PlanningError,
    generate_study_sessions,
)
from studyplanner.reporting import DecisionTraceCollector

NOW = datetime(2026, 1, 5, tzinfo=timezone.utc)


def _subject(**overrides: object) -> dict:
    payload = {
        "subject_id": "math",
        "name": "Math",
        "total_hours": 10,
        "difficulty": 3,
        "exam_date": (NOW + timedelta(days=10)).isoformat(),
    }
    payload.update(overrides)
    return payload


def test_reference_subject_produces_front_loaded_sessions() -> None:
    sessions = generate_study_sessions(_subject(), {"daily_availability": 3}, now=NOW)

    assert len(sessions) == 10
    assert all(s["duration"] == 0.9 for s in sessions)
    assert sum(s["duration"] for s in sessions) <= 10
    assert [s["date"].date().isoformat() for s in sessions] == [
        "2026-01-15",
        "2026-01-15",
        "2026-01-15",
        "2026-01-14",
        "2026-01-13",
        "2026-01-12",
        "2026-01-11",
        "2026-01-10",
        "2026-01-08",
        "2026-01-06",
    ]
    assert sessions[-1]["title"] == "Math - Study Session 11"
    assert sessions[-1]["notes"] == "Final review session"
    assert [s["notes"] for s in sessions[:-1]] == [""] * 9
    assert all(s["status"] == "scheduled" and s["subject_id"] == "math" for s in sessions)


def test_default_options_use_three_hours_per_day() -> None:
    assert generate_study_sessions(_subject(), None, now=NOW) == generate_study_sessions(
        _subject(), {"daily_availability": 3, "session_buffer": 0.5}, now=NOW
    )


@pytest.mark.parametrize("offset", [timedelta(0), timedelta(hours=-1), timedelta(days=-3)])
def test_exam_not_in_future_raises(offset: timedelta) -> None:
    subject = _subject(exam_date=(NOW + offset).isoformat())
    with pytest.raises(ExamDateInPastError) as excinfo:
        generate_study_sessions(subject, {}, now=NOW)
    assert excinfo.value.code == "exam_date_in_past"


@pytest.mark.parametrize("availability", [0, -2])
def test_non_positive_availability_is_rejected(availability: float) -> None:
    with pytest.raises(InvalidAvailabilityError):
        generate_study_sessions(_subject(), {"daily_availability": availability}, now=NOW)


def test_missing_exam_date_is_a_planning_error() -> None:
    with pytest.raises(PlanningError):
        generate_study_sessions(_subject(exam_date=None), {}, now=NOW)


def test_past_dates_are_pushed_forward_by_loop_position() -> None:
    subject = _subject(total_hours=1, difficulty=1, exam_date=(NOW + timedelta(hours=12)).isoformat())
    sessions = generate_study_sessions(subject, {"daily_availability": 3}, now=NOW)

    assert [s["date"] for s in sessions] == [NOW + timedelta(hours=12), NOW + timedelta(days=2)]
    assert [s["duration"] for s in sessions] == [0.5, 0.5]
    assert all(s["date"] >= NOW for s in sessions)
    assert sessions[-1]["notes"] == "Final review session"


def test_full_day_collision_bumps_and_drops_the_session() -> None:
    subject = _subject(total_hours=3, difficulty=1, exam_date=(NOW + timedelta(days=2)).isoformat())
    trace = DecisionTraceCollector(start_timestamp=NOW)
    sessions = generate_study_sessions(subject, {"daily_availability": 1}, now=NOW, decision_trace=trace)

    assert [s["title"] for s in sessions] == ["Math - Study Session 1", "Math - Study Session 3"]
    assert [s["date"] for s in sessions] == [NOW + timedelta(days=2), NOW + timedelta(days=1)]
    assert [s["notes"] for s in sessions] == ["", "Final review session"]

    items = trace.as_list()
    assert len(items) == 3
    assert "RULE_BUMP_FULL_DAY" in items[1]["applied_rules"]
    assert "RULE_DROP_SHORT_SESSION" in items[1]["applied_rules"]
    assert items[1]["date"] == "2026-01-08"


def test_date_only_exam_is_read_as_utc_midnight() -> None:
    sessions = generate_study_sessions(_subject(exam_date="2026-01-15"), {}, now=NOW)
    assert sessions == generate_study_sessions(_subject(), {}, now=NOW)


def test_alternate_multiplier_table_changes_session_count() -> None:
    default = generate_study_sessions(_subject(difficulty=1), {}, now=NOW)
    boosted = generate_study_sessions(_subject(difficulty=1), {}, now=NOW, multipliers={1: 2.0})
    assert len(boosted) > len(default)


def test_output_is_deterministic_for_same_clock() -> None:
    first = generate_study_sessions(_subject(total_hours=40, difficulty=5), {"daily_availability": 4}, now=NOW)
    second = generate_study_sessions(_subject(total_hours=40, difficulty=5), {"daily_availability": 4}, now=NOW)
    assert first == second


def test_last_session_rounds_down_to_stay_within_subject_hours() -> None:
    subject = _subject(total_hours=2.96, difficulty=1)
    trace = DecisionTraceCollector(start_timestamp=NOW)
    sessions = generate_study_sessions(subject, {"daily_availability": 3}, now=NOW, decision_trace=trace)

    assert [s["duration"] for s in sessions] == [1.5, 1.4]
    assert sum(s["duration"] for s in sessions) <= 2.96
    assert "RULE_ROUND_DOWN_TO_REMAINING" in trace.as_list()[1]["applied_rules"]
