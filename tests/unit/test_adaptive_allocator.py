from __future__ import annotations

from copy import deepcopy
from datetime import datetime, timedelta, timezone

from studyplanner.engine import generate_adaptive_schedule
from studyplanner.reporting import DecisionTraceCollector

NOW = datetime(2026, 1, 5, tzinfo=timezone.utc)


def _task(task_id: str, task_type: str = "Heavy", duration: float = 1.0, **extra: object) -> dict:
    payload = {
        "task_id": task_id,
        "subject": "Math",
        "title": f"Task {task_id}",
        "task_type": task_type,
        "duration": duration,
        "completed": False,
    }
    payload.update(extra)
    return payload


def test_single_heavy_task_is_capped_at_two_hours_and_consumed() -> None:
    logs = [{"focus_score": 5, "time_of_day": 9}, {"focus_score": 4, "time_of_day": 10}]
    sessions = generate_adaptive_schedule(
        [_task("t1", "Heavy", 3)],
        logs,
        {"study_hours_per_day": 4},
        now=NOW,
    )

    assert len(sessions) == 1
    session = sessions[0]
    assert session["task_id"] == "t1"
    assert session["duration"] == 2
    assert session["date"] == NOW + timedelta(hours=9)
    assert session["focus_level"] == 5.0
    assert session["notes"] == "Focus Level: 5.0"
    assert session["status"] == "scheduled"


def test_no_tasks_yields_empty_schedule() -> None:
    assert generate_adaptive_schedule([], [], {}, now=NOW) == []


def test_zero_study_hours_yields_empty_schedule() -> None:
    assert generate_adaptive_schedule([_task("t1")], [], {"study_hours_per_day": 0}, now=NOW) == []


def test_default_study_hours_is_four() -> None:
    tasks = [_task(str(i), "Medium", 2) for i in range(3)]
    sessions = generate_adaptive_schedule(tasks, [], None, now=NOW)
    assert [s["date"].date() for s in sessions] == [NOW.date(), NOW.date(), (NOW + timedelta(days=1)).date()]


def test_daily_capacity_fills_best_hours_then_rolls_to_next_day() -> None:
    logs = [
        {"focus_score": 5, "time_of_day": 8},
        {"focus_score": 4, "time_of_day": 18},
    ]
    tasks = [_task("a", "Heavy", 3), _task("b", "Heavy", 3), _task("c", "Heavy", 3)]
    sessions = generate_adaptive_schedule(tasks, logs, {"study_hours_per_day": 4}, now=NOW)

    assert [(s["task_id"], s["date"], s["duration"]) for s in sessions] == [
        ("a", NOW + timedelta(hours=8), 2),
        ("b", NOW + timedelta(hours=18), 2),
        ("c", NOW + timedelta(days=1, hours=8), 2),
    ]


def test_session_is_limited_by_remaining_daily_capacity() -> None:
    tasks = [_task("a", "Heavy", 2), _task("b", "Medium", 2)]
    sessions = generate_adaptive_schedule(tasks, [], {"study_hours_per_day": 3}, now=NOW)

    assert [s["duration"] for s in sessions] == [2, 1]
    assert [s["date"] for s in sessions] == [NOW, NOW + timedelta(hours=1)]


def test_horizon_stops_after_seven_days() -> None:
    tasks = [_task(str(i), "Light", 2) for i in range(20)]
    sessions = generate_adaptive_schedule(tasks, [], {"study_hours_per_day": 2}, now=NOW)

    assert len(sessions) == 7
    assert sessions[-1]["date"] == NOW + timedelta(days=6)


def test_priority_order_maps_to_focus_rank() -> None:
    logs = [
        {"focus_score": 5, "time_of_day": 7},
        {"focus_score": 2, "time_of_day": 7},
        {"focus_score": 4, "time_of_day": 21},
    ]
    tasks = [
        _task("review", "Review", 1),
        _task("heavy", "Heavy", 1),
        _task("light", "Light", 1),
    ]
    sessions = generate_adaptive_schedule(tasks, logs, {"study_hours_per_day": 3}, now=NOW)

    assert [(s["task_id"], s["date"].hour) for s in sessions] == [
        ("heavy", 21),
        ("light", 7),
        ("review", 0),
    ]
    assert sessions[0]["focus_level"] == 4.0
    assert sessions[1]["focus_level"] == 3.5


def test_hours_before_now_are_skipped_on_the_first_day() -> None:
    later = NOW + timedelta(hours=15, minutes=30)
    sessions = generate_adaptive_schedule([_task("a"), _task("b", "Light")], [], {}, now=later)

    assert [s["date"] for s in sessions] == [NOW + timedelta(hours=16), NOW + timedelta(hours=17)]
    assert all(s["date"] >= later for s in sessions)


def test_late_evening_spills_into_following_days() -> None:
    later = NOW + timedelta(hours=23, minutes=1)
    tasks = [_task("a", "Heavy", 2), _task("b", "Heavy", 2)]
    sessions = generate_adaptive_schedule(tasks, [], {"study_hours_per_day": 2}, now=later)

    assert [s["date"] for s in sessions] == [NOW + timedelta(days=1), NOW + timedelta(days=2)]


def test_horizon_starts_at_midnight_of_the_utc_day() -> None:
    local_now = datetime(2026, 1, 5, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    sessions = generate_adaptive_schedule([_task("a")], [], {}, now=local_now)

    assert sessions[0]["date"] == datetime(2026, 1, 4, 23, tzinfo=timezone.utc)
    assert sessions[0]["date"] >= local_now


def test_inputs_are_not_mutated_and_output_is_deterministic() -> None:
    tasks = [_task("a", "Light", 1), _task("b", "Heavy", 3, deadline="2026-01-07")]
    logs = [{"focus_score": 4, "time_of_day": 10}]
    snapshot = deepcopy((tasks, logs))

    first = generate_adaptive_schedule(tasks, logs, {"study_hours_per_day": 4}, now=NOW)
    second = generate_adaptive_schedule(tasks, logs, {"study_hours_per_day": 4}, now=NOW)

    assert first == second
    assert (tasks, logs) == snapshot


def test_decision_trace_records_partial_placement() -> None:
    trace = DecisionTraceCollector(start_timestamp=NOW)
    generate_adaptive_schedule([_task("a", "Heavy", 3)], [], {}, now=NOW, decision_trace=trace)

    items = trace.as_list()
    assert len(items) == 1
    assert items[0]["reference"] == "a"
    assert "RULE_CONSUME_ON_FIRST_PLACEMENT" in items[0]["applied_rules"]
    assert items[0]["timestamp"] == "2026-01-05T00:00:00.001000Z"
