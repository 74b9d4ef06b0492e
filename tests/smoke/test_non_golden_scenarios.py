from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from studyplanner.engine import ExamDateInPastError, NoPendingTasksError, run_planner
from studyplanner.metrics import collect_metrics
from studyplanner.normalization import normalize_request, resolve_effective_config
from studyplanner.validation import ValidationReport, validate_domain_inputs

NOW = datetime(2026, 1, 5, tzinfo=timezone.utc)


def _loaded(payload: dict, mode: str) -> dict:
    loaded = normalize_request({"now": NOW.isoformat(), **payload}, mode=mode)
    vr = ValidationReport()
    loaded["effective_config"] = resolve_effective_config(loaded, vr)
    vr.extend(validate_domain_inputs(loaded))
    assert vr.ok, vr.as_dict()
    return loaded


def _warning_codes(result: dict) -> list[str]:
    return [w["code"] for w in result["warnings"]]


def test_semester_week_with_overflowing_backlog() -> None:
    types = ["Heavy", "Medium", "Light", "Review"]
    tasks = [
        {
            "task_id": f"t{i:02d}",
            "subject": ["Math", "Biology", "History"][i % 3],
            "title": f"Assignment {i}",
            "task_type": types[i % 4],
            "duration": 1 + (i % 3) * 0.5,
            "deadline": (NOW + timedelta(days=1 + i % 6)).date().isoformat() if i % 2 else None,
            "completed": i % 7 == 0,
        }
        for i in range(30)
    ]
    logs = [
        {"focus_score": 5, "time_of_day": 8},
        {"focus_score": 4, "time_of_day": 8},
        {"focus_score": 4, "time_of_day": 16},
        {"focus_score": 2, "time_of_day": 23},
    ]
    result = run_planner(_loaded({"tasks": tasks, "focus_logs": logs, "preferences": {"study_hours_per_day": 2}}, "adaptive"))

    pending = [t for t in tasks if not t["completed"]]
    assert len(result["tasks"]) == len(pending)
    assert len(result["sessions"]) + len(result["unscheduled_task_ids"]) == len(pending)
    assert "WARN_TASKS_NOT_SCHEDULED" in _warning_codes(result)
    assert "WARN_NO_FOCUS_DATA" not in _warning_codes(result)
    assert result["peak_focus_hour"] == 8
    assert all(day["total_hours"] <= 2 for day in result["daily_plan"])
    assert len(result["daily_plan"]) == 7

    metrics = collect_metrics(result)
    assert metrics["days_used"] == 7
    assert metrics["task_coverage"] < 1.0
    assert metrics["capacity_utilization"] == 1.0


def test_fresh_student_without_focus_history() -> None:
    tasks = [{"task_id": "essay", "subject": "English", "title": "Essay draft", "task_type": "Heavy", "duration": 5}]
    result = run_planner(_loaded({"tasks": tasks}, "adaptive"))

    assert result["sessions"][0]["date"] == NOW
    assert result["sessions"][0]["duration"] == 2.0
    assert result["sessions"][0]["notes"] == "Focus Level: 3.0"
    assert _warning_codes(result) == ["WARN_TASK_PARTIALLY_PLACED", "WARN_NO_FOCUS_DATA"]
    assert [s["code"] for s in result["suggestions"]] == ["SUGGEST_SPLIT_TASK", "SUGGEST_LOG_FOCUS"]


def test_everything_done_raises() -> None:
    tasks = [{"task_id": "a", "task_type": "Light", "duration": 1, "completed": True}]
    with pytest.raises(NoPendingTasksError):
        run_planner(_loaded({"tasks": tasks}, "adaptive"))


def test_cramming_two_days_before_exam() -> None:
    subject = {
        "subject_id": "chem",
        "name": "Chemistry",
        "total_hours": 3,
        "difficulty": 1,
        "exam_date": (NOW + timedelta(days=2)).isoformat(),
    }
    result = run_planner(_loaded({"subject": subject, "options": {"daily_availability": 1}}, "spaced"))

    assert result["days_until_exam"] == 2
    assert len(result["sessions"]) == 2
    assert set(_warning_codes(result)) == {"WARN_HOURS_SHORTFALL", "WARN_SESSIONS_DROPPED", "WARN_EXAM_IMMINENT"}
    shortfall = next(w for w in result["warnings"] if w["code"] == "WARN_HOURS_SHORTFALL")
    assert shortfall["shortfall_hours"] == 1.0

    metrics = collect_metrics(result)
    assert metrics["sessions_count"] == 2
    assert metrics["total_hours"] == 2.0
    assert metrics["days_used"] == 2
    assert metrics["max_daily_hours"] == 1.0
    assert metrics["capacity_utilization"] == 1.0
    assert metrics["hours_coverage"] == 0.6667
    assert metrics["final_review_sessions"] == 1


def test_month_long_preparation_for_hard_exam() -> None:
    subject = {
        "subject_id": "physics",
        "name": "Physics",
        "total_hours": 40,
        "difficulty": 5,
        "exam_date": (NOW + timedelta(days=30, hours=9)).isoformat(),
    }
    result = run_planner(_loaded({"subject": subject, "options": {"daily_availability": 4}}, "spaced"))

    distribution = result["distribution"]
    assert distribution["base_session_count"] == 27
    assert distribution["adjusted_session_count"] == 60
    assert distribution["session_count"] == 60
    assert result["days_until_exam"] == 31
    assert 0 < len(result["sessions"]) <= 60
    assert result["schedule"]["total_hours"] <= 40
    assert all(NOW <= s["date"] <= result["schedule"]["exam_date"] for s in result["sessions"])
    assert "WARN_EXAM_IMMINENT" not in _warning_codes(result)


def test_exam_already_happened() -> None:
    subject = {"subject_id": "bio", "name": "Biology", "total_hours": 5, "difficulty": 2, "exam_date": "2026-01-04"}
    with pytest.raises(ExamDateInPastError):
        run_planner(_loaded({"subject": subject}, "spaced"))
