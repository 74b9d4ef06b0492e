"""Session-allocation engine."""

from .adaptive import generate_adaptive_schedule, rank_hours
from .errors import (
    EmptyScheduleError,
    ExamDateInPastError,
    InvalidAvailabilityError,
    NoPendingTasksError,
    PlanningError,
)
from .focus_profile import build_focus_profile, peak_focus_hour, summarize_focus_logs
from .prioritizer import DEFAULT_LOAD_WEIGHTS, prioritize_tasks
from .runner import run_focus_stats, run_planner
from .spaced import (
    DIFFICULTY_MULTIPLIERS,
    compute_session_distribution,
    generate_spaced_intervals,
    generate_study_sessions,
)

__all__ = [
    "DEFAULT_LOAD_WEIGHTS",
    "DIFFICULTY_MULTIPLIERS",
    "EmptyScheduleError",
    "ExamDateInPastError",
    "InvalidAvailabilityError",
    "NoPendingTasksError",
    "PlanningError",
    "build_focus_profile",
    "compute_session_distribution",
    "generate_adaptive_schedule",
    "generate_spaced_intervals",
    "generate_study_sessions",
    "peak_focus_hour",
    "prioritize_tasks",
    "rank_hours",
    "run_focus_stats",
    "run_planner",
    "summarize_focus_logs",
]
