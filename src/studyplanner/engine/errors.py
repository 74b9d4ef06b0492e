"""Domain errors raised by the planning engine."""

from __future__ import annotations


class PlanningError(Exception):
    """Base error for a planning call that cannot produce a result."""

    code = "planning_error"

    def __init__(self, message: str, *, path: str = "$") -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class ExamDateInPastError(PlanningError):
    """The subject's exam date is not strictly in the future."""

    code = "exam_date_in_past"

    def __init__(self, days_until_exam: int) -> None:
        super().__init__(
            f"Exam date must be in the future (days until exam: {days_until_exam})",
            path="$.subject.exam_date",
        )
        self.days_until_exam = days_until_exam


class InvalidAvailabilityError(PlanningError):
    """Daily availability is zero or negative."""

    code = "invalid_daily_availability"

    def __init__(self, daily_availability: float) -> None:
        super().__init__(
            f"daily_availability must be > 0, got {daily_availability!r}",
            path="$.options.daily_availability",
        )
        self.daily_availability = daily_availability


class NoPendingTasksError(PlanningError):
    """Adaptive planning was requested without any incomplete task."""

    code = "no_pending_tasks"

    def __init__(self) -> None:
        super().__init__(
            "No tasks found. Create tasks before generating a schedule.",
            path="$.tasks",
        )


class EmptyScheduleError(PlanningError):
    """Planning ran but produced no session."""

    code = "empty_schedule"

    def __init__(self, message: str = "Unable to generate schedule. Check your preferences and task durations.") -> None:
        super().__init__(message, path="$")
