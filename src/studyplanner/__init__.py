"""Study session planner: adaptive focus-based and spaced exam planning."""

from .engine import generate_adaptive_schedule, generate_study_sessions

__all__ = ["generate_adaptive_schedule", "generate_study_sessions"]

__version__ = "0.1.0"
