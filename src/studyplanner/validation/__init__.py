"""Validation helpers."""

from .errors import ValidationError
from .errors import ValidationReport
from .domain_validator import validate_domain_inputs
from .request import PLAN_MODES, validate_plan_request

__all__ = [
    "PLAN_MODES",
    "ValidationError",
    "ValidationReport",
    "validate_domain_inputs",
    "validate_plan_request",
]
