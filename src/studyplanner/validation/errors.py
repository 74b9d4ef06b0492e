"""Validation issues collected while loading a planning request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Severity = Literal["error", "info"]


@dataclass(slots=True)
class ValidationError:
    """Blocking problem in the shape used by CLI error reports."""

    code: str
    message: str
    path: str

    def as_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "path": self.path}


@dataclass(slots=True)
class ValidationIssue:
    code: str
    message: str
    field_path: str
    severity: Severity = "error"
    suggested_fix: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_error(self) -> ValidationError:
        return ValidationError(code=self.code, message=self.message, path=self.field_path)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "field_path": self.field_path,
        }
        if self.suggested_fix:
            payload["suggested_fix"] = self.suggested_fix
        payload.update(self.extra)
        return payload


@dataclass(slots=True)
class ValidationReport:
    """Issues found across every input of one request.

    Nothing short-circuits: config resolution and domain validation both
    append here, and the caller decides once at the end whether to plan.
    Infos (clamped values and the like) never block planning.
    """

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def infos(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "info"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(
        self,
        *,
        code: str,
        message: str,
        field_path: str,
        suggested_fix: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                code=code,
                message=message,
                field_path=field_path,
                suggested_fix=suggested_fix,
                extra=extra or {},
            )
        )

    def add_info(
        self,
        *,
        code: str,
        message: str,
        field_path: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(code=code, message=message, field_path=field_path, severity="info", extra=extra or {})
        )

    def extend(self, other: ValidationReport) -> None:
        self.issues.extend(other.issues)

    def to_errors(self) -> list[ValidationError]:
        return [issue.to_error() for issue in self.errors]

    def as_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "errors": [issue.as_dict() for issue in self.errors],
            "infos": [issue.as_dict() for issue in self.infos],
        }
