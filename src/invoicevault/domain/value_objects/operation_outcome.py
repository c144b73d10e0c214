"""Structured operation outcome returned to callers."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from invoicevault.domain.value_objects.severity import Severity
from invoicevault.domain.value_objects.validation_message import ValidationMessage


class IssueType(StrEnum):
    """Issue codes used in outcomes."""

    INVALID = "invalid"
    INFORMATIONAL = "informational"
    NOT_FOUND = "not-found"
    FORBIDDEN = "forbidden"
    BUSINESS_RULE = "business-rule"
    EXCEPTION = "exception"
    LOGIN = "login"


@dataclass(frozen=True)
class Issue:
    """One severity-tagged diagnostic entry."""

    severity: Severity
    code: IssueType
    diagnostics: str
    location: str | None = None

    def to_dict(self) -> dict:
        data = {
            "severity": self.severity.value,
            "code": self.code.value,
            "diagnostics": self.diagnostics,
        }
        if self.location:
            data["location"] = [self.location]
        return data


@dataclass(frozen=True)
class OperationOutcome:
    """Ordered collection of issues."""

    issues: tuple[Issue, ...] = field(default_factory=tuple)

    @classmethod
    def from_messages(cls, messages: Iterable[ValidationMessage]) -> "OperationOutcome":
        """One INVALID issue per message, keeping severity, location and order."""
        return cls(
            issues=tuple(
                Issue(
                    severity=m.severity,
                    code=IssueType.INVALID,
                    diagnostics=m.message,
                    location=m.location,
                )
                for m in messages
            )
        )

    @classmethod
    def information(cls, diagnostics: str) -> "OperationOutcome":
        return cls(
            issues=(Issue(Severity.INFORMATION, IssueType.INFORMATIONAL, diagnostics),)
        )

    @property
    def is_empty(self) -> bool:
        return not self.issues

    def to_dict(self) -> dict:
        return {
            "resourceType": "OperationOutcome",
            "issue": [i.to_dict() for i in self.issues],
        }
