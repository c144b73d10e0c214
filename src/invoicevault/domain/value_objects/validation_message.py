"""Single message produced by a validation engine."""

from dataclasses import dataclass

from invoicevault.domain.value_objects.severity import Severity


@dataclass(frozen=True)
class ValidationMessage:
    """Engine message: severity, location (path inside the resource) and text."""

    severity: Severity
    location: str
    message: str
