"""Validation gate - severity-based blocking around the validation engine."""

import logging
from dataclasses import dataclass

from invoicevault.application.ports import ValidationEngine
from invoicevault.domain.entities import Resource
from invoicevault.domain.exceptions import ValidationFailed
from invoicevault.domain.value_objects import OperationOutcome, ValidationMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationReport:
    """Engine messages split into blocking errors and advisory warnings."""

    errors: tuple[ValidationMessage, ...] = ()
    warnings: tuple[ValidationMessage, ...] = ()


class ValidationGate:
    """Runs the engine and blocks on FATAL/ERROR; WARNING/INFORMATION pass through.

    Stateless, so one instance is shared by all use cases.
    """

    def __init__(self, engine: ValidationEngine) -> None:
        self._engine = engine

    def validate(self, resource: Resource) -> ValidationReport:
        """Classify engine messages by severity, keeping engine order."""
        messages = self._engine.validate(resource)
        return ValidationReport(
            errors=tuple(m for m in messages if m.severity.blocks),
            warnings=tuple(m for m in messages if not m.severity.blocks),
        )

    def validate_or_block(self, resource: Resource) -> OperationOutcome:
        """Return advisory messages as an outcome, or raise ValidationFailed."""
        report = self.validate(resource)
        if report.errors:
            outcome = OperationOutcome.from_messages(report.errors)
            logger.error(
                "Validation failed for %s with %d blocking message(s): %s",
                resource.kind,
                len(report.errors),
                "; ".join(f"{m.location}: {m.message} [{m.severity}]" for m in report.errors),
            )
            raise ValidationFailed(outcome)
        if report.warnings:
            logger.info(
                "Validation passed for %s with %d advisory message(s)",
                resource.kind,
                len(report.warnings),
            )
        return OperationOutcome.from_messages(report.warnings)
