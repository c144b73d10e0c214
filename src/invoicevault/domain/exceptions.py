"""Domain exceptions."""

from invoicevault.domain.value_objects import (
    Issue,
    IssueType,
    OperationOutcome,
    Severity,
)


class InvoiceVaultError(Exception):
    """Base exception for invoicevault."""

    issue_type = IssueType.EXCEPTION

    def to_outcome(self) -> OperationOutcome:
        """Render as a single-issue outcome."""
        return OperationOutcome(
            issues=(Issue(Severity.ERROR, self.issue_type, str(self)),)
        )


class PermissionDenied(InvoiceVaultError):
    """Caller is not allowed to perform the requested action."""

    issue_type = IssueType.FORBIDDEN


class NotFound(InvoiceVaultError):
    """Requested resource was not found."""

    issue_type = IssueType.NOT_FOUND

    def __init__(self, kind: str, resource_id: str) -> None:
        self.kind = kind
        self.resource_id = resource_id
        super().__init__(f"{kind}/{resource_id} not found")


class ValidationFailed(InvoiceVaultError):
    """Validation found blocking (error/fatal) messages."""

    issue_type = IssueType.INVALID

    def __init__(self, outcome: OperationOutcome) -> None:
        self.outcome = outcome
        lines = [
            f"{i.location or '-'}: {i.diagnostics} [{i.severity.value}]"
            for i in outcome.issues
        ]
        super().__init__("Validation failed:\n" + "\n".join(lines))

    def to_outcome(self) -> OperationOutcome:
        return self.outcome


class InvalidState(InvoiceVaultError):
    """Resource is not in a state that allows the operation."""

    issue_type = IssueType.BUSINESS_RULE


class InternalError(InvoiceVaultError):
    """Store inconsistency or failed write; aborts the unit of work."""

    def to_outcome(self) -> OperationOutcome:
        return OperationOutcome(
            issues=(Issue(Severity.FATAL, self.issue_type, str(self)),)
        )


class IdCollision(InternalError):
    """Generated id already existed in the store."""
