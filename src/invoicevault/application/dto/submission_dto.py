"""Submission DTOs."""

from dataclasses import dataclass

from invoicevault.domain.entities import Document
from invoicevault.domain.value_objects import OperationOutcome


@dataclass(frozen=True)
class SubmissionOutcome:
    """Advisory warnings plus, for a persisted submission, the derived document.

    ``attachments`` holds the attachment documents that were stored and
    linked from the derived document.
    """

    warnings: OperationOutcome | None = None
    transformed: Document | None = None
    attachments: tuple[Document, ...] = ()

    @property
    def token(self) -> str | None:
        """Id of the derived document, handed back to the submitter."""
        return self.transformed.id if self.transformed else None
