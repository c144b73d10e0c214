"""Domain value objects."""

from invoicevault.domain.value_objects.coding import Coding
from invoicevault.domain.value_objects.document_action import DocumentAction
from invoicevault.domain.value_objects.document_flag import (
    ARCHIVE_KIND_SYSTEM,
    FLAG_EXTENSION_URL,
    FLAG_SYSTEM,
    FlagCode,
)
from invoicevault.domain.value_objects.document_status import STATUS_SYSTEM, DocumentStatus
from invoicevault.domain.value_objects.operation_outcome import Issue, IssueType, OperationOutcome
from invoicevault.domain.value_objects.relation_type import RelationType
from invoicevault.domain.value_objects.resource_kind import ResourceKind
from invoicevault.domain.value_objects.severity import Severity
from invoicevault.domain.value_objects.submission_mode import SubmissionMode
from invoicevault.domain.value_objects.typed_id import TypedId
from invoicevault.domain.value_objects.validation_message import ValidationMessage

__all__ = [
    "ARCHIVE_KIND_SYSTEM",
    "FLAG_EXTENSION_URL",
    "FLAG_SYSTEM",
    "STATUS_SYSTEM",
    "Coding",
    "DocumentAction",
    "DocumentStatus",
    "FlagCode",
    "Issue",
    "IssueType",
    "OperationOutcome",
    "RelationType",
    "ResourceKind",
    "Severity",
    "SubmissionMode",
    "TypedId",
    "ValidationMessage",
]
