"""Domain entities."""

from invoicevault.domain.entities.audit_event import AuditEvent
from invoicevault.domain.entities.binary import Binary
from invoicevault.domain.entities.communication import Communication
from invoicevault.domain.entities.document import Attachment, Document, DocumentFlag, RelatesTo
from invoicevault.domain.entities.invoice import Invoice

Resource = Document | Invoice | Binary | AuditEvent | Communication

__all__ = [
    "Attachment",
    "AuditEvent",
    "Binary",
    "Communication",
    "Document",
    "DocumentFlag",
    "Invoice",
    "RelatesTo",
    "Resource",
]
