"""Resource kinds held by the resource store."""

from enum import StrEnum


class ResourceKind(StrEnum):
    """Kinds of resources this service stores and erases."""

    DOCUMENT = "DocumentReference"
    INVOICE = "Invoice"
    BINARY = "Binary"
    AUDIT_EVENT = "AuditEvent"
    COMMUNICATION = "Communication"
