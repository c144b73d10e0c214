"""Audit event entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from invoicevault.domain.value_objects import ResourceKind


@dataclass
class AuditEvent:
    """Record of a committed operation.

    The affected resource is kept as a plain identifier string rather than a
    reference, so it stays valid after the resource has been erased.
    """

    kind: ClassVar[str] = ResourceKind.AUDIT_EVENT

    id: str | None
    action: str
    subtype: str
    outcome: str
    entity_identifier: str
    recorded: datetime
    entity_description: str | None = None
    actor_id: str | None = None
