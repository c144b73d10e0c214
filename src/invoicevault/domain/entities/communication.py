"""Communication entity - notification addressed to a document's subject."""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from invoicevault.domain.value_objects import Coding, ResourceKind


@dataclass
class Communication:
    """Stored notification.

    The document token is kept as a plain string, so the notification stays
    readable after the document it announced has been erased.
    """

    kind: ClassVar[str] = ResourceKind.COMMUNICATION

    id: str | None
    category: Coding
    recipient: str
    sent: datetime
    payload: str
    token: str | None = None
    status: str = "completed"
    old_status: str | None = None
    new_status: str | None = None
