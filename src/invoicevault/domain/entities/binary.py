"""Binary entity - opaque attachment content."""

from dataclasses import dataclass
from typing import ClassVar

from invoicevault.domain.value_objects import ResourceKind


@dataclass
class Binary:
    """Attachment blob; data is base64 encoded."""

    kind: ClassVar[str] = ResourceKind.BINARY

    id: str | None
    content_type: str
    data: str = ""
