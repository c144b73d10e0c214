"""Document entity - billing document reference."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from invoicevault.domain.value_objects import (
    STATUS_SYSTEM,
    Coding,
    DocumentStatus,
    RelationType,
    ResourceKind,
    TypedId,
)


@dataclass
class Attachment:
    """Content entry: either inline base64 data or a url to a stored resource."""

    content_type: str
    url: str | None = None
    data: str | None = None
    title: str | None = None

    @property
    def reference(self) -> TypedId | None:
        """Typed reference behind url, or None for absent/untyped urls."""
        if not self.url:
            return None
        try:
            return TypedId.parse(self.url)
        except ValueError:
            return None


@dataclass
class DocumentFlag:
    """Marker set by the recipient, such as read or archived."""

    marker: Coding
    time: datetime
    details: str | None = None
    read: bool | None = None
    archive_kind: Coding | None = None


@dataclass
class RelatesTo:
    """Typed link to another document."""

    code: RelationType
    target: TypedId


@dataclass
class Document:
    """Invoice-like document with status tags, content and links to other resources."""

    kind: ClassVar[str] = ResourceKind.DOCUMENT

    id: str | None
    subject: str | None = None
    description: str | None = None
    type: Coding | None = None
    tags: list[Coding] = field(default_factory=list)
    profiles: list[str] = field(default_factory=list)
    content: list[Attachment] = field(default_factory=list)
    related: list[TypedId] = field(default_factory=list)
    relates_to: list[RelatesTo] = field(default_factory=list)
    invoices: list[TypedId] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    date: datetime | None = None
    flags: list[DocumentFlag] = field(default_factory=list)

    @property
    def typed_id(self) -> TypedId:
        if not self.id:
            raise ValueError("Document has no id")
        return TypedId(self.kind, self.id)

    def has_tag(self, system: str, code: str) -> bool:
        return any(tag.matches(system, code) for tag in self.tags)

    @property
    def status_tag(self) -> Coding | None:
        """First tag in the invoice status system."""
        return next((t for t in self.tags if t.system == STATUS_SYSTEM), None)

    @property
    def is_in_trash(self) -> bool:
        return self.has_tag(STATUS_SYSTEM, DocumentStatus.PAPIERKORB)

    def set_status(self, status: DocumentStatus) -> None:
        """Replace every status tag with the given one."""
        self.tags = [t for t in self.tags if t.system != STATUS_SYSTEM]
        self.tags.append(Coding(STATUS_SYSTEM, status.value, status.display))

    @property
    def transforms_target(self) -> TypedId | None:
        return next(
            (r.target for r in self.relates_to if r.code == RelationType.TRANSFORMS),
            None,
        )

    def mark_transform_of(self, original: TypedId) -> None:
        """Link this derived document to its original; allowed only once."""
        if self.transforms_target is not None:
            raise ValueError(
                f"Document {self.id} already transforms {self.transforms_target}"
            )
        self.relates_to.append(RelatesTo(RelationType.TRANSFORMS, original))

    def add_flag(self, flag: DocumentFlag) -> None:
        """Append a marker; earlier markers are kept as history."""
        self.flags.append(flag)

    def clone(self) -> "Document":
        return copy.deepcopy(self)
