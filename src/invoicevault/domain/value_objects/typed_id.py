"""Typed resource identifier."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class TypedId:
    """(kind, id) pair - versionless identity of a stored resource.

    Equality, hashing and ordering are keyed on the pair, so sets of TypedId
    are used to deduplicate visits and deletions across the resource graph.
    """

    kind: str
    id: str

    def __post_init__(self) -> None:
        if not self.kind or not self.id:
            raise ValueError("TypedId requires both kind and id")
        if "/" in self.kind or "/" in self.id:
            raise ValueError(f"Invalid TypedId part: {self.kind!r}/{self.id!r}")

    @classmethod
    def parse(cls, reference: str) -> "TypedId":
        """Parse 'Kind/id' (or an absolute url ending in it); history suffix is dropped."""
        if not isinstance(reference, str):
            raise ValueError(f"Reference must be a string, got {type(reference).__name__}")
        parts = [p for p in reference.strip().split("/") if p]
        if "_history" in parts:
            parts = parts[: parts.index("_history")]
        if len(parts) < 2:
            raise ValueError(f"Not a typed reference: {reference!r}")
        return cls(kind=parts[-2], id=parts[-1])

    @property
    def reference(self) -> str:
        return f"{self.kind}/{self.id}"

    def __str__(self) -> str:
        return self.reference
