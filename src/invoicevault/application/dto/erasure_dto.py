"""Erasure DTOs."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from invoicevault.domain.value_objects import TypedId


@dataclass(frozen=True)
class ErasurePlan:
    """Resources collected from a root document, grouped by kind.

    ``documents`` never contains the root; it is deleted separately and first.
    """

    root: TypedId
    binaries: frozenset[TypedId] = field(default_factory=frozenset)
    invoices: frozenset[TypedId] = field(default_factory=frozenset)
    documents: frozenset[TypedId] = field(default_factory=frozenset)

    def dependencies(self) -> Iterator[TypedId]:
        """Binaries, then invoices, then documents; sorted within each kind."""
        yield from sorted(self.binaries)
        yield from sorted(self.invoices)
        yield from sorted(self.documents)

    def __len__(self) -> int:
        return 1 + len(self.binaries) + len(self.invoices) + len(self.documents)
