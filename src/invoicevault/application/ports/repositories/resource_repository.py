"""Resource repository port."""

from typing import Protocol

from invoicevault.application.dto.resource_dto import StoredResource
from invoicevault.domain.entities import Resource
from invoicevault.domain.value_objects import TypedId


class ResourceRepository(Protocol):
    """Port for resource persistence, keyed by (kind, id)."""

    async def create(self, resource: Resource) -> StoredResource:
        """Insert; keeps a caller-supplied id, otherwise the store assigns one.

        ``created`` is False when (kind, id) already exists and nothing was written.
        """
        ...

    async def read(self, typed_id: TypedId) -> Resource:
        """Return the resource or raise NotFound."""
        ...

    async def update(self, resource: Resource) -> StoredResource:
        """Upsert with explicit id; ``created`` tells whether the row was new."""
        ...

    async def delete(self, typed_id: TypedId) -> None:
        """Delete the resource or raise NotFound."""
        ...
