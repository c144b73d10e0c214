"""PostgreSQL resource repository implementation."""

import copy
import logging
from uuid import uuid4

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from invoicevault.application.dto.resource_dto import StoredResource
from invoicevault.domain.entities import Resource
from invoicevault.domain.exceptions import NotFound
from invoicevault.domain.value_objects import TypedId
from invoicevault.infrastructure.codec import resource_from_dict, resource_to_dict

logger = logging.getLogger(__name__)


class PostgresResourceRepository:
    """Resource repository over the single ``resource`` table, keyed by (kind, id)."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, resource: Resource) -> StoredResource:
        """Insert; existing (kind, id) leaves the row untouched and returns created=False."""
        stored = _with_id(resource, resource.id or str(uuid4()))
        cur = await self._conn.execute(
            "INSERT INTO resource (kind, id, body) VALUES (%s, %s, %s) "
            "ON CONFLICT (kind, id) DO NOTHING RETURNING id",
            (stored.kind, stored.id, Jsonb(resource_to_dict(stored))),
        )
        r = await cur.fetchone()
        typed_id = TypedId(stored.kind, stored.id)
        logger.debug("create %s -> %s", typed_id, "inserted" if r else "exists")
        return StoredResource(typed_id=typed_id, resource=stored, created=r is not None)

    async def read(self, typed_id: TypedId) -> Resource:
        """Get resource by typed id."""
        cur = await self._conn.execute(
            "SELECT body FROM resource WHERE kind = %s AND id = %s",
            (typed_id.kind, typed_id.id),
        )
        r = await cur.fetchone()
        if not r:
            raise NotFound(typed_id.kind, typed_id.id)
        return resource_from_dict(typed_id.kind, r[0])

    async def update(self, resource: Resource) -> StoredResource:
        """Upsert by explicit id; ``created`` is True when no row existed."""
        if not resource.id:
            raise ValueError("update requires an explicit id")
        cur = await self._conn.execute(
            "INSERT INTO resource (kind, id, body) VALUES (%s, %s, %s) "
            "ON CONFLICT (kind, id) DO UPDATE SET body = EXCLUDED.body, updated_at = now() "
            "RETURNING id, (xmax = 0) AS inserted",
            (resource.kind, resource.id, Jsonb(resource_to_dict(resource))),
        )
        r = await cur.fetchone()
        typed_id = TypedId(resource.kind, r[0])
        logger.debug("update %s -> %s", typed_id, "inserted" if r[1] else "replaced")
        return StoredResource(typed_id=typed_id, resource=resource, created=bool(r[1]))

    async def delete(self, typed_id: TypedId) -> None:
        """Delete resource by typed id."""
        cur = await self._conn.execute(
            "DELETE FROM resource WHERE kind = %s AND id = %s RETURNING id",
            (typed_id.kind, typed_id.id),
        )
        if await cur.fetchone() is None:
            raise NotFound(typed_id.kind, typed_id.id)


def _with_id(resource: Resource, resource_id: str) -> Resource:
    if resource.id == resource_id:
        return resource
    stored = copy.copy(resource)
    stored.id = resource_id
    return stored
