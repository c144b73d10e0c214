"""Audit trail for committed operations."""

import logging
from datetime import UTC, datetime

from invoicevault.application.dto.caller import Caller
from invoicevault.domain.entities import AuditEvent
from invoicevault.domain.value_objects import TypedId

logger = logging.getLogger(__name__)

ACTION_CREATE = "C"
ACTION_UPDATE = "U"
ACTION_DELETE = "D"
OUTCOME_SUCCESS = "0"


class AuditRecorder:
    """Stores an AuditEvent in its own unit of work after an operation committed.

    Recording is best effort: a failure is logged and never undoes or fails
    the operation being audited.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def record(
        self,
        *,
        action: str,
        subtype: str,
        entity: TypedId,
        description: str,
        caller: Caller | None,
    ) -> AuditEvent | None:
        event = AuditEvent(
            id=None,
            action=action,
            subtype=subtype,
            outcome=OUTCOME_SUCCESS,
            entity_identifier=entity.reference,
            entity_description=description,
            actor_id=_actor_id(caller),
            recorded=datetime.now(UTC),
        )
        try:
            async with self._uow_factory() as uow:
                stored = await uow.resources.create(event)
        except Exception:
            logger.exception("Could not record audit event %s/%s for %s", action, subtype, entity)
            return None
        logger.debug("Audit event %s recorded for %s", stored.typed_id, entity)
        return stored.resource


def _actor_id(caller: Caller | None) -> str | None:
    if caller is None:
        return None
    return caller.telematik_id or caller.subject_id or caller.user_id
