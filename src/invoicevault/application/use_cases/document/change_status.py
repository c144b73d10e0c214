"""Change document status use case."""

import logging

from invoicevault.application.dto.caller import Caller
from invoicevault.application.ports import PermissionChecker
from invoicevault.application.services.audit_recorder import ACTION_UPDATE, AuditRecorder
from invoicevault.application.services.notification_recorder import NotificationRecorder
from invoicevault.domain.entities import Document
from invoicevault.domain.exceptions import InternalError, InvalidState, NotFound, PermissionDenied
from invoicevault.domain.value_objects import DocumentAction, DocumentStatus, ResourceKind, TypedId

logger = logging.getLogger(__name__)


class ChangeStatusUseCase:
    """Move a document between open, done and trash.

    Trash is terminal: a trashed document can only be erased.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        audit_recorder: AuditRecorder | None = None,
        notification_recorder: NotificationRecorder | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._audit = audit_recorder
        self._notifications = notification_recorder

    async def execute(self, caller: Caller, document_id: str, new_status: str) -> Document:
        """Change status; raises NotFound, PermissionDenied or InvalidState."""
        try:
            target = DocumentStatus(new_status)
        except ValueError:
            raise InvalidState(f"Unknown status '{new_status}'") from None

        typed_id = TypedId(ResourceKind.DOCUMENT, document_id)
        async with self._uow_factory() as uow:
            document = await uow.resources.read(typed_id)
            if not isinstance(document, Document):
                raise NotFound(typed_id.kind, typed_id.id)

            allowed = await self._permission_checker.check(
                caller, DocumentAction.CHANGE_STATUS, document
            )
            if not allowed:
                raise PermissionDenied(f"Caller may not change status of {typed_id}")

            current = current_status(document)
            _check_transition(current, target)
            document.set_status(target)
            stored = await uow.resources.update(document)
            if stored.created:
                raise InternalError(f"{typed_id} vanished while changing its status")

        logger.info("Status of %s changed from %s to %s", typed_id, current, target)
        if self._audit is not None:
            await self._audit.record(
                action=ACTION_UPDATE,
                subtype="change-status",
                entity=typed_id,
                description=f"Status changed from '{current}' to '{target}'",
                caller=caller,
            )
        if self._notifications is not None:
            await self._notifications.status_changed(document, current, target)
        return document


def current_status(document: Document) -> DocumentStatus:
    """Status from the first status tag; missing or unknown codes count as open."""
    tag = document.status_tag
    if tag is None:
        return DocumentStatus.OFFEN
    try:
        return DocumentStatus(tag.code)
    except ValueError:
        logger.warning("Document %s has unknown status '%s', treating as open", document.id, tag.code)
        return DocumentStatus.OFFEN


def _check_transition(current: DocumentStatus, target: DocumentStatus) -> None:
    if current == target:
        raise InvalidState(f"Document already has status '{target}'")
    if current == DocumentStatus.PAPIERKORB:
        raise InvalidState("Documents in the trash cannot change status")
