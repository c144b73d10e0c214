"""Process flag use case - recipient markers such as read or archived."""

import logging
from datetime import datetime

from invoicevault.application.dto.caller import Caller
from invoicevault.application.ports import PermissionChecker
from invoicevault.application.services.audit_recorder import ACTION_UPDATE, AuditRecorder
from invoicevault.domain.entities import Document, DocumentFlag
from invoicevault.domain.exceptions import InternalError, NotFound, PermissionDenied, ValidationFailed
from invoicevault.domain.value_objects import (
    Coding,
    DocumentAction,
    FlagCode,
    OperationOutcome,
    ResourceKind,
    Severity,
    TypedId,
    ValidationMessage,
)

logger = logging.getLogger(__name__)


class ProcessFlagUseCase:
    """Attach a marker to a document.

    Markers accumulate; setting one never removes an earlier one. A read
    marker needs the read flag and an archived marker needs the archive
    kind. Other marker codes are stored as given.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        audit_recorder: AuditRecorder | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._audit = audit_recorder

    async def execute(
        self,
        caller: Caller,
        document_id: str,
        marker: Coding | None,
        time: datetime | None,
        details: str | None = None,
        read: bool | None = None,
        archive_kind: Coding | None = None,
    ) -> Document:
        """Flag document; raises ValidationFailed, NotFound or PermissionDenied."""
        _check_input(marker, time, read, archive_kind)

        typed_id = TypedId(ResourceKind.DOCUMENT, document_id)
        async with self._uow_factory() as uow:
            document = await uow.resources.read(typed_id)
            if not isinstance(document, Document):
                raise NotFound(typed_id.kind, typed_id.id)

            allowed = await self._permission_checker.check(
                caller, DocumentAction.PROCESS_FLAG, document
            )
            if not allowed:
                raise PermissionDenied(f"Caller may not flag {typed_id}")

            document.add_flag(
                DocumentFlag(
                    marker=marker,
                    time=time,
                    details=details or None,
                    read=read if marker.code == FlagCode.GELESEN else None,
                    archive_kind=archive_kind if marker.code == FlagCode.ARCHIVIERT else None,
                )
            )
            stored = await uow.resources.update(document)
            if stored.created:
                raise InternalError(f"{typed_id} vanished while flagging it")

        logger.info("Flag '%s' set on %s", marker.code, typed_id)
        if self._audit is not None:
            await self._audit.record(
                action=ACTION_UPDATE,
                subtype="process-flag",
                entity=typed_id,
                description=f"Flag '{marker.code}' set",
                caller=caller,
            )
        return document


def _check_input(
    marker: Coding | None,
    time: datetime | None,
    read: bool | None,
    archive_kind: Coding | None,
) -> None:
    if marker is None:
        _reject("markierung", "Parameter 'markierung' is required")
    if time is None:
        _reject("zeitpunkt", "Parameter 'zeitpunkt' is required")
    if marker.code == FlagCode.GELESEN and read is None:
        _reject("gelesen", "Parameter 'gelesen' is required for marker 'gelesen'")
    elif marker.code == FlagCode.ARCHIVIERT and archive_kind is None:
        _reject(
            "artDerArchivierung",
            "Parameter 'artDerArchivierung' is required for marker 'archiviert'",
        )
    elif marker.code not in list(FlagCode):
        logger.warning("Unknown marker code '%s', storing it without further checks", marker.code)


def _reject(location: str, text: str) -> None:
    raise ValidationFailed(
        OperationOutcome.from_messages([ValidationMessage(Severity.ERROR, location, text)])
    )
