"""Notifications for the insured person a document is addressed to."""

import logging
from datetime import UTC, datetime

from invoicevault.domain.entities import Communication, Document
from invoicevault.domain.value_objects import Coding

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE_SYSTEM = "http://gematik.de/fhir/erg/CodeSystem/notification-type"
TOKEN_AVAILABLE = Coding(NOTIFICATION_TYPE_SYSTEM, "erg-token-available", "ERG-Token verfügbar")
STATUS_CHANGED = Coding(NOTIFICATION_TYPE_SYSTEM, "status-change", "Statusänderung")


class NotificationRecorder:
    """Stores Communication records for a document's subject.

    Like the audit trail this runs after the operation committed and is best
    effort: a failure is logged and the operation still succeeds. Documents
    without a subject have nobody to notify and are skipped.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def document_available(
        self, document: Document, provider_name: str | None = None
    ) -> Communication | None:
        """Announce a newly submitted document and its token."""
        text = (
            "Neue E-Rechnung verfügbar!\n\n"
            f"Von: {provider_name or 'Unbekannt'}\n"
            f"ERG-Token: {document.id}\n"
        )
        return await self._store(document, TOKEN_AVAILABLE, text)

    async def status_changed(
        self, document: Document, old_status: str, new_status: str
    ) -> Communication | None:
        """Tell the subject that a document moved to another status."""
        text = (
            f"Der Status Ihrer E-Rechnung (ERG-Token: {document.id}) wurde von "
            f"'{old_status}' zu '{new_status}' geändert."
        )
        return await self._store(
            document, STATUS_CHANGED, text, old_status=old_status, new_status=new_status
        )

    async def _store(
        self,
        document: Document,
        category: Coding,
        payload: str,
        old_status: str | None = None,
        new_status: str | None = None,
    ) -> Communication | None:
        if not document.subject:
            logger.info("Document %s has no subject, no %s notification", document.id, category.code)
            return None
        notification = Communication(
            id=None,
            category=category,
            recipient=document.subject,
            sent=datetime.now(UTC),
            payload=payload,
            token=document.id,
            old_status=old_status,
            new_status=new_status,
        )
        try:
            async with self._uow_factory() as uow:
                stored = await uow.resources.create(notification)
        except Exception:
            logger.exception(
                "Could not store %s notification for %s", category.code, document.subject
            )
            return None
        logger.info("Notification %s stored for token %s", stored.typed_id, document.id)
        return stored.resource
