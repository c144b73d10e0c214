"""Submit document use case."""

import logging

from invoicevault.application.dto.caller import Caller
from invoicevault.application.dto.submission_dto import SubmissionOutcome
from invoicevault.application.ports import (
    InvoiceReader,
    PermissionChecker,
    TokenGenerator,
    UnitOfWork,
)
from invoicevault.application.services.audit_recorder import ACTION_CREATE, AuditRecorder
from invoicevault.application.services.notification_recorder import NotificationRecorder
from invoicevault.application.services.transform_metadata import apply_transform_metadata
from invoicevault.application.services.validation_gate import ValidationGate
from invoicevault.domain.entities import Binary, Document
from invoicevault.domain.exceptions import (
    IdCollision,
    InternalError,
    PermissionDenied,
    ValidationFailed,
)
from invoicevault.domain.value_objects import (
    DocumentAction,
    OperationOutcome,
    Severity,
    SubmissionMode,
    ValidationMessage,
)

logger = logging.getLogger(__name__)


class SubmitDocumentUseCase:
    """Validate a document and, in normal mode, store it with its derived copy.

    The original is stored as submitted. A clone of it gets a fresh token as
    id, open status, extracted invoices, stored attachments and a transforms
    link back to the original. Attachment documents submitted alongside are
    stored on their own and linked from the clone. All writes happen in one
    unit of work: either every resource exists afterwards or none does. Test
    mode only validates and never opens a unit of work.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        validation_gate: ValidationGate,
        token_generator: TokenGenerator,
        permission_checker: PermissionChecker | None = None,
        audit_recorder: AuditRecorder | None = None,
        invoice_reader: InvoiceReader | None = None,
        notification_recorder: NotificationRecorder | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._gate = validation_gate
        self._token_generator = token_generator
        self._permission_checker = permission_checker
        self._audit = audit_recorder
        self._invoice_reader = invoice_reader
        self._notifications = notification_recorder

    async def execute(
        self,
        document: Document | None,
        mode: SubmissionMode | str | None = SubmissionMode.NORMAL,
        caller: Caller | None = None,
        attachments: list[Document] | None = None,
    ) -> SubmissionOutcome:
        """Submit document; raises ValidationFailed, PermissionDenied or InternalError.

        Attachment documents with blocking validation messages are skipped;
        their messages are reported with the warnings, located under
        ``anhaenge[i]``.
        """
        if document is None:
            logger.warning("Submit called without a document")
            return SubmissionOutcome()

        mode = SubmissionMode.parse(mode)
        if caller is not None and self._permission_checker is not None:
            allowed = await self._permission_checker.check(caller, DocumentAction.SUBMIT)
            if not allowed:
                raise PermissionDenied("Caller is not allowed to submit documents")

        logger.info(
            "Submitting document %s with %d attachment document(s) in %s mode",
            document.id or "(new)",
            len(attachments or []),
            mode,
        )
        warnings = self._gate.validate_or_block(document)
        accepted, attachment_messages = self._check_attachments(attachments or [])
        warnings = OperationOutcome(
            issues=warnings.issues + OperationOutcome.from_messages(attachment_messages).issues
        )

        if mode == SubmissionMode.TEST:
            logger.info("Test mode: validation only, nothing stored")
            return SubmissionOutcome(warnings=_or_none(warnings))

        async with self._uow_factory() as uow:
            original = await self._store_original(uow, document)
            transformed, stored_attachments = await self._store_transformed(
                uow, original, caller, accepted
            )

        logger.info(
            "Stored document %s and its transform %s", original.typed_id, transformed.typed_id
        )
        if self._audit is not None:
            await self._audit.record(
                action=ACTION_CREATE,
                subtype="submit",
                entity=transformed.typed_id,
                description=f"Document submitted with token '{transformed.id}'",
                caller=caller,
            )
        if self._notifications is not None:
            await self._notifications.document_available(transformed, _provider_name(caller))
        return SubmissionOutcome(
            warnings=_or_none(warnings),
            transformed=transformed,
            attachments=tuple(stored_attachments),
        )

    def _check_attachments(
        self, attachments: list[Document]
    ) -> tuple[list[Document], list[ValidationMessage]]:
        accepted: list[Document] = []
        messages: list[ValidationMessage] = []
        for index, attachment in enumerate(attachments):
            report = self._gate.validate(attachment)
            messages.extend(
                ValidationMessage(m.severity, _attachment_location(index, m.location), m.message)
                for m in report.errors + report.warnings
            )
            if report.errors:
                logger.warning(
                    "Attachment document %d has %d blocking message(s) and is skipped",
                    index,
                    len(report.errors),
                )
                continue
            accepted.append(attachment)
        return accepted, messages

    async def _store_original(self, uow: UnitOfWork, document: Document) -> Document:
        stored = await uow.resources.create(document)
        if not stored.created:
            raise InternalError(
                f"Store did not confirm creation of {stored.typed_id}"
            )
        if not isinstance(stored.resource, Document) or not stored.resource.id:
            raise InternalError("Stored document is not available after create")
        return stored.resource

    async def _store_transformed(
        self,
        uow: UnitOfWork,
        original: Document,
        caller: Caller | None,
        attachments: list[Document],
    ) -> tuple[Document, list[Document]]:
        transformed = original.clone()
        transformed.id = None
        apply_transform_metadata(transformed, caller)
        token = self._token_generator.generate_unique_token()
        transformed.id = token
        logger.debug("Generated token %s for transform of %s", token, original.typed_id)

        await self._store_invoices(uow, transformed)
        await self._store_binaries(uow, transformed)
        stored_attachments = []
        for attachment in attachments:
            stored_attachment = await self._store_attachment_document(uow, attachment)
            transformed.related.append(stored_attachment.typed_id)
            stored_attachments.append(stored_attachment)
        try:
            transformed.mark_transform_of(original.typed_id)
        except ValueError as e:
            raise InternalError(str(e)) from e

        stored = await uow.resources.update(transformed)
        if stored.typed_id.id != token:
            raise InternalError(
                f"Store returned id {stored.typed_id.id!r} for transform, expected {token!r}"
            )
        if not stored.created:
            raise IdCollision(f"Generated token {token!r} already exists for {stored.typed_id.kind}")
        return transformed, stored_attachments

    async def _store_invoices(self, uow: UnitOfWork, document: Document) -> None:
        """Store invoices carried inline and point their attachments at them."""
        if self._invoice_reader is None:
            return
        for index, attachment in enumerate(document.content):
            if not attachment.data:
                continue
            try:
                invoice = self._invoice_reader.read(attachment)
            except ValueError as e:
                raise ValidationFailed(
                    OperationOutcome.from_messages(
                        [
                            ValidationMessage(
                                Severity.ERROR,
                                f"$.content[{index}].attachment.data",
                                f"Embedded invoice cannot be read: {e}",
                            )
                        ]
                    )
                ) from e
            if invoice is None:
                continue
            invoice.id = None
            if invoice.subject is None:
                invoice.subject = document.subject
            elif document.subject is None:
                document.subject = invoice.subject
            stored = await uow.resources.create(invoice)
            if not stored.created:
                raise InternalError(
                    f"Store did not confirm creation of invoice {index} as {stored.typed_id}"
                )
            attachment.data = None
            attachment.url = stored.typed_id.reference
            if stored.typed_id not in document.invoices:
                document.invoices.append(stored.typed_id)
            logger.info("Invoice in attachment %d of %s stored as %s", index, document.id, stored.typed_id)

    async def _store_binaries(self, uow: UnitOfWork, document: Document) -> None:
        """Move inline attachment data into Binary resources referenced by url."""
        for index, attachment in enumerate(document.content):
            if not attachment.data:
                continue
            stored = await uow.resources.create(
                Binary(id=None, content_type=attachment.content_type, data=attachment.data)
            )
            if not stored.created:
                raise InternalError(
                    f"Store did not confirm creation of attachment {index} as {stored.typed_id}"
                )
            attachment.data = None
            attachment.url = stored.typed_id.reference
            logger.debug("Attachment %d of %s stored as %s", index, document.id, stored.typed_id)

    async def _store_attachment_document(self, uow: UnitOfWork, attachment: Document) -> Document:
        """Store an attachment document under a store-assigned id, its data as Binary."""
        document = attachment.clone()
        document.id = None
        await self._store_binaries(uow, document)
        stored = await uow.resources.create(document)
        if not stored.created or not isinstance(stored.resource, Document):
            raise InternalError(
                f"Store did not confirm creation of attachment document {stored.typed_id}"
            )
        logger.info("Attachment document stored as %s", stored.typed_id)
        return stored.resource


def _attachment_location(index: int, location: str) -> str:
    return f"anhaenge[{index}]" + location.removeprefix("$")


def _provider_name(caller: Caller | None) -> str | None:
    if caller is None:
        return None
    return caller.telematik_id or caller.user_id


def _or_none(outcome):
    return None if outcome.is_empty else outcome
