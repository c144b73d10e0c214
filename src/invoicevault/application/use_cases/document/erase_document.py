"""Erase document use case."""

import logging

from invoicevault.application.dto.caller import Caller
from invoicevault.application.dto.erasure_dto import ErasurePlan
from invoicevault.application.ports import PermissionChecker, UnitOfWork
from invoicevault.application.services.audit_recorder import ACTION_DELETE, AuditRecorder
from invoicevault.application.services.resource_graph import collect_erasure_plan
from invoicevault.domain.entities import Document
from invoicevault.domain.exceptions import (
    InternalError,
    InvalidState,
    NotFound,
    PermissionDenied,
)
from invoicevault.domain.value_objects import (
    STATUS_SYSTEM,
    DocumentAction,
    DocumentStatus,
    OperationOutcome,
    ResourceKind,
    TypedId,
)

logger = logging.getLogger(__name__)


class EraseDocumentUseCase:
    """Erase a trashed document and everything it transitively references.

    Steps, all inside one unit of work: load and authorize the root, require
    the trash tag, collect the resource graph, delete the root, then delete
    binaries, invoices and linked documents. Any failure other than a
    not-found on a dependency rolls the whole erasure back.
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

    async def execute(self, caller: Caller, document_id: str) -> OperationOutcome:
        """Erase document; raises NotFound, PermissionDenied, InvalidState or InternalError."""
        root_id = TypedId(ResourceKind.DOCUMENT, document_id)
        logger.info("Erase requested for %s by %s", root_id, caller.user_id)

        async with self._uow_factory() as uow:
            root = await uow.resources.read(root_id)
            if not isinstance(root, Document):
                raise NotFound(root_id.kind, root_id.id)

            allowed = await self._permission_checker.check(caller, DocumentAction.ERASE, root)
            if not allowed:
                raise PermissionDenied(f"Caller may not erase {root_id}")

            _require_trash_status(root)
            plan = await collect_erasure_plan(uow.resources, root)
            await self._delete_root(uow, root_id)
            await self._delete_dependencies(uow, plan)

        logger.info("Erased %s together with %d dependent resource(s)", root_id, len(plan) - 1)
        if self._audit is not None:
            await self._audit.record(
                action=ACTION_DELETE,
                subtype="erase",
                entity=root_id,
                description=f"{root_id.kind} with id '{root_id.id}' erased",
                caller=caller,
            )
        return OperationOutcome.information(f"Document '{document_id}' and associated resources erased")

    async def _delete_root(self, uow: UnitOfWork, root_id: TypedId) -> None:
        try:
            await uow.resources.delete(root_id)
        except Exception as e:
            logger.error("Failed to delete root %s: %s", root_id, e, exc_info=True)
            raise InternalError(f"Could not delete {root_id}: {e}") from e
        logger.info("Deleted root %s", root_id)

    async def _delete_dependencies(self, uow: UnitOfWork, plan: ErasurePlan) -> None:
        for typed_id in plan.dependencies():
            try:
                await uow.resources.delete(typed_id)
            except NotFound:
                logger.warning("Collected %s already gone, skipping", typed_id)
                continue
            except Exception as e:
                logger.error("Failed to delete collected %s: %s", typed_id, e, exc_info=True)
                raise InternalError(f"Could not delete collected {typed_id}: {e}") from e
            logger.info("Deleted collected %s", typed_id)


def _require_trash_status(document: Document) -> None:
    if not document.is_in_trash:
        message = (
            f"Document {document.id} is not in status '{DocumentStatus.PAPIERKORB}' "
            f"(system '{STATUS_SYSTEM}') and cannot be erased"
        )
        logger.warning(message)
        raise InvalidState(message)
    logger.info("Status check passed for %s", document.typed_id)
