"""Get document use case."""

from invoicevault.application.dto.caller import Caller
from invoicevault.application.ports import PermissionChecker
from invoicevault.domain.entities import Document
from invoicevault.domain.exceptions import NotFound, PermissionDenied
from invoicevault.domain.value_objects import DocumentAction, ResourceKind, TypedId


class GetDocumentUseCase:
    """Get document by id."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(self, caller: Caller, document_id: str) -> Document:
        """Get document by id."""
        typed_id = TypedId(ResourceKind.DOCUMENT, document_id)
        async with self._uow_factory() as uow:
            document = await uow.resources.read(typed_id)
            if not isinstance(document, Document):
                raise NotFound(typed_id.kind, typed_id.id)

        has_read = await self._permission_checker.check(caller, DocumentAction.READ, document)
        if not has_read:
            raise PermissionDenied("Caller does not have read access to document")
        return document
