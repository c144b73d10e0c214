"""Permission checker port - document-level authorization."""

from typing import Protocol

from invoicevault.application.dto.caller import Caller
from invoicevault.domain.entities import Document
from invoicevault.domain.value_objects import DocumentAction


class PermissionChecker(Protocol):
    """Port for checking whether a caller may act on a document."""

    async def check(
        self, caller: Caller, action: DocumentAction, document: Document | None = None
    ) -> bool: ...
