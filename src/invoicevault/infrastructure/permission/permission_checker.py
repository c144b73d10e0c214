"""Permission checker implementation - realm roles plus document subject."""

import logging

from invoicevault.application.dto.caller import Caller
from invoicevault.domain.entities import Document
from invoicevault.domain.value_objects import DocumentAction

logger = logging.getLogger(__name__)


class RoleBasedPermissionChecker:
    """Checks caller roles; insured callers only reach their own documents.

    - submit: provider role.
    - read, change_status, erase, process_flag: payer role, or insured role with the
      caller's subject id equal to the document subject.
    """

    def __init__(
        self,
        provider_role: str = "provider",
        insured_role: str = "insured",
        payer_role: str = "payer",
    ) -> None:
        self._provider_role = provider_role
        self._insured_role = insured_role
        self._payer_role = payer_role

    async def check(
        self, caller: Caller, action: DocumentAction, document: Document | None = None
    ) -> bool:
        """Check if caller may perform action on document."""
        if action == DocumentAction.SUBMIT:
            allowed = caller.has_role(self._provider_role)
        elif caller.has_role(self._payer_role):
            allowed = True
        else:
            allowed = (
                document is not None
                and caller.has_role(self._insured_role)
                and caller.subject_id is not None
                and caller.subject_id == document.subject
            )
        if not allowed:
            logger.info("Denied %s for caller %s", action, caller.user_id)
        return allowed
