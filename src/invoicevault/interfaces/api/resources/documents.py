"""Document API resources."""

import logging
from datetime import datetime

import falcon
import falcon.asgi

from invoicevault.application.use_cases.document.change_status import ChangeStatusUseCase
from invoicevault.application.use_cases.document.erase_document import EraseDocumentUseCase
from invoicevault.application.use_cases.document.get_document import GetDocumentUseCase
from invoicevault.application.use_cases.document.process_flag import ProcessFlagUseCase
from invoicevault.application.use_cases.document.submit_document import SubmitDocumentUseCase
from invoicevault.domain.exceptions import (
    InternalError,
    InvalidState,
    InvoiceVaultError,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from invoicevault.domain.value_objects import Issue, IssueType, OperationOutcome, Severity
from invoicevault.infrastructure.codec import (
    coding_from_dict,
    document_from_dict,
    resource_to_dict,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS: list[tuple[type[InvoiceVaultError], str]] = [
    (ValidationFailed, falcon.HTTP_422),
    (InvalidState, falcon.HTTP_400),
    (NotFound, falcon.HTTP_404),
    (PermissionDenied, falcon.HTTP_403),
    (InternalError, falcon.HTTP_500),
]


def _outcome(severity: Severity, code: IssueType, diagnostics: str) -> dict:
    return OperationOutcome(issues=(Issue(severity, code, diagnostics),)).to_dict()


def _unauthorized(resp: falcon.asgi.Response) -> None:
    resp.status = falcon.HTTP_401
    resp.media = _outcome(Severity.ERROR, IssueType.LOGIN, "Unauthorized")


def _bad_request(resp: falcon.asgi.Response, message: str) -> None:
    resp.status = falcon.HTTP_400
    resp.media = _outcome(Severity.ERROR, IssueType.INVALID, message)


def _render_error(resp: falcon.asgi.Response, error: InvoiceVaultError) -> None:
    """Map a domain error to status and outcome body."""
    status = next(
        (status for cls, status in _ERROR_STATUS if isinstance(error, cls)),
        falcon.HTTP_500,
    )
    if status == falcon.HTTP_500:
        logger.error("Request failed: %s", error)
    resp.status = status
    resp.media = error.to_outcome().to_dict()


async def _get_json_object(req: falcon.asgi.Request) -> dict:
    body = await req.get_media()
    if not isinstance(body, dict):
        raise ValueError("JSON object expected")
    return body


def _parse_submission(body: dict) -> tuple:
    """Plain document body, or {"rechnung": document, "anhaenge": [documents]}."""
    if "rechnung" not in body:
        return document_from_dict(body), []
    attachments = body.get("anhaenge") or []
    if not isinstance(attachments, list):
        raise ValueError("'anhaenge' must be a JSON array")
    return document_from_dict(body["rechnung"]), [document_from_dict(a) for a in attachments]


class SubmitDocumentResource:
    """POST /v1/documents/submit?mode=normal|test - validate and store a document."""

    def __init__(self, submit_document: SubmitDocumentUseCase) -> None:
        self._submit_document = submit_document

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Submit document; responds with warnings, the derived document and its token."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return

        try:
            document, attachments = _parse_submission(await _get_json_object(req))
        except (falcon.HTTPBadRequest, ValueError) as e:
            _bad_request(resp, f"Invalid document: {e}")
            return

        try:
            result = await self._submit_document.execute(
                document, mode=req.get_param("mode"), caller=user, attachments=attachments
            )
        except InvoiceVaultError as e:
            _render_error(resp, e)
            return

        resp.media = {
            "warnings": result.warnings.to_dict() if result.warnings else None,
            "transformed": resource_to_dict(result.transformed) if result.transformed else None,
            "token": result.token,
            "anhaenge": [resource_to_dict(a) for a in result.attachments],
        }
        resp.status = falcon.HTTP_200


class DocumentResource:
    """GET /v1/documents/{document_id} - get document."""

    def __init__(self, get_document: GetDocumentUseCase) -> None:
        self._get_document = get_document

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Get document by id."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return

        try:
            document = await self._get_document.execute(user, document_id)
        except InvoiceVaultError as e:
            _render_error(resp, e)
            return
        except ValueError:
            _bad_request(resp, "Invalid document id")
            return
        resp.media = resource_to_dict(document)
        resp.status = falcon.HTTP_200


class DocumentStatusResource:
    """POST /v1/documents/{document_id}/status - change document status."""

    def __init__(self, change_status: ChangeStatusUseCase) -> None:
        self._change_status = change_status

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Body: {"status": "offen"|"erledigt"|"papierkorb"}."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return

        try:
            body = await _get_json_object(req)
            new_status = body["status"]
            if not isinstance(new_status, str):
                raise ValueError("status must be a string")
        except (falcon.HTTPBadRequest, KeyError, ValueError) as e:
            _bad_request(resp, f"Invalid body: {e}")
            return

        try:
            document = await self._change_status.execute(user, document_id, new_status)
        except InvoiceVaultError as e:
            _render_error(resp, e)
            return
        except ValueError:
            _bad_request(resp, "Invalid document id")
            return
        resp.media = resource_to_dict(document)
        resp.status = falcon.HTTP_200


class EraseDocumentResource:
    """POST /v1/documents/{document_id}/erase - erase a trashed document and its graph."""

    def __init__(self, erase_document: EraseDocumentUseCase) -> None:
        self._erase_document = erase_document

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Erase document."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return

        try:
            outcome = await self._erase_document.execute(user, document_id)
        except InvoiceVaultError as e:
            _render_error(resp, e)
            return
        except ValueError:
            _bad_request(resp, "Invalid document id")
            return
        resp.media = outcome.to_dict()
        resp.status = falcon.HTTP_200


class ProcessFlagResource:
    """POST /v1/documents/{document_id}/flag - set a read or archived marker."""

    def __init__(self, process_flag: ProcessFlagUseCase) -> None:
        self._process_flag = process_flag

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Body: {"markierung": coding, "zeitpunkt": datetime, "details"?, "gelesen"?,
        "artDerArchivierung"?}; responds with the document meta."""
        user = getattr(req.context, "user", None)
        if not user:
            _unauthorized(resp)
            return

        try:
            body = await _get_json_object(req)
            params = _parse_flag(body)
        except (falcon.HTTPBadRequest, ValueError) as e:
            _bad_request(resp, f"Invalid body: {e}")
            return

        try:
            document = await self._process_flag.execute(user, document_id, **params)
        except InvoiceVaultError as e:
            _render_error(resp, e)
            return
        except ValueError:
            _bad_request(resp, "Invalid document id")
            return
        resp.media = {"meta": resource_to_dict(document).get("meta", {})}
        resp.status = falcon.HTTP_200


def _parse_flag(body: dict) -> dict:
    """Decode flag parameters; absent ones stay None for the use case to judge."""
    marker = body.get("markierung")
    time = body.get("zeitpunkt")
    details = body.get("details")
    read = body.get("gelesen")
    archive_kind = body.get("artDerArchivierung")
    if time is not None and not isinstance(time, str):
        raise ValueError("'zeitpunkt' must be an ISO 8601 string")
    if details is not None and not isinstance(details, str):
        raise ValueError("'details' must be a string")
    if read is not None and not isinstance(read, bool):
        raise ValueError("'gelesen' must be a boolean")
    return {
        "marker": coding_from_dict(marker) if marker is not None else None,
        "time": datetime.fromisoformat(time) if time is not None else None,
        "details": details,
        "read": read,
        "archive_kind": coding_from_dict(archive_kind) if archive_kind is not None else None,
    }
