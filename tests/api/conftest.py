"""Fixtures for API tests."""

import falcon.asgi
import pytest

from invoicevault.application.dto.caller import Caller
from invoicevault.application.services.notification_recorder import NotificationRecorder
from invoicevault.application.services.validation_gate import ValidationGate
from invoicevault.application.use_cases.document.change_status import ChangeStatusUseCase
from invoicevault.application.use_cases.document.erase_document import EraseDocumentUseCase
from invoicevault.application.use_cases.document.get_document import GetDocumentUseCase
from invoicevault.application.use_cases.document.process_flag import ProcessFlagUseCase
from invoicevault.application.use_cases.document.submit_document import SubmitDocumentUseCase
from invoicevault.infrastructure.codec import EmbeddedInvoiceReader
from invoicevault.infrastructure.permission.permission_checker import RoleBasedPermissionChecker
from invoicevault.infrastructure.validation import JsonSchemaValidationEngine
from invoicevault.interfaces.api.app import add_routes
from invoicevault.interfaces.api.resources.documents import (
    DocumentResource,
    DocumentStatusResource,
    EraseDocumentResource,
    ProcessFlagResource,
    SubmitDocumentResource,
)
from invoicevault.interfaces.api.resources.health import HealthResource
from invoicevault.main import handle_unexpected_error

from tests.conftest import SequenceTokenGenerator


class AuthBypassMiddleware:
    """Middleware that sets context.user for testing; None simulates a missing token."""

    def __init__(self) -> None:
        self.user: Caller | None = Caller(
            user_id="test-user-1",
            roles=frozenset({"provider", "insured"}),
            subject_id="X110000001",
            telematik_id="3-SMC-B-1",
        )

    async def process_request(self, req, resp):
        req.context.user = self.user


@pytest.fixture
def auth() -> AuthBypassMiddleware:
    return AuthBypassMiddleware()


@pytest.fixture
def app(uow_factory, auth):
    """Falcon ASGI app with API resources for testing."""
    permission_checker = RoleBasedPermissionChecker()
    notifications = NotificationRecorder(uow_factory)
    submit_document = SubmitDocumentUseCase(
        unit_of_work_factory=uow_factory,
        validation_gate=ValidationGate(JsonSchemaValidationEngine()),
        token_generator=SequenceTokenGenerator(),
        permission_checker=permission_checker,
        invoice_reader=EmbeddedInvoiceReader(),
        notification_recorder=notifications,
    )
    get_document = GetDocumentUseCase(uow_factory, permission_checker)
    change_status = ChangeStatusUseCase(
        uow_factory, permission_checker, notification_recorder=notifications
    )
    erase_document = EraseDocumentUseCase(uow_factory, permission_checker)
    process_flag = ProcessFlagUseCase(uow_factory, permission_checker)

    app = falcon.asgi.App(middleware=[auth])
    app.add_error_handler(Exception, handle_unexpected_error)
    return add_routes(
        app,
        SubmitDocumentResource(submit_document),
        DocumentResource(get_document),
        DocumentStatusResource(change_status),
        EraseDocumentResource(erase_document),
        ProcessFlagResource(process_flag),
        HealthResource(),
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
