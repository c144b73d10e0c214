"""Application entry point and composition root."""

import logging

import falcon
import falcon.asgi

from invoicevault import __version__
from invoicevault.application.services.audit_recorder import AuditRecorder
from invoicevault.application.services.notification_recorder import NotificationRecorder
from invoicevault.application.services.validation_gate import ValidationGate
from invoicevault.application.use_cases.document.change_status import ChangeStatusUseCase
from invoicevault.application.use_cases.document.erase_document import EraseDocumentUseCase
from invoicevault.application.use_cases.document.get_document import GetDocumentUseCase
from invoicevault.application.use_cases.document.process_flag import ProcessFlagUseCase
from invoicevault.application.use_cases.document.submit_document import SubmitDocumentUseCase
from invoicevault.config import get_settings
from invoicevault.domain.value_objects import Issue, IssueType, OperationOutcome, Severity
from invoicevault.infrastructure.auth.keycloak_provider import KeycloakProvider
from invoicevault.infrastructure.codec import EmbeddedInvoiceReader
from invoicevault.infrastructure.permission.permission_checker import RoleBasedPermissionChecker
from invoicevault.infrastructure.persistence.postgres.connection import create_pool
from invoicevault.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from invoicevault.infrastructure.token.secure_token_generator import SecureTokenGenerator
from invoicevault.infrastructure.validation import JsonSchemaValidationEngine
from invoicevault.interfaces.api.app import create_app
from invoicevault.interfaces.api.middleware.auth import AuthMiddleware
from invoicevault.interfaces.api.middleware.cors import CORSMiddleware
from invoicevault.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from invoicevault.interfaces.api.resources.documents import (
    DocumentResource,
    DocumentStatusResource,
    EraseDocumentResource,
    ProcessFlagResource,
    SubmitDocumentResource,
)
from invoicevault.interfaces.api.resources.health import HealthResource

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    print(f"InvoiceVault v{__version__}")


async def handle_unexpected_error(req, resp, ex, params) -> None:
    """Log unexpected exceptions and answer with a 500 outcome."""
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = OperationOutcome(
        issues=(Issue(Severity.FATAL, IssueType.EXCEPTION, "Internal server error"),)
    ).to_dict()


def create_invoicevault_app() -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level)
    pool = create_pool(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
            subject_claim=settings.subject_claim,
            telematik_claim=settings.telematik_claim,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak client secret not set; every request is unauthenticated")

    permission_checker = RoleBasedPermissionChecker(
        provider_role=settings.provider_role,
        insured_role=settings.insured_role,
        payer_role=settings.payer_role,
    )
    validation_gate = ValidationGate(
        JsonSchemaValidationEngine(max_attachment_bytes=settings.max_attachment_bytes)
    )
    audit_recorder = AuditRecorder(uow_factory)
    notification_recorder = NotificationRecorder(uow_factory)

    submit_document = SubmitDocumentUseCase(
        unit_of_work_factory=uow_factory,
        validation_gate=validation_gate,
        token_generator=SecureTokenGenerator(),
        permission_checker=permission_checker,
        audit_recorder=audit_recorder,
        invoice_reader=EmbeddedInvoiceReader(),
        notification_recorder=notification_recorder,
    )
    get_document = GetDocumentUseCase(
        unit_of_work_factory=uow_factory,
        permission_checker=permission_checker,
    )
    change_status = ChangeStatusUseCase(
        unit_of_work_factory=uow_factory,
        permission_checker=permission_checker,
        audit_recorder=audit_recorder,
        notification_recorder=notification_recorder,
    )
    erase_document = EraseDocumentUseCase(
        unit_of_work_factory=uow_factory,
        permission_checker=permission_checker,
        audit_recorder=audit_recorder,
    )
    process_flag = ProcessFlagUseCase(
        unit_of_work_factory=uow_factory,
        permission_checker=permission_checker,
        audit_recorder=audit_recorder,
    )

    cors_origins = [
        o.strip() for o in settings.cors_origins.split(",") if o.strip()
    ]
    app = create_app(
        SubmitDocumentResource(submit_document),
        DocumentResource(get_document),
        DocumentStatusResource(change_status),
        EraseDocumentResource(erase_document),
        ProcessFlagResource(process_flag),
        HealthResource(pool),
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool, wait=settings.database_wait_on_startup),
            AuthMiddleware(keycloak),
        ],
    )
    app.add_error_handler(Exception, handle_unexpected_error)
    logger.info("InvoiceVault v%s configured (%s)", __version__, settings.environment)
    return app


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_invoicevault_app(), host="0.0.0.0", port=8000)
