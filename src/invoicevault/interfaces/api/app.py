"""Falcon ASGI application."""

import falcon.asgi
from falcon.asgi import App

from invoicevault.interfaces.api.resources.documents import (
    DocumentResource,
    DocumentStatusResource,
    EraseDocumentResource,
    ProcessFlagResource,
    SubmitDocumentResource,
)
from invoicevault.interfaces.api.resources.health import HealthResource


def add_routes(
    app: App,
    submit_resource: SubmitDocumentResource,
    document_resource: DocumentResource,
    status_resource: DocumentStatusResource,
    erase_resource: EraseDocumentResource,
    flag_resource: ProcessFlagResource,
    health_resource: HealthResource,
) -> App:
    """Register API routes on app."""
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/documents/submit", submit_resource)
    app.add_route("/v1/documents/{document_id}", document_resource)
    app.add_route("/v1/documents/{document_id}/status", status_resource)
    app.add_route("/v1/documents/{document_id}/erase", erase_resource)
    app.add_route("/v1/documents/{document_id}/flag", flag_resource)
    return app


def create_app(
    submit_resource: SubmitDocumentResource,
    document_resource: DocumentResource,
    status_resource: DocumentStatusResource,
    erase_resource: EraseDocumentResource,
    flag_resource: ProcessFlagResource,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    return add_routes(
        app,
        submit_resource,
        document_resource,
        status_resource,
        erase_resource,
        flag_resource,
        health_resource,
    )
