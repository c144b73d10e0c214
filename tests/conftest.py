"""Pytest fixtures for InvoiceVault tests."""

from __future__ import annotations

import base64
import copy
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

import pytest

from invoicevault.application.dto.caller import Caller
from invoicevault.application.dto.resource_dto import StoredResource
from invoicevault.domain.entities import Attachment, Document, RelatesTo, Resource
from invoicevault.domain.exceptions import NotFound
from invoicevault.domain.value_objects import (
    DocumentStatus,
    RelationType,
    Severity,
    TypedId,
    ValidationMessage,
)

# --- Fake store ---


class FakeResourceStore:
    """In-memory resource table shared by all units of work of a test.

    Keeps a log of successful writes and lets a test make a write fail by
    registering an exception for (operation, typed id).
    """

    def __init__(self) -> None:
        self.rows: dict[TypedId, Resource] = {}
        self.mutations: list[tuple[str, TypedId]] = []
        self.failures: dict[tuple[str, TypedId], Exception] = {}
        self.commits = 0
        self.rollbacks = 0

    def add(self, resource: Resource) -> Resource:
        """Seed a resource without logging a mutation."""
        if resource.id is None:
            resource.id = str(uuid4())
        self.rows[TypedId(resource.kind, resource.id)] = copy.deepcopy(resource)
        return resource

    def get(self, typed_id: TypedId) -> Resource | None:
        return self.rows.get(typed_id)

    def fail(self, operation: str, typed_id: TypedId, error: Exception) -> None:
        self.failures[(operation, typed_id)] = error

    def snapshot(self) -> dict[TypedId, Resource]:
        return copy.deepcopy(self.rows)

    def restore(self, snapshot: dict[TypedId, Resource]) -> None:
        self.rows = snapshot

    def deletions(self) -> list[TypedId]:
        return [tid for op, tid in self.mutations if op == "delete"]

    def _check(self, operation: str, typed_id: TypedId) -> None:
        error = self.failures.get((operation, typed_id))
        if error is not None:
            raise error


class FakeResourceRepository:
    """In-memory resource repository over a FakeResourceStore."""

    def __init__(self, store: FakeResourceStore) -> None:
        self._store = store

    async def create(self, resource: Resource) -> StoredResource:
        stored = copy.deepcopy(resource)
        if not stored.id:
            stored.id = str(uuid4())
        typed_id = TypedId(stored.kind, stored.id)
        self._store._check("create", typed_id)
        if typed_id in self._store.rows:
            return StoredResource(typed_id=typed_id, resource=stored, created=False)
        self._store.rows[typed_id] = copy.deepcopy(stored)
        self._store.mutations.append(("create", typed_id))
        return StoredResource(typed_id=typed_id, resource=stored, created=True)

    async def read(self, typed_id: TypedId) -> Resource:
        resource = self._store.rows.get(typed_id)
        if resource is None:
            raise NotFound(typed_id.kind, typed_id.id)
        return copy.deepcopy(resource)

    async def update(self, resource: Resource) -> StoredResource:
        if not resource.id:
            raise ValueError("update requires an explicit id")
        typed_id = TypedId(resource.kind, resource.id)
        self._store._check("update", typed_id)
        created = typed_id not in self._store.rows
        self._store.rows[typed_id] = copy.deepcopy(resource)
        self._store.mutations.append(("update", typed_id))
        return StoredResource(typed_id=typed_id, resource=resource, created=created)

    async def delete(self, typed_id: TypedId) -> None:
        self._store._check("delete", typed_id)
        if typed_id not in self._store.rows:
            raise NotFound(typed_id.kind, typed_id.id)
        del self._store.rows[typed_id]
        self._store.mutations.append(("delete", typed_id))


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work; rollback restores the store as it was on entry."""

    def __init__(self, store: FakeResourceStore | None = None) -> None:
        self.store = store or FakeResourceStore()
        self.resources = FakeResourceRepository(self.store)
        self._snapshot = self.store.snapshot()

    async def commit(self) -> None:
        self.store.commits += 1
        self._snapshot = self.store.snapshot()

    async def rollback(self) -> None:
        self.store.rollbacks += 1
        self.store.restore(self._snapshot)


def make_uow_factory(store: FakeResourceStore):
    """Factory with the commit/rollback contract of the PostgreSQL one."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        uow = FakeUnitOfWork(store)
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise

    return _factory


# --- Fakes for other ports ---


class SequenceTokenGenerator:
    """Deterministic tokens: token-1, token-2, ..."""

    def __init__(self, prefix: str = "token") -> None:
        self._prefix = prefix
        self.issued: list[str] = []

    def generate_unique_token(self) -> str:
        token = f"{self._prefix}-{len(self.issued) + 1}"
        self.issued.append(token)
        return token


class StubValidationEngine:
    """Returns the configured messages; ``by_id`` overrides them per resource id."""

    def __init__(
        self,
        messages: list[ValidationMessage] | None = None,
        by_id: dict[str, list[ValidationMessage]] | None = None,
    ) -> None:
        self.messages = list(messages or [])
        self.by_id = dict(by_id or {})
        self.calls = 0

    def validate(self, resource: Resource) -> list[ValidationMessage]:
        self.calls += 1
        return list(self.by_id.get(resource.id, self.messages))


def message(severity: Severity, location: str = "$", text: str = "msg") -> ValidationMessage:
    return ValidationMessage(severity=severity, location=location, message=text)


# --- Builders ---


def make_document(
    document_id: str | None = "doc-1",
    *,
    subject: str | None = "X110000001",
    status: DocumentStatus | None = None,
    content: list[Attachment] | None = None,
    related: list[TypedId] | None = None,
    transforms: TypedId | None = None,
    invoices: list[TypedId] | None = None,
) -> Document:
    doc = Document(
        id=document_id,
        subject=subject,
        content=content if content is not None else [Attachment("application/pdf", data="JVBERi0=", title="Rechnung")],
        related=list(related or []),
        invoices=list(invoices or []),
    )
    if status is not None:
        doc.set_status(status)
    if transforms is not None:
        doc.relates_to.append(RelatesTo(RelationType.TRANSFORMS, transforms))
    return doc


def url_attachment(target: TypedId, title: str | None = "Anhang") -> Attachment:
    return Attachment(content_type="application/pdf", url=target.reference, title=title)


INVOICE_JSON = {
    "resourceType": "Invoice",
    "id": "inv-submitted",
    "status": "issued",
    "totalGross": {"value": "119.00", "currency": "EUR"},
    "date": "2026-01-31",
}


def invoice_attachment(invoice: dict | None = None, title: str | None = "Rechnungsdaten") -> Attachment:
    """Attachment carrying an invoice as base64 JSON."""
    raw = json.dumps(INVOICE_JSON if invoice is None else invoice).encode()
    return Attachment("application/fhir+json", data=base64.b64encode(raw).decode(), title=title)


# --- Fixtures ---


@pytest.fixture
def store() -> FakeResourceStore:
    """Fresh in-memory store for each test."""
    return FakeResourceStore()


@pytest.fixture
def uow_factory(store: FakeResourceStore):
    """Factory returning async context manager with FakeUnitOfWork over ``store``."""
    return make_uow_factory(store)


@pytest.fixture
def token_generator() -> SequenceTokenGenerator:
    return SequenceTokenGenerator()


@pytest.fixture
def mock_permission_checker():
    """AsyncMock for PermissionChecker - returns True by default."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.check.return_value = True
    return mock


@pytest.fixture
def provider() -> Caller:
    return Caller(user_id="user-provider", roles=frozenset({"provider"}), telematik_id="3-SMC-B-1")


@pytest.fixture
def insured() -> Caller:
    return Caller(user_id="user-insured", roles=frozenset({"insured"}), subject_id="X110000001")
