"""Unit tests for erasure plan collection."""

import logging

import pytest

from invoicevault.application.services.resource_graph import collect_erasure_plan
from invoicevault.domain.value_objects import ResourceKind, TypedId

from tests.conftest import FakeResourceRepository, make_document, url_attachment

DOC = ResourceKind.DOCUMENT


@pytest.mark.asyncio
async def test_transforms_followed_only_from_root(store) -> None:
    """The original's own transforms link is not walked."""
    store.add(make_document("older", content=[]))
    store.add(make_document("orig", content=[], transforms=TypedId(DOC, "older")))
    root = make_document("derived", content=[], transforms=TypedId(DOC, "orig"))

    plan = await collect_erasure_plan(FakeResourceRepository(store), root)

    assert plan.documents == frozenset({TypedId(DOC, "orig")})


@pytest.mark.asyncio
async def test_related_documents_walked_at_any_depth(store) -> None:
    store.add(make_document("a", content=[], related=[TypedId(DOC, "b")]))
    store.add(
        make_document(
            "b", content=[url_attachment(TypedId("Binary", "deep"))], related=[TypedId(DOC, "c")]
        )
    )
    store.add(make_document("c", content=[]))
    root = make_document("root", content=[], related=[TypedId(DOC, "a")])

    plan = await collect_erasure_plan(FakeResourceRepository(store), root)

    assert plan.documents == {TypedId(DOC, "a"), TypedId(DOC, "b"), TypedId(DOC, "c")}
    assert plan.binaries == {TypedId("Binary", "deep")}
    assert len(plan) == 5


@pytest.mark.asyncio
async def test_root_never_in_documents(store) -> None:
    root = make_document("root", content=[], related=[TypedId(DOC, "root")])
    plan = await collect_erasure_plan(FakeResourceRepository(store), root)
    assert plan.documents == frozenset()
    assert plan.root == TypedId(DOC, "root")
    assert len(plan) == 1


@pytest.mark.asyncio
async def test_non_document_related_and_unknown_content_kinds_ignored(store, caplog) -> None:
    root = make_document(
        "root",
        content=[url_attachment(TypedId("Patient", "p-1"))],
        related=[TypedId("Patient", "p-1")],
    )
    with caplog.at_level(logging.WARNING):
        plan = await collect_erasure_plan(FakeResourceRepository(store), root)
    assert len(plan) == 1
    assert "Patient/p-1" in caplog.text


@pytest.mark.asyncio
async def test_dependencies_ordered_binaries_invoices_documents(store) -> None:
    store.add(make_document("d-1", content=[]))
    root = make_document(
        "root",
        content=[
            url_attachment(TypedId("Invoice", "i-2")),
            url_attachment(TypedId("Binary", "b-1")),
        ],
        related=[TypedId(DOC, "d-1")],
        invoices=[TypedId("Invoice", "i-1")],
    )
    plan = await collect_erasure_plan(FakeResourceRepository(store), root)
    assert [str(t) for t in plan.dependencies()] == [
        "Binary/b-1",
        "Invoice/i-1",
        "Invoice/i-2",
        "DocumentReference/d-1",
    ]
