"""Unit tests for EraseDocumentUseCase."""

from collections import Counter

import pytest

from invoicevault.application.services.audit_recorder import AuditRecorder
from invoicevault.application.use_cases.document.erase_document import EraseDocumentUseCase
from invoicevault.domain.entities import Binary, Invoice
from invoicevault.domain.exceptions import (
    InternalError,
    InvalidState,
    NotFound,
    PermissionDenied,
)
from invoicevault.domain.value_objects import DocumentStatus, ResourceKind, Severity, TypedId

from tests.conftest import make_document, url_attachment

DOC = ResourceKind.DOCUMENT


def _ref(kind: str, resource_id: str) -> TypedId:
    return TypedId(kind, resource_id)


def _seed_graph(store) -> None:
    """root -> related A (with binary + invoice) -> related B -> related A (cycle)."""
    store.add(Binary(id="bin-root", content_type="application/pdf", data="AA=="))
    store.add(Binary(id="bin-a", content_type="application/pdf", data="AA=="))
    store.add(Invoice(id="inv-a"))
    store.add(Invoice(id="inv-root"))
    store.add(
        make_document(
            "root",
            status=DocumentStatus.PAPIERKORB,
            content=[url_attachment(_ref("Binary", "bin-root"))],
            related=[_ref(DOC, "a")],
            invoices=[_ref("Invoice", "inv-root")],
        )
    )
    store.add(
        make_document(
            "a",
            content=[
                url_attachment(_ref("Binary", "bin-a")),
                url_attachment(_ref("Invoice", "inv-a")),
            ],
            related=[_ref(DOC, "b"), _ref(DOC, "root")],
        )
    )
    store.add(make_document("b", content=[], related=[_ref(DOC, "a")]))
    store.add(make_document("unrelated", status=DocumentStatus.PAPIERKORB))


def _use_case(uow_factory, permission_checker, **kwargs) -> EraseDocumentUseCase:
    return EraseDocumentUseCase(
        unit_of_work_factory=uow_factory, permission_checker=permission_checker, **kwargs
    )


@pytest.mark.asyncio
async def test_erase_deletes_graph_once_despite_cycle(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    _seed_graph(store)

    outcome = await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")

    deleted = store.deletions()
    assert Counter(deleted).most_common(1)[0][1] == 1
    assert set(deleted) == {
        _ref(DOC, "root"),
        _ref(DOC, "a"),
        _ref(DOC, "b"),
        _ref("Binary", "bin-root"),
        _ref("Binary", "bin-a"),
        _ref("Invoice", "inv-a"),
        _ref("Invoice", "inv-root"),
    }
    assert set(store.rows) == {_ref(DOC, "unrelated")}
    assert outcome.issues[0].severity == Severity.INFORMATION
    assert "root" in outcome.issues[0].diagnostics


@pytest.mark.asyncio
async def test_erase_order_root_binaries_invoices_documents(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    _seed_graph(store)
    await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")

    kinds = [tid.kind for tid in store.deletions()]
    assert kinds[0] == DOC and store.deletions()[0].id == "root"
    rest = kinds[1:]
    assert rest == sorted(rest, key=["Binary", "Invoice", DOC].index)


@pytest.mark.asyncio
async def test_erase_requires_trash_and_mutates_nothing(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    store.add(make_document("root", status=DocumentStatus.OFFEN))
    with pytest.raises(InvalidState, match="papierkorb"):
        await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")
    assert store.mutations == []
    assert _ref(DOC, "root") in store.rows


@pytest.mark.asyncio
async def test_erase_without_status_tag_is_invalid_state(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    store.add(make_document("root"))
    with pytest.raises(InvalidState):
        await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")
    assert store.mutations == []


@pytest.mark.asyncio
async def test_erase_permission_checked_before_anything(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    _seed_graph(store)
    mock_permission_checker.check.return_value = False
    with pytest.raises(PermissionDenied):
        await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")
    assert store.mutations == []


@pytest.mark.asyncio
async def test_erase_unknown_root_is_not_found(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    with pytest.raises(NotFound):
        await _use_case(uow_factory, mock_permission_checker).execute(insured, "missing")


@pytest.mark.asyncio
async def test_erase_twice_raises_not_found_and_keeps_unrelated(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    _seed_graph(store)
    use_case = _use_case(uow_factory, mock_permission_checker)
    await use_case.execute(insured, "root")
    with pytest.raises(NotFound):
        await use_case.execute(insured, "root")
    assert set(store.rows) == {_ref(DOC, "unrelated")}


@pytest.mark.asyncio
async def test_erase_dependency_failure_rolls_back_everything(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    _seed_graph(store)
    before = store.snapshot()
    store.fail("delete", _ref("Invoice", "inv-a"), RuntimeError("connection lost"))

    with pytest.raises(InternalError, match="Invoice/inv-a"):
        await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")

    assert store.rows == before
    assert store.rollbacks == 1


@pytest.mark.asyncio
async def test_erase_root_delete_failure_is_internal_error(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    _seed_graph(store)
    before = store.snapshot()
    store.fail("delete", _ref(DOC, "root"), RuntimeError("locked"))
    with pytest.raises(InternalError):
        await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")
    assert store.rows == before


@pytest.mark.asyncio
async def test_erase_missing_dependencies_are_skipped(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    """Dangling references only log warnings; the rest is erased."""
    store.add(
        make_document(
            "root",
            status=DocumentStatus.PAPIERKORB,
            content=[url_attachment(_ref("Binary", "gone"))],
            related=[_ref(DOC, "also-gone")],
        )
    )
    outcome = await _use_case(uow_factory, mock_permission_checker).execute(insured, "root")
    assert store.rows == {}
    assert store.deletions() == [_ref(DOC, "root")]
    assert not outcome.is_empty


@pytest.mark.asyncio
async def test_erase_follows_transforms_from_root(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    """Erasing a derived document erases the original it was cloned from."""
    store.add(Binary(id="bin-orig", content_type="application/pdf", data="AA=="))
    store.add(make_document("orig", content=[url_attachment(_ref("Binary", "bin-orig"))]))
    store.add(
        make_document(
            "derived",
            status=DocumentStatus.PAPIERKORB,
            content=[],
            transforms=_ref(DOC, "orig"),
        )
    )
    await _use_case(uow_factory, mock_permission_checker).execute(insured, "derived")
    assert store.rows == {}


@pytest.mark.asyncio
async def test_erase_records_audit_event_with_plain_identifier(
    uow_factory, store, mock_permission_checker, insured
) -> None:
    store.add(make_document("root", status=DocumentStatus.PAPIERKORB, content=[]))
    use_case = _use_case(
        uow_factory, mock_permission_checker, audit_recorder=AuditRecorder(uow_factory)
    )
    await use_case.execute(insured, "root")

    events = list(store.rows.values())
    assert len(events) == 1
    assert events[0].action == "D"
    assert events[0].entity_identifier == "DocumentReference/root"
    assert events[0].actor_id == "X110000001"
