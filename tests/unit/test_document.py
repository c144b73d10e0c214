"""Unit tests for the Document entity."""

from datetime import UTC, datetime

import pytest

from invoicevault.domain.entities import Attachment, Document, DocumentFlag
from invoicevault.domain.value_objects import (
    FLAG_SYSTEM,
    STATUS_SYSTEM,
    Coding,
    DocumentStatus,
    RelationType,
    TypedId,
)

from tests.conftest import make_document


def test_typed_id_requires_id() -> None:
    with pytest.raises(ValueError):
        Document(id=None).typed_id


def test_status_tag_and_trash() -> None:
    doc = make_document(status=DocumentStatus.PAPIERKORB)
    assert doc.status_tag == Coding(STATUS_SYSTEM, "papierkorb", "Papierkorb")
    assert doc.is_in_trash


def test_trash_requires_status_system() -> None:
    """A papierkorb code from another system is not the trash marker."""
    doc = make_document()
    doc.tags.append(Coding("https://other.example/cs", "papierkorb"))
    assert not doc.is_in_trash


def test_set_status_replaces_existing_status_tags() -> None:
    doc = make_document(status=DocumentStatus.OFFEN)
    doc.tags.append(Coding("https://other.example/cs", "keep"))
    doc.set_status(DocumentStatus.ERLEDIGT)
    status_tags = [t for t in doc.tags if t.system == STATUS_SYSTEM]
    assert [t.code for t in status_tags] == ["erledigt"]
    assert doc.has_tag("https://other.example/cs", "keep")


def test_mark_transform_of_only_once() -> None:
    doc = make_document("derived")
    doc.mark_transform_of(TypedId("DocumentReference", "orig"))
    assert doc.transforms_target == TypedId("DocumentReference", "orig")
    with pytest.raises(ValueError, match="already transforms"):
        doc.mark_transform_of(TypedId("DocumentReference", "other"))


def test_clone_is_deep() -> None:
    doc = make_document(status=DocumentStatus.OFFEN)
    clone = doc.clone()
    clone.content[0].data = None
    clone.set_status(DocumentStatus.ERLEDIGT)
    assert doc.content[0].data == "JVBERi0="
    assert doc.status_tag.code == "offen"
    assert clone.relates_to is not doc.relates_to


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (None, None),
        ("Binary/b-1", TypedId("Binary", "b-1")),
        ("https://x.example/fhir/Invoice/i-1", TypedId("Invoice", "i-1")),
        ("not-a-reference", None),
        (5, None),
    ],
)
def test_attachment_reference(url, expected) -> None:
    assert Attachment("application/pdf", url=url).reference == expected


def test_relation_codes() -> None:
    assert RelationType("transforms") == RelationType.TRANSFORMS


def test_flags_accumulate_and_are_cloned() -> None:
    doc = make_document()
    first = DocumentFlag(Coding(FLAG_SYSTEM, "gelesen"), datetime(2026, 2, 1, tzinfo=UTC), read=True)
    second = DocumentFlag(Coding(FLAG_SYSTEM, "gelesen"), datetime(2026, 2, 2, tzinfo=UTC), read=False)
    doc.add_flag(first)
    doc.add_flag(second)
    clone = doc.clone()
    clone.flags.clear()
    assert doc.flags == [first, second]
