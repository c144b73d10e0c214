"""Resource <-> JSON dict conversion.

The JSON form is what the HTTP API exchanges, what the validation engine
checks against its schema and what the store keeps in the ``body`` column.
References are rendered as ``{"reference": "Kind/id"}``.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from invoicevault.domain.entities import (
    Attachment,
    AuditEvent,
    Binary,
    Communication,
    Document,
    DocumentFlag,
    Invoice,
    RelatesTo,
    Resource,
)
from invoicevault.domain.value_objects import (
    FLAG_EXTENSION_URL,
    Coding,
    RelationType,
    ResourceKind,
    TypedId,
)


class ResourceCodecError(ValueError):
    """JSON does not describe a resource this system understands."""


def resource_to_dict(resource: Resource) -> dict[str, Any]:
    """Serialize any supported resource."""
    if isinstance(resource, Document):
        return _document_to_dict(resource)
    if isinstance(resource, Invoice):
        return _invoice_to_dict(resource)
    if isinstance(resource, Binary):
        return _binary_to_dict(resource)
    if isinstance(resource, AuditEvent):
        return _audit_event_to_dict(resource)
    if isinstance(resource, Communication):
        return _communication_to_dict(resource)
    raise ResourceCodecError(f"Unsupported resource type: {type(resource).__name__}")


def resource_from_dict(kind: str, data: dict[str, Any]) -> Resource:
    """Deserialize a resource of the given kind."""
    if not isinstance(data, dict):
        raise ResourceCodecError("Resource must be a JSON object")
    declared = data.get("resourceType")
    if declared is not None and declared != kind:
        raise ResourceCodecError(f"Expected resourceType {kind!r}, got {declared!r}")
    try:
        if kind == ResourceKind.DOCUMENT:
            return _document_from_dict(data)
        if kind == ResourceKind.INVOICE:
            return _invoice_from_dict(data)
        if kind == ResourceKind.BINARY:
            return Binary(
                id=data.get("id"),
                content_type=data["contentType"],
                data=data.get("data", ""),
            )
        if kind == ResourceKind.AUDIT_EVENT:
            return _audit_event_from_dict(data)
        if kind == ResourceKind.COMMUNICATION:
            return _communication_from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
        raise ResourceCodecError(f"Malformed {kind}: {e}") from e
    raise ResourceCodecError(f"Unsupported resource kind: {kind!r}")


def document_from_dict(data: dict[str, Any]) -> Document:
    """Deserialize a DocumentReference body."""
    doc = resource_from_dict(ResourceKind.DOCUMENT, data)
    if not isinstance(doc, Document):
        raise ResourceCodecError(f"Expected a document, got {type(doc).__name__}")
    return doc


def coding_from_dict(value: Any) -> Coding:
    """Deserialize a standalone coding such as an operation parameter."""
    if not isinstance(value, dict):
        raise ResourceCodecError("Coding must be a JSON object")
    try:
        return _coding_from_dict(value)
    except KeyError as e:
        raise ResourceCodecError(f"Coding is missing {e}") from e


def _ref(typed_id: TypedId) -> dict[str, str]:
    return {"reference": typed_id.reference}


def _parse_ref(value: dict[str, Any]) -> TypedId:
    return TypedId.parse(_object(value, "reference")["reference"])


def _object(value: Any, name: str) -> dict[str, Any]:
    """Return value when it is a JSON object; absent values read as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ResourceCodecError(f"{name!r} must be a JSON object, got {type(value).__name__}")
    return value


def _array(value: Any, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ResourceCodecError(f"{name!r} must be a JSON array, got {type(value).__name__}")
    return value


def _relation_object(value: Any) -> dict[str, Any]:
    return _object(value, "relatesTo")


def _extension_object(value: Any) -> dict[str, Any]:
    return _object(value, "extension")


def _coding_to_dict(coding: Coding) -> dict[str, str]:
    out = {"system": coding.system, "code": coding.code}
    if coding.display is not None:
        out["display"] = coding.display
    return out


def _coding_from_dict(value: dict[str, Any]) -> Coding:
    value = _object(value, "coding")
    return Coding(system=value["system"], code=value["code"], display=value.get("display"))


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None and v != [] and v != {}}


def _document_to_dict(doc: Document) -> dict[str, Any]:
    content = []
    for a in doc.content:
        attachment = _drop_none(
            {"contentType": a.content_type, "url": a.url, "data": a.data, "title": a.title}
        )
        content.append({"attachment": attachment})
    return _drop_none(
        {
            "resourceType": ResourceKind.DOCUMENT.value,
            "id": doc.id,
            "meta": _drop_none(
                {
                    "profile": list(doc.profiles),
                    "tag": [_coding_to_dict(t) for t in doc.tags],
                    "extension": [_flag_to_dict(f) for f in doc.flags],
                }
            ),
            "subject": doc.subject,
            "description": doc.description,
            "type": _coding_to_dict(doc.type) if doc.type else None,
            "date": doc.date.isoformat() if doc.date else None,
            "author": list(doc.authors),
            "content": content,
            "context": _drop_none({"related": [_ref(r) for r in doc.related]}),
            "relatesTo": [
                {"code": r.code.value, "target": _ref(r.target)} for r in doc.relates_to
            ],
            "invoice": [_ref(r) for r in doc.invoices],
        }
    )


def _document_from_dict(data: dict[str, Any]) -> Document:
    meta = _object(data.get("meta"), "meta")
    context = _object(data.get("context"), "context")
    content = []
    for entry in _array(data.get("content"), "content"):
        a = _object(_object(entry, "content")["attachment"], "attachment")
        content.append(
            Attachment(
                content_type=a["contentType"],
                url=a.get("url"),
                data=a.get("data"),
                title=a.get("title"),
            )
        )
    return Document(
        id=data.get("id"),
        subject=data.get("subject"),
        description=data.get("description"),
        type=_coding_from_dict(data["type"]) if data.get("type") else None,
        tags=[_coding_from_dict(t) for t in _array(meta.get("tag"), "tag")],
        profiles=list(_array(meta.get("profile"), "profile")),
        content=content,
        related=[_parse_ref(r) for r in _array(context.get("related"), "related")],
        relates_to=[
            RelatesTo(code=RelationType(r["code"]), target=_parse_ref(r["target"]))
            for r in map(_relation_object, _array(data.get("relatesTo"), "relatesTo"))
        ],
        invoices=[_parse_ref(r) for r in _array(data.get("invoice"), "invoice")],
        authors=list(_array(data.get("author"), "author")),
        date=datetime.fromisoformat(data["date"]) if data.get("date") else None,
        flags=[
            _flag_from_dict(e)
            for e in map(_extension_object, _array(meta.get("extension"), "extension"))
            if e.get("url") == FLAG_EXTENSION_URL
        ],
    )


def _invoice_to_dict(invoice: Invoice) -> dict[str, Any]:
    total = None
    if invoice.total_gross is not None:
        total = {"value": str(invoice.total_gross), "currency": invoice.currency}
    return _drop_none(
        {
            "resourceType": ResourceKind.INVOICE.value,
            "id": invoice.id,
            "subject": invoice.subject,
            "status": invoice.status,
            "totalGross": total,
            "date": invoice.issued.isoformat() if invoice.issued else None,
        }
    )


def _invoice_from_dict(data: dict[str, Any]) -> Invoice:
    total = _object(data.get("totalGross"), "totalGross")
    return Invoice(
        id=data.get("id"),
        subject=data.get("subject"),
        status=data.get("status", "issued"),
        total_gross=Decimal(str(total["value"])) if "value" in total else None,
        currency=total.get("currency", "EUR"),
        issued=date.fromisoformat(data["date"]) if data.get("date") else None,
    )


def _binary_to_dict(binary: Binary) -> dict[str, Any]:
    return _drop_none(
        {
            "resourceType": ResourceKind.BINARY.value,
            "id": binary.id,
            "contentType": binary.content_type,
            "data": binary.data,
        }
    )


def _audit_event_to_dict(event: AuditEvent) -> dict[str, Any]:
    return _drop_none(
        {
            "resourceType": ResourceKind.AUDIT_EVENT.value,
            "id": event.id,
            "action": event.action,
            "subtype": event.subtype,
            "outcome": event.outcome,
            "recorded": event.recorded.isoformat(),
            "entity": _drop_none(
                {"identifier": event.entity_identifier, "description": event.entity_description}
            ),
            "agent": _drop_none({"identifier": event.actor_id}),
        }
    )


def _audit_event_from_dict(data: dict[str, Any]) -> AuditEvent:
    entity = _object(data["entity"], "entity")
    agent = _object(data.get("agent"), "agent")
    return AuditEvent(
        id=data.get("id"),
        action=data["action"],
        subtype=data["subtype"],
        outcome=data["outcome"],
        entity_identifier=entity["identifier"],
        entity_description=entity.get("description"),
        recorded=datetime.fromisoformat(data["recorded"]),
        actor_id=agent.get("identifier"),
    )


def _flag_to_dict(flag: DocumentFlag) -> dict[str, Any]:
    parts = [
        {"url": "markierung", "valueCoding": _coding_to_dict(flag.marker)},
        {"url": "zeitpunkt", "valueDateTime": flag.time.isoformat()},
    ]
    if flag.details:
        parts.append({"url": "details", "valueString": flag.details})
    if flag.read is not None:
        parts.append({"url": "gelesen", "valueBoolean": flag.read})
    if flag.archive_kind is not None:
        parts.append({"url": "artDerArchivierung", "valueCoding": _coding_to_dict(flag.archive_kind)})
    return {"url": FLAG_EXTENSION_URL, "extension": parts}


def _flag_from_dict(data: dict[str, Any]) -> DocumentFlag:
    parts = {
        p["url"]: p for p in map(_extension_object, _array(data.get("extension"), "extension"))
    }
    archive_kind = parts.get("artDerArchivierung")
    read = parts.get("gelesen")
    details = parts.get("details")
    return DocumentFlag(
        marker=_coding_from_dict(parts["markierung"]["valueCoding"]),
        time=datetime.fromisoformat(parts["zeitpunkt"]["valueDateTime"]),
        details=details["valueString"] if details else None,
        read=bool(read["valueBoolean"]) if read else None,
        archive_kind=_coding_from_dict(archive_kind["valueCoding"]) if archive_kind else None,
    )


def _communication_to_dict(notification: Communication) -> dict[str, Any]:
    return _drop_none(
        {
            "resourceType": ResourceKind.COMMUNICATION.value,
            "id": notification.id,
            "status": notification.status,
            "category": _coding_to_dict(notification.category),
            "recipient": {"identifier": notification.recipient},
            "sent": notification.sent.isoformat(),
            "payload": notification.payload,
            "token": notification.token,
            "oldStatus": notification.old_status,
            "newStatus": notification.new_status,
        }
    )


def _communication_from_dict(data: dict[str, Any]) -> Communication:
    return Communication(
        id=data.get("id"),
        status=data.get("status", "completed"),
        category=_coding_from_dict(data["category"]),
        recipient=_object(data["recipient"], "recipient")["identifier"],
        sent=datetime.fromisoformat(data["sent"]),
        payload=data["payload"],
        token=data.get("token"),
        old_status=data.get("oldStatus"),
        new_status=data.get("newStatus"),
    )
