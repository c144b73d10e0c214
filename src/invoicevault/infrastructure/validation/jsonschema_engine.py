"""JSON Schema validation engine.

Validates the JSON form of a resource against a bundled Draft 2020-12 schema
and adds the attachment rules a schema cannot express: decodable base64 and
a size limit on inline data. Invoices embedded as
``application/fhir+json`` data are decoded and checked against their own
schema.
"""

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from invoicevault.domain.entities import Attachment, Document, Resource
from invoicevault.domain.value_objects import ResourceKind, Severity, ValidationMessage
from invoicevault.infrastructure.codec import (
    INVOICE_CONTENT_TYPE,
    EmbeddedInvoiceReader,
    resource_to_dict,
)

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "schemas"
DEFAULT_MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024


def load_schema(kind: str, schema_dir: Path = SCHEMA_DIR) -> dict[str, Any] | None:
    """Load and check the schema for a kind; None when the kind has no schema."""
    path = schema_dir / f"{kind}.json"
    if not path.exists():
        return None
    with open(path, encoding="utf-8") as f:
        schema = json.load(f)
    Draft202012Validator.check_schema(schema)
    return schema


class JsonSchemaValidationEngine:
    """Validation engine backed by ``jsonschema``.

    Messages come out in a stable order: schema violations sorted by JSON
    path, then attachment checks in content order, then document-level
    advisories.
    """

    def __init__(
        self,
        max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES,
        schema_dir: Path = SCHEMA_DIR,
        invoice_reader: EmbeddedInvoiceReader | None = None,
    ) -> None:
        self._max_attachment_bytes = max_attachment_bytes
        self._invoice_reader = invoice_reader or EmbeddedInvoiceReader()
        self._validators: dict[str, Draft202012Validator] = {}
        for kind in ResourceKind:
            schema = load_schema(kind.value, schema_dir)
            if schema is not None:
                self._validators[kind.value] = Draft202012Validator(schema)

    def validate(self, resource: Resource) -> list[ValidationMessage]:
        data = resource_to_dict(resource)
        messages = self._schema_messages(resource.kind, data)
        if isinstance(resource, Document):
            messages.extend(self._attachment_messages(resource))
            messages.extend(_document_advisories(resource))
        logger.debug("Validated %s: %d message(s)", resource.kind, len(messages))
        return messages

    def _schema_messages(self, kind: str, data: dict[str, Any]) -> list[ValidationMessage]:
        validator = self._validators.get(kind)
        if validator is None:
            return []
        errors = sorted(validator.iter_errors(data), key=lambda e: (e.json_path, e.message))
        return [ValidationMessage(Severity.ERROR, e.json_path, e.message) for e in errors]

    def _attachment_messages(self, document: Document) -> list[ValidationMessage]:
        messages = []
        for i, attachment in enumerate(document.content):
            location = f"$.content[{i}].attachment"
            if attachment.data:
                try:
                    raw = base64.b64decode(attachment.data, validate=True)
                except (binascii.Error, ValueError, TypeError):
                    messages.append(
                        ValidationMessage(
                            Severity.ERROR, f"{location}.data", "Attachment data is not valid base64"
                        )
                    )
                else:
                    if len(raw) > self._max_attachment_bytes:
                        messages.append(
                            ValidationMessage(
                                Severity.ERROR,
                                f"{location}.data",
                                f"Attachment is {len(raw)} bytes, limit is {self._max_attachment_bytes}",
                            )
                        )
                    else:
                        messages.extend(self._embedded_invoice_messages(attachment, f"{location}.data"))
            if not attachment.title:
                messages.append(
                    ValidationMessage(Severity.WARNING, f"{location}.title", "Attachment has no title")
                )
        return messages

    def _embedded_invoice_messages(
        self, attachment: Attachment, location: str
    ) -> list[ValidationMessage]:
        """Schema messages of an inline invoice, located below the attachment data."""
        try:
            invoice = self._invoice_reader.read(attachment)
        except ValueError as e:
            return [ValidationMessage(Severity.ERROR, location, f"Embedded invoice cannot be read: {e}")]
        if invoice is None:
            return []
        return [
            ValidationMessage(m.severity, location + m.location.removeprefix("$"), m.message)
            for m in self._schema_messages(ResourceKind.INVOICE, resource_to_dict(invoice))
        ]


def _document_advisories(document: Document) -> list[ValidationMessage]:
    has_invoice = bool(document.invoices) or any(
        (a.reference is not None and a.reference.kind == ResourceKind.INVOICE)
        or (bool(a.data) and a.content_type == INVOICE_CONTENT_TYPE)
        for a in document.content
    )
    if has_invoice:
        return []
    return [
        ValidationMessage(
            Severity.INFORMATION, "$.invoice", "Document references no financial record"
        )
    ]
