"""Reads invoices carried inline as base64 JSON in document attachments."""

import base64
import binascii
import json
import logging

from invoicevault.domain.entities import Attachment, Invoice
from invoicevault.domain.value_objects import ResourceKind
from invoicevault.infrastructure.codec.resource_codec import ResourceCodecError, resource_from_dict

logger = logging.getLogger(__name__)

INVOICE_CONTENT_TYPE = "application/fhir+json"


class EmbeddedInvoiceReader:
    """Decodes ``application/fhir+json`` attachment data into an Invoice.

    JSON resources of another type are not invoices and read as None.
    """

    def read(self, attachment: Attachment) -> Invoice | None:
        if not attachment.data or not _is_fhir_json(attachment.content_type):
            return None
        try:
            text = base64.b64decode(attachment.data, validate=True).decode("utf-8")
            data = json.loads(text)
        except (binascii.Error, UnicodeDecodeError, ValueError, TypeError) as e:
            raise ResourceCodecError(f"Embedded resource is not base64 encoded JSON: {e}") from e
        if not isinstance(data, dict):
            raise ResourceCodecError("Embedded resource must be a JSON object")
        declared = data.get("resourceType")
        if declared != ResourceKind.INVOICE:
            logger.warning("Ignoring embedded %s, only invoices are extracted", declared)
            return None
        invoice = resource_from_dict(ResourceKind.INVOICE, data)
        if not isinstance(invoice, Invoice):
            raise ResourceCodecError(f"Expected an invoice, got {type(invoice).__name__}")
        return invoice


def _is_fhir_json(content_type: object) -> bool:
    return isinstance(content_type, str) and content_type.lower() == INVOICE_CONTENT_TYPE
