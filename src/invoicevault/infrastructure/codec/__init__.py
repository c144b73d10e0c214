"""JSON codec for stored and transported resources."""

from invoicevault.infrastructure.codec.embedded_invoice import (
    INVOICE_CONTENT_TYPE,
    EmbeddedInvoiceReader,
)
from invoicevault.infrastructure.codec.resource_codec import (
    ResourceCodecError,
    coding_from_dict,
    document_from_dict,
    resource_from_dict,
    resource_to_dict,
)

__all__ = [
    "INVOICE_CONTENT_TYPE",
    "EmbeddedInvoiceReader",
    "ResourceCodecError",
    "coding_from_dict",
    "document_from_dict",
    "resource_from_dict",
    "resource_to_dict",
]
