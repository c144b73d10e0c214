"""Invoice reader port - invoices embedded in document attachments."""

from typing import Protocol

from invoicevault.domain.entities import Attachment, Invoice


class InvoiceReader(Protocol):
    """Port for decoding an invoice carried inline in an attachment."""

    def read(self, attachment: Attachment) -> Invoice | None:
        """Invoice behind the attachment data, or None when it carries none.

        Raises ValueError when the data claims to be a resource but cannot
        be decoded.
        """
        ...
