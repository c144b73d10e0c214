"""Invoice entity - financial record attached to a document."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar

from invoicevault.domain.value_objects import ResourceKind


@dataclass
class Invoice:
    """Monetary detail record; stored and deleted independently of its document."""

    kind: ClassVar[str] = ResourceKind.INVOICE

    id: str | None
    subject: str | None = None
    status: str = "issued"
    total_gross: Decimal | None = None
    currency: str = "EUR"
    issued: date | None = None
