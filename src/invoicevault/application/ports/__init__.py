"""Application ports - interfaces for external adapters."""

from invoicevault.application.ports.invoice_reader import InvoiceReader
from invoicevault.application.ports.permission_checker import PermissionChecker
from invoicevault.application.ports.token_generator import TokenGenerator
from invoicevault.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory
from invoicevault.application.ports.validation_engine import ValidationEngine

__all__ = [
    "InvoiceReader",
    "PermissionChecker",
    "TokenGenerator",
    "UnitOfWork",
    "UnitOfWorkFactory",
    "ValidationEngine",
]
