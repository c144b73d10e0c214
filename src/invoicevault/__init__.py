"""InvoiceVault - invoice document submission and erasure service."""

__version__ = "0.1.0"
