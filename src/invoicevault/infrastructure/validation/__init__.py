"""Validation engine adapters."""

from invoicevault.infrastructure.validation.jsonschema_engine import JsonSchemaValidationEngine

__all__ = ["JsonSchemaValidationEngine"]
