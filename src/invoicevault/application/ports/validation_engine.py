"""Validation engine port - profile/terminology validation."""

from typing import Protocol

from invoicevault.domain.entities import Resource
from invoicevault.domain.value_objects import ValidationMessage


class ValidationEngine(Protocol):
    """Port for validating a resource; returns messages of every severity."""

    def validate(self, resource: Resource) -> list[ValidationMessage]: ...
