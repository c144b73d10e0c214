"""Repository ports."""

from invoicevault.application.ports.repositories.resource_repository import (
    ResourceRepository,
)

__all__ = [
    "ResourceRepository",
]
