"""Resource store result DTO."""

from dataclasses import dataclass

from invoicevault.domain.entities import Resource
from invoicevault.domain.value_objects import TypedId


@dataclass(frozen=True)
class StoredResource:
    """Result of a store write: the id the store used and whether the row was new."""

    typed_id: TypedId
    resource: Resource
    created: bool
