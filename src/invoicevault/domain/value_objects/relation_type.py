"""Document-to-document relationship codes."""

from enum import StrEnum


class RelationType(StrEnum):
    """relatesTo codes; TRANSFORMS links a derived document to its original."""

    REPLACES = "replaces"
    TRANSFORMS = "transforms"
    SIGNS = "signs"
    APPENDS = "appends"
