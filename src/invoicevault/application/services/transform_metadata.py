"""Metadata applied to the derived copy of a submitted document."""

from invoicevault.application.dto.caller import Caller
from invoicevault.domain.entities import Document
from invoicevault.domain.value_objects import DocumentStatus, RelationType

DOCUMENT_METADATA_PROFILE = (
    "https://gematik.de/fhir/erg/StructureDefinition/erg-dokumentenmetadaten|1.1.0-RC1"
)


def apply_transform_metadata(document: Document, caller: Caller | None = None) -> None:
    """Reset status to open, set the metadata profile and author.

    Inherited transforms links are dropped so the copy can only point at the
    document it was cloned from.
    """
    document.profiles = [DOCUMENT_METADATA_PROFILE]
    document.set_status(DocumentStatus.OFFEN)
    document.relates_to = [
        r for r in document.relates_to if r.code != RelationType.TRANSFORMS
    ]
    if caller is not None and caller.telematik_id:
        document.authors = [caller.telematik_id]
