"""Marker vocabulary for documents flagged by their recipient."""

from enum import StrEnum

FLAG_SYSTEM = "https://gematik.de/fhir/erg/CodeSystem/erg-rechnung-markierung-cs"
FLAG_EXTENSION_URL = (
    "https://gematik.de/fhir/erg/StructureDefinition/erg-documentreference-markierung"
)
ARCHIVE_KIND_SYSTEM = "https://gematik.de/fhir/erg/CodeSystem/erg-dokument-artderarchivierung-cs"


class FlagCode(StrEnum):
    """Marker codes with extra required fields; other codes are stored as given."""

    GELESEN = "gelesen"
    ARCHIVIERT = "archiviert"
