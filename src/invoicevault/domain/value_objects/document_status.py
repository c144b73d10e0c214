"""Invoice status vocabulary carried as a document tag."""

from enum import StrEnum

STATUS_SYSTEM = "https://gematik.de/fhir/erg/CodeSystem/erg-rechnungsstatus-cs"


class DocumentStatus(StrEnum):
    """Status codes in STATUS_SYSTEM; PAPIERKORB is the trash marker."""

    OFFEN = "offen"
    ERLEDIGT = "erledigt"
    PAPIERKORB = "papierkorb"

    @property
    def display(self) -> str:
        return _DISPLAYS[self]


_DISPLAYS = {
    DocumentStatus.OFFEN: "Offen",
    DocumentStatus.ERLEDIGT: "Erledigt",
    DocumentStatus.PAPIERKORB: "Papierkorb",
}
