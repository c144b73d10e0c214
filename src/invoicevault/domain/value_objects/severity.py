"""Diagnostic severity."""

from enum import StrEnum


class Severity(StrEnum):
    """Severity of a diagnostic message, ordered FATAL > ERROR > WARNING > INFORMATION."""

    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def blocks(self) -> bool:
        """FATAL and ERROR block persistence; the rest are advisory."""
        return self.rank >= _RANKS[Severity.ERROR]


_RANKS = {
    Severity.FATAL: 3,
    Severity.ERROR: 2,
    Severity.WARNING: 1,
    Severity.INFORMATION: 0,
}
