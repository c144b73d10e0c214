"""Coded value (system + code)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Coding:
    """Code from a code system; display is informational and ignored in matching."""

    system: str
    code: str
    display: str | None = None

    def matches(self, system: str, code: str) -> bool:
        return self.system == system and self.code == code
