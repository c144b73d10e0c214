"""Authenticated caller DTO."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Caller:
    """Identity resolved upstream by token introspection."""

    user_id: str
    roles: frozenset[str] = field(default_factory=frozenset)
    subject_id: str | None = None
    telematik_id: str | None = None

    def has_role(self, role: str) -> bool:
        return role in self.roles
