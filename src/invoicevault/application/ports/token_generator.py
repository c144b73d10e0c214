"""Token generator port."""

from typing import Protocol


class TokenGenerator(Protocol):
    """Port for generating opaque ids for derived documents."""

    def generate_unique_token(self) -> str: ...
