"""Secure random token generator."""

import secrets

TOKEN_BYTES = 32


class SecureTokenGenerator:
    """Tokens of 32 random bytes rendered as 64 lowercase hex characters."""

    def __init__(self, num_bytes: int = TOKEN_BYTES) -> None:
        self._num_bytes = num_bytes

    def generate_unique_token(self) -> str:
        return secrets.token_hex(self._num_bytes)
