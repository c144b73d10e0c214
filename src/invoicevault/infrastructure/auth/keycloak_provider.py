"""Keycloak OIDC provider for token introspection."""

import logging
from dataclasses import dataclass

from keycloak import KeycloakOpenID

logger = logging.getLogger(__name__)


@dataclass
class OIDCUser:
    """Authenticated user from OIDC token."""

    user_id: str
    username: str | None
    realm_roles: list[str]
    subject_id: str | None = None
    telematik_id: str | None = None


class KeycloakProvider:
    """Keycloak OIDC - introspects tokens and extracts user info."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
        subject_claim: str = "insured_id",
        telematik_claim: str = "telematik_id",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )
        self._subject_claim = subject_claim
        self._telematik_claim = telematik_claim

    def decode_token(self, token: str) -> OIDCUser | None:
        """Introspect token, return user info or None."""
        try:
            token_info = self._keycloak.introspect(token)
        except Exception:
            logger.warning("Token introspection failed", exc_info=True)
            return None
        if not token_info.get("active"):
            return None
        return user_from_claims(token_info, self._subject_claim, self._telematik_claim)


def user_from_claims(claims: dict, subject_claim: str, telematik_claim: str) -> OIDCUser:
    """Map introspection claims onto OIDCUser."""
    return OIDCUser(
        user_id=claims.get("sub", ""),
        username=claims.get("preferred_username"),
        realm_roles=list(claims.get("realm_access", {}).get("roles", [])),
        subject_id=claims.get(subject_claim),
        telematik_id=claims.get(telematik_claim),
    )
