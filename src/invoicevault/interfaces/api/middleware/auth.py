"""Auth middleware - resolves the caller from a bearer token."""

import falcon.asgi

from invoicevault.application.dto.caller import Caller


class AuthMiddleware:
    """Middleware that introspects the bearer token and sets req.context.user.

    ``req.context.user`` is None when the header is missing, the token is
    inactive or no identity provider is configured; resources answer 401.
    """

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Extract caller from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return
        user = self._keycloak.decode_token(auth[7:])
        if user:
            req.context.user = Caller(
                user_id=user.user_id,
                roles=frozenset(user.realm_roles),
                subject_id=user.subject_id,
                telematik_id=user.telematik_id,
            )
