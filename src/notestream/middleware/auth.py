"""Authentication dependencies for the HTTP and realtime entry points."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.exceptions import NotAuthenticated
from ..core.logging import get_logger
from ..core.schemas.auth import Caller
from ..security import AuthFailure, authenticate

logger = get_logger("auth")


class JWTBearer(HTTPBearer):
    """Bearer credential resolved to a Caller.

    Missing, malformed, expired and revoked tokens all raise the same
    NotAuthenticated error; the reason only goes to the logs.
    """

    def __init__(self):
        # we raise our own error so REST and GraphQL report it the same way
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> Caller:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        token = credentials.credentials if credentials else None

        result = await authenticate(token)
        if isinstance(result, AuthFailure):
            logger.debug(
                "Rejected credential",
                extra={"reason": result.reason, "path": request.url.path},
            )
            raise NotAuthenticated()
        return result


async def get_current_caller(caller: Caller = Depends(JWTBearer())) -> Caller:
    """Get the authenticated caller or fail with 401."""
    return caller


def get_bearer_token(request: Request) -> Optional[str]:
    """Raw credential from the Authorization header."""
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
