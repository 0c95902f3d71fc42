"""JWT token utilities and the session authenticator."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from ..config import get_settings
from ..core.redis_client import get_redis_client
from ..core.schemas.auth import Caller

logger = logging.getLogger(__name__)


class AuthFailure(BaseModel):
    """Result of a rejected credential.

    ``reason`` is for server logs only and is never sent to clients.
    """

    reason: str


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with JTI for Redis blacklisting."""
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    # Add JWT ID for blacklisting capability
    jti = str(uuid.uuid4())
    to_encode.update({"exp": expire, "type": "access", "jti": jti})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_token_for_user(user) -> str:
    """Issue an access token carrying the caller identity."""
    return create_access_token({"sub": str(user.id), "username": user.username})


def strip_bearer(credential: str) -> str:
    token = credential.strip()
    if token[:7].lower() == "bearer ":
        token = token[7:].strip()
    return token


async def decode_access_token(token: str) -> Union[Dict[str, Any], AuthFailure]:
    """Decode and validate access token, checking the Redis blacklist."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require_exp": True},
        )
    except ExpiredSignatureError:
        return AuthFailure(reason="expired")
    except JWTError:
        return AuthFailure(reason="invalid")

    # Verify token type
    if payload.get("type") != "access":
        return AuthFailure(reason="wrong token type")

    # Only consult the blacklist when Redis is up; auth keeps working without it
    jti = payload.get("jti")
    redis_client = get_redis_client()
    if jti and redis_client.is_connected:
        if await redis_client.is_token_blacklisted(jti):
            return AuthFailure(reason="revoked")

    return payload


async def authenticate(credential: Optional[str]) -> Union[Caller, AuthFailure]:
    """Turn a bearer credential into a Caller.

    Never raises: every problem (absent, malformed, expired, bad signature,
    revoked) comes back as an AuthFailure.
    """
    if not credential or not credential.strip():
        return AuthFailure(reason="missing")

    payload = await decode_access_token(strip_bearer(credential))
    if isinstance(payload, AuthFailure):
        return payload

    user_id = payload.get("sub")
    username = payload.get("username")
    if not user_id or not username:
        return AuthFailure(reason="missing claims")

    try:
        return Caller(id=UUID(str(user_id)), username=str(username))
    except ValueError:
        return AuthFailure(reason="malformed subject")


async def blacklist_token(token: str) -> bool:
    """Add token to Redis blacklist for secure logout."""
    try:
        settings = get_settings()
        payload = jwt.decode(strip_bearer(token), settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.error(f"Blacklist token error: {e}")
        return False

    jti = payload.get("jti")
    exp = payload.get("exp")
    if not jti or not exp:
        return False

    # Keep the entry only as long as the token would have been valid
    expire_time = datetime.fromtimestamp(exp, tz=timezone.utc)
    remaining_seconds = int((expire_time - datetime.now(timezone.utc)).total_seconds())
    if remaining_seconds <= 0:
        return False

    redis_client = get_redis_client()
    return await redis_client.add_to_blacklist(jti, remaining_seconds)
