"""Security utilities."""

from .jwt import (
    AuthFailure,
    authenticate,
    blacklist_token,
    create_access_token,
    create_token_for_user,
    decode_access_token,
)
from .password import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "AuthFailure",
    "authenticate",
    "blacklist_token",
    "create_access_token",
    "create_token_for_user",
    "decode_access_token",
]
