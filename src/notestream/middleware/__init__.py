"""Request middleware and authentication dependencies."""

from .auth import JWTBearer, get_bearer_token, get_current_caller

__all__ = ["JWTBearer", "get_bearer_token", "get_current_caller"]
