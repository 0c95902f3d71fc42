"""Authentication service implementation."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...security import blacklist_token, create_token_for_user, hash_password, verify_password
from ..exceptions import DuplicateUser, InvalidCredentials, NotAuthenticated, NotFound
from ..repositories.user_repository import UserRepository
from ..schemas.auth import AuthResponse, Caller, LoginRequest, RegisterRequest, UserResponse
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def register_user(self, request: RegisterRequest) -> AuthResponse:
        """Register new user and log them in."""
        if await self.user_repo.is_username_or_email_taken(request.username, request.email):
            raise DuplicateUser()

        user_data = {
            "username": request.username,
            "email": request.email,
            "password_hash": hash_password(request.password),
        }

        try:
            user = await self.user_repo.create_user(user_data)
        except IntegrityError as e:
            # lost a race with a concurrent registration
            raise DuplicateUser() from e

        logger.info(f"Registered user {user.username}", extra={"user_id": str(user.id)})
        return AuthResponse(token=create_token_for_user(user), user=UserResponse.model_validate(user))

    async def login_user(self, request: LoginRequest) -> AuthResponse:
        """Login user and return a JWT."""
        user = await self.user_repo.get_by_username(request.username)
        if not user or not verify_password(request.password, user.password_hash):
            logger.info(f"Failed login for {request.username}")
            raise InvalidCredentials()

        return AuthResponse(token=create_token_for_user(user), user=UserResponse.model_validate(user))

    async def get_current_user(self, caller: Optional[Caller]) -> UserResponse:
        """Get the caller's account."""
        if caller is None:
            raise NotAuthenticated()

        user = await self.user_repo.get_by_id(caller.id)
        if not user:
            raise NotFound("User not found")
        return UserResponse.model_validate(user)

    async def logout_user(self, token: str) -> bool:
        """Revoke the access token; False when it could not be recorded."""
        try:
            revoked = await blacklist_token(token)
        except Exception as e:
            # Log error but don't fail logout if Redis is down
            logger.warning(f"Failed to blacklist token in Redis: {e}")
            return False

        if not revoked:
            logger.info("Logout without revocation (Redis unavailable or token already expired)")
        return revoked
