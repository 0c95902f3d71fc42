"""User repository for database operations."""

from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User
from .base import store_errors


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(self, user_data: dict) -> User:
        """Create new user."""
        user = User(**user_data)
        async with store_errors(self.session, "creating user"):
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        async with store_errors(self.session, "loading user"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        stmt = select(User).where(User.username == username)
        async with store_errors(self.session, "loading user"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def is_username_or_email_taken(self, username: str, email: str) -> bool:
        """Check if either identifier already belongs to an account."""
        stmt = select(User.id).where(or_(User.username == username, User.email == email)).limit(1)
        async with store_errors(self.session, "checking user uniqueness"):
            result = await self.session.execute(stmt)
            return result.first() is not None
