"""
Service interfaces for NoteStream.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..schemas.auth import AuthResponse, Caller, LoginRequest, RegisterRequest, UserResponse
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteCreate, NoteResponse, NoteUpdate


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> AuthResponse:
        """Register new user and issue a token."""
        pass

    @abstractmethod
    async def login_user(self, request: LoginRequest) -> AuthResponse:
        """Check credentials and issue a token."""
        pass

    @abstractmethod
    async def get_current_user(self, caller: Optional[Caller]) -> UserResponse:
        """Get the caller's account."""
        pass

    @abstractmethod
    async def logout_user(self, token: str) -> bool:
        """Revoke the presented access token."""
        pass


class INoteService(ABC):
    """Note mutations (with their events) and reads."""

    @abstractmethod
    async def create_note(self, caller: Optional[Caller], request: NoteCreate):
        """Create a note owned by the caller."""
        pass

    @abstractmethod
    async def update_note(self, caller: Optional[Caller], note_id: str | UUID, request: NoteUpdate):
        """Apply a partial update to one of the caller's notes."""
        pass

    @abstractmethod
    async def delete_note(self, caller: Optional[Caller], note_id: str | UUID):
        """Delete one of the caller's notes."""
        pass

    @abstractmethod
    async def get_note(self, caller: Optional[Caller], note_id: str | UUID) -> NoteResponse:
        """Get any note by ID."""
        pass

    @abstractmethod
    async def list_notes(
        self, caller: Optional[Caller], tag: Optional[str] = None, owner: Optional[str] = None
    ) -> List[NoteResponse]:
        """List notes, optionally filtered."""
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
        pass
