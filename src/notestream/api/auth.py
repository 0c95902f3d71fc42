"""Authentication API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.auth import AuthResponse, Caller, LoginRequest, RegisterRequest, UserResponse
from ..core.schemas.common import SuccessResponse
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_bearer_token, get_current_caller
from .errors import ERROR_RESPONSES

router = APIRouter(tags=["authentication"], responses=ERROR_RESPONSES)


@router.post("/register", response_model=AuthResponse)
async def register(request: RegisterRequest, session: AsyncSession = Depends(get_db_session)):
    """Register a new user and return a token for it."""
    auth_service = AuthService(session)
    return await auth_service.register_user(request)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, session: AsyncSession = Depends(get_db_session)):
    """Login user and get a JWT."""
    auth_service = AuthService(session)
    return await auth_service.login_user(request)


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    caller: Caller = Depends(get_current_caller),
    session: AsyncSession = Depends(get_db_session),
):
    """Get current user profile."""
    auth_service = AuthService(session)
    return await auth_service.get_current_user(caller)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    caller: Caller = Depends(get_current_caller),
    token: str = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_db_session),
):
    """Revoke the presented access token."""
    auth_service = AuthService(session)
    return SuccessResponse(success=await auth_service.logout_user(token))
