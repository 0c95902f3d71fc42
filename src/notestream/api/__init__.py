"""API routers for NoteStream."""

from .auth import router as auth_router
from .errors import register_exception_handlers
from .graphql_api import graphql_router
from .health import router as health_router
from .notes import router as notes_router
from .realtime import router as realtime_router

__all__ = [
    "auth_router",
    "notes_router",
    "health_router",
    "graphql_router",
    "realtime_router",
    "register_exception_handlers",
]
