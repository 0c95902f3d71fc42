"""
Pydantic schemas for validating and documenting API requests and responses.

This package exposes the models used across the application to define
input/output contracts for authentication, notes, realtime events and
common responses (errors and health).
"""

from .auth import AuthResponse, Caller, LoginRequest, RegisterRequest, UserResponse
from .common import ErrorResponse, HealthCheckResponse, SuccessResponse
from .events import AnyNoteEvent, NoteAdded, NoteDeleted, NoteEvent, NoteUpdated
from .notes import NoteCreate, NoteResponse, NoteUpdate, OwnerSummary

__all__ = [
    # Auth schemas
    "LoginRequest",
    "RegisterRequest",
    "AuthResponse",
    "UserResponse",
    "Caller",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "OwnerSummary",
    # Event schemas
    "NoteEvent",
    "NoteAdded",
    "NoteUpdated",
    "NoteDeleted",
    "AnyNoteEvent",
    # Common schemas
    "ErrorResponse",
    "SuccessResponse",
    "HealthCheckResponse",
]
