"""
Database models for NoteStream.

SQLAlchemy ORM models defining the persisted state:
    - User: account with unique username and email
    - Note: text note with ordered tags, owned by exactly one user
"""

from .base import BaseModel
from .note import Note
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
]
