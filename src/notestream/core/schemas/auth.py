"""
Authentication schemas.

These schemas define the API contracts for registration, login and the
identity carried by a verified token.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import CamelModel


class RegisterRequest(BaseModel):
    """User registration request schema."""

    username: str = Field(min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(description="Unique email address")
    password: str = Field(min_length=8, max_length=128, description="User password")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        """Validate username format."""
        if not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError("Username can only contain letters, numbers, hyphens, and underscores")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        # stored lower-cased so uniqueness is case-insensitive
        return v.strip().lower() if isinstance(v, str) else v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "alice",
                "email": "alice@example.com",
                "password": "securepassword123",
            }
        }
    )


class LoginRequest(BaseModel):
    """User login request schema."""

    username: str = Field(min_length=1, max_length=50, description="Username")
    password: str = Field(min_length=1, max_length=128, description="User password")

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "alice", "password": "securepassword123"}}
    )


class UserResponse(CamelModel):
    """Public user information."""

    id: uuid.UUID = Field(description="User unique identifier")
    username: str = Field(description="Username")
    email: str = Field(description="Email address")
    created_at: datetime = Field(description="Account creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Token plus the user it was issued for."""

    token: str = Field(description="JWT access token")
    user: UserResponse

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "user": {
                    "id": "123e4567-e89b-12d3-a456-426614174000",
                    "username": "alice",
                    "email": "alice@example.com",
                    "createdAt": "2025-09-13T10:30:00Z",
                },
            }
        }
    )


class Caller(BaseModel):
    """Identity decoded from a verified access token."""

    id: uuid.UUID
    username: str

    model_config = ConfigDict(frozen=True)
