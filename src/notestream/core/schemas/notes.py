"""
Note management schemas.

These schemas define the wire contracts for note CRUD operations. They are
shared by the REST router, the GraphQL resolvers and the realtime payloads.
"""

import uuid
from datetime import datetime
from typing import Annotated, Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models.types import TAG_MAX_LENGTH
from .common import CamelModel, format_validation_errors


Tag = Annotated[str, Field(max_length=TAG_MAX_LENGTH)]


def _not_blank(value: Optional[str], field: str) -> Optional[str]:
    if value is not None and len(value.strip()) == 0:
        raise ValueError(f"{field} cannot be empty")
    return value


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(min_length=1, description="Note content")
    tags: List[Tag] = Field(default_factory=list, description="Ordered note tags")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _not_blank(v, "Title")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        return _not_blank(v, "Content")

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v):
        # an explicit null means "no tags"
        return [] if v is None else v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Meeting Notes - Q4 Planning",
                "content": "1. Review Q3 performance\n2. Set Q4 objectives",
                "tags": ["meeting", "planning"],
            }
        }
    )


class NoteUpdate(BaseModel):
    """Note update request schema; absent or null fields are left unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200, description="Note title")
    content: Optional[str] = Field(default=None, min_length=1, description="Note content")
    tags: Optional[List[Tag]] = Field(default=None, description="Ordered note tags")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _not_blank(v, "Title")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        return _not_blank(v, "Content")

    def changes(self) -> dict[str, Any]:
        """Fields to write."""
        return self.model_dump(exclude_none=True)

    model_config = ConfigDict(
        json_schema_extra={"example": {"content": "Action items added."}}
    )


class OwnerSummary(CamelModel):
    id: uuid.UUID
    username: str


class NoteResponse(CamelModel):
    """Note response schema."""

    id: uuid.UUID = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    tags: List[str] = Field(description="Ordered note tags")

    owner_id: uuid.UUID = Field(description="Note owner ID")
    owner: OwnerSummary = Field(description="Note owner")

    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    @classmethod
    def from_model(cls, note) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            tags=list(note.tags or []),
            owner_id=note.owner_id,
            owner=OwnerSummary(id=note.owner.id, username=note.owner.username),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Hi",
                "content": "World",
                "tags": [],
                "ownerId": "456e7890-e89b-12d3-a456-426614174000",
                "owner": {"id": "456e7890-e89b-12d3-a456-426614174000", "username": "alice"},
                "createdAt": "2025-09-13T10:30:00Z",
                "updatedAt": "2025-09-13T10:30:00Z",
            }
        }
    )


def parse_note_create(data: Mapping[str, Any]) -> NoteCreate:
    """Build a NoteCreate from untrusted input, raising the domain ValidationError."""
    try:
        return NoteCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc.errors())) from exc


def parse_note_update(data: Mapping[str, Any]) -> NoteUpdate:
    try:
        return NoteUpdate.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc.errors())) from exc
