"""
Realtime event schemas.

An event is an immutable record of a committed note mutation. It is
serialized once with ``to_message`` and pushed to every connected session.
"""

import uuid
from typing import Any, Dict, Literal, Union

from pydantic import ConfigDict, Field

from .common import CamelModel
from .notes import NoteResponse


class NoteEvent(CamelModel):
    """Base for broadcast events."""

    model_config = ConfigDict(frozen=True)

    def to_message(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class NoteAdded(NoteEvent):
    event: Literal["noteAdded"] = "noteAdded"
    note: NoteResponse


class NoteUpdated(NoteEvent):
    event: Literal["noteUpdated"] = "noteUpdated"
    note: NoteResponse


class NoteDeleted(NoteEvent):
    event: Literal["noteDeleted"] = "noteDeleted"
    id: uuid.UUID = Field(description="ID of the deleted note")
    deleted_by_username: str = Field(description="Username of the owner who deleted it")


AnyNoteEvent = Union[NoteAdded, NoteUpdated, NoteDeleted]
