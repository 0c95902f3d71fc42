"""GraphQL endpoint.

Mirrors the REST surface: reads go to NoteService directly, mutations go
through the same NoteService calls and the same hub dispatch, so one GraphQL
mutation means one store write and one broadcast.
"""

from typing import Any, Dict, List, Optional

import strawberry
from fastapi import Depends
from graphql import GraphQLError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import HTTPConnection
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from ..core.exceptions import NoteStreamError
from ..core.logging import get_logger
from ..core.notifications import NotificationHub, get_notification_hub
from ..core.schemas.auth import Caller, UserResponse
from ..core.schemas.notes import NoteResponse, parse_note_create, parse_note_update
from ..core.services import AuthService, NoteService
from ..core.services.note_service import require_caller
from ..database import get_db_session
from ..security import authenticate

logger = get_logger("graphql")


@strawberry.type
class User:
    id: strawberry.ID
    username: str
    email: str
    created_at: str

    @classmethod
    def from_response(cls, user: UserResponse) -> "User":
        return cls(
            id=strawberry.ID(str(user.id)),
            username=user.username,
            email=user.email,
            created_at=user.model_dump(mode="json")["created_at"],
        )


@strawberry.type
class NoteOwner:
    id: strawberry.ID
    username: str


@strawberry.type
class Note:
    id: strawberry.ID
    title: str
    content: str
    tags: List[str]
    owner_id: strawberry.ID
    owner: NoteOwner
    created_at: str
    updated_at: str

    @classmethod
    def from_response(cls, note: NoteResponse) -> "Note":
        # same timestamp rendering as the REST and realtime payloads
        stamps = note.model_dump(mode="json", include={"created_at", "updated_at"})
        return cls(
            id=strawberry.ID(str(note.id)),
            title=note.title,
            content=note.content,
            tags=list(note.tags),
            owner_id=strawberry.ID(str(note.owner_id)),
            owner=NoteOwner(id=strawberry.ID(str(note.owner.id)), username=note.owner.username),
            created_at=stamps["created_at"],
            updated_at=stamps["updated_at"],
        )


@strawberry.input
class CreateNoteInput:
    title: str
    content: str
    tags: Optional[List[str]] = None


@strawberry.input
class UpdateNoteInput:
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None


def _caller(info: Info) -> Optional[Caller]:
    return info.context["caller"]


def _note_service(info: Info) -> NoteService:
    return NoteService(info.context["session"])


@strawberry.type
class Query:
    @strawberry.field
    async def me(self, info: Info) -> Optional[User]:
        auth_service = AuthService(info.context["session"])
        return User.from_response(await auth_service.get_current_user(_caller(info)))

    @strawberry.field
    async def notes(
        self, info: Info, tag: Optional[str] = None, owner: Optional[strawberry.ID] = None
    ) -> List[Note]:
        notes = await _note_service(info).list_notes(_caller(info), tag=tag, owner=owner)
        return [Note.from_response(note) for note in notes]

    @strawberry.field
    async def note(self, info: Info, id: strawberry.ID) -> Optional[Note]:
        return Note.from_response(await _note_service(info).get_note(_caller(info), id))


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_note(self, info: Info, input: CreateNoteInput) -> Note:
        # authentication is checked before the input, as the REST front does
        caller = require_caller(_caller(info))
        request = parse_note_create(
            {"title": input.title, "content": input.content, "tags": input.tags}
        )
        outcome = await _note_service(info).create_note(caller, request)
        return Note.from_response(info.context["hub"].dispatch(outcome))

    @strawberry.mutation
    async def update_note(self, info: Info, id: strawberry.ID, input: UpdateNoteInput) -> Note:
        caller = require_caller(_caller(info))
        request = parse_note_update(
            {"title": input.title, "content": input.content, "tags": input.tags}
        )
        outcome = await _note_service(info).update_note(caller, id, request)
        return Note.from_response(info.context["hub"].dispatch(outcome))

    @strawberry.mutation
    async def delete_note(self, info: Info, id: strawberry.ID) -> bool:
        outcome = await _note_service(info).delete_note(_caller(info), id)
        return info.context["hub"].dispatch(outcome)


class NoteStreamSchema(strawberry.Schema):
    """Schema that logs domain errors quietly and everything else loudly."""

    def process_errors(self, errors: List[GraphQLError], execution_context=None) -> None:
        for error in errors:
            original = getattr(error, "original_error", None)
            if isinstance(original, NoteStreamError) and original.status_code < 500:
                logger.debug(f"GraphQL {type(original).__name__}: {original.message}", extra={"path": error.path})
            else:
                logger.error(f"GraphQL error: {error.message}", exc_info=original, extra={"path": error.path})


schema = NoteStreamSchema(query=Query, mutation=Mutation)


async def get_context(
    connection: HTTPConnection,
    session: AsyncSession = Depends(get_db_session),
    hub: NotificationHub = Depends(get_notification_hub),
) -> Dict[str, Any]:
    """Per-request context: the caller (or None), a DB session and the hub."""
    result = await authenticate(connection.headers.get("authorization"))
    return {
        "caller": result if isinstance(result, Caller) else None,
        "session": session,
        "hub": hub,
    }


graphql_router = GraphQLRouter(schema, context_getter=get_context)
