"""Note service: the mutation pipeline and note reads."""

import logging
from datetime import datetime, timedelta
from typing import Any, List, NamedTuple, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictOrStoreError, NotAuthenticated, NotAuthorized, NotFound
from ..models.base import utcnow
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import Caller
from ..schemas.events import AnyNoteEvent, NoteAdded, NoteDeleted, NoteUpdated
from ..schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from .interfaces import INoteService

logger = logging.getLogger(__name__)


class MutationOutcome(NamedTuple):
    """What a committed mutation returns to its transport, plus the event to broadcast."""

    result: Any
    event: AnyNoteEvent


def parse_note_id(raw: str | UUID | None) -> Optional[UUID]:
    """Parse an external note ID; None if it cannot be one."""
    if isinstance(raw, UUID):
        return raw
    if raw is None:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        return None


def require_caller(caller: Optional[Caller]) -> Caller:
    if caller is None:
        raise NotAuthenticated()
    return caller


class NoteService(INoteService):
    """Note service implementation.

    Mutations return a MutationOutcome and never broadcast themselves; the
    transport hands ``outcome.event`` to the notification hub once the call
    has returned, so a broadcast problem cannot roll back a committed write.
    Failed checks raise before anything is written and produce no event.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        # Used to confirm the caller's account still exists before it owns anything
        self.user_repo = UserRepository(session)

    async def create_note(self, caller: Optional[Caller], request: NoteCreate) -> MutationOutcome:
        """Create new note owned by the caller."""
        caller = require_caller(caller)
        if await self.user_repo.get_by_id(caller.id) is None:
            raise NotAuthenticated()

        try:
            note = await self.note_repo.create_note(
                {
                    "title": request.title,
                    "content": request.content,
                    "tags": list(request.tags),
                    "owner_id": caller.id,
                }
            )
        except IntegrityError as e:
            # owner removed after the check above
            logger.warning(f"Note insert for {caller.username} rejected: {e.orig}")
            raise ConflictOrStoreError("Store error while creating note") from e

        response = NoteResponse.from_model(note)
        logger.info(f"Note {note.id} created by {caller.username}")
        return MutationOutcome(response, NoteAdded(note=response))

    async def update_note(
        self, caller: Optional[Caller], note_id: str | UUID, request: NoteUpdate
    ) -> MutationOutcome:
        """Apply only the fields present in the request."""
        caller = require_caller(caller)
        note = await self._load_owned(caller, note_id)

        update_data = request.changes()
        update_data["updated_at"] = self._next_timestamp(note.updated_at)

        updated = await self.note_repo.update_owned(note.id, caller.id, update_data)
        if updated is None:
            # removed or changed hands between the check and the write
            raise NotFound()

        response = NoteResponse.from_model(updated)
        logger.info(f"Note {note.id} updated by {caller.username}", extra={"fields": sorted(request.changes())})
        return MutationOutcome(response, NoteUpdated(note=response))

    async def delete_note(self, caller: Optional[Caller], note_id: str | UUID) -> MutationOutcome:
        """Delete note."""
        caller = require_caller(caller)
        note = await self._load_owned(caller, note_id)

        if not await self.note_repo.delete_owned(note.id, caller.id):
            raise NotFound()

        logger.info(f"Note {note.id} deleted by {caller.username}")
        return MutationOutcome(True, NoteDeleted(id=note.id, deleted_by_username=caller.username))

    async def get_note(self, caller: Optional[Caller], note_id: str | UUID) -> NoteResponse:
        """Get note by ID. Any authenticated caller may read any note."""
        require_caller(caller)
        note = await self._load(note_id)
        return NoteResponse.from_model(note)

    async def list_notes(
        self,
        caller: Optional[Caller],
        tag: Optional[str] = None,
        owner: Optional[str | UUID] = None,
    ) -> List[NoteResponse]:
        """List notes, optionally only those carrying a tag or owned by someone."""
        require_caller(caller)

        owner_id = None
        if owner is not None and owner != "":
            owner_id = parse_note_id(owner)
            if owner_id is None:
                return []

        notes = await self.note_repo.list_notes(owner_id=owner_id, tag=tag or None)
        return [NoteResponse.from_model(note) for note in notes]

    async def _load(self, note_id: str | UUID):
        parsed = parse_note_id(note_id)
        note = await self.note_repo.get_by_id(parsed) if parsed else None
        if note is None:
            raise NotFound()
        return note

    async def _load_owned(self, caller: Caller, note_id: str | UUID):
        note = await self._load(note_id)
        if not note.is_owned_by(caller.id):
            logger.warning(f"{caller.username} tried to modify note {note.id} owned by {note.owner_id}")
            raise NotAuthorized()
        return note

    @staticmethod
    def _next_timestamp(previous: datetime) -> datetime:
        """Current time, bumped past ``previous`` so updated_at always moves forward."""
        now = utcnow()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now
