"""Note repository for database operations."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import String, delete, desc, select, type_coerce, update
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note
from .base import store_errors

logger = logging.getLogger(__name__)


class NoteRepository:
    """Repository for note database operations.

    Writes that need ownership go through ``update_owned``/``delete_owned``:
    a single UPDATE/DELETE filtered on both id and owner, so the ownership
    check and the write cannot be split by a concurrent request.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Create new note."""
        note = Note(**note_data)
        async with store_errors(self.session, "creating note"):
            self.session.add(note)
            await self.session.commit()
        # reload so the owner relationship is populated
        return await self.get_by_id(note.id)

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID with its owner."""
        stmt = (
            select(Note)
            .where(Note.id == note_id)
            .execution_options(populate_existing=True)
        )
        async with store_errors(self.session, "loading note"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def list_notes(
        self,
        owner_id: Optional[UUID] = None,
        tag: Optional[str] = None,
    ) -> List[Note]:
        """List notes, newest update first, optionally by owner and tag."""
        in_sql = tag is not None and self.session.get_bind().dialect.name == "postgresql"
        stmt = self.list_query(owner_id, tag if in_sql else None)

        async with store_errors(self.session, "listing notes"):
            result = await self.session.execute(stmt)
            notes = list(result.scalars())

        # tags are a serialized list on other backends, filter here
        if tag is not None and not in_sql:
            notes = [note for note in notes if note.has_tag(tag)]
        return notes

    @staticmethod
    def list_query(owner_id: Optional[UUID] = None, tag: Optional[str] = None):
        """SELECT for list_notes; the tag test is the PostgreSQL array containment."""
        stmt = select(Note).order_by(desc(Note.updated_at))
        if owner_id is not None:
            stmt = stmt.where(Note.owner_id == owner_id)
        if tag is not None:
            stmt = stmt.where(type_coerce(Note.tags, ARRAY(String)).contains([tag]))
        return stmt

    async def update_owned(
        self, note_id: UUID, owner_id: UUID, update_data: dict
    ) -> Optional[Note]:
        """Apply update_data if the note exists and is owned by owner_id."""
        stmt = (
            update(Note)
            .where(Note.id == note_id, Note.owner_id == owner_id)
            .values(**update_data)
            .execution_options(synchronize_session=False)
        )
        async with store_errors(self.session, "updating note"):
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                # nothing was written, leave the session and its loaded objects alone
                logger.warning(f"Note {note_id} not updated: missing or not owned by {owner_id}")
                return None
            await self.session.commit()

        return await self.get_by_id(note_id)

    async def delete_owned(self, note_id: UUID, owner_id: UUID) -> bool:
        """Delete the note if it exists and is owned by owner_id."""
        stmt = (
            delete(Note)
            .where(Note.id == note_id, Note.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        async with store_errors(self.session, "deleting note"):
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                logger.warning(f"Note {note_id} not deleted: missing or not owned by {owner_id}")
                return False
            await self.session.commit()

        logger.info(f"Deleted note {note_id}")
        return True
