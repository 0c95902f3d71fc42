"""Notes API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.notifications import NotificationHub, get_notification_hub
from ..core.schemas.auth import Caller
from ..core.schemas.common import SuccessResponse
from ..core.schemas.notes import NoteCreate, NoteResponse, NoteUpdate
from ..core.services import NoteService
from ..database import get_db_session
from .errors import ERROR_RESPONSES
from ..middleware.auth import get_current_caller

router = APIRouter(prefix="/notes", tags=["notes"], responses=ERROR_RESPONSES)


@router.post("", response_model=NoteResponse)
async def create_note(
    request: NoteCreate,
    caller: Caller = Depends(get_current_caller),
    session: AsyncSession = Depends(get_db_session),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """Create a new note and announce it to connected sessions."""
    note_service = NoteService(session)
    return hub.dispatch(await note_service.create_note(caller, request))


@router.get("", response_model=List[NoteResponse])
async def list_notes(
    tag: Optional[str] = Query(None, description="Only notes carrying this tag"),
    owner: Optional[str] = Query(None, description="Only notes owned by this user ID"),
    caller: Caller = Depends(get_current_caller),
    session: AsyncSession = Depends(get_db_session),
):
    """List notes of every user, newest first."""
    note_service = NoteService(session)
    return await note_service.list_notes(caller, tag=tag, owner=owner)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    caller: Caller = Depends(get_current_caller),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a specific note."""
    note_service = NoteService(session)
    return await note_service.get_note(caller, note_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    request: NoteUpdate,
    caller: Caller = Depends(get_current_caller),
    session: AsyncSession = Depends(get_db_session),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """Update the fields present in the body."""
    note_service = NoteService(session)
    return hub.dispatch(await note_service.update_note(caller, note_id, request))


@router.delete("/{note_id}", response_model=SuccessResponse)
async def delete_note(
    note_id: str,
    caller: Caller = Depends(get_current_caller),
    session: AsyncSession = Depends(get_db_session),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """Delete a note."""
    note_service = NoteService(session)
    hub.dispatch(await note_service.delete_note(caller, note_id))
    return SuccessResponse()
