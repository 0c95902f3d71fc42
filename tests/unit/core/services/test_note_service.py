"""Tests for the note mutation pipeline and reads."""

import uuid

import pytest

from notestream.core.exceptions import ConflictOrStoreError, NotAuthenticated, NotAuthorized, NotFound
from notestream.core.repositories.note_repository import NoteRepository
from notestream.core.schemas.auth import Caller
from notestream.core.schemas.events import NoteAdded, NoteDeleted, NoteUpdated
from notestream.core.schemas.notes import NoteCreate, NoteUpdate
from notestream.core.services.note_service import MutationOutcome, NoteService, parse_note_id


@pytest.fixture
def service(test_session):
    return NoteService(test_session)


async def _create(service, caller, **fields):
    data = {"title": "A", "content": "B", "tags": ["x"]}
    data.update(fields)
    outcome = await service.create_note(caller, NoteCreate(**data))
    return outcome.result


class TestCreate:
    async def test_owner_is_caller_and_event_produced(self, service, alice_caller):
        outcome = await service.create_note(alice_caller, NoteCreate(title="Hi", content="World"))

        assert isinstance(outcome, MutationOutcome)
        note = outcome.result
        assert note.owner_id == alice_caller.id
        assert note.owner.username == "alice"
        assert note.tags == []
        assert isinstance(outcome.event, NoteAdded)
        assert outcome.event.note == note

    async def test_requires_caller(self, service, test_session):
        with pytest.raises(NotAuthenticated):
            await service.create_note(None, NoteCreate(title="Hi", content="World"))

        assert await NoteRepository(test_session).list_notes() == []

    async def test_caller_without_account_is_rejected(self, service, test_session):
        ghost = Caller(id=uuid.uuid4(), username="ghost")

        with pytest.raises(NotAuthenticated):
            await service.create_note(ghost, NoteCreate(title="Hi", content="World"))

        assert await NoteRepository(test_session).list_notes() == []

    async def test_owner_removed_before_insert_is_store_error(self, service, test_session, monkeypatch):
        ghost = Caller(id=uuid.uuid4(), username="ghost")

        async def account_still_there(user_id):
            return object()

        monkeypatch.setattr(service.user_repo, "get_by_id", account_still_there)

        with pytest.raises(ConflictOrStoreError) as exc_info:
            await service.create_note(ghost, NoteCreate(title="Hi", content="World"))

        # no SQL reaches the caller
        assert exc_info.value.message == "Store error while creating note"
        assert await NoteRepository(test_session).list_notes() == []


class TestUpdate:
    async def test_partial_update_keeps_absent_fields(self, service, alice_caller):
        before = await _create(service, alice_caller)

        outcome = await service.update_note(alice_caller, before.id, NoteUpdate(content="C"))
        after = outcome.result

        assert after.title == "A"
        assert after.content == "C"
        assert after.tags == ["x"]
        assert after.updated_at > before.updated_at
        assert after.created_at == before.created_at
        assert isinstance(outcome.event, NoteUpdated)
        assert outcome.event.note == after

    async def test_empty_update_still_refreshes_timestamp(self, service, alice_caller):
        before = await _create(service, alice_caller)

        after = (await service.update_note(alice_caller, before.id, NoteUpdate())).result

        assert after.updated_at > before.updated_at
        assert (after.title, after.content, after.tags) == ("A", "B", ["x"])

    async def test_tags_can_be_cleared(self, service, alice_caller):
        before = await _create(service, alice_caller)

        after = (await service.update_note(alice_caller, before.id, NoteUpdate(tags=[]))).result

        assert after.tags == []

    async def test_non_owner_is_rejected_and_note_unchanged(self, service, alice_caller, bob_caller):
        before = await _create(service, alice_caller)

        with pytest.raises(NotAuthorized):
            await service.update_note(bob_caller, before.id, NoteUpdate(title="mine now"))

        current = await service.get_note(alice_caller, before.id)
        assert current == before

    async def test_unknown_id(self, service, alice_caller):
        with pytest.raises(NotFound):
            await service.update_note(alice_caller, uuid.uuid4(), NoteUpdate(title="x"))

    async def test_invalid_id_is_not_found(self, service, alice_caller):
        with pytest.raises(NotFound):
            await service.update_note(alice_caller, "not-a-uuid", NoteUpdate(title="x"))

    async def test_requires_caller(self, service, alice_caller):
        note = await _create(service, alice_caller)
        with pytest.raises(NotAuthenticated):
            await service.update_note(None, note.id, NoteUpdate(title="x"))

    async def test_write_lost_to_concurrent_delete(self, service, alice_caller, monkeypatch):
        note = await _create(service, alice_caller)

        async def gone(*args, **kwargs):
            return None

        monkeypatch.setattr(service.note_repo, "update_owned", gone)

        with pytest.raises(NotFound):
            await service.update_note(alice_caller, note.id, NoteUpdate(title="x"))


class TestDelete:
    async def test_owner_deletes(self, service, alice_caller):
        note = await _create(service, alice_caller)

        outcome = await service.delete_note(alice_caller, str(note.id))

        assert outcome.result is True
        assert outcome.event == NoteDeleted(id=note.id, deleted_by_username="alice")
        with pytest.raises(NotFound):
            await service.get_note(alice_caller, note.id)

    async def test_non_owner_cannot_delete(self, service, alice_caller, bob_caller):
        note = await _create(service, alice_caller)

        with pytest.raises(NotAuthorized):
            await service.delete_note(bob_caller, note.id)

        assert (await service.get_note(bob_caller, note.id)).id == note.id

    async def test_unknown_id(self, service, alice_caller):
        with pytest.raises(NotFound):
            await service.delete_note(alice_caller, uuid.uuid4())


class TestReads:
    async def test_any_caller_reads_any_note(self, service, alice_caller, bob_caller):
        note = await _create(service, alice_caller)

        assert (await service.get_note(bob_caller, note.id)).title == "A"

    async def test_reads_require_caller(self, service):
        with pytest.raises(NotAuthenticated):
            await service.list_notes(None)
        with pytest.raises(NotAuthenticated):
            await service.get_note(None, uuid.uuid4())

    async def test_list_filters(self, service, alice_caller, bob_caller):
        await _create(service, alice_caller, title="a", tags=["work"])
        await _create(service, bob_caller, title="b", tags=["home"])

        assert {n.title for n in await service.list_notes(bob_caller)} == {"a", "b"}
        assert [n.title for n in await service.list_notes(bob_caller, tag="work")] == ["a"]
        assert [n.title for n in await service.list_notes(alice_caller, owner=str(bob_caller.id))] == ["b"]
        assert await service.list_notes(alice_caller, owner="not-a-uuid") == []
        assert len(await service.list_notes(alice_caller, tag="", owner="")) == 2


def test_parse_note_id():
    note_id = uuid.uuid4()
    assert parse_note_id(note_id) is note_id
    assert parse_note_id(str(note_id)) == note_id
    assert parse_note_id("nope") is None
    assert parse_note_id(None) is None
