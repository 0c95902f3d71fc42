"""Tests for the REST notes endpoints and their status-code mapping."""

import uuid
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from conftest import bearer, register
from notestream.core.exceptions import ConflictOrStoreError
from notestream.core.schemas.auth import Caller
from notestream.core.services.note_service import NoteService
from notestream.main import app


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def alice_token(client):
    return register(client, "alice")["token"]


@pytest.fixture
def bob_token(client):
    return register(client, "bob")["token"]


def _create(client, token, **fields):
    payload = {"title": "A", "content": "B", "tags": ["x"]}
    payload.update(fields)
    response = client.post("/api/notes", json=payload, headers=bearer(token))
    assert response.status_code == 200, response.text
    return response.json()


def test_create_note(client, alice_token, hub):
    note = _create(client, alice_token, tags=None)

    assert note["title"] == "A"
    assert note["tags"] == []
    assert note["owner"]["username"] == "alice"
    assert note["ownerId"] == note["owner"]["id"]
    assert _ts(note["updatedAt"]) >= _ts(note["createdAt"])


def test_create_requires_auth(client):
    response = client.post("/api/notes", json={"title": "A", "content": "B"})

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


@pytest.mark.parametrize("payload", [{"content": "B"}, {"title": "A", "content": ""}, {"title": " ", "content": "B"}])
def test_create_validation_is_400(client, alice_token, payload):
    response = client.post("/api/notes", json=payload, headers=bearer(alice_token))

    assert response.status_code == 400
    assert response.json()["error"]
    assert client.get("/api/notes", headers=bearer(alice_token)).json() == []


def test_get_and_list(client, alice_token, bob_token):
    mine = _create(client, alice_token, title="mine", tags=["work"])
    theirs = _create(client, bob_token, title="theirs", tags=["home"])

    response = client.get(f"/api/notes/{theirs['id']}", headers=bearer(alice_token))
    assert response.status_code == 200
    assert response.json()["title"] == "theirs"

    all_notes = client.get("/api/notes", headers=bearer(alice_token)).json()
    assert [n["title"] for n in all_notes] == ["theirs", "mine"]

    by_tag = client.get("/api/notes", params={"tag": "work"}, headers=bearer(alice_token)).json()
    assert [n["id"] for n in by_tag] == [mine["id"]]

    by_owner = client.get(
        "/api/notes", params={"owner": theirs["ownerId"]}, headers=bearer(alice_token)
    ).json()
    assert [n["id"] for n in by_owner] == [theirs["id"]]


@pytest.mark.parametrize("note_id", [str(uuid.uuid4()), "not-a-uuid"])
def test_get_missing_is_404(client, alice_token, note_id):
    response = client.get(f"/api/notes/{note_id}", headers=bearer(alice_token))

    assert response.status_code == 404
    assert response.json() == {"error": "Note not found"}


def test_partial_update(client, alice_token):
    note = _create(client, alice_token)

    response = client.put(f"/api/notes/{note['id']}", json={"content": "C"}, headers=bearer(alice_token))

    assert response.status_code == 200
    updated = response.json()
    assert (updated["title"], updated["content"], updated["tags"]) == ("A", "C", ["x"])
    assert _ts(updated["updatedAt"]) > _ts(note["updatedAt"])


def test_update_by_non_owner_is_403(client, alice_token, bob_token, hub):
    note = _create(client, alice_token)
    observer = hub.connect(Caller(id=uuid.uuid4(), username="observer"))

    response = client.put(f"/api/notes/{note['id']}", json={"title": "mine"}, headers=bearer(bob_token))

    assert response.status_code == 403
    assert response.json() == {"error": "Not authorized"}
    assert client.get(f"/api/notes/{note['id']}", headers=bearer(bob_token)).json() == note
    assert observer.queue.empty()


def test_update_validation_is_400(client, alice_token):
    note = _create(client, alice_token)

    response = client.put(f"/api/notes/{note['id']}", json={"title": ""}, headers=bearer(alice_token))

    assert response.status_code == 400


def test_overlong_tag_is_400(client, alice_token, hub):
    note = _create(client, alice_token)
    observer = hub.connect(Caller(id=uuid.uuid4(), username="observer"))
    long_tag = "x" * 101

    created = client.post(
        "/api/notes", json={"title": "A", "content": "B", "tags": [long_tag]}, headers=bearer(alice_token)
    )
    updated = client.put(f"/api/notes/{note['id']}", json={"tags": [long_tag]}, headers=bearer(alice_token))

    assert created.status_code == 400
    assert updated.status_code == 400
    assert "tags" in updated.json()["error"]
    assert client.get(f"/api/notes/{note['id']}", headers=bearer(alice_token)).json()["tags"] == ["x"]
    assert observer.queue.empty()


def test_delete(client, alice_token, bob_token):
    note = _create(client, alice_token)

    forbidden = client.delete(f"/api/notes/{note['id']}", headers=bearer(bob_token))
    assert forbidden.status_code == 403

    response = client.delete(f"/api/notes/{note['id']}", headers=bearer(alice_token))
    assert response.status_code == 200
    assert response.json() == {"success": True}

    again = client.delete(f"/api/notes/{note['id']}", headers=bearer(alice_token))
    assert again.status_code == 404


def test_store_failure_is_500(client, alice_token, monkeypatch):
    async def broken(self, caller, request):
        raise ConflictOrStoreError("Store error while creating note")

    monkeypatch.setattr(NoteService, "create_note", broken)

    response = client.post("/api/notes", json={"title": "A", "content": "B"}, headers=bearer(alice_token))

    assert response.status_code == 500
    assert response.json() == {"error": "Store error while creating note"}


def test_unexpected_error_is_500(client, alice_token, monkeypatch):
    async def broken(self, caller, tag=None, owner=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(NoteService, "list_notes", broken)

    with TestClient(app, raise_server_exceptions=False) as quiet_client:
        response = quiet_client.get("/api/notes", headers=bearer(alice_token))

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
