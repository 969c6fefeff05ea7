from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from careerchat.db.engine import get_engine
from careerchat.db.init_db import init_db
from careerchat.main import create_app
from careerchat.services.chat_history_service import ChatHistoryService


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    app = create_app()

    import careerchat.api.chat_history as history_api

    def _override():
        with session_factory() as db:
            yield ChatHistoryService(db)

    app.dependency_overrides[history_api.get_chat_history_service] = _override
    return TestClient(app)


def test_save_chat_message(client):
    r = client.post(
        "/api/chat-history",
        json={"user_id": "u-1", "message": "How do I move into data science?", "sender": "user"},
    )

    assert r.status_code == 201
    body = r.json()
    assert body["id"] >= 1
    assert body["user_id"] == "u-1"
    assert body["sender"] == "user"
    assert body["timestamp"]


def test_history_is_ascending_and_scoped_to_user(client):
    for user_id, message, sender in [
        ("u-1", "first", "user"),
        ("u-2", "someone else", "user"),
        ("u-1", "second", "assistant"),
        ("u-1", "third", "user"),
    ]:
        client.post(
            "/api/chat-history",
            json={"user_id": user_id, "message": message, "sender": sender},
        )

    r = client.get("/api/chat-history/u-1")

    assert r.status_code == 200
    assert [m["message"] for m in r.json()] == ["first", "second", "third"]


def test_recent_messages_are_newest_first(client):
    for message in ["one", "two", "three"]:
        client.post(
            "/api/chat-history",
            json={"user_id": "u-1", "message": message, "sender": "user"},
        )

    r = client.get("/api/chat-history/u-1", params={"limit": 2})

    assert r.status_code == 200
    assert [m["message"] for m in r.json()] == ["three", "two"]


def test_unknown_user_has_empty_history(client):
    r = client.get("/api/chat-history/nobody")
    assert r.status_code == 200
    assert r.json() == []


def test_save_rejects_blank_message(client):
    r = client.post(
        "/api/chat-history",
        json={"user_id": "u-1", "message": "   ", "sender": "user"},
    )
    assert r.status_code == 400


def test_save_rejects_unknown_sender(client):
    r = client.post(
        "/api/chat-history",
        json={"user_id": "u-1", "message": "hi", "sender": "system"},
    )
    assert r.status_code == 422


def test_limit_validation(client):
    assert client.get("/api/chat-history/u-1", params={"limit": 0}).status_code == 422
    assert client.get("/api/chat-history/u-1", params={"limit": 101}).status_code == 422


def test_service_rolls_back_on_failure(session_factory):
    with session_factory() as db:
        service = ChatHistoryService(db)
        with pytest.raises(Exception):
            service.save_message(user_id="u-1", message=None, sender="user")

        # Session stays usable after the failed insert.
        saved = service.save_message(user_id="u-1", message="hello", sender="user")
        assert service.get_history("u-1") == [saved]


def test_sqlite_memory_engine_shares_one_connection():
    engine = get_engine("sqlite://")
    assert isinstance(engine.pool, StaticPool)
