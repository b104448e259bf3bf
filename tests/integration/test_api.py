"""Integration tests for the HTTP API (app.main)."""

import json

import pytest
from fastapi.testclient import TestClient

from app.api.middleware.error_handler import PersistenceError
from app.core.dependencies import get_agent, get_database_service, get_memory_service
from app.main import create_app

from tests.fakes import FakeDatabase, FakeGemini

LONG_REPLY = "Owls are nocturnal birds of prey with excellent hearing and silent flight."


class FailingDatabase(FakeDatabase):
    async def get_profile(self, user_id):
        raise PersistenceError("profiles unavailable")

    async def save_messages(self, records):
        raise PersistenceError("Failed to save messages: down")


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def app(make_agent, gemini, database, memory):
    application = create_app()
    agent = make_agent(gemini)

    async def override_agent():
        return agent

    async def override_database():
        return database

    async def override_memory():
        return memory

    application.dependency_overrides[get_agent] = override_agent
    application.dependency_overrides[get_database_service] = override_database
    application.dependency_overrides[get_memory_service] = override_memory
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


def _events(body: str):
    return [
        json.loads(line[len("data: "):])
        for line in body.splitlines()
        if line.startswith("data: ")
    ]


# ── Health endpoints ─────────────────────────────────────────────────────────


class TestHealthEndpoints:
    def test_health(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_ready_reports_persistence(self, client):
        data = client.get("/api/v1/ready").json()
        assert "llm_configured" in data["checks"]
        assert "persistence_configured" in data

    def test_live(self, client):
        assert client.get("/api/v1/live").json() == {"status": "alive"}

    def test_root(self, client):
        data = client.get("/").json()
        assert data["health"] == "/api/v1/health"


# ── POST /chat ───────────────────────────────────────────────────────────────


class TestChatEndpoint:
    def test_reply_is_returned_and_stored(self, client, gemini, database, memory):
        gemini.streams.append([LONG_REPLY])
        resp = client.post("/api/v1/chat", json={
            "prompt": "Tell me about owls",
            "user_id": "u-1",
            "project_id": "p-1",
            "chat_id": "c-1",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["error"] is None

        message = data["messages"][0]
        assert message["text"] == LONG_REPLY
        assert message["sender"] == "ai"
        assert message["memoryToCreate"][0]["key"] == "last_topic"

        assert database.saved_messages[0].text == LONG_REPLY
        user_id, entries = memory.saved[0]
        assert user_id == "u-1"
        assert entries[0].value == "Tell me about owls"

    def test_persist_false(self, client, gemini, database, memory):
        gemini.streams.append([LONG_REPLY])
        resp = client.post("/api/v1/chat", json={"prompt": "hi", "user_id": "u-1", "persist": False})
        assert resp.status_code == 200
        assert database.saved_messages == []
        assert memory.saved == []

    def test_search_handoff(self, client, gemini):
        gemini.streams.extend([["<SEARCH>news</SEARCH>"], ["Headlines."]])
        data = client.post("/api/v1/chat", json={"prompt": "news?", "user_id": "u-1"}).json()
        assert data["messages"][0]["text"] == "Headlines."

    def test_model_failure_is_a_message(self, client, gemini):
        gemini.streams.append(RuntimeError("boom"))
        resp = client.post("/api/v1/chat", json={"prompt": "hi", "user_id": "u-1"})
        assert resp.status_code == 200
        assert resp.json()["messages"][0]["text"] == "An error occurred: boom"

    def test_persistence_failure_is_reported(self, app, client, gemini):
        failing = FailingDatabase()

        async def override_database():
            return failing

        app.dependency_overrides[get_database_service] = override_database
        gemini.streams.append(["ok"])
        data = client.post("/api/v1/chat", json={"prompt": "hi", "user_id": "u-1"}).json()

        assert data["success"] is True
        assert data["messages"][0]["text"] == "ok"
        assert "Failed to save messages" in data["error"]

    def test_blank_prompt_rejected(self, client):
        resp = client.post("/api/v1/chat", json={"prompt": "   ", "user_id": "u-1"})
        assert resp.status_code == 422
        data = resp.json()
        assert data["success"] is False
        assert data["error_code"] == "VALIDATION_ERROR"

    def test_missing_user_rejected(self, client):
        resp = client.post("/api/v1/chat", json={"prompt": "hi"})
        assert resp.status_code == 422

    def test_malformed_attachment_rejected(self, client, gemini):
        resp = client.post("/api/v1/chat", json={
            "prompt": "read this",
            "user_id": "u-1",
            "files": [{"data": "not base64!!", "mime_type": "text/plain"}],
        })
        assert resp.status_code == 422
        assert resp.json()["error_code"] == "VALIDATION_ERROR"
        assert gemini.stream_calls == []

    def test_data_url_attachment_accepted(self, client, gemini):
        gemini.streams.append(["Got it."])
        resp = client.post("/api/v1/chat", json={
            "prompt": "read this",
            "user_id": "u-1",
            "files": [{"data": "data:text/plain;base64,aGVsbG8=", "mime_type": "text/plain"}],
        })
        assert resp.status_code == 200
        parts = gemini.stream_calls[0]["contents"][-1]["parts"]
        assert parts[0]["inline_data"]["data"] == b"hello"


# ── POST /chat/stream ────────────────────────────────────────────────────────


class TestChatStreamEndpoint:
    def test_chunks_then_result(self, client, gemini, database):
        gemini.streams.append(["Hello ", "there!"])
        resp = client.post("/api/v1/chat/stream", json={"prompt": "hi", "user_id": "u-1"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")

        events = _events(resp.text)
        assert events[:-1] == [
            {"type": "chunk", "text": "Hello "},
            {"type": "chunk", "text": "there!"},
        ]
        assert events[-1]["type"] == "result"
        assert events[-1]["messages"][0]["text"] == "Hello there!"
        assert "error" not in events[-1]
        assert len(database.saved_messages) == 1

    def test_image_start_event(self, client, gemini):
        gemini.streams.append(["Sure! <IMAGE>a fox</IMAGE>"])
        events = _events(client.post(
            "/api/v1/chat/stream", json={"prompt": "draw a fox", "user_id": "u-1"}
        ).text)

        chunk_texts = [event["text"] for event in events if event["type"] == "chunk"]
        assert json.loads(chunk_texts[-1])["type"] == "image_generation_start"
        result = events[-1]["messages"][0]
        assert result["imageStatus"] == "complete"
        assert result["image_base64"] == "aW1n"
