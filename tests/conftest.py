"""Shared test fixtures for the Bubble Agent test suite."""

import pytest

from app.agents.orchestrator import AutonomousAgent
from app.core.config import Settings

from tests.fakes import FakeDatabase, FakeGemini, FakeImages, FakeMemory, FakeResearch


@pytest.fixture
def test_settings():
    """Settings with predictable models and limits."""
    return Settings(
        gemini_api_key="test-key",
        supabase_url="",
        supabase_key="",
        chat_model="chat-model",
        search_model="search-model",
        thinking_model="thinking-model",
        canvas_model="canvas-model",
        project_model="project-model",
        study_model="study-model",
        research_model="research-model",
        image_model="imagen-test",
        max_hops=2,
        memory_topic_threshold=50,
    )


@pytest.fixture
def memory():
    return FakeMemory({"inner_personal": {"name": "Ada"}})


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def research():
    return FakeResearch()


@pytest.fixture
def make_agent(test_settings, memory, database, research):
    """Build an AutonomousAgent around a FakeGemini and the fake services."""

    def _make(gemini: FakeGemini, **overrides) -> AutonomousAgent:
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        return AutonomousAgent(
            gemini=gemini,
            memory_service=memory,
            database_service=database,
            research_service=research,
            image_service=FakeImages(gemini),
            settings=settings,
        )

    return _make
