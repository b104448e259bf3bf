"""Tests for app.services — Gemini helpers, Supabase services, research and images."""

from types import SimpleNamespace

import pytest
from google.genai import types
from pydantic import ValidationError

from app.api.middleware.error_handler import (
    ConfigurationError,
    ImageGenerationError,
    PersistenceError,
)
from app.models.schemas import (
    FileAttachment,
    HistoryMessage,
    MemoryEntry,
    MemoryLayer,
    MessageRecord,
    Profile,
)
from app.services.database_service import DatabaseService
from app.services.gemini_client import (
    GeminiClient,
    GenerationResult,
    extract_grounding_chunks,
    history_to_contents,
    user_turn,
)
from app.services.image_service import ImageService
from app.services.memory_service import MemoryService
from app.services.research_service import ResearchService

from tests.fakes import FakeGemini


class FakeQuery:
    """Records a supabase query builder chain and returns canned rows."""

    def __init__(self, client, target):
        self.client = client
        self.calls = [target]

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    async def execute(self):
        self.client.executed.append(self.calls)
        if self.client.error is not None:
            raise self.client.error
        return SimpleNamespace(data=self.client.data)


class FakeSupabase:
    def __init__(self, data=None, error=None):
        self.data = data if data is not None else []
        self.error = error
        self.executed = []

    def table(self, name):
        return FakeQuery(self, ("table", name))

    def rpc(self, fn, params):
        return FakeQuery(self, ("rpc", fn, params))


# ── gemini_client helpers ────────────────────────────────────────────────────


class TestHistoryToContents:
    def test_roles_and_blank_messages(self):
        history = [
            HistoryMessage(sender="user", text="Hi"),
            HistoryMessage(sender="ai", text=""),
            HistoryMessage(sender="ai", text="Hello!"),
            HistoryMessage(sender="system", text="note"),
        ]
        contents = history_to_contents(history)
        assert contents == [
            {"role": "user", "parts": [{"text": "Hi"}]},
            {"role": "model", "parts": [{"text": "Hello!"}]},
            {"role": "model", "parts": [{"text": "note"}]},
        ]

    def test_empty(self):
        assert history_to_contents([]) == []


class TestUserTurn:
    def test_prompt_only(self):
        assert user_turn("hello") == {"role": "user", "parts": [{"text": "hello"}]}

    def test_files_come_before_text(self):
        files = [
            FileAttachment(data="aGVsbG8=", mime_type="text/plain"),
            FileAttachment(data="d29ybGQ=", mime_type="image/png", name="w.png"),
        ]
        turn = user_turn("describe", files)
        assert turn["parts"][0] == {"inline_data": {"data": b"hello", "mime_type": "text/plain"}}
        assert turn["parts"][1] == {"inline_data": {"data": b"world", "mime_type": "image/png"}}
        assert turn["parts"][2] == {"text": "describe"}

    def test_data_url_prefix_is_stripped(self):
        attachment = FileAttachment(data="data:text/plain;base64,aGVsbG8=", mime_type="text/plain")
        assert attachment.data == "aGVsbG8="
        assert user_turn("read", [attachment])["parts"][0]["inline_data"]["data"] == b"hello"

    def test_malformed_base64_rejected(self):
        with pytest.raises(ValidationError):
            FileAttachment(data="not base64!!", mime_type="text/plain")
        with pytest.raises(ValidationError):
            FileAttachment(data="aGVsbG8", mime_type="text/plain")


class TestExtractGroundingChunks:
    def test_web_chunks(self):
        response = types.GenerateContentResponse(candidates=[
            types.Candidate(grounding_metadata=types.GroundingMetadata(grounding_chunks=[
                types.GroundingChunk(web=types.GroundingChunkWeb(uri="https://a.example", title="A")),
            ]))
        ])
        assert extract_grounding_chunks(response) == [
            {"web": {"uri": "https://a.example", "title": "A"}}
        ]

    def test_no_candidates(self):
        assert extract_grounding_chunks(types.GenerateContentResponse()) == []

    def test_no_metadata(self):
        response = types.GenerateContentResponse(candidates=[types.Candidate()])
        assert extract_grounding_chunks(response) == []


class TestGeminiClient:
    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            GeminiClient(api_key="").client

    def test_config_is_none_without_options(self):
        assert GeminiClient(api_key="k")._build_config() is None

    def test_config_options(self):
        config = GeminiClient(api_key="k")._build_config(
            system_instruction="be nice",
            google_search=True,
            text_only=True,
            response_mime_type="application/json",
        )
        assert config.tools[0].google_search is not None
        assert config.response_modalities == ["TEXT"]
        assert config.response_mime_type == "application/json"


# ── MemoryService ────────────────────────────────────────────────────────────


class TestMemoryService:
    @pytest.mark.asyncio
    async def test_context_grouped_by_layer(self):
        client = FakeSupabase(data=[
            {"layer": "inner_personal", "key": "name", "value": "Ada"},
            {"layer": "preferences", "key": "tone", "value": "casual"},
            {"layer": "inner_personal", "key": "city", "value": "Lisbon"},
        ])
        service = MemoryService(client)
        context = await service.get_context("u-1", [MemoryLayer.INNER_PERSONAL, MemoryLayer.PREFERENCES])

        assert context == {
            "inner_personal": {"name": "Ada", "city": "Lisbon"},
            "preferences": {"tone": "casual"},
        }
        calls = client.executed[0]
        assert calls[0] == ("table", "memories")
        assert ("eq", ("user_id", "u-1"), {}) in calls
        assert ("in_", ("layer", ["inner_personal", "preferences"]), {}) in calls

    @pytest.mark.asyncio
    async def test_not_configured(self):
        assert await MemoryService(None).get_context("u-1", list(MemoryLayer)) == {}

    @pytest.mark.asyncio
    async def test_no_layers(self):
        client = FakeSupabase()
        assert await MemoryService(client).get_context("u-1", []) == {}
        assert client.executed == []

    @pytest.mark.asyncio
    async def test_fetch_failure_degrades_to_empty(self):
        client = FakeSupabase(error=RuntimeError("down"))
        assert await MemoryService(client).get_context("u-1", list(MemoryLayer)) == {}

    @pytest.mark.asyncio
    async def test_save_upserts(self):
        client = FakeSupabase()
        entries = [MemoryEntry(layer=MemoryLayer.OUTER_PERSONAL, key="last_topic", value="owls")]
        written = await MemoryService(client, table="mem").save("u-1", entries)

        assert written == 1
        calls = client.executed[0]
        assert calls[0] == ("table", "mem")
        name, args, kwargs = calls[1]
        assert name == "upsert"
        assert args[0] == [{"user_id": "u-1", "layer": "outer_personal", "key": "last_topic", "value": "owls"}]
        assert kwargs == {"on_conflict": "user_id,layer,key"}

    @pytest.mark.asyncio
    async def test_save_nothing(self):
        client = FakeSupabase()
        assert await MemoryService(client).save("u-1", []) == 0
        assert client.executed == []

    @pytest.mark.asyncio
    async def test_save_failure(self):
        client = FakeSupabase(error=RuntimeError("down"))
        entries = [MemoryEntry(layer=MemoryLayer.CUSTOM, key="k", value="v")]
        with pytest.raises(PersistenceError):
            await MemoryService(client).save("u-1", entries)


# ── DatabaseService ──────────────────────────────────────────────────────────


class TestDatabaseService:
    @pytest.mark.asyncio
    async def test_increment_thinking_count(self):
        client = FakeSupabase()
        await DatabaseService(client).increment_thinking_count("u-1")
        assert client.executed[0][0] == ("rpc", "increment_thinking_count", {"p_user_id": "u-1"})

    @pytest.mark.asyncio
    async def test_increment_failure(self):
        client = FakeSupabase(error=RuntimeError("down"))
        with pytest.raises(PersistenceError):
            await DatabaseService(client).increment_thinking_count("u-1")

    @pytest.mark.asyncio
    async def test_get_profile(self):
        client = FakeSupabase(data=[{"id": "u-1", "preferred_image_model": "gemini-image"}])
        profile = await DatabaseService(client).get_profile("u-1")
        assert profile == Profile(id="u-1", preferred_image_model="gemini-image")

    @pytest.mark.asyncio
    async def test_missing_profile(self):
        assert await DatabaseService(FakeSupabase(data=[])).get_profile("u-1") is None

    @pytest.mark.asyncio
    async def test_save_messages_drops_memory(self):
        client = FakeSupabase()
        record = MessageRecord(
            project_id="p-1",
            chat_id="c-1",
            text="hi",
            memory_to_create=[MemoryEntry(layer=MemoryLayer.CUSTOM, key="k", value="v")],
        )
        assert await DatabaseService(client).save_messages([record]) == 1

        name, args, _ = client.executed[0][1]
        assert name == "insert"
        assert args[0] == [{"project_id": "p-1", "chat_id": "c-1", "sender": "ai", "text": "hi"}]

    @pytest.mark.asyncio
    async def test_not_configured_is_noop(self):
        service = DatabaseService(None)
        await service.increment_thinking_count("u-1")
        assert await service.get_profile("u-1") is None
        assert await service.save_messages([MessageRecord(text="hi")]) == 0


# ── ResearchService ──────────────────────────────────────────────────────────


class TestResearchService:
    def test_parse_queries(self):
        service = ResearchService(FakeGemini(), model="m", max_queries=2)
        response = 'Sure: {"queries": ["a", " ", "b", "c"]}'
        assert service._parse_queries(response, "q") == ["a", "b"]

    def test_parse_queries_fallback(self):
        service = ResearchService(FakeGemini(), model="m")
        assert service._parse_queries("not json", "q") == ["q"]
        assert service._parse_queries("{broken", "q") == ["q"]
        assert service._parse_queries('{"queries": []}', "q") == ["q"]

    def test_parse_queries_wrong_shape(self):
        service = ResearchService(FakeGemini(), model="m")
        assert service._parse_queries('{"queries": null}', "q") == ["q"]
        assert service._parse_queries('{"queries": 3}', "q") == ["q"]
        assert service._parse_queries('{"queries": "solar power"}', "q") == ["q"]
        assert service._parse_queries('{"plan": ["a"]}', "q") == ["q"]
        assert service._parse_queries('["a", "b"]', "q") == ["q"]

    @pytest.mark.asyncio
    async def test_null_plan_searches_the_question(self):
        gemini = FakeGemini(generations=['{"queries": null}', "finding", "Answer."])
        progress = []
        result = await ResearchService(gemini, model="m").deep_research("solar", progress.append)

        assert result.answer == "Answer."
        assert progress[1] == "Searching: solar"
        assert gemini.generate_calls[1]["contents"] == "solar"

    @pytest.mark.asyncio
    async def test_deep_research(self):
        source = {"web": {"uri": "https://a.example", "title": "A"}}
        gemini = FakeGemini(generations=[
            '{"queries": ["first", "second"]}',
            GenerationResult(text="fact one", grounding_chunks=[source]),
            GenerationResult(text="fact two", grounding_chunks=[source, {"web": {"uri": "https://b.example"}}]),
            "  The answer.  ",
        ])
        progress = []
        result = await ResearchService(gemini, model="research").deep_research("batteries", progress.append)

        assert result.answer == "The answer."
        assert result.sources == ["- [A](https://a.example)", "- [https://b.example](https://b.example)"]
        assert progress == [
            "Planning research...",
            "Searching: first",
            "Searching: second",
            "Synthesizing findings...",
        ]
        assert gemini.generate_calls[0]["response_mime_type"] == "application/json"
        assert gemini.generate_calls[1]["google_search"] is True
        assert "### first\nfact one" in gemini.generate_calls[3]["contents"]


# ── ImageService ─────────────────────────────────────────────────────────────


class TestImageService:
    @pytest.mark.asyncio
    async def test_empty_prompt(self):
        with pytest.raises(ImageGenerationError):
            await ImageService(FakeGemini(), default_model="imagen").generate("   ")

    @pytest.mark.asyncio
    async def test_model_choice(self):
        gemini = FakeGemini()
        service = ImageService(gemini, default_model="imagen")
        await service.generate(" a fox ")
        await service.generate("a cat", preferred_model="gemini-image")
        assert gemini.image_calls == [
            {"prompt": "a fox", "model": "imagen"},
            {"prompt": "a cat", "model": "gemini-image"},
        ]
