"""Tests for the Gemini text-generation client."""

import json

import httpx
import pytest

from src.config.settings import Settings
from src.core.errors import ExternalServiceError
from src.core.question_generator import (
    FALLBACK_QUESTIONS,
    QUESTION_GENERATION_CONFIG,
    QuestionGenerationService,
)
from src.core.report_generator import REPORT_GENERATION_CONFIG
from src.core.text_generation import GeminiClient
from src.models.interview import Difficulty, InterviewSetup


def make_client(settings, handler, langfuse=None) -> GeminiClient:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url=settings.gemini_base_url,
    )
    return GeminiClient(settings, client=http, langfuse=langfuse)


def gemini_response(*texts: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}


def test_question_and_report_configs():
    assert QUESTION_GENERATION_CONFIG.to_payload() == {
        "temperature": 0.7,
        "maxOutputTokens": 3000,
        "topP": 0.95,
        "topK": 40,
        "responseMimeType": "application/json",
    }
    assert REPORT_GENERATION_CONFIG.to_payload() == {
        "temperature": 0.5,
        "maxOutputTokens": 4000,
        "topP": 0.9,
        "responseMimeType": "application/json",
    }


@pytest.mark.asyncio
async def test_generate_posts_prompt_and_joins_parts(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_response('[{"id": ', '"q1"}]'))

    client = make_client(settings, handler)
    text = await client.generate("Ask me things", QUESTION_GENERATION_CONFIG)

    assert text == '[{"id": "q1"}]'
    assert seen["path"].endswith(f"/models/{settings.gemini_model}:generateContent")
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "Ask me things"
    assert seen["body"]["generationConfig"]["maxOutputTokens"] == 3000


@pytest.mark.asyncio
async def test_uses_configured_api_key():
    settings = Settings(gemini_api_key="secret-key")
    client = GeminiClient(settings)

    assert client.client.headers["x-goog-api-key"] == "secret-key"
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": {"message": "internal"}}),
    httpx.Response(429, json={"error": {"message": "quota"}}),
    httpx.Response(200, content=b"not json"),
    httpx.Response(200, json=["unexpected"]),
    httpx.Response(200, json={"candidates": []}),
    httpx.Response(200, json=gemini_response("")),
    httpx.Response(200, json={"candidates": "oops"}),
    httpx.Response(200, json={"candidates": ["oops"]}),
    httpx.Response(200, json={"candidates": [{"content": "text"}]}),
    httpx.Response(200, json={"candidates": [{"content": None}]}),
    httpx.Response(200, json={"candidates": [{"content": {"parts": {"text": "x"}}}]}),
])
async def test_failures_raise_external_service_error(settings, response):
    client = make_client(settings, lambda request: response)

    with pytest.raises(ExternalServiceError):
        await client.generate("prompt", REPORT_GENERATION_CONFIG)


@pytest.mark.asyncio
async def test_timeout_raises_external_service_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(settings, handler)

    with pytest.raises(ExternalServiceError):
        await client.generate("prompt", REPORT_GENERATION_CONFIG)


@pytest.mark.asyncio
async def test_malformed_candidate_falls_back_to_question_bank(settings):
    client = make_client(
        settings, lambda request: httpx.Response(200, json={"candidates": [{"content": None}]})
    )
    service = QuestionGenerationService(client)

    questions = await service.generate(
        InterviewSetup(track="javascript", difficulty=Difficulty.EASY, duration_minutes=20)
    )

    assert questions == FALLBACK_QUESTIONS["javascript"][:3]


# =============================================================================
# LANGFUSE TRACING
# =============================================================================

class FakeGeneration:

    def __init__(self, **kwargs):
        self.started = kwargs
        self.updates: list[dict] = []
        self.ended = False

    def update(self, **kwargs):
        self.updates.append(kwargs)

    def end(self):
        self.ended = True


class FakeLangfuse:

    def __init__(self):
        self.generations: list[FakeGeneration] = []
        self.flushed = False

    def start_generation(self, **kwargs) -> FakeGeneration:
        generation = FakeGeneration(**kwargs)
        self.generations.append(generation)
        return generation

    def flush(self):
        self.flushed = True


class TestTracing:

    def test_disabled_without_keys(self):
        client = GeminiClient(Settings(gemini_api_key="k"))

        assert client.langfuse is None

    def test_disabled_by_flag(self):
        settings = Settings(
            langfuse_enabled=False,
            langfuse_public_key="pk-lf-test",
            langfuse_secret_key="sk-lf-test",
        )

        assert GeminiClient(settings).langfuse is None

    @pytest.mark.asyncio
    async def test_records_successful_generation(self, settings):
        langfuse = FakeLangfuse()
        client = make_client(
            settings,
            lambda request: httpx.Response(200, json=gemini_response("hello")),
            langfuse=langfuse,
        )

        await client.generate("Say hello", REPORT_GENERATION_CONFIG)

        [generation] = langfuse.generations
        assert generation.started["model"] == settings.gemini_model
        assert generation.started["input"] == "Say hello"
        assert generation.started["model_parameters"]["maxOutputTokens"] == 4000
        assert generation.updates == [{"output": "hello"}]
        assert generation.ended

    @pytest.mark.asyncio
    async def test_records_failed_generation(self, settings):
        langfuse = FakeLangfuse()
        client = make_client(
            settings, lambda request: httpx.Response(503), langfuse=langfuse
        )

        with pytest.raises(ExternalServiceError):
            await client.generate("prompt", REPORT_GENERATION_CONFIG)

        [generation] = langfuse.generations
        assert generation.updates[0]["level"] == "ERROR"
        assert generation.ended

    @pytest.mark.asyncio
    async def test_tracing_errors_do_not_break_generation(self, settings):
        class BrokenLangfuse:
            def start_generation(self, **kwargs):
                raise RuntimeError("langfuse down")

        client = make_client(
            settings,
            lambda request: httpx.Response(200, json=gemini_response("ok")),
            langfuse=BrokenLangfuse(),
        )

        assert await client.generate("prompt", REPORT_GENERATION_CONFIG) == "ok"

    @pytest.mark.asyncio
    async def test_close_flushes(self, settings):
        langfuse = FakeLangfuse()
        client = make_client(settings, lambda request: httpx.Response(200), langfuse=langfuse)

        await client.close()

        assert langfuse.flushed
