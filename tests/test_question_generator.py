"""Tests for question generation and its fallback bank."""

import json

import pytest

from src.core.errors import ExternalServiceError, GenerationValidationError
from src.core.question_generator import (
    FALLBACK_QUESTIONS,
    QUESTION_GENERATION_CONFIG,
    QuestionGenerationService,
)
from src.models.interview import Difficulty, InterviewSetup
from tests.fakes import FakeTextProvider, question_payload


def make_setup(track: str = "javascript", difficulty: Difficulty = Difficulty.MEDIUM) -> InterviewSetup:
    return InterviewSetup(
        track=track,
        difficulty=difficulty,
        focus_areas=["closures"],
        duration_minutes=20,
    )


class TestGenerate:

    @pytest.mark.asyncio
    async def test_parses_provider_questions(self):
        provider = FakeTextProvider([json.dumps(question_payload(6))])
        service = QuestionGenerationService(provider)

        questions = await service.generate(make_setup())

        assert [q.id for q in questions] == ["q1", "q2", "q3", "q4", "q5", "q6"]
        assert questions[0].expected_key_points == ["point a", "point b"]
        assert questions[0].time_allocation_minutes == 3
        assert questions[0].follow_ups == ["Can you give an example?"]

    @pytest.mark.asyncio
    async def test_sends_prompt_with_generation_config(self):
        provider = FakeTextProvider([json.dumps(question_payload(7))])
        service = QuestionGenerationService(provider)

        await service.generate(make_setup(difficulty=Difficulty.HARD))

        prompt, config = provider.calls[0]
        assert config == QUESTION_GENERATION_CONFIG
        assert config.temperature == 0.7
        assert "closures" in prompt
        assert "Generate 7 interview questions" in prompt

    @pytest.mark.asyncio
    async def test_accepts_json_wrapped_in_prose(self):
        response = "Here you go:\n```json\n" + json.dumps(question_payload(2)) + "\n```"
        service = QuestionGenerationService(FakeTextProvider([response]))

        questions = await service.generate(make_setup())

        assert len(questions) == 2

    @pytest.mark.asyncio
    async def test_questions_sorted_by_order(self):
        payload = list(reversed(question_payload(3)))
        service = QuestionGenerationService(FakeTextProvider([json.dumps(payload)]))

        questions = await service.generate(make_setup())

        assert [q.order for q in questions] == [1, 2, 3]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        "not json at all",
        "[]",
        '{"questions": []}',
        '[{"id": "q1"}]',
        '[{"id": "q1", "order": 1, "text": "Q?", "difficulty": 42, "timeAllocation": 3}]',
    ])
    async def test_malformed_output_falls_back(self, response):
        service = QuestionGenerationService(FakeTextProvider([response]))

        questions = await service.generate(make_setup())

        assert questions == FALLBACK_QUESTIONS["javascript"][:5]

    @pytest.mark.asyncio
    async def test_provider_error_falls_back(self):
        provider = FakeTextProvider([ExternalServiceError("text-generation", "timeout")])
        service = QuestionGenerationService(provider)

        questions = await service.generate(make_setup(difficulty=Difficulty.EASY))

        assert len(questions) == 3


class TestFallbackQuestions:

    @pytest.fixture
    def service(self):
        return QuestionGenerationService(FakeTextProvider())

    def test_easy_returns_three(self, service):
        assert len(service.fallback_questions("javascript", Difficulty.EASY)) == 3

    @pytest.mark.parametrize("difficulty", [Difficulty.MEDIUM, Difficulty.HARD, Difficulty.EXPERT])
    def test_other_difficulties_return_five(self, service, difficulty):
        assert len(service.fallback_questions("javascript", difficulty)) == 5

    def test_capped_at_bank_size(self, service):
        questions = service.fallback_questions("system-design", Difficulty.HARD)

        assert len(questions) == len(FALLBACK_QUESTIONS["system-design"]) == 4

    def test_unknown_track_uses_default_bank(self, service):
        questions = service.fallback_questions("behavioral", Difficulty.MEDIUM)

        assert questions == FALLBACK_QUESTIONS["javascript"][:5]

    def test_bank_questions_are_ordered_from_one(self, service):
        for bank in FALLBACK_QUESTIONS.values():
            assert [q.order for q in bank] == list(range(1, len(bank) + 1))


def test_parse_questions_raises_validation_error():
    service = QuestionGenerationService(FakeTextProvider())

    with pytest.raises(GenerationValidationError):
        service.parse_questions("[1, 2, 3]")
