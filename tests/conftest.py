"""
Shared test fixtures.

Providers are replaced by in-memory fakes implementing the provider
protocols; storage is the in-memory repository.
"""

import json

import pytest

from src.config.settings import Settings
from src.core.question_generator import QuestionGenerationService
from src.core.report_generator import ReportGenerator
from src.core.session_lifecycle import SessionLifecycleManager
from src.core.statistics import StatisticsAggregator
from src.core.voice_session import VoiceSessionOrchestrator
from src.storage.memory import InMemoryInterviewRepository
from tests.fakes import (
    TRANSCRIPT,
    FakeTextProvider,
    FakeVoiceProvider,
    question_payload,
    report_payload,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gemini_api_key="test-gemini-key",
        vapi_private_key="test-vapi-key",
        vapi_phone_number_id="pn_test",
        vapi_webhook_secret="whsec_test",
    )


@pytest.fixture
def repository() -> InMemoryInterviewRepository:
    return InMemoryInterviewRepository()


@pytest.fixture
def text_provider() -> FakeTextProvider:
    return FakeTextProvider()


@pytest.fixture
def voice_provider() -> FakeVoiceProvider:
    return FakeVoiceProvider(details={"transcript": TRANSCRIPT})


@pytest.fixture
def lifecycle(settings, repository, text_provider, voice_provider) -> SessionLifecycleManager:
    return SessionLifecycleManager(
        repository=repository,
        question_generator=QuestionGenerationService(text_provider),
        voice=VoiceSessionOrchestrator(voice_provider, settings),
        report_generator=ReportGenerator(text_provider),
        statistics=StatisticsAggregator(repository),
    )


@pytest.fixture
def provider_questions_json() -> str:
    return json.dumps(question_payload())


@pytest.fixture
def provider_report_json() -> str:
    return json.dumps(report_payload())
