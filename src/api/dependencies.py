"""
API Dependencies

Provides dependency injection for API endpoints.
Core components are built once at start-up and kept on app.state.
"""

from fastapi import Header, HTTPException, Request

from src.config.settings import Settings
from src.core.errors import (
    ExternalServiceError,
    InterviewEngineError,
    InterviewNotStartedError,
    PaymentRequiredError,
    ReportNotReadyError,
    SessionNotFoundError,
    StateTransitionError,
    UnauthorizedSessionAccessError,
    WebhookSignatureError,
)
from src.core.question_generator import QuestionGenerationService
from src.core.report_generator import ReportGenerator
from src.core.session_lifecycle import SessionLifecycleManager
from src.core.statistics import StatisticsAggregator
from src.core.text_generation import TextGenerationProvider
from src.core.voice_session import VoiceProvider, VoiceSessionOrchestrator
from src.core.webhooks import VoiceWebhookHandler
from src.storage.repository import InterviewRepository


# ============================================================================
# COMPONENT WIRING
# ============================================================================

def build_lifecycle_manager(
    settings: Settings,
    text_provider: TextGenerationProvider,
    voice_provider: VoiceProvider,
    repository: InterviewRepository,
) -> SessionLifecycleManager:
    """Wire the lifecycle manager and its services around shared providers."""
    return SessionLifecycleManager(
        repository=repository,
        question_generator=QuestionGenerationService(text_provider),
        voice=VoiceSessionOrchestrator(voice_provider, settings),
        report_generator=ReportGenerator(text_provider),
        statistics=StatisticsAggregator(repository),
    )


def get_lifecycle_manager(request: Request) -> SessionLifecycleManager:
    """Get the lifecycle manager built at start-up."""
    return request.app.state.lifecycle


def get_webhook_handler(request: Request) -> VoiceWebhookHandler:
    """Get the voice webhook handler built at start-up."""
    return request.app.state.webhook_handler


def get_current_user_id(x_user_id: str = Header(...)) -> str:
    """Caller identity, supplied by the authenticating gateway."""
    if not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing user id")
    return x_user_id


# ============================================================================
# ERROR MAPPING
# ============================================================================

ERROR_STATUS_CODES: list[tuple[type[Exception], int]] = [
    (SessionNotFoundError, 404),
    (UnauthorizedSessionAccessError, 403),
    (PaymentRequiredError, 402),
    (InterviewNotStartedError, 409),
    (ReportNotReadyError, 409),
    (StateTransitionError, 409),
    (ExternalServiceError, 502),
    (WebhookSignatureError, 401),
]


def to_http_exception(error: InterviewEngineError) -> HTTPException:
    """Map an engine error to an HTTPException."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
