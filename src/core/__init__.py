"""
Core business logic modules for PrepKit interviews

Contains:
- Session Lifecycle: State machine for the interview session
- Question Generation: Provider-backed questions with a fallback bank
- Voice Session: Voice agent call orchestration
- Report Generator: Transcript scoring with a heuristic fallback
- Statistics: Per-user interview rollups
"""

from src.core.question_generator import QuestionGenerationService
from src.core.report_generator import ReportGenerator
from src.core.session_lifecycle import SessionLifecycleManager
from src.core.statistics import StatisticsAggregator
from src.core.transcript_processor import TranscriptProcessor
from src.core.voice_session import VoiceSessionOrchestrator
from src.core.webhooks import VoiceWebhookHandler

__all__ = [
    "QuestionGenerationService",
    "ReportGenerator",
    "SessionLifecycleManager",
    "StatisticsAggregator",
    "TranscriptProcessor",
    "VoiceSessionOrchestrator",
    "VoiceWebhookHandler",
]
