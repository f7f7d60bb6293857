"""
Session Lifecycle Manager - State machine for the interview session.

This is the central coordinator for the interview engine. It owns the
session state machine and sequences pricing, question generation, the
voice call, transcript parsing, report scoring and statistics.
"""

import asyncio
import logging
import math
from collections import defaultdict
from datetime import datetime

from pydantic import BaseModel

from src.core import pricing
from src.core.errors import (
    InterviewNotStartedError,
    PaymentRequiredError,
    ReportNotReadyError,
    SessionNotFoundError,
    StateTransitionError,
    StatisticsUpdateError,
    UnauthorizedSessionAccessError,
)
from src.core.question_generator import QuestionGenerationService
from src.core.report_generator import ReportGenerator
from src.core.statistics import StatisticsAggregator
from src.core.transcript_processor import TranscriptProcessor
from src.core.voice_session import VoiceSessionOrchestrator
from src.models.interview import (
    Difficulty,
    InterviewConfiguration,
    InterviewHistoryItem,
    InterviewHistoryPage,
    InterviewSession,
    InterviewSetup,
    SessionStatus,
)
from src.models.pricing import PricingQuote
from src.models.question import Question
from src.models.report import InterviewReport
from src.models.transcript import Transcript
from src.storage.repository import InterviewRepository

logger = logging.getLogger(__name__)


class SessionCreated(BaseModel):
    """Result of creating an interview session."""

    session_id: str
    questions: list[Question]
    pricing: PricingQuote
    estimated_duration_minutes: int


class InterviewStarted(BaseModel):
    """Result of starting the voice interview."""

    call_id: str
    status: str


class SessionLifecycleManager:
    """
    Manages the interview session lifecycle using a state machine pattern.

    States:
        SETUP → IN_PROGRESS → COMPLETED

    Status only moves forward. Starting requires a captured payment;
    completing requires a started call and stores exactly one transcript
    and one report.
    """

    VALID_TRANSITIONS: dict[SessionStatus, list[SessionStatus]] = {
        SessionStatus.SETUP: [SessionStatus.IN_PROGRESS],
        SessionStatus.IN_PROGRESS: [SessionStatus.COMPLETED],
        SessionStatus.COMPLETED: [],  # Terminal state
    }

    TRANSCRIPT_CONFIDENCE = 0.95

    def __init__(
        self,
        repository: InterviewRepository,
        question_generator: QuestionGenerationService,
        voice: VoiceSessionOrchestrator,
        report_generator: ReportGenerator,
        statistics: StatisticsAggregator | None = None,
        transcript_processor: TranscriptProcessor | None = None,
    ):
        """
        Initialize the manager with its collaborators.

        Args:
            repository: Persistence for sessions, transcripts, reports, statistics
            question_generator: Question generation with fallback bank
            voice: Voice call orchestration
            report_generator: Report scoring with heuristic fallback
            statistics: Per-user statistics (defaults to one over the repository)
            transcript_processor: Transcript segmenter
        """
        self.repository = repository
        self.question_generator = question_generator
        self.voice = voice
        self.report_generator = report_generator
        self.statistics = statistics or StatisticsAggregator(repository)
        self.transcript_processor = transcript_processor or TranscriptProcessor()

        # One lock per session serialises read-modify-write of the session record
        self._session_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._completing: set[str] = set()

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def can_transition(self, current: SessionStatus, new_status: SessionStatus) -> bool:
        return new_status in self.VALID_TRANSITIONS.get(current, [])

    def transition_state(self, session: InterviewSession, new_status: SessionStatus) -> None:
        """
        Move a session to a new status in place.

        Raises:
            StateTransitionError: If the transition is not in VALID_TRANSITIONS
        """
        old_status = session.status

        if not self.can_transition(old_status, new_status):
            raise StateTransitionError(
                f"Invalid transition from {old_status.value} to {new_status.value}. "
                f"Valid transitions: {[s.value for s in self.VALID_TRANSITIONS.get(old_status, [])]}"
            )

        session.status = new_status

        if new_status == SessionStatus.IN_PROGRESS:
            session.started_at = datetime.utcnow()
        elif new_status == SessionStatus.COMPLETED:
            session.ended_at = datetime.utcnow()

        logger.info(f"Session {session.session_id}: {old_status.value} → {new_status.value}")

    def _require_transition(self, session: InterviewSession, new_status: SessionStatus) -> None:
        if not self.can_transition(session.status, new_status):
            raise StateTransitionError(
                f"Session {session.session_id} is {session.status.value}, "
                f"cannot move to {new_status.value}"
            )

    # =========================================================================
    # SESSION ACCESS
    # =========================================================================

    async def _load(self, session_id: str) -> InterviewSession:
        session = await self.repository.get_session(session_id)
        if not session:
            raise SessionNotFoundError(session_id)
        return session

    async def get_session(self, session_id: str, user_id: str) -> InterviewSession:
        """Get a session owned by the caller."""
        session = await self._load(session_id)
        if session.user_id != user_id:
            raise UnauthorizedSessionAccessError(session_id)
        return session

    # =========================================================================
    # INTERVIEW FLOW
    # =========================================================================

    async def create_session(
        self,
        user_id: str,
        track: str,
        difficulty: str | Difficulty,
        focus_areas: list[str],
        specific_requirements: str | None = None,
    ) -> SessionCreated:
        """
        Price the interview, generate its questions and store it in SETUP.

        The pricing quote and questions are frozen on the session.
        """
        tier = Difficulty.parse(difficulty)
        duration = pricing.estimated_duration(tier)
        quote = pricing.quote(tier, duration)

        setup = InterviewSetup(
            track=track,
            difficulty=tier,
            focus_areas=focus_areas,
            specific_requirements=specific_requirements,
            duration_minutes=duration,
        )
        questions = await self.question_generator.generate(setup)

        session = InterviewSession(
            user_id=user_id,
            track=track,
            difficulty=tier,
            configuration=InterviewConfiguration(
                focus_areas=focus_areas,
                specific_requirements=specific_requirements,
                duration_minutes=duration,
            ),
            questions=questions,
            pricing=quote,
        )
        await self.repository.save_session(session)

        logger.info(
            f"Created interview session {session.session_id} "
            f"(track={track}, difficulty={tier.value}, questions={len(questions)})"
        )

        return SessionCreated(
            session_id=session.session_id,
            questions=questions,
            pricing=quote,
            estimated_duration_minutes=duration,
        )

    async def record_payment_status(self, session_id: str, payment_status: str) -> InterviewSession:
        """Store the payment status reported by the payment-capture flow."""
        async with self._session_locks[session_id]:
            session = await self._load(session_id)
            session.payment_status = payment_status
            await self.repository.save_session(session)

        logger.info(f"Session {session_id}: payment status {payment_status}")
        return session

    async def start_interview(self, session_id: str, user_id: str) -> InterviewStarted:
        """
        Start the voice interview.

        Raises:
            SessionNotFoundError, UnauthorizedSessionAccessError,
            PaymentRequiredError, StateTransitionError, ExternalServiceError
        """
        async with self._session_locks[session_id]:
            session = await self.get_session(session_id, user_id)

            if not session.is_payment_captured:
                raise PaymentRequiredError(session_id, session.payment_status)

            self._require_transition(session, SessionStatus.IN_PROGRESS)

            handle = await self.voice.start(
                session_id=session.session_id,
                questions=session.questions,
                user_id=user_id,
                track=session.track,
            )

            session.external_call_id = handle.call_id
            self.transition_state(session, SessionStatus.IN_PROGRESS)
            await self.repository.save_session(session)

        return InterviewStarted(call_id=handle.call_id, status=handle.status)

    async def complete_interview(self, session_id: str, end_call: bool = False) -> None:
        """
        Complete the interview: store transcript and report, then roll up statistics.

        Only one completion per session runs at a time; a concurrent second
        call fails with StateTransitionError before doing any work. The
        session is reloaded before the final save so call events recorded
        meanwhile are kept.

        Args:
            session_id: Session to complete
            end_call: Also end the voice call (best effort) once the transcript is fetched

        Raises:
            SessionNotFoundError, InterviewNotStartedError, StateTransitionError,
            ExternalServiceError (transcript fetch)
        """
        async with self._session_locks[session_id]:
            session = await self._load(session_id)

            if not session.external_call_id:
                raise InterviewNotStartedError(session_id)

            self._require_transition(session, SessionStatus.COMPLETED)

            if session_id in self._completing:
                raise StateTransitionError(f"Session {session_id} is already being completed")
            self._completing.add(session_id)

        try:
            report = await self._score_interview(session, end_call)

            async with self._session_locks[session_id]:
                session = await self._load(session_id)
                self.transition_state(session, SessionStatus.COMPLETED)
                session.report_generated = True
                await self.repository.save_session(session)
        finally:
            self._completing.discard(session_id)

        await self._record_statistics(session, report)

    async def _score_interview(self, session: InterviewSession, end_call: bool) -> InterviewReport:
        """Fetch and store the transcript, then generate and store the report."""
        raw_transcript = await self.voice.fetch_transcript(session.external_call_id)

        if end_call:
            await self.voice.end(session.external_call_id)

        transcript = Transcript(
            session_id=session.session_id,
            raw_text=raw_transcript,
            segments=self.transcript_processor.parse(raw_transcript),
            confidence_score=self.TRANSCRIPT_CONFIDENCE,
        )
        await self.repository.save_transcript(transcript)

        report = await self.report_generator.generate(
            session_id=session.session_id,
            transcript=raw_transcript,
            questions=session.questions,
            track=session.track,
            difficulty=session.difficulty.value,
        )
        await self.repository.save_report(report)
        return report

    async def _record_statistics(self, session: InterviewSession, report: InterviewReport) -> None:
        """Best-effort statistics update; never fails the completion."""
        try:
            await self.statistics.record(session.user_id, report.overall_score, session.track)
        except StatisticsUpdateError as e:
            logger.warning(f"Statistics update skipped for session {session.session_id}: {e}")

    # =========================================================================
    # VOICE CALL EVENTS
    # =========================================================================

    async def get_session_by_call_id(self, call_id: str) -> InterviewSession | None:
        return await self.repository.find_session_by_call_id(call_id)

    async def record_call_duration(self, session_id: str, duration_seconds: int) -> InterviewSession:
        async with self._session_locks[session_id]:
            session = await self._load(session_id)
            session.duration_seconds = max(0, int(duration_seconds))
            await self.repository.save_session(session)
        return session

    async def record_recording(self, session_id: str, recording_url: str) -> InterviewSession:
        async with self._session_locks[session_id]:
            session = await self._load(session_id)
            session.recording_url = recording_url
            await self.repository.save_session(session)
        return session

    async def record_call_failure(
        self, session_id: str, error: str | None, reason: str | None
    ) -> InterviewSession:
        """Store a provider-reported call failure. Status is unchanged."""
        async with self._session_locks[session_id]:
            session = await self._load(session_id)
            session.metadata = {**session.metadata, "error": error, "failureReason": reason}
            await self.repository.save_session(session)

        logger.warning(f"Voice call failed for session {session_id}: {error or reason}")
        return session

    # =========================================================================
    # REPORTS & HISTORY
    # =========================================================================

    async def get_report(self, session_id: str, user_id: str) -> InterviewReport:
        """
        Get the stored report for a session owned by the caller.

        Raises:
            SessionNotFoundError, UnauthorizedSessionAccessError, ReportNotReadyError
        """
        await self.get_session(session_id, user_id)

        report = await self.repository.get_report(session_id)
        if not report:
            raise ReportNotReadyError(session_id)
        return report

    async def get_history(self, user_id: str, page: int = 1, limit: int = 10) -> InterviewHistoryPage:
        """Paginated interview history, newest first, with scores where reported."""
        page = max(1, page)
        limit = max(1, limit)

        sessions = await self.repository.list_sessions(user_id, offset=(page - 1) * limit, limit=limit)
        total = await self.repository.count_sessions(user_id)

        interviews = []
        for session in sessions:
            report = await self.repository.get_report(session.session_id)
            interviews.append(InterviewHistoryItem(
                session_id=session.session_id,
                track=session.track,
                difficulty=session.difficulty,
                status=session.status,
                date=session.created_at,
                duration_seconds=session.duration_seconds,
                score=report.overall_score if report else None,
            ))

        return InterviewHistoryPage(
            interviews=interviews,
            total=total,
            page=page,
            total_pages=math.ceil(total / limit),
        )
