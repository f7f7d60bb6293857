"""
In-memory implementation of InterviewRepository.

Used for local development and tests. Stored objects are deep copies, so
callers only change persisted state by saving again.
"""

import asyncio
from collections import defaultdict

from src.models.interview import InterviewSession
from src.models.report import InterviewReport
from src.models.statistics import UserInterviewStatistics
from src.models.transcript import Transcript
from src.storage.repository import InterviewRepository, StatisticsMutator


class InMemoryInterviewRepository(InterviewRepository):

    def __init__(self):
        self._sessions: dict[str, InterviewSession] = {}
        self._transcripts: dict[str, Transcript] = {}
        self._reports: dict[str, InterviewReport] = {}
        self._statistics: dict[str, UserInterviewStatistics] = {}

        # One lock per user serialises statistics read-modify-write
        self._statistics_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def save_session(self, session: InterviewSession) -> None:
        self._sessions[session.session_id] = session.model_copy(deep=True)

    async def get_session(self, session_id: str) -> InterviewSession | None:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def find_session_by_call_id(self, call_id: str) -> InterviewSession | None:
        for session in self._sessions.values():
            if session.external_call_id == call_id:
                return session.model_copy(deep=True)
        return None

    async def list_sessions(
        self, user_id: str, offset: int, limit: int
    ) -> list[InterviewSession]:
        # Insertion order breaks created_at ties
        ranked = sorted(
            (
                (s.created_at, index, s)
                for index, s in enumerate(self._sessions.values())
                if s.user_id == user_id
            ),
            key=lambda item: item[:2],
            reverse=True,
        )
        return [s.model_copy(deep=True) for _, _, s in ranked[offset:offset + limit]]

    async def count_sessions(self, user_id: str) -> int:
        return sum(1 for s in self._sessions.values() if s.user_id == user_id)

    async def save_transcript(self, transcript: Transcript) -> None:
        self._transcripts[transcript.session_id] = transcript.model_copy(deep=True)

    async def get_transcript(self, session_id: str) -> Transcript | None:
        transcript = self._transcripts.get(session_id)
        return transcript.model_copy(deep=True) if transcript else None

    async def save_report(self, report: InterviewReport) -> None:
        self._reports[report.session_id] = report.model_copy(deep=True)

    async def get_report(self, session_id: str) -> InterviewReport | None:
        report = self._reports.get(session_id)
        return report.model_copy(deep=True) if report else None

    async def get_statistics(self, user_id: str) -> UserInterviewStatistics | None:
        stats = self._statistics.get(user_id)
        return stats.model_copy(deep=True) if stats else None

    async def update_statistics(
        self, user_id: str, mutator: StatisticsMutator
    ) -> UserInterviewStatistics:
        async with self._statistics_locks[user_id]:
            current = self._statistics.get(user_id)
            updated = mutator(current.model_copy(deep=True) if current else None)
            self._statistics[user_id] = updated.model_copy(deep=True)
            return updated
