"""
Persistence interface for the interview engine.
"""

from abc import ABC, abstractmethod
from typing import Callable

from src.models.interview import InterviewSession
from src.models.report import InterviewReport
from src.models.statistics import UserInterviewStatistics
from src.models.transcript import Transcript

StatisticsMutator = Callable[[UserInterviewStatistics | None], UserInterviewStatistics]


class InterviewRepository(ABC):
    """
    Storage for sessions, transcripts, reports and per-user statistics.

    Implementations propagate their own errors unchanged.
    """

    # Sessions

    @abstractmethod
    async def save_session(self, session: InterviewSession) -> None:
        pass

    @abstractmethod
    async def get_session(self, session_id: str) -> InterviewSession | None:
        pass

    @abstractmethod
    async def find_session_by_call_id(self, call_id: str) -> InterviewSession | None:
        pass

    @abstractmethod
    async def list_sessions(
        self, user_id: str, offset: int, limit: int
    ) -> list[InterviewSession]:
        """Sessions for a user, newest first."""
        pass

    @abstractmethod
    async def count_sessions(self, user_id: str) -> int:
        pass

    # Transcripts & reports

    @abstractmethod
    async def save_transcript(self, transcript: Transcript) -> None:
        pass

    @abstractmethod
    async def get_transcript(self, session_id: str) -> Transcript | None:
        pass

    @abstractmethod
    async def save_report(self, report: InterviewReport) -> None:
        pass

    @abstractmethod
    async def get_report(self, session_id: str) -> InterviewReport | None:
        pass

    # Statistics

    @abstractmethod
    async def get_statistics(self, user_id: str) -> UserInterviewStatistics | None:
        pass

    @abstractmethod
    async def update_statistics(
        self, user_id: str, mutator: StatisticsMutator
    ) -> UserInterviewStatistics:
        """
        Atomically read, mutate and write a user's statistics.

        The mutator receives the current record (or None) and returns the
        record to store. No other update for the same user may interleave.
        """
        pass
