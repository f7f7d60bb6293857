"""
Statistics Aggregator for PrepKit interviews

Maintains each user's running interview rollup. Updates go through the
repository's atomic update, so concurrent completions for the same user
cannot lose an increment.
"""

import logging
import math
from datetime import datetime

from src.core.errors import StatisticsUpdateError
from src.models.statistics import UserInterviewStatistics
from src.storage.repository import InterviewRepository

logger = logging.getLogger(__name__)


def apply_score(
    stats: UserInterviewStatistics | None,
    user_id: str,
    score: int,
    track: str,
    at: datetime | None = None,
) -> UserInterviewStatistics:
    """Fold one completed interview into a statistics record."""
    at = at or datetime.utcnow()

    if stats is None:
        return UserInterviewStatistics(
            user_id=user_id,
            total_interviews=1,
            average_score=score,
            per_track_counts={track: 1},
            last_interview_at=at,
            best_score_achieved=score,
        )

    total = stats.total_interviews + 1
    running_sum = stats.average_score * stats.total_interviews + score
    per_track = dict(stats.per_track_counts)
    per_track[track] = per_track.get(track, 0) + 1

    return stats.model_copy(update={
        "total_interviews": total,
        "average_score": int(math.floor(running_sum / total + 0.5)),
        "per_track_counts": per_track,
        "last_interview_at": at,
        "best_score_achieved": max(stats.best_score_achieved, score),
    })


class StatisticsAggregator:
    """Records completed interview scores into per-user statistics."""

    def __init__(self, repository: InterviewRepository):
        self.repository = repository

    async def record(self, user_id: str, score: int, track: str) -> UserInterviewStatistics:
        """
        Record a completed interview.

        Raises:
            StatisticsUpdateError: If the update could not be stored
        """
        try:
            stats = await self.repository.update_statistics(
                user_id,
                lambda current: apply_score(current, user_id, score, track),
            )
        except Exception as e:
            raise StatisticsUpdateError(
                f"Failed to update statistics for user {user_id}: {e}"
            ) from e

        logger.info(
            f"Statistics for user {user_id}: total={stats.total_interviews} "
            f"average={stats.average_score} best={stats.best_score_achieved}"
        )
        return stats
