"""
Per-user interview statistics
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserInterviewStatistics(BaseModel):
    """Running rollup of a user's completed interviews."""

    user_id: str
    total_interviews: int = Field(default=0, ge=0)
    average_score: int = Field(default=0, ge=0, le=100)
    per_track_counts: dict[str, int] = Field(default_factory=dict)
    last_interview_at: datetime | None = None
    best_score_achieved: int = Field(default=0, ge=0, le=100)
