"""
Transcript models for PrepKit interviews
"""

from datetime import datetime

from pydantic import BaseModel, Field


class QASegment(BaseModel):
    """One question/answer exchange extracted from a raw transcript."""

    question_text: str
    answer_text: str


class Transcript(BaseModel):
    """Stored call transcript. Created once, when the interview completes."""

    session_id: str
    raw_text: str
    segments: list[QASegment] = Field(default_factory=list)
    confidence_score: float = Field(default=0.95, ge=0, le=1)
    created_at: datetime = Field(default_factory=datetime.utcnow)
