"""
Data models and schemas for PrepKit interviews

Contains Pydantic models for:
- Interview sessions and their lifecycle status
- Generated questions
- Pricing quotes
- Transcripts
- Scored reports
- Per-user statistics
"""

from src.models.interview import (
    InterviewSession,
    InterviewConfiguration,
    InterviewSetup,
    InterviewHistoryItem,
    InterviewHistoryPage,
    InterviewTrack,
    SessionStatus,
    Difficulty,
    PAYMENT_CAPTURED,
)
from src.models.question import Question
from src.models.pricing import PricingQuote, CostBreakdown
from src.models.transcript import Transcript, QASegment
from src.models.report import (
    InterviewReport,
    ScoreBreakdown,
    QuestionAnalysis,
    Strength,
    Weakness,
    Recommendation,
)
from src.models.statistics import UserInterviewStatistics

__all__ = [
    # Interview
    "InterviewSession",
    "InterviewConfiguration",
    "InterviewSetup",
    "InterviewHistoryItem",
    "InterviewHistoryPage",
    "InterviewTrack",
    "SessionStatus",
    "Difficulty",
    "PAYMENT_CAPTURED",
    # Question
    "Question",
    # Pricing
    "PricingQuote",
    "CostBreakdown",
    # Transcript
    "Transcript",
    "QASegment",
    # Report
    "InterviewReport",
    "ScoreBreakdown",
    "QuestionAnalysis",
    "Strength",
    "Weakness",
    "Recommendation",
    # Statistics
    "UserInterviewStatistics",
]
