"""
Report models for PrepKit interviews

Defines the structure of the scored interview report. Field names are
snake_case in Python and camelCase on the wire, matching the JSON the
text-generation provider is asked to return.
"""

import math
from datetime import datetime
from uuid import uuid4

from pydantic import Field, field_validator

from src.models.question import CamelModel


def _round_score(value):
    """Accept fractional scores from the provider, store integers."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return value
        return int(value + 0.5) if value >= 0 else int(value - 0.5)
    return value


class ScoreBreakdown(CamelModel):
    """Named scoring dimensions (each 0-100)."""

    technical_depth: int = Field(..., ge=0, le=100)
    communication: int = Field(..., ge=0, le=100)
    problem_solving: int = Field(..., ge=0, le=100)
    trade_off_analysis: int = Field(..., ge=0, le=100)
    time_management: int = Field(..., ge=0, le=100)

    @field_validator("*", mode="before")
    @classmethod
    def round_scores(cls, value):
        return _round_score(value)


class ScoringDetails(CamelModel):
    """Per-question rubric (each 0-10)."""

    technical_correctness: float = Field(..., ge=0, le=10)
    completeness: float = Field(..., ge=0, le=10)
    communication: float = Field(..., ge=0, le=10)
    depth_of_thinking: float = Field(..., ge=0, le=10)


class QuestionFeedback(CamelModel):
    what_you_did_well: list[str] = Field(default_factory=list)
    what_could_be_better: list[str] = Field(default_factory=list)
    missing_points: list[str] = Field(default_factory=list)
    scoring_details: ScoringDetails | None = None


class QuestionAnalysis(CamelModel):
    """Analysis of the answer to a single question."""

    question_id: str
    question_text: str = ""
    user_score: int = Field(..., ge=0, le=100)
    feedback: QuestionFeedback = Field(default_factory=QuestionFeedback)

    @field_validator("user_score", mode="before")
    @classmethod
    def round_scores(cls, value):
        return _round_score(value)


class Strength(CamelModel):
    area: str
    description: str
    importance: str = ""


class Weakness(CamelModel):
    area: str
    description: str
    importance: str = ""
    focus_on: str = ""


class Recommendation(CamelModel):
    """A prioritised study recommendation."""

    priority: int = Field(..., ge=1)
    topic: str
    resources: list[str] = Field(default_factory=list)
    time_to_master: str = ""
    practice_strategy: str = ""


class ComparisonToStandards(CamelModel):
    your_score: int = Field(..., ge=0, le=100)
    average_for_difficulty: int = Field(..., ge=0, le=100)
    top_performer_score: int = Field(..., ge=0, le=100)
    status_message: str = ""

    @field_validator(
        "your_score", "average_for_difficulty", "top_performer_score", mode="before"
    )
    @classmethod
    def round_scores(cls, value):
        return _round_score(value)


class NextInterviewSuggestion(CamelModel):
    recommended_topic: str
    focus_areas: list[str] = Field(default_factory=list)
    difficulty: str
    estimated_improvement: str = ""


class InterviewReport(CamelModel):
    """Complete scored interview report. Immutable once stored."""

    # Metadata
    report_id: str = Field(default_factory=lambda: f"rpt_{uuid4().hex[:12]}")
    session_id: str
    generated_at: datetime = Field(default_factory=datetime.utcnow)

    # === SCORES ===

    overall_score: int = Field(..., ge=0, le=100)
    score_breakdown: ScoreBreakdown
    summary: str

    # === DETAILED BREAKDOWN ===

    question_analysis: list[QuestionAnalysis] = Field(default_factory=list)

    # === QUALITATIVE FEEDBACK ===

    strengths: list[Strength] = Field(default_factory=list)
    weaknesses: list[Weakness] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)

    # === BENCHMARKS & NEXT STEPS ===

    comparison_to_standards: ComparisonToStandards
    next_steps: list[str] = Field(default_factory=list)
    suggestion_for_next_interview: NextInterviewSuggestion

    # True when produced by the local heuristic instead of the provider
    is_fallback: bool = False

    @field_validator("overall_score", mode="before")
    @classmethod
    def round_scores(cls, value):
        return _round_score(value)
