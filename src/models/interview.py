"""
Interview session and state models for PrepKit interviews
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from src.models.pricing import PricingQuote
from src.models.question import Question


PAYMENT_CAPTURED = "CAPTURED"


class SessionStatus(str, Enum):
    """Interview session lifecycle states."""

    SETUP = "SETUP"  # Questions generated, awaiting payment/start
    IN_PROGRESS = "IN_PROGRESS"  # Voice call running
    COMPLETED = "COMPLETED"  # Transcript and report stored


class Difficulty(str, Enum):
    """Interview difficulty tiers."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        """Map a raw difficulty string to a tier, defaulting to MEDIUM."""
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.MEDIUM


class InterviewTrack(str, Enum):
    """Subject-matter category of an interview."""

    JAVASCRIPT = "javascript"
    MACHINE_CODING = "machine-coding"
    DSA = "dsa"
    SYSTEM_DESIGN = "system-design"
    BEHAVIORAL = "behavioral"

    @property
    def display_name(self) -> str:
        """Human-readable track name."""
        names = {
            "javascript": "JavaScript",
            "machine-coding": "Machine Coding",
            "dsa": "Data Structures & Algorithms",
            "system-design": "System Design",
            "behavioral": "Behavioral",
        }
        return names.get(self.value, self.value)


class InterviewSetup(BaseModel):
    """Inputs for question generation."""

    track: str
    difficulty: Difficulty
    focus_areas: list[str] = Field(default_factory=list)
    specific_requirements: str | None = None
    duration_minutes: int = Field(..., ge=1)

    @property
    def question_count(self) -> int:
        """Number of questions to request from the provider."""
        counts = {
            Difficulty.EASY: 5,
            Difficulty.MEDIUM: 6,
        }
        return counts.get(self.difficulty, 7)


class InterviewConfiguration(BaseModel):
    """User's interview configuration, captured at creation."""

    focus_areas: list[str] = Field(default_factory=list)
    specific_requirements: str | None = None
    duration_minutes: int = Field(..., ge=1)


class InterviewSession(BaseModel):
    """Complete interview session state."""

    # Identification
    session_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str

    # Setup
    track: str
    difficulty: Difficulty
    configuration: InterviewConfiguration

    # State
    status: SessionStatus = Field(default=SessionStatus.SETUP)
    payment_status: str = "CREATED"

    # Generated content (immutable once set)
    questions: list[Question] = Field(default_factory=list)
    pricing: PricingQuote

    # Voice call
    external_call_id: str | None = None
    recording_url: str | None = None
    duration_seconds: int | None = None

    # Timing
    created_at: datetime = Field(default_factory=datetime.utcnow)
    started_at: datetime | None = None
    ended_at: datetime | None = None

    report_generated: bool = False

    # Provider-side events that do not change status (e.g. call failures)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_payment_captured(self) -> bool:
        return self.payment_status == PAYMENT_CAPTURED

    def get_duration_seconds(self) -> float:
        """Get interview duration in seconds."""
        if self.duration_seconds is not None:
            return float(self.duration_seconds)
        if not self.started_at:
            return 0.0
        end = self.ended_at or datetime.utcnow()
        return (end - self.started_at).total_seconds()

    def total_time_allocation(self) -> int:
        """Sum of per-question time budgets, in minutes."""
        return sum(q.time_allocation_minutes for q in self.questions)


class InterviewHistoryItem(BaseModel):
    """One row of a user's interview history."""

    session_id: str
    track: str
    difficulty: Difficulty
    status: SessionStatus
    date: datetime
    duration_seconds: int | None = None
    score: int | None = None


class InterviewHistoryPage(BaseModel):
    """Paginated interview history."""

    interviews: list[InterviewHistoryItem] = Field(default_factory=list)
    total: int
    page: int
    total_pages: int
