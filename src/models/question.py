"""
Question models for PrepKit interviews
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting the camelCase keys emitted by the text-generation provider."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Question(CamelModel):
    """A single generated interview question. Immutable once generated."""

    model_config = ConfigDict(frozen=True)

    # Identification
    id: str = Field(..., min_length=1, description="Unique question ID")
    order: int = Field(..., ge=1, description="1-based position in the interview")

    # Content
    text: str = Field(..., min_length=1, description="The question text")
    motivation: str = Field(
        default="",
        description="Why this question is being asked"
    )

    # Evaluation guidance
    expected_key_points: list[str] = Field(
        default_factory=list,
        description="Key points expected in a good answer"
    )

    # Difficulty & timing
    difficulty: int = Field(
        ..., ge=1, le=10,
        description="Numeric difficulty (1-10)"
    )
    time_allocation_minutes: int = Field(
        ..., ge=1,
        alias="timeAllocation",
        description="Minutes budgeted for this question"
    )

    # Follow-up options
    follow_ups: list[str] = Field(
        default_factory=list,
        description="Follow-up prompts the interviewer may use"
    )
