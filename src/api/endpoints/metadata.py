"""
Metadata API endpoints

Provides reference data for:
- Interview tracks
- Difficulty tiers with price and duration
- Cost breakdown per tier
"""

from fastapi import APIRouter
from pydantic import BaseModel

from src.core import pricing
from src.models.interview import Difficulty, InterviewTrack
from src.models.pricing import CostBreakdown

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class TrackInfo(BaseModel):
    """Information about an interview track."""
    id: str
    name: str


class DifficultyPricing(BaseModel):
    """Price, duration and cost of one difficulty tier."""
    id: str
    name: str
    price: int
    currency: str
    duration_minutes: int
    cost_breakdown: CostBreakdown


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/tracks")
async def get_tracks() -> list[TrackInfo]:
    """Get all available interview tracks."""
    return [
        TrackInfo(id=track.value, name=track.display_name)
        for track in InterviewTrack
    ]


@router.get("/pricing")
async def get_pricing() -> list[DifficultyPricing]:
    """Get price and estimated cost for every difficulty tier."""
    tiers = []

    for difficulty in Difficulty:
        duration = pricing.estimated_duration(difficulty)
        tiers.append(DifficultyPricing(
            id=difficulty.value,
            name=difficulty.value.title(),
            price=pricing.pricing_tier(difficulty),
            currency=pricing.CURRENCY,
            duration_minutes=duration,
            cost_breakdown=pricing.cost_breakdown(duration),
        ))

    return tiers
