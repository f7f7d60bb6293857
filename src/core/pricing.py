"""
Pricing Engine for PrepKit interviews

Pure cost/price calculations. Unknown difficulty strings fall back to the
medium tier. Margins are reported as computed and may be negative.
"""

import math

from src.models.interview import Difficulty
from src.models.pricing import CostBreakdown, PricingQuote

CURRENCY = "INR"
USD_TO_INR = 83

# User-facing price per difficulty tier (INR)
PRICING_TIERS: dict[Difficulty, int] = {
    Difficulty.EASY: 99,
    Difficulty.MEDIUM: 149,
    Difficulty.HARD: 199,
    Difficulty.EXPERT: 299,
}

# Default call length per difficulty tier (minutes)
DURATIONS: dict[Difficulty, int] = {
    Difficulty.EASY: 12,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 25,
    Difficulty.EXPERT: 30,
}

# Per-interview cost model (USD)
VOICE_BASE_FEE = 0.5
VOICE_PER_MINUTE = 0.75
QUESTION_GENERATION_COST = 0.01
REPORT_GENERATION_COST = 0.02
INFRASTRUCTURE_COST = 0.05
PAYMENT_PROCESSING_COST = 0.03


def _round(value: float) -> int:
    """Round half up to the nearest currency unit."""
    return int(math.floor(value + 0.5))


def _voice_cost_usd(duration_minutes: int) -> float:
    return VOICE_BASE_FEE + VOICE_PER_MINUTE * duration_minutes


def _text_generation_cost_usd() -> float:
    return QUESTION_GENERATION_COST + REPORT_GENERATION_COST


def _total_cost_usd(duration_minutes: int) -> float:
    return (
        _voice_cost_usd(duration_minutes)
        + _text_generation_cost_usd()
        + INFRASTRUCTURE_COST
        + PAYMENT_PROCESSING_COST
    )


def estimated_duration(difficulty: str | Difficulty) -> int:
    """Default interview length in minutes for a difficulty tier."""
    return DURATIONS[Difficulty.parse(difficulty)]


def pricing_tier(difficulty: str | Difficulty) -> int:
    """User-facing price for a difficulty tier."""
    return PRICING_TIERS[Difficulty.parse(difficulty)]


def quote(difficulty: str | Difficulty, duration_minutes: int | None = None) -> PricingQuote:
    """
    Price an interview.

    Args:
        difficulty: Difficulty tier (unknown values price as medium)
        duration_minutes: Call length override; defaults to the tier duration

    Returns:
        PricingQuote with user price, cost price and margin in INR
    """
    if duration_minutes is None:
        duration_minutes = estimated_duration(difficulty)

    cost_price = _round(_total_cost_usd(duration_minutes) * USD_TO_INR)
    user_price = pricing_tier(difficulty)

    return PricingQuote(
        user_price=user_price,
        cost_price=cost_price,
        margin=user_price - cost_price,
        currency=CURRENCY,
    )


def cost_breakdown(duration_minutes: int) -> CostBreakdown:
    """Per-category cost estimate, using the same constants as quote()."""
    return CostBreakdown(
        voice=_round(_voice_cost_usd(duration_minutes) * USD_TO_INR),
        text_generation=_round(_text_generation_cost_usd() * USD_TO_INR),
        infrastructure=_round(INFRASTRUCTURE_COST * USD_TO_INR),
        payment=_round(PAYMENT_PROCESSING_COST * USD_TO_INR),
        total=_round(_total_cost_usd(duration_minutes) * USD_TO_INR),
        currency=CURRENCY,
    )
