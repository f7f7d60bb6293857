"""
Pricing models for PrepKit interviews
"""

from pydantic import BaseModel, ConfigDict, Field


class PricingQuote(BaseModel):
    """Price quoted for a session. Frozen on the session at creation time."""

    model_config = ConfigDict(frozen=True)

    user_price: int = Field(..., description="Price charged to the user")
    cost_price: int = Field(..., description="Estimated cost to serve the session")
    margin: int = Field(..., description="user_price - cost_price, may be negative")
    currency: str = "INR"


class CostBreakdown(BaseModel):
    """Per-category cost estimate in the display currency."""

    voice: int
    text_generation: int
    infrastructure: int
    payment: int
    total: int
    currency: str = "INR"
