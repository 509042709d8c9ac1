"""
Quote data model - a carrier's bid against a load, and its score breakdown.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.data.models.load import VehicleType


class QuoteStatus(str, Enum):
    """Quote status enumeration."""

    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ScoreBreakdown(BaseModel):
    """
    Per-signal scores attached to an evaluated quote.

    All values are in [0, 1] and rounded to 4 decimal places. Instances are
    frozen; build them through src.acceptance.composite.build_breakdown so the
    composite always matches the components.
    """

    model_config = ConfigDict(frozen=True)

    price_score: float = Field(..., ge=0.0, le=1.0)
    eta_score: float = Field(..., ge=0.0, le=1.0)
    fleet_rating_score: float = Field(..., ge=0.0, le=1.0)
    vehicle_match: float = Field(..., ge=0.0, le=1.0)
    composite_score: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def zero(cls) -> "ScoreBreakdown":
        """Breakdown attached to quotes rejected before scoring."""
        return cls(
            price_score=0.0,
            eta_score=0.0,
            fleet_rating_score=0.0,
            vehicle_match=0.0,
            composite_score=0.0,
        )


class Quote(BaseModel):
    """A carrier's price and vehicle offer for a load."""

    quote_id: str = Field(..., description="Unique quote identifier")
    load_id: str = Field(..., description="Load this quote bids on")
    quoted_price: float = Field(..., gt=0, description="Quoted price (GBP)")
    status: QuoteStatus = Field(QuoteStatus.SENT, description="Current quote status")

    associated_fleet_id: str = Field(..., description="Fleet that submitted the quote")
    fleet_quoter_name: Optional[str] = None

    requested_vehicle_type: Optional[VehicleType] = None
    offered_vehicle_type: Optional[VehicleType] = None
    eta_to_collection: Optional[int] = Field(None, ge=0, description="Minutes to reach collection")
    adr_certified: bool = False

    def vehicle(self, default: VehicleType = VehicleType.RIGID_18T) -> VehicleType:
        """The vehicle class on offer, falling back to the requested class."""
        return self.offered_vehicle_type or self.requested_vehicle_type or default

    @property
    def eta_minutes(self) -> int:
        """ETA to collection, treating a missing estimate as immediate."""
        return self.eta_to_collection or 0


class FleetProfile(BaseModel):
    """Carrier fleet reputation data."""

    fleet_id: str
    company_name: str = "My Fleet"
    rating: float = Field(3.0, ge=0.0, le=5.0)
    total_jobs_completed: int = Field(0, ge=0)


class PriceRecommendation(BaseModel):
    """Benchmark price range for a load (GBP)."""

    min: float
    mid: float
    max: float
