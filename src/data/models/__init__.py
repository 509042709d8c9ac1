"""
Pydantic data models for the freight marketplace.

Core models:
- Load: Freight job posting
- Quote: Carrier bid against a load
- ScoreBreakdown: Per-signal evaluation scores
- FleetProfile: Carrier reputation
- PriceRecommendation: Benchmark price range
"""

from .load import Load, LoadStatus, Location, VehicleType
from .quote import FleetProfile, PriceRecommendation, Quote, QuoteStatus, ScoreBreakdown

__all__ = [
    "FleetProfile",
    "Load",
    "LoadStatus",
    "Location",
    "PriceRecommendation",
    "Quote",
    "QuoteStatus",
    "ScoreBreakdown",
    "VehicleType",
]
