"""Weighted composite of the four quote signals."""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from src.core.config import AcceptanceConfig
from src.data.models.load import Load
from src.data.models.quote import PriceRecommendation, Quote, ScoreBreakdown
from src.acceptance.competition import CompetitionContext
from src.acceptance.signals import (
    absolute_price_score,
    eta_score,
    fleet_rating_score,
    vehicle_match_score,
    vehicle_preference_score,
)

W_PRICE = Decimal("0.40")
W_ETA = Decimal("0.25")
W_RATING = Decimal("0.15")
W_VEHICLE = Decimal("0.20")

_PLACES = Decimal("0.0001")


def round4(value: float) -> Decimal:
    """Round half-up to 4 decimal places."""
    return Decimal(str(value)).quantize(_PLACES, rounding=ROUND_HALF_UP)


def compute_composite(price: float, eta: float, rating: float, vehicle: float) -> float:
    """Weighted sum of already-rounded component scores, rounded to 4 places."""
    total = (
        round4(price) * W_PRICE
        + round4(eta) * W_ETA
        + round4(rating) * W_RATING
        + round4(vehicle) * W_VEHICLE
    )
    return float(total.quantize(_PLACES, rounding=ROUND_HALF_UP))


def build_breakdown(price: float, eta: float, rating: float, vehicle: float) -> ScoreBreakdown:
    """
    Build a ScoreBreakdown whose composite is derived from its components.

    Components are rounded first so the persisted composite can always be
    recomputed from the persisted components.
    """
    return ScoreBreakdown(
        price_score=float(round4(price)),
        eta_score=float(round4(eta)),
        fleet_rating_score=float(round4(rating)),
        vehicle_match=float(round4(vehicle)),
        composite_score=compute_composite(price, eta, rating, vehicle),
    )


def meets_threshold(breakdown: ScoreBreakdown, threshold: float) -> bool:
    """Compare composite and threshold at 4 decimal places."""
    return round4(breakdown.composite_score) >= round4(threshold)


@dataclass
class ScoredQuote:
    quote: Quote
    breakdown: ScoreBreakdown


class CompositeEvaluator:
    """
    Score pending quotes for one load.

    One pipeline serves both modes: the CompetitionContext is empty for a sole
    bidder, so blending is a no-op, and populated when quotes compete.
    """

    def __init__(
        self,
        load: Load,
        recommendation: Optional[PriceRecommendation],
        fleet_ratings: dict[str, float],
        now: datetime,
        config: AcceptanceConfig,
    ) -> None:
        self.load = load
        self.recommendation = recommendation
        self.fleet_ratings = fleet_ratings
        self.now = now
        self.config = config

    def vehicle_score(self, quote: Quote) -> float:
        offered = quote.vehicle(self.config.default_vehicle_type)
        if self.load.has_vehicle_preferences:
            return vehicle_preference_score(self.load.acceptable_vehicle_types, offered)
        return vehicle_match_score(self.load.required_vehicle_type, offered)

    def score(self, quote: Quote, context: CompetitionContext) -> ScoredQuote:
        absolute_price = absolute_price_score(
            quote.quoted_price, self.recommendation, self.load.max_budget
        )
        price = context.blend_price(absolute_price, quote.quoted_price)

        absolute_eta = eta_score(
            quote.eta_minutes,
            self.load.distance_km,
            now=self.now,
            collection_time=self.load.collection_time,
            collection_window_minutes=self.load.collection_window_minutes,
            default_grace_minutes=self.config.default_grace_minutes,
        )
        eta = context.blend_eta(absolute_eta, quote.eta_minutes)

        rating = fleet_rating_score(
            self.fleet_ratings.get(quote.associated_fleet_id, self.config.neutral_fleet_rating)
        )

        return ScoredQuote(
            quote=quote,
            breakdown=build_breakdown(price, eta, rating, self.vehicle_score(quote)),
        )

    def score_all(self, quotes: Sequence[Quote], context: CompetitionContext) -> list[ScoredQuote]:
        return [self.score(q, context) for q in quotes]
