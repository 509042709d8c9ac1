"""
Price recommendation providers.

The acceptance engine consumes a benchmark range {min, mid, max} per load.
RuleBasedPriceRecommender reproduces the marketplace's rate-per-km formula:

    mid = distance_km * rate_per_km[vehicle]
          * adr_multiplier (when ADR is required)
          * max(competition_floor, 1 - competition_step * quote_count)
          * (0.95 + rating / 5 * 0.1)
    min = mid * (1 - spread), max = mid * (1 + spread)
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol

import structlog

from src.core.config import RateConfig, get_config
from src.data.models.load import VehicleType
from src.data.models.quote import PriceRecommendation
from src.data.repository import JobMarketRepository

log = structlog.get_logger(__name__)


class PriceRecommender(Protocol):
    """Source of benchmark price ranges."""

    def recommend_price(
        self,
        load_id: str,
        vehicle_type: Optional[VehicleType] = None,
        default_rating: Optional[float] = None,
    ) -> Optional[PriceRecommendation]: ...


def _pence(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class RuleBasedPriceRecommender:
    """Benchmark recommender driven by the configured rate table."""

    def __init__(
        self,
        repository: JobMarketRepository,
        rates: Optional[RateConfig] = None,
    ) -> None:
        self.repository = repository
        self.rates = rates or get_config().get_rate_config()

    def recommend_price(
        self,
        load_id: str,
        vehicle_type: Optional[VehicleType] = None,
        default_rating: Optional[float] = None,
    ) -> Optional[PriceRecommendation]:
        """
        Recommend a price range for a load.

        Args:
            load_id: Load to price
            vehicle_type: Vehicle class to price for (defaults to the load's requirement)
            default_rating: Fleet rating to assume (defaults to the fleet profile's rating)

        Returns:
            PriceRecommendation, or None when the load is unknown
        """
        load = self.repository.get_load(load_id)
        if load is None:
            return None

        vt = vehicle_type or load.required_vehicle_type
        rate = self.rates.per_km.get(vt, self.rates.fallback_per_km)
        rating = default_rating if default_rating is not None else self.repository.get_fleet_profile().rating

        base_price = load.distance_km * rate
        adr_multiplier = self.rates.adr_multiplier if load.adr_required else 1.0
        competing_quotes = len(self.repository.get_quotes_by_load(load_id))
        competition_factor = max(
            self.rates.competition_floor, 1.0 - competing_quotes * self.rates.competition_step
        )
        rating_factor = 0.95 + (rating / 5.0) * 0.1

        mid = base_price * adr_multiplier * competition_factor * rating_factor
        recommendation = PriceRecommendation(
            min=_pence(mid * (1 - self.rates.spread)),
            mid=_pence(mid),
            max=_pence(mid * (1 + self.rates.spread)),
        )

        log.info(
            "price_recommended",
            load_id=load_id,
            vehicle_type=vt.value,
            base_price=round(base_price, 2),
            adr_multiplier=adr_multiplier,
            competition_factor=round(competition_factor, 2),
            rating_factor=round(rating_factor, 2),
            range_min=recommendation.min,
            range_max=recommendation.max,
        )
        return recommendation
