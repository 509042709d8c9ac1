"""
Signal scorers for quote evaluation.

Each scorer is a pure function returning a value in [0, 1]:
- Vehicle match: ordinal gradient or poster preference list
- Price: benchmark range or budget-aware taper
- ETA: lateness against the collection window, or a distance heuristic
- Fleet rating: profile rating normalised to [0, 1]
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from src.data.models.load import VehicleType
from src.data.models.quote import PriceRecommendation

# Used when no benchmark range is available.
NO_RECOMMENDATION_PRICE_SCORE = 0.7

# Vehicle gradient by size difference (offered rank - requested rank).
OVERSIZE_SCORES = {0: 1.0, 1: 0.9, 2: 0.75}
OVERSIZE_FLOOR = 0.6

PREFERENCE_SCORES = (1.0, 0.85)
PREFERENCE_FLOOR = 0.7


def vehicle_match_score(requested: VehicleType, offered: VehicleType) -> float:
    """Score an offered vehicle against the requested class by capacity rank."""
    diff = offered.rank - requested.rank
    if diff < 0:
        # Undersized: capacity cannot be faked
        return 0.0
    return OVERSIZE_SCORES.get(diff, OVERSIZE_FLOOR)


def vehicle_preference_score(acceptable: Sequence[VehicleType], offered: VehicleType) -> float:
    """Score an offered vehicle by its position in the poster's preference list."""
    if offered not in acceptable:
        return 0.0
    idx = list(acceptable).index(offered)
    if idx < len(PREFERENCE_SCORES):
        return PREFERENCE_SCORES[idx]
    return PREFERENCE_FLOOR


def benchmark_price_score(quoted_price: float, rec: PriceRecommendation) -> float:
    """
    Score a price against a recommended range.

    At or below mid scores 1.0, tapering to 0.7 at max and to 0.0 at twice max.
    Prices under 60% of min are treated as suspiciously cheap (0.3).
    """
    if quoted_price <= 0:
        return 0.0
    if quoted_price < rec.min * 0.6:
        return 0.3
    if quoted_price <= rec.mid:
        return 1.0
    if quoted_price <= rec.max:
        return 1.0 - 0.3 * ((quoted_price - rec.mid) / (rec.max - rec.mid))
    ceiling = rec.max * 2.0
    if quoted_price <= ceiling:
        return 0.7 * (1.0 - (quoted_price - rec.max) / (ceiling - rec.max))
    return 0.0


def budget_price_score(quoted_price: float, rec_mid: float, max_budget: float) -> float:
    """Score a price tapering from 1.0 at the benchmark mid to 0.5 at the poster's budget."""
    if quoted_price <= 0:
        return 0.0
    if quoted_price <= rec_mid:
        return 1.0
    if quoted_price <= max_budget:
        span = max_budget - rec_mid
        if span <= 0:
            return 1.0
        return 1.0 - 0.5 * ((quoted_price - rec_mid) / span)
    # Over budget; normally stopped by the eligibility gate
    return 0.0


def absolute_price_score(
    quoted_price: float,
    rec: Optional[PriceRecommendation],
    max_budget: Optional[float] = None,
) -> Optional[float]:
    """
    Pick the price strategy for a load.

    Returns None when there is no recommendation to score against; callers
    decide the fallback (flat score or pool-relative rank).
    """
    if rec is None:
        return None
    if max_budget is not None:
        return budget_price_score(quoted_price, rec.mid, max_budget)
    return benchmark_price_score(quoted_price, rec)


def _as_utc(ts: datetime) -> datetime:
    # Naive timestamps are taken as UTC
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def eta_score(
    eta_minutes: int,
    distance_km: float,
    now: datetime,
    collection_time: Optional[datetime] = None,
    collection_window_minutes: Optional[int] = None,
    default_grace_minutes: int = 10,
) -> float:
    """
    Score the carrier's arrival against the load's collection time.

    Args:
        eta_minutes: Minutes until the vehicle reaches collection
        distance_km: Load distance, used when no collection time is set
        now: Evaluation instant
        collection_time: Requested collection instant
        collection_window_minutes: Grace period; defaults to default_grace_minutes

    Returns:
        1.0 within the grace period, tapering to 0.5 over the next 20 minutes
        and to 0.0 over the 30 after that.
    """
    if collection_time is not None:
        lateness = (_as_utc(now) - _as_utc(collection_time)).total_seconds() / 60.0 + eta_minutes
        grace = collection_window_minutes if collection_window_minutes is not None else default_grace_minutes

        if lateness <= grace:
            return 1.0
        moderate_end = grace + 20
        if lateness <= moderate_end:
            return 1.0 - 0.5 * ((lateness - grace) / 20)
        heavy_end = moderate_end + 30
        if lateness <= heavy_end:
            return 0.5 - 0.5 * ((lateness - moderate_end) / 30)
        return 0.0

    # Distance heuristic: roughly a minute per km, never under 30 minutes
    reasonable = max(distance_km, 30.0)
    if eta_minutes <= reasonable:
        return 1.0
    ratio = eta_minutes / reasonable
    if ratio >= 3.0:
        return 0.0
    return 1.0 - (ratio - 1.0) / 2.0


def fleet_rating_score(rating: float) -> float:
    """Normalise a 0-5 fleet rating."""
    return max(0.0, min(5.0, rating)) / 5.0
