"""
Scoring mode selection and competitive blending.

A single pending quote is judged on absolute signals alone (sole-bidder mode).
With several pending quotes, price and ETA are blended with the quote's rank
inside the pool so that being cheaper or faster than rivals counts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from src.core.config import AcceptanceConfig
from src.data.models.quote import Quote
from src.acceptance.signals import NO_RECOMMENDATION_PRICE_SCORE

ABSOLUTE_WEIGHT = 0.6
RELATIVE_WEIGHT = 0.4


class ScoringMode(str, Enum):
    """How pending quotes for a load are compared."""

    SOLE_BIDDER = "sole_bidder"
    COMPETITIVE = "competitive"


def _relative(value: float, low: float, high: float) -> Optional[float]:
    # 1.0 for the lowest value in the pool, 0.0 for the highest
    if high - low <= 0:
        return None
    return 1.0 - (value - low) / (high - low)


@dataclass(frozen=True)
class CompetitionContext:
    """Price and ETA spread of the pending pool; empty for a sole bidder."""

    pool_size: int = 1
    price_min: float = 0.0
    price_max: float = 0.0
    eta_min: int = 0
    eta_max: int = 0

    @classmethod
    def from_quotes(cls, quotes: Sequence[Quote]) -> "CompetitionContext":
        if len(quotes) <= 1:
            return cls(pool_size=len(quotes))
        prices = [q.quoted_price for q in quotes]
        etas = [q.eta_minutes for q in quotes]
        return cls(
            pool_size=len(quotes),
            price_min=min(prices),
            price_max=max(prices),
            eta_min=min(etas),
            eta_max=max(etas),
        )

    @property
    def is_competitive(self) -> bool:
        return self.pool_size > 1

    def relative_price(self, price: float) -> Optional[float]:
        if not self.is_competitive:
            return None
        return _relative(price, self.price_min, self.price_max)

    def relative_eta(self, eta_minutes: int) -> Optional[float]:
        if not self.is_competitive:
            return None
        return _relative(eta_minutes, self.eta_min, self.eta_max)

    def blend_price(self, absolute: Optional[float], price: float) -> float:
        """
        Combine an absolute price score with the pool rank.

        Without a benchmark (absolute is None) the pool rank is used alone,
        and with neither the flat fallback applies.
        """
        relative = self.relative_price(price)
        if absolute is None:
            return relative if relative is not None else NO_RECOMMENDATION_PRICE_SCORE
        if relative is None:
            return absolute
        return absolute * ABSOLUTE_WEIGHT + relative * RELATIVE_WEIGHT

    def blend_eta(self, absolute: float, eta_minutes: int) -> float:
        relative = self.relative_eta(eta_minutes)
        if relative is None:
            return absolute
        return absolute * ABSOLUTE_WEIGHT + relative * RELATIVE_WEIGHT


@dataclass(frozen=True)
class ModeSelection:
    mode: ScoringMode
    threshold: float
    context: CompetitionContext


def select_mode(pending: Sequence[Quote], config: AcceptanceConfig) -> ModeSelection:
    """Pick the scoring mode and acceptance threshold for the pending pool."""
    context = CompetitionContext.from_quotes(pending)
    if context.is_competitive:
        return ModeSelection(ScoringMode.COMPETITIVE, config.competitive_threshold, context)
    return ModeSelection(ScoringMode.SOLE_BIDDER, config.sole_bidder_threshold, context)
