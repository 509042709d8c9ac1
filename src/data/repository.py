"""
Job market repository contract and an in-memory implementation.

The acceptance engine only talks to storage through JobMarketRepository, so
any backing store (SQL, HTTP API, in-memory fake) can be injected.
"""

from typing import Optional, Protocol

import structlog

from src.data.models.load import Load, LoadStatus
from src.data.models.quote import FleetProfile, Quote, QuoteStatus, ScoreBreakdown

log = structlog.get_logger(__name__)


class JobMarketRepository(Protocol):
    """Read and update operations the acceptance engine needs."""

    def get_quote(self, quote_id: str) -> Optional[Quote]: ...

    def get_load(self, load_id: str) -> Optional[Load]: ...

    def get_quotes_by_load(self, load_id: str) -> list[Quote]:
        """All quotes for a load, in submission order."""
        ...

    def get_fleet_profile(self, fleet_id: Optional[str] = None) -> FleetProfile: ...

    def update_quote_status(self, quote_id: str, status: QuoteStatus) -> None: ...

    def update_load_status(self, load_id: str, status: LoadStatus) -> None: ...

    def increment_fleet_jobs_completed(self, fleet_id: Optional[str] = None) -> None: ...

    def set_quote_score_breakdown(self, quote_id: str, breakdown: ScoreBreakdown) -> None: ...

    def set_quote_feedback(self, quote_id: str, feedback: str) -> None: ...


class InMemoryJobMarketRepository:
    """Dict-backed repository for tests, demos and simulations."""

    DEFAULT_FLEET_ID = "fleet-001"

    def __init__(self, default_rating: float = 3.0) -> None:
        self._loads: dict[str, Load] = {}
        self._quotes: dict[str, Quote] = {}
        self._scores: dict[str, ScoreBreakdown] = {}
        self._feedback: dict[str, str] = {}
        self._fleets: dict[str, FleetProfile] = {}
        self.add_fleet_profile(FleetProfile(fleet_id=self.DEFAULT_FLEET_ID, rating=default_rating))

    # Loads

    def add_load(self, load: Load) -> Load:
        self._loads[load.load_id] = load
        return load

    def get_load(self, load_id: str) -> Optional[Load]:
        return self._loads.get(load_id)

    def update_load_status(self, load_id: str, status: LoadStatus) -> None:
        load = self._loads.get(load_id)
        if load:
            self._loads[load_id] = load.model_copy(update={"status": status})
            log.debug("load_status_updated", load_id=load_id, status=status.value)

    # Quotes

    def add_quote(self, quote: Quote) -> Quote:
        self._quotes[quote.quote_id] = quote
        return quote

    def get_quote(self, quote_id: str) -> Optional[Quote]:
        return self._quotes.get(quote_id)

    def get_quotes_by_load(self, load_id: str) -> list[Quote]:
        return [q for q in self._quotes.values() if q.load_id == load_id]

    def update_quote_status(self, quote_id: str, status: QuoteStatus) -> None:
        quote = self._quotes.get(quote_id)
        if quote:
            self._quotes[quote_id] = quote.model_copy(update={"status": status})
            log.debug("quote_status_updated", quote_id=quote_id, status=status.value)

    def set_quote_score_breakdown(self, quote_id: str, breakdown: ScoreBreakdown) -> None:
        self._scores[quote_id] = breakdown

    def get_quote_score_breakdown(self, quote_id: str) -> Optional[ScoreBreakdown]:
        return self._scores.get(quote_id)

    def set_quote_feedback(self, quote_id: str, feedback: str) -> None:
        self._feedback[quote_id] = feedback

    def get_quote_feedback(self, quote_id: str) -> Optional[str]:
        return self._feedback.get(quote_id)

    # Fleets

    def add_fleet_profile(self, profile: FleetProfile) -> FleetProfile:
        self._fleets[profile.fleet_id] = profile
        return profile

    def get_fleet_profile(self, fleet_id: Optional[str] = None) -> FleetProfile:
        """Profile for a fleet; unknown fleets share the default fleet's profile."""
        return self._fleets.get(fleet_id or self.DEFAULT_FLEET_ID) or self._fleets[self.DEFAULT_FLEET_ID]

    def increment_fleet_jobs_completed(self, fleet_id: Optional[str] = None) -> None:
        profile = self.get_fleet_profile(fleet_id)
        self._fleets[profile.fleet_id] = profile.model_copy(
            update={"total_jobs_completed": profile.total_jobs_completed + 1}
        )

    def reset(self, default_rating: float = 3.0) -> None:
        """Drop all data, keeping only a fresh default fleet."""
        self.__init__(default_rating=default_rating)
