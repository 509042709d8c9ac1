"""
Shared test fixtures.

Every engine in the suite runs against an in-memory repository, the
rule-based price recommender and a frozen clock so results are reproducible.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from src.acceptance.engine import QuoteAcceptanceEngine
from src.core.config import AcceptanceConfig, RateConfig
from src.data.models.load import Load, Location, VehicleType
from src.data.models.quote import Quote
from src.data.repository import InMemoryJobMarketRepository
from src.tools.price_recommender import RuleBasedPriceRecommender

FROZEN_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FROZEN_NOW


@pytest.fixture
def repository() -> InMemoryJobMarketRepository:
    return InMemoryJobMarketRepository(default_rating=4.2)


@pytest.fixture
def make_engine(now):
    """Build an engine over a repository, with or without price recommendations."""

    def _make(repository, with_recommender: bool = True) -> QuoteAcceptanceEngine:
        recommender = RuleBasedPriceRecommender(repository, rates=RateConfig()) if with_recommender else None
        return QuoteAcceptanceEngine(
            repository=repository,
            recommender=recommender,
            clock=lambda: now,
            acceptance_config=AcceptanceConfig(),
        )

    return _make


@pytest.fixture
def engine(repository, make_engine) -> QuoteAcceptanceEngine:
    return make_engine(repository)


@pytest.fixture
def add_load(repository):
    """Add a Birmingham → London rigid 18t load, overriding any field."""
    counter = itertools.count(1)

    def _add(repo=None, **kwargs) -> Load:
        defaults = {
            "load_id": f"LOAD-{next(counter):03d}",
            "load_poster_name": "Test",
            "origin": Location(city="Birmingham"),
            "destination": Location(city="London"),
            "distance_km": 163.5,
            "required_vehicle_type": VehicleType.RIGID_18T,
        }
        defaults.update(kwargs)
        return (repo or repository).add_load(Load(**defaults))

    return _add


@pytest.fixture
def add_quote(repository):
    """Add a sent quote for a load, overriding any field."""
    counter = itertools.count(1)

    def _add(load: Load, repo=None, **kwargs) -> Quote:
        defaults = {
            "quote_id": f"Q-{next(counter):03d}",
            "load_id": load.load_id,
            "quoted_price": 350.0,
            "associated_fleet_id": InMemoryJobMarketRepository.DEFAULT_FLEET_ID,
            "requested_vehicle_type": load.required_vehicle_type,
            "offered_vehicle_type": load.required_vehicle_type,
            "eta_to_collection": 60,
            "adr_certified": False,
        }
        defaults.update(kwargs)
        return (repo or repository).add_quote(Quote(**defaults))

    return _add


@pytest.fixture
def minutes_from_now(now):
    """Instant a number of minutes after the frozen clock."""

    def _at(minutes: int) -> datetime:
        return now + timedelta(minutes=minutes)

    return _at
