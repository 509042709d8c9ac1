"""Tests for composite scoring and competitive blending."""

from decimal import Decimal

import pytest

from src.acceptance.competition import CompetitionContext, ScoringMode, select_mode
from src.acceptance.composite import build_breakdown, compute_composite, meets_threshold, round4
from src.core.config import AcceptanceConfig
from src.data.models.quote import Quote, ScoreBreakdown


def make_quote(quote_id: str, price: float, eta: int) -> Quote:
    return Quote(
        quote_id=quote_id,
        load_id="LOAD-001",
        quoted_price=price,
        associated_fleet_id="fleet-001",
        eta_to_collection=eta,
    )


class TestComposite:
    """Weighted composite and rounding."""

    def test_weights(self):
        assert compute_composite(1.0, 1.0, 1.0, 1.0) == 1.0
        assert compute_composite(1.0, 0.0, 0.0, 0.0) == 0.4
        assert compute_composite(0.0, 1.0, 0.0, 0.0) == 0.25
        assert compute_composite(0.0, 0.0, 1.0, 0.0) == 0.15
        assert compute_composite(0.0, 0.0, 0.0, 1.0) == 0.2

    def test_components_rounded_before_weighting(self):
        breakdown = build_breakdown(0.91558, 1.0, 0.84, 1.0)
        assert breakdown.price_score == 0.9156
        assert breakdown.composite_score == 0.9422

    def test_rounding_is_half_up(self):
        assert round4(0.00005) == Decimal("0.0001")
        assert round4(0.12345) == Decimal("0.1235")

    def test_composite_reproducible_from_components(self):
        breakdown = build_breakdown(0.6833, 0.8137, 0.84, 0.75)
        recomputed = compute_composite(
            breakdown.price_score,
            breakdown.eta_score,
            breakdown.fleet_rating_score,
            breakdown.vehicle_match,
        )
        assert recomputed == breakdown.composite_score

    def test_breakdown_is_frozen(self):
        breakdown = build_breakdown(1.0, 1.0, 1.0, 1.0)
        with pytest.raises(Exception):
            breakdown.composite_score = 0.5

    def test_zero_breakdown(self):
        zero = ScoreBreakdown.zero()
        assert zero.composite_score == 0.0
        assert zero.price_score == zero.eta_score == zero.fleet_rating_score == zero.vehicle_match == 0.0

    def test_threshold_comparison(self):
        assert meets_threshold(build_breakdown(0.425, 1.0, 0.6, 0.5), 0.61)
        assert meets_threshold(build_breakdown(1.0, 1.0, 0.0, 0.75), 0.70)
        assert not meets_threshold(build_breakdown(0.9998, 1.0, 0.0, 0.75), 0.80)


class TestCompetitionContext:
    """Sole-bidder vs. competitive blending."""

    def test_sole_bidder_context_is_empty(self):
        context = CompetitionContext.from_quotes([make_quote("Q-1", 350.0, 90)])
        assert not context.is_competitive
        assert context.blend_price(0.9, 350.0) == 0.9
        assert context.blend_price(None, 350.0) == 0.7
        assert context.blend_eta(0.8, 90) == 0.8

    def test_relative_ranks(self):
        context = CompetitionContext.from_quotes(
            [make_quote("Q-1", 350.0, 90), make_quote("Q-2", 400.0, 120), make_quote("Q-3", 375.0, 105)]
        )
        assert context.is_competitive
        assert context.relative_price(350.0) == 1.0
        assert context.relative_price(400.0) == 0.0
        assert context.relative_price(375.0) == pytest.approx(0.5)
        assert context.relative_eta(105) == pytest.approx(0.5)

    def test_blend_is_sixty_forty(self):
        context = CompetitionContext.from_quotes([make_quote("Q-1", 350.0, 90), make_quote("Q-2", 400.0, 120)])
        assert context.blend_price(0.5, 350.0) == pytest.approx(0.7)
        assert context.blend_price(0.5, 400.0) == pytest.approx(0.3)
        assert context.blend_eta(1.0, 120) == pytest.approx(0.6)

    def test_identical_prices_skip_relative(self):
        context = CompetitionContext.from_quotes([make_quote("Q-1", 350.0, 90), make_quote("Q-2", 350.0, 120)])
        assert context.relative_price(350.0) is None
        assert context.blend_price(0.6833, 350.0) == 0.6833
        assert context.blend_price(None, 350.0) == 0.7

    def test_no_recommendation_uses_rank_alone(self):
        context = CompetitionContext.from_quotes([make_quote("Q-1", 350.0, 90), make_quote("Q-2", 400.0, 120)])
        assert context.blend_price(None, 350.0) == 1.0
        assert context.blend_price(None, 400.0) == 0.0


class TestModeSelection:
    def test_sole_bidder(self):
        selection = select_mode([make_quote("Q-1", 350.0, 90)], AcceptanceConfig())
        assert selection.mode == ScoringMode.SOLE_BIDDER
        assert selection.threshold == 0.60

    def test_competitive(self):
        selection = select_mode(
            [make_quote("Q-1", 350.0, 90), make_quote("Q-2", 400.0, 120)], AcceptanceConfig()
        )
        assert selection.mode == ScoringMode.COMPETITIVE
        assert selection.threshold == 0.70
