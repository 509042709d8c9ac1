"""Tests for the individual signal scorers."""

from datetime import timedelta

import pytest

from src.acceptance.signals import (
    absolute_price_score,
    benchmark_price_score,
    budget_price_score,
    eta_score,
    fleet_rating_score,
    vehicle_match_score,
    vehicle_preference_score,
)
from src.data.models.load import VehicleType
from src.data.models.quote import PriceRecommendation

REC = PriceRecommendation(min=85.0, mid=100.0, max=115.0)


class TestVehicleMatch:
    """Ordinal gradient and preference-list vehicle scoring."""

    @pytest.mark.parametrize(
        "requested,offered,expected",
        [
            (VehicleType.RIGID_18T, VehicleType.RIGID_18T, 1.0),
            (VehicleType.RIGID_18T, VehicleType.RIGID_26T, 0.9),
            (VehicleType.RIGID_18T, VehicleType.ARTICULATED, 0.75),
            (VehicleType.SMALL_VAN, VehicleType.LUTON, 0.6),
            (VehicleType.SMALL_VAN, VehicleType.RIGID_18T, 0.6),
            (VehicleType.ARTICULATED, VehicleType.SMALL_VAN, 0.0),
            (VehicleType.RIGID_18T, VehicleType.RIGID_7_5T, 0.0),
        ],
    )
    def test_gradient(self, requested, offered, expected):
        assert vehicle_match_score(requested, offered) == expected

    def test_preference_list_positions(self):
        prefs = [VehicleType.RIGID_18T, VehicleType.RIGID_26T, VehicleType.ARTICULATED, VehicleType.LUTON]
        assert vehicle_preference_score(prefs, VehicleType.RIGID_18T) == 1.0
        assert vehicle_preference_score(prefs, VehicleType.RIGID_26T) == 0.85
        assert vehicle_preference_score(prefs, VehicleType.ARTICULATED) == 0.7
        assert vehicle_preference_score(prefs, VehicleType.LUTON) == 0.7

    def test_preference_list_missing_vehicle(self):
        assert vehicle_preference_score([VehicleType.RIGID_18T], VehicleType.SMALL_VAN) == 0.0


class TestBenchmarkPrice:
    """Price scoring against a recommended range."""

    def test_at_or_below_mid(self):
        assert benchmark_price_score(100.0, REC) == 1.0
        assert benchmark_price_score(60.0, REC) == 1.0

    def test_suspiciously_cheap(self):
        # 0.6 * min = 51
        assert benchmark_price_score(50.0, REC) == 0.3

    def test_taper_to_max(self):
        assert benchmark_price_score(107.5, REC) == pytest.approx(0.85)
        assert benchmark_price_score(115.0, REC) == pytest.approx(0.7)

    def test_taper_to_double_max(self):
        assert benchmark_price_score(172.5, REC) == pytest.approx(0.35)
        assert benchmark_price_score(230.0, REC) == pytest.approx(0.0)

    def test_beyond_double_max(self):
        assert benchmark_price_score(300.0, REC) == 0.0

    def test_non_positive_price(self):
        assert benchmark_price_score(0.0, REC) == 0.0
        assert benchmark_price_score(-10.0, REC) == 0.0


class TestBudgetPrice:
    """Budget-aware price taper."""

    def test_at_or_below_mid(self):
        assert budget_price_score(100.0, 100.0, 200.0) == 1.0

    def test_halfway_to_budget(self):
        assert budget_price_score(150.0, 100.0, 200.0) == pytest.approx(0.75)

    def test_at_budget(self):
        assert budget_price_score(200.0, 100.0, 200.0) == pytest.approx(0.5)

    def test_over_budget(self):
        assert budget_price_score(201.0, 100.0, 200.0) == 0.0

    def test_budget_below_mid(self):
        assert budget_price_score(90.0, 100.0, 80.0) == 1.0


class TestAbsolutePrice:
    def test_no_recommendation(self):
        assert absolute_price_score(100.0, None) is None
        assert absolute_price_score(100.0, None, max_budget=150.0) is None

    def test_budget_selects_budget_strategy(self):
        assert absolute_price_score(115.0, REC, max_budget=130.0) == pytest.approx(0.75)

    def test_no_budget_selects_benchmark(self):
        assert absolute_price_score(115.0, REC) == pytest.approx(0.7)


class TestEta:
    """ETA scoring with and without a collection time."""

    @pytest.mark.parametrize(
        "eta,collection_in,expected",
        [
            (90, 120, 1.0),  # 30 minutes early
            (70, 60, 1.0),  # 10 minutes late, inside default grace
            (80, 60, 0.75),  # 20 late: halfway down the moderate band
            (90, 60, 0.5),  # 30 late: end of the moderate band
            (120, 60, 0.0),  # 60 late: end of the heavy band
            (180, 60, 0.0),
        ],
    )
    def test_collection_window(self, now, eta, collection_in, expected):
        score = eta_score(eta, 163.5, now=now, collection_time=now + timedelta(minutes=collection_in))
        assert score == pytest.approx(expected)

    def test_45_minutes_late(self, now):
        score = eta_score(105, 163.5, now=now, collection_time=now + timedelta(minutes=60))
        assert 0.0 < score < 0.3

    def test_custom_window_extends_grace(self, now):
        score = eta_score(
            85, 163.5, now=now, collection_time=now + timedelta(minutes=60), collection_window_minutes=30
        )
        assert score == 1.0

    def test_zero_window(self, now):
        score = eta_score(
            70, 163.5, now=now, collection_time=now + timedelta(minutes=60), collection_window_minutes=0
        )
        assert score == pytest.approx(0.75)

    def test_naive_collection_time_is_utc(self, now):
        naive = (now + timedelta(minutes=60)).replace(tzinfo=None)
        assert eta_score(70, 163.5, now=now, collection_time=naive) == 1.0

    def test_distance_heuristic(self, now):
        assert eta_score(160, 163.5, now=now) == 1.0
        assert eta_score(327, 163.5, now=now) == pytest.approx(0.5)
        assert eta_score(491, 163.5, now=now) == 0.0

    def test_distance_heuristic_minimum(self, now):
        # Short loads still allow 30 minutes
        assert eta_score(30, 5.0, now=now) == 1.0
        assert eta_score(45, 5.0, now=now) == pytest.approx(0.75)


class TestFleetRating:
    def test_normalised(self):
        assert fleet_rating_score(4.2) == pytest.approx(0.84)
        assert fleet_rating_score(5.0) == 1.0
        assert fleet_rating_score(0.0) == 0.0
