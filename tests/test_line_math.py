"""
Tests for over/under line and payout derivation
Run with: pytest tests/test_line_math.py -v
"""

import math
import sys

import pytest

from backend.core.line_math import (
    payout_multiplier,
    round1,
    round_half_away,
    suggest_line,
)
from backend.core.valuation import AllianceValuation, TeamInput, aggregate_alliance
from backend.core.valuation_config import ValuationConfig

CFG = ValuationConfig.default()

RED = [
    TeamInput("frc254", rank=1, epa=38.5, win_probability=0.78),
    TeamInput("frc1678", rank=3, epa=28.4, win_probability=0.62),
    TeamInput("frc971", rank=5, epa=15.2, win_probability=0.43),
]
BLUE = [
    TeamInput("frc1114", rank=2, epa=34.1, win_probability=0.73),
    TeamInput("frc2056", rank=4, epa=26.0, win_probability=0.59),
    TeamInput("frc148", rank=6, epa=14.9, win_probability=0.41),
]


def _alliance(value, epa):
    return AllianceValuation(alliance_value=value, alliance_epa=epa)


class TestRounding:
    """Ties round away from zero"""

    @pytest.mark.parametrize("x, places, expected", [
        (2.25, 1, 2.3),
        (-2.25, 1, -2.3),
        (78.55, 1, 78.6),
        (0.125, 2, 0.13),   # built-in round() gives 0.12
        (2.675, 2, 2.68),   # binary value is 2.67499999...
        (1.04, 1, 1.0),
        (-0.04, 1, -0.0),
        (0.0, 1, 0.0),
        (5.5, 0, 6.0),
        (-5.5, 0, -6.0),
    ])
    def test_round_half_away(self, x, places, expected):
        assert round_half_away(x, places) == expected

    def test_round1_is_idempotent(self):
        for x in (78.6, 0.1, -12.3, 1234.5):
            assert round1(round1(x)) == round1(x)

    @pytest.mark.parametrize("x", [1e308, -1e308, sys.float_info.max, math.inf, -math.inf])
    def test_values_too_large_to_scale_pass_through(self, x):
        assert round1(x) == x

    def test_nan_passes_through(self):
        assert math.isnan(round_half_away(math.nan, 2))


class TestSuggestLineExample:
    """The qm1 example alliances"""

    @pytest.fixture
    def suggestion(self):
        red = aggregate_alliance(RED, CFG)
        blue = aggregate_alliance(BLUE, CFG)
        return suggest_line(red, blue, CFG)

    def test_base_line(self, suggestion):
        # (82.1 + 75.0) / 2 = 78.55 → 78.6 (ties away from zero)
        assert suggestion.base_line == 78.6

    def test_per_alliance_lines(self, suggestion):
        # red holds ~51.1% of the value: +0.17 pts, blue the mirror image
        assert suggestion.per_alliance["red"].line == 78.8
        assert suggestion.per_alliance["blue"].line == 78.4

    def test_match_line(self, suggestion):
        assert suggestion.match_line == 78.6

    def test_payouts_floored(self, suggestion):
        assert suggestion.per_alliance["red"].payout_multiplier == 1.01
        assert suggestion.per_alliance["blue"].payout_multiplier == 1.01

    def test_alliance_values_echoed(self, suggestion):
        assert suggestion.per_alliance["red"].alliance_value == pytest.approx(13.8674, abs=1e-3)
        assert suggestion.per_alliance["blue"].alliance_value == pytest.approx(13.2749, abs=1e-3)

    def test_to_dict_shape(self, suggestion):
        d = suggestion.to_dict()
        assert d["base_line"] == 78.6
        assert set(d["per_alliance"]) == {"red", "blue"}
        assert set(d["per_alliance"]["red"]) == {"line", "alliance_value", "payout_multiplier"}


class TestSuggestLine:
    """General behaviour"""

    def test_equal_values_give_equal_lines(self):
        s = suggest_line(_alliance(12.0, 80.0), _alliance(12.0, 60.0), CFG)

        assert s.base_line == 70.0
        assert s.per_alliance["red"].line == s.per_alliance["blue"].line == s.base_line
        assert s.match_line == s.base_line

    def test_equal_values_give_minimum_payout(self):
        s = suggest_line(_alliance(9.0, 50.0), _alliance(9.0, 50.0), CFG)

        assert s.per_alliance["red"].payout_multiplier == 1.01
        assert s.per_alliance["blue"].payout_multiplier == 1.01

    def test_fully_lopsided_share_moves_line_ten_percent(self):
        s = suggest_line(_alliance(10.0, 50.0), _alliance(0.0, 50.0), CFG)

        assert s.base_line == 50.0
        assert s.per_alliance["red"].line == 55.0
        assert s.per_alliance["blue"].line == 45.0

    def test_underdog_gets_higher_payout(self):
        s = suggest_line(_alliance(12.0, 60.0), _alliance(4.0, 60.0), CFG)

        # avg 8 → blue: 1 + (1 - 0.5) * 0.5 = 1.25; red floored
        assert s.per_alliance["blue"].payout_multiplier == 1.25
        assert s.per_alliance["red"].payout_multiplier == 1.01

    def test_custom_side_labels(self):
        s = suggest_line(_alliance(3.0, 10.0), _alliance(3.0, 10.0), CFG, sides=("home", "away"))
        assert set(s.per_alliance) == {"home", "away"}

    def test_empty_alliances_do_not_raise(self):
        s = suggest_line(_alliance(0.0, 0.0), _alliance(0.0, 0.0), CFG)

        assert s.base_line == 0.0
        assert s.match_line == 0.0
        for line in s.per_alliance.values():
            assert math.isfinite(line.line)
            assert math.isfinite(line.payout_multiplier)
            assert line.payout_multiplier >= 1.01

    def test_negative_epa_gives_negative_line(self):
        s = suggest_line(_alliance(3.0, -12.0), _alliance(3.0, -8.0), CFG)
        assert s.base_line == -10.0

    def test_sensitivity_zero_pins_lines_to_base(self):
        cfg = ValuationConfig(line_sensitivity=0.0)
        s = suggest_line(_alliance(30.0, 70.0), _alliance(3.0, 70.0), cfg)
        assert s.per_alliance["red"].line == s.per_alliance["blue"].line == 70.0

    def test_idempotent(self):
        red = aggregate_alliance(RED, CFG)
        blue = aggregate_alliance(BLUE, CFG)
        assert suggest_line(red, blue, CFG) == suggest_line(red, blue, CFG)

    @pytest.mark.parametrize("epa", [1e308, -1e308])
    def test_huge_epa_alliances_stay_finite(self, epa):
        huge = [TeamInput("frc1", rank=1, epa=epa, win_probability=0.0),
                TeamInput("frc2", rank=1, epa=epa, win_probability=0.0)]
        s = suggest_line(aggregate_alliance(huge, CFG), aggregate_alliance(huge, CFG), CFG)

        assert math.isfinite(s.base_line)
        assert math.isfinite(s.match_line)
        for line in s.per_alliance.values():
            assert math.isfinite(line.line)
            assert math.isfinite(line.alliance_value)
            assert line.payout_multiplier >= 1.01

    def test_near_max_lines_do_not_overflow(self):
        big = sys.float_info.max
        s = suggest_line(_alliance(1e308, big), _alliance(1.0, big), CFG)

        assert s.base_line == big
        assert s.per_alliance["red"].line == big
        assert math.isfinite(s.match_line)


class TestPayoutMultiplier:
    """House floor of 1.01"""

    @pytest.mark.parametrize("a, b", [
        (1000.0, 1.0),
        (1.0, 1000.0),
        (1e9, 1.0),
        (3.0, 3.0),
        (0.0, 0.0),
        (0.0, 5.0),
    ])
    def test_never_below_floor(self, a, b):
        s = suggest_line(_alliance(a, 40.0), _alliance(b, 40.0), CFG)
        for line in s.per_alliance.values():
            assert line.payout_multiplier >= 1.01

    def test_extreme_skew_underdog(self):
        # avg = 500.5 → 1 + (1 - 1/500.5) * 0.5 ≈ 1.499
        assert payout_multiplier(1.0, 500.5, CFG) == 1.5

    def test_average_value_prices_at_floor(self):
        assert payout_multiplier(7.0, 7.0, CFG) == 1.01

    def test_zero_average_treated_as_one(self):
        assert payout_multiplier(0.0, 0.0, CFG) == 1.5

    def test_rounded_to_two_places(self):
        p = payout_multiplier(2.0, 3.0, CFG)  # 1 + (1/3) * 0.5 = 1.1666…
        assert p == 1.17

    def test_custom_floor(self):
        cfg = ValuationConfig(min_payout=1.1)
        assert payout_multiplier(5.0, 5.0, cfg) == 1.1
