"""Over/under line and payout derivation from two alliance valuations.

All functions here are **pure**: no I/O, no logging.

The match line starts from the mean alliance EPA and is nudged per alliance
by its share of the combined value::

    base_line = round1((epa_a + epa_b) / 2)
    delta_i   = (share_i − 0.5) × line_sensitivity × base_line
    line_i    = round1(base_line + delta_i)
    match     = round1((line_a + line_b) / 2)

With the default sensitivity of 0.2 a fully lopsided share (1.0) moves a
line by at most ±10% of the base line.

Payouts reward the alliance valued below average::

    payout_i = max(min_payout, 1 + (1 − value_i / avg_value) × payout_sensitivity)

An alliance at exactly the average value prices at 1.0 before the floor,
so the effective minimum is ``min_payout`` (1.01).  Strong favourites are
floored rather than priced below it.

Rounding
--------
Python's built-in :func:`round` rounds half to even.  Lines and payouts
here use :func:`round_half_away` instead (``2.25 → 2.3``, ``-2.25 → -2.3``),
which is what bettors expect from a published line.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping

from backend.core.valuation import AllianceValuation, clamp_finite
from backend.core.valuation_config import ValuationConfig


#: Default alliance labels, in (side_a, side_b) order.
DEFAULT_SIDES: tuple[str, str] = ("red", "blue")


def round_half_away(x: float, places: int = 0) -> float:
    """Round ``x`` to ``places`` decimals, ties away from zero.

    The scaled value is first rounded to 9 decimals so that binary
    representation noise (``78.55 * 10 == 785.4999…``) does not flip a
    decimal tie.  Non-finite input, and values too large to scale, are
    returned unchanged; a float that large has no fractional part.
    """
    scale = 10 ** places
    scaled = abs(x) * scale
    if not math.isfinite(scaled):
        return x
    scaled = round(scaled, 9)
    return math.copysign(math.floor(scaled + 0.5), x) / scale


def round1(x: float) -> float:
    """Round to one decimal place, ties away from zero."""
    return round_half_away(x, 1)


@dataclass(frozen=True, slots=True)
class AllianceLine:
    """Per-alliance line and pricing."""

    line: float
    alliance_value: float
    payout_multiplier: float

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "alliance_value": self.alliance_value,
            "payout_multiplier": self.payout_multiplier,
        }


@dataclass(frozen=True)
class LineSuggestion:
    """Suggested match line plus per-alliance lines and payouts."""

    base_line: float
    match_line: float
    per_alliance: Mapping[str, AllianceLine] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "base_line": self.base_line,
            "match_line": self.match_line,
            "per_alliance": {
                side: line.to_dict() for side, line in self.per_alliance.items()
            },
        }


def payout_multiplier(
    alliance_value: float,
    avg_value: float,
    config: ValuationConfig,
) -> float:
    """Price one alliance relative to the match-average value.

    ``avg_value`` of zero is treated as 1.  The floor is applied both
    before and after rounding so a rounded result never dips under it.

    Returns:
        Payout multiplier rounded to 2 decimals, ``>= config.min_payout``.
    """
    if avg_value == 0:
        avg_value = 1.0
    payout = 1.0 + (1.0 - alliance_value / avg_value) * config.payout_sensitivity
    payout = max(config.min_payout, payout)
    return max(config.min_payout, round_half_away(payout, 2))


def suggest_line(
    side_a: AllianceValuation,
    side_b: AllianceValuation,
    config: ValuationConfig,
    sides: tuple[str, str] = DEFAULT_SIDES,
) -> LineSuggestion:
    """Derive the match line and per-alliance payouts for two alliances.

    Args:
        side_a: Valuation of the first alliance (red by default).
        side_b: Valuation of the second alliance (blue by default).
        config: Valuation constants (sensitivities, payout floor).
        sides: Labels for ``side_a`` and ``side_b`` in the result mapping.

    Returns:
        :class:`LineSuggestion`.  Zero total value (two empty alliances) is
        handled by treating the denominator as 1; no finite input raises
        or yields a non-finite line.

    Examples::

        Two alliances of equal value → line_a == line_b == base_line,
        both payouts == 1.01.
    """
    label_a, label_b = sides

    # Halve before adding so two near-max EPAs cannot overflow the mean
    base_line = round1(side_a.alliance_epa / 2 + side_b.alliance_epa / 2)

    total_value = clamp_finite(side_a.alliance_value + side_b.alliance_value)
    denominator = total_value if total_value != 0 else 1.0
    share_a = side_a.alliance_value / denominator
    share_b = side_b.alliance_value / denominator

    delta_a = (share_a - 0.5) * config.line_sensitivity * base_line
    delta_b = (share_b - 0.5) * config.line_sensitivity * base_line

    line_a = round1(clamp_finite(base_line + delta_a))
    line_b = round1(clamp_finite(base_line + delta_b))
    match_line = round1(line_a / 2 + line_b / 2)

    avg_value = total_value / 2

    return LineSuggestion(
        base_line=base_line,
        match_line=match_line,
        per_alliance={
            label_a: AllianceLine(
                line=line_a,
                alliance_value=side_a.alliance_value,
                payout_multiplier=payout_multiplier(side_a.alliance_value, avg_value, config),
            ),
            label_b: AllianceLine(
                line=line_b,
                alliance_value=side_b.alliance_value,
                payout_multiplier=payout_multiplier(side_b.alliance_value, avg_value, config),
            ),
        },
    )
