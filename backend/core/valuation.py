"""Team and alliance valuation — the single source of truth for team value.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement the value formula in services.

A team's value rewards the underdog / high-performer combination::

    epa_factor      = max(floor, epa / epa_scale)
    rank_multiplier = rank_multipliers.get(rank, 1.0)
    win_factor      = 1 / (win_probability + ε)
    raw_value       = epa_factor × rank_multiplier × win_factor
    value           = max(min_value, raw_value)

An alliance's value is the plain sum of its team values.

Design decisions
----------------
* The full factor breakdown is returned with every value.  Callers (the
  API, the dashboard) must be able to audit how a value was derived, so
  :class:`TeamValuation` is a transparent record rather than a bare float.
* Inputs are **not** validated or clamped.  Ranks outside the multiplier
  table fall back to the default multiplier, win probabilities outside
  ``[0, 1]`` flow through the formula, and any resulting raw value below
  the floor is clamped.  Shape validation belongs to the request layer.
* The floor is a one-sided ``max``: values above it are never scaled down.
* Factors and sums are capped at ``±sys.float_info.max``, so every output
  stays finite for finite input.

Run tests with::

    pytest tests/test_valuation.py -v
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

from backend.core.valuation_config import ValuationConfig

_FLOAT_MAX = sys.float_info.max


def clamp_finite(x: float) -> float:
    """Cap an overflowed float at the largest finite value of the same sign."""
    if math.isinf(x):
        return math.copysign(_FLOAT_MAX, x)
    return x


# ---------------------------------------------------------------------------
# Data transfer objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TeamInput:
    """Raw per-team signals for one match.

    Attributes:
        team_key: Team identifier (e.g. ``"frc254"``).  Not used in the math.
        rank: Event ranking position, 1 = best.  ``None`` means unknown.
        epa: Expected Points Added.  May be negative; ``None`` counts as 0.
        win_probability: Predicted probability the team's alliance wins.
            ``None`` means the config's default win probability is used.
    """

    team_key: str = ""
    rank: Optional[int] = None
    epa: Optional[float] = None
    win_probability: Optional[float] = None


@dataclass(frozen=True, slots=True)
class TeamValuation:
    """Full breakdown of a single team's value."""

    team_key: str
    epa_factor: float
    rank_multiplier: float
    win_factor: float
    raw_value: float
    value: float

    def to_dict(self) -> dict:
        return {
            "raw_value": self.raw_value,
            "value": self.value,
            "components": {
                "epa_factor": self.epa_factor,
                "rank_multiplier": self.rank_multiplier,
                "win_factor": self.win_factor,
            },
        }


@dataclass(frozen=True, slots=True)
class AllianceValuation:
    """Summed valuation for one alliance.

    ``inputs`` and ``teams`` are index-aligned: ``teams[i]`` is the
    valuation of ``inputs[i]``.  Mismatched lengths are rejected.
    """

    inputs: tuple[TeamInput, ...] = field(default_factory=tuple)
    teams: tuple[TeamValuation, ...] = field(default_factory=tuple)
    alliance_value: float = 0.0
    alliance_epa: float = 0.0

    def __post_init__(self) -> None:
        if len(self.inputs) != len(self.teams):
            raise ValueError(
                f"inputs and teams must align: {len(self.inputs)} != {len(self.teams)}"
            )

    def to_dict(self) -> dict:
        return {
            "teams": [
                {
                    "team_key": inp.team_key,
                    "rank": inp.rank,
                    "epa": inp.epa,
                    "win_prob": inp.win_probability,
                    "computed": val.to_dict(),
                }
                for inp, val in zip(self.inputs, self.teams, strict=True)
            ],
            "alliance_value": self.alliance_value,
            "alliance_epa": self.alliance_epa,
        }


# ---------------------------------------------------------------------------
# Valuation
# ---------------------------------------------------------------------------


def valuate_team(team: TeamInput, config: ValuationConfig) -> TeamValuation:
    """Map one team's (rank, EPA, win probability) to a scalar value.

    Lower win probability and higher EPA both raise the value; the rank
    multiplier adds a small bonus for top-ranked teams.

    The function is total over finite inputs.  The only singular point of
    the formula, ``win_probability == -ε``, is guarded by falling back to
    ``ε`` alone as the denominator.  Factors that overflow are capped at
    the largest finite float.

    Args:
        team: Raw team signals.  Absent fields use defaults.
        config: Valuation constants.

    Returns:
        :class:`TeamValuation` with every intermediate factor.

    Examples::

        valuate_team(TeamInput("frc254", 1, 38.5, 0.78), cfg).value  →  5.42
        valuate_team(TeamInput("frc1", 8, -5.0, 0.9), cfg).value     →  1.0 (floor)
    """
    epa = team.epa if team.epa is not None else 0.0
    win_prob = (
        team.win_probability
        if team.win_probability is not None
        else config.default_win_probability
    )

    epa_factor = clamp_finite(max(config.epa_factor_floor, epa / config.epa_scale))
    rank_multiplier = config.rank_multiplier(team.rank)

    denominator = win_prob + config.epsilon
    if denominator == 0.0:
        denominator = config.epsilon
    win_factor = clamp_finite(1.0 / denominator)

    raw_value = clamp_finite(epa_factor * rank_multiplier * win_factor)
    value = max(config.min_value, raw_value)

    return TeamValuation(
        team_key=team.team_key,
        epa_factor=epa_factor,
        rank_multiplier=rank_multiplier,
        win_factor=win_factor,
        raw_value=raw_value,
        value=value,
    )


def aggregate_alliance(
    teams: Sequence[TeamInput],
    config: ValuationConfig,
) -> AllianceValuation:
    """Value every team in an alliance and sum the results.

    FRC alliances have three teams, but any length is accepted.  An empty
    sequence yields an alliance value and EPA of 0.

    Returns:
        :class:`AllianceValuation` with per-team breakdowns in input order.
    """
    inputs = tuple(teams)
    valuations = tuple(valuate_team(t, config) for t in inputs)
    return AllianceValuation(
        inputs=inputs,
        teams=valuations,
        alliance_value=clamp_finite(sum((v.value for v in valuations), 0.0)),
        alliance_epa=clamp_finite(sum((t.epa or 0.0 for t in inputs), 0.0)),
    )
