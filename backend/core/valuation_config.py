"""Valuation configuration — every tunable constant in one place.

This module is the **registry** for the constants that drive team valuation,
line derivation and payout pricing.  Nowhere else in the codebase should the
rank-multiplier table, EPA scale or payout floor be hard-coded.

Architecture
------------
:class:`ValuationConfig` is a frozen dataclass built once at process start
and passed explicitly into every core call.  There is no module-level mutable
state: two configs can coexist in the same process (e.g. an A/B comparison
in a script) without interfering.

Typical usage::

    from backend.core.valuation_config import ValuationConfig

    cfg = ValuationConfig.from_env()
    valuation = valuate_team(team, cfg)

    # Override a single constant for a tuning run:
    from dataclasses import replace
    custom_cfg = replace(cfg, epa_scale=12.5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Mapping, Optional

from dotenv import load_dotenv


#: Default rank multipliers.  Rank 1 earns a 10% bonus, decaying gently to
#: rank 8.  Any rank outside the table falls back to
#: :attr:`ValuationConfig.default_rank_multiplier`.
DEFAULT_RANK_MULTIPLIERS: Final[Mapping[int, float]] = MappingProxyType({
    1: 1.10,
    2: 1.08,
    3: 1.06,
    4: 1.04,
    5: 1.02,
    6: 1.01,
    7: 1.005,
    8: 1.001,
})


def parse_rank_multipliers(text: str) -> dict[int, float]:
    """Parse a ``"1:1.10,2:1.08"`` string into a rank → multiplier dict.

    Whitespace around entries is ignored and empty entries are skipped, so
    a trailing comma is harmless.

    Raises:
        ValueError: If an entry is not of the form ``rank:multiplier``.
    """
    table: dict[int, float] = {}
    for entry in text.split(","):
        entry = entry.strip()
        if not entry:
            continue
        rank_str, sep, mult_str = entry.partition(":")
        if not sep:
            raise ValueError(
                f"Invalid rank multiplier entry {entry!r}: expected 'rank:multiplier'."
            )
        table[int(rank_str.strip())] = float(mult_str.strip())
    return table


@dataclass(frozen=True)
class ValuationConfig:
    """Immutable configuration bundle for the valuation pipeline.

    Attributes:
        rank_multipliers: Read-only rank → multiplier table.  Only small
            positive ranks are expected; the table has no upper bound.
        default_rank_multiplier: Multiplier for a rank missing from the
            table (including an absent rank).
        epa_scale: Divisor that maps a raw EPA onto a factor near 1.  An
            EPA equal to ``epa_scale`` yields an EPA factor of exactly 1.
        epa_factor_floor: Lower bound on the EPA factor so that zero or
            negative EPA never drives a team's product to zero.
        epsilon: Added to the win probability before inversion so a
            win probability of 0 still yields a finite win factor.
        min_value: Floor applied to every team value.
        line_sensitivity: How far a fully lopsided value share moves an
            alliance line, as a fraction of the base line (0.2 → ±10%).
        payout_sensitivity: Scale applied to an alliance's relative value
            deficit when pricing its payout multiplier.
        min_payout: House floor on any payout multiplier.
        default_win_probability: Win probability assumed for a team that
            does not report one.
    """

    rank_multipliers: Mapping[int, float] = field(
        default_factory=lambda: dict(DEFAULT_RANK_MULTIPLIERS)
    )
    default_rank_multiplier: float = 1.0
    epa_scale: float = 10.0
    epa_factor_floor: float = 0.01
    epsilon: float = 0.001
    min_value: float = 1.0
    line_sensitivity: float = 0.2
    payout_sensitivity: float = 0.5
    min_payout: float = 1.01
    default_win_probability: float = 0.5

    def __post_init__(self) -> None:
        if self.epa_scale <= 0:
            raise ValueError(f"epa_scale must be > 0, got {self.epa_scale!r}.")
        if self.epa_factor_floor <= 0:
            raise ValueError(
                f"epa_factor_floor must be > 0, got {self.epa_factor_floor!r}."
            )
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be > 0, got {self.epsilon!r}.")
        if self.line_sensitivity < 0 or self.payout_sensitivity < 0:
            raise ValueError("line_sensitivity and payout_sensitivity must be >= 0.")
        if self.min_payout < 1.0:
            raise ValueError(
                f"min_payout must be >= 1.0 (house never pays below stake), "
                f"got {self.min_payout!r}."
            )
        for rank in self.rank_multipliers:
            if rank < 1:
                raise ValueError(f"rank_multipliers keys must be >= 1, got {rank!r}.")
        # Freeze the table itself, not just the attribute binding.
        object.__setattr__(
            self, "rank_multipliers", MappingProxyType(dict(self.rank_multipliers))
        )

    # ------------------------------------------------------------------ #
    #  Named constructors                                                  #
    # ------------------------------------------------------------------ #

    @classmethod
    def default(cls) -> ValuationConfig:
        """Return the canonical configuration."""
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ValuationConfig:
        """Build a config from environment variables, falling back to defaults.

        Recognised variables: ``EPA_SCALE``, ``WIN_PROB_EPSILON``,
        ``MIN_TEAM_VALUE``, ``MIN_PAYOUT``, ``LINE_SENSITIVITY`` and
        ``RANK_MULTIPLIERS`` (see :func:`parse_rank_multipliers`).  A
        ``.env`` file is loaded first when reading the process environment.

        Args:
            environ: Mapping to read instead of ``os.environ``.  Used by tests.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        overrides: dict = {}
        float_vars = {
            "EPA_SCALE": "epa_scale",
            "WIN_PROB_EPSILON": "epsilon",
            "MIN_TEAM_VALUE": "min_value",
            "MIN_PAYOUT": "min_payout",
            "LINE_SENSITIVITY": "line_sensitivity",
        }
        for var, attr in float_vars.items():
            raw = environ.get(var)
            if raw:
                overrides[attr] = float(raw)

        raw_table = environ.get("RANK_MULTIPLIERS")
        if raw_table:
            overrides["rank_multipliers"] = parse_rank_multipliers(raw_table)

        return cls(**overrides)

    # ------------------------------------------------------------------ #
    #  Convenience accessors                                               #
    # ------------------------------------------------------------------ #

    def rank_multiplier(self, rank: Optional[int]) -> float:
        """Return the multiplier for ``rank``, or the fallback if unknown."""
        if rank is None:
            return self.default_rank_multiplier
        return self.rank_multipliers.get(rank, self.default_rank_multiplier)

    def to_dict(self) -> dict:
        return {
            "rank_multipliers": {str(k): v for k, v in sorted(self.rank_multipliers.items())},
            "default_rank_multiplier": self.default_rank_multiplier,
            "epa_scale": self.epa_scale,
            "epa_factor_floor": self.epa_factor_floor,
            "epsilon": self.epsilon,
            "min_value": self.min_value,
            "line_sensitivity": self.line_sensitivity,
            "payout_sensitivity": self.payout_sensitivity,
            "min_payout": self.min_payout,
            "default_win_probability": self.default_win_probability,
        }

    def __repr__(self) -> str:
        return (
            f"ValuationConfig(epa_scale={self.epa_scale}, "
            f"epsilon={self.epsilon}, min_value={self.min_value}, "
            f"min_payout={self.min_payout})"
        )
