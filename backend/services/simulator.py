"""
Random-match simulator for demoing and eyeballing the pricing pipeline.

Generates synthetic three-team alliances and runs each match through
predict_match().  Not used for any correctness-relevant decision.

Team generation:
    rank             uniform integer in [1, 8]
    epa              uniform in [-10, 50), rounded to 1 decimal
    win_probability  uniform in [0, 1], rounded to 2 decimals
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from backend.core.valuation import TeamInput
from backend.core.valuation_config import ValuationConfig
from backend.services.predictor import MatchPrediction, predict_match

logger = logging.getLogger(__name__)

ALLIANCE_SIZE = 3
MAX_RANK = 8
EPA_LOW = -10.0
EPA_HIGH = 50.0
TEAM_KEY_OFFSET = 1000


@dataclass
class SimulationSummary:
    """Aggregate view of a batch of simulated matches."""

    matches: int
    mean_match_line: float
    min_match_line: float
    max_match_line: float
    mean_red_payout: float
    mean_blue_payout: float
    red_favoured_pct: float  # share of matches where red out-values blue

    def to_dict(self) -> Dict:
        return {
            "matches": self.matches,
            "mean_match_line": self.mean_match_line,
            "min_match_line": self.min_match_line,
            "max_match_line": self.max_match_line,
            "mean_red_payout": self.mean_red_payout,
            "mean_blue_payout": self.mean_blue_payout,
            "red_favoured_pct": self.red_favoured_pct,
        }


def random_team(rng: np.random.Generator, index: int) -> TeamInput:
    """Draw one synthetic team.  ``index`` only determines the team key."""
    rank = int(rng.integers(1, MAX_RANK + 1))
    epa = round(float(rng.uniform(EPA_LOW, EPA_HIGH)), 1)
    win_prob = round(float(rng.uniform(0.0, 1.0)), 2)
    return TeamInput(
        team_key=f"frc{TEAM_KEY_OFFSET + index}",
        rank=rank,
        epa=epa,
        win_probability=win_prob,
    )


def simulate_matches(
    n: int,
    config: ValuationConfig,
    seed: Optional[int] = None,
) -> List[MatchPrediction]:
    """
    Simulate ``n`` random matches.

    Each match draws six fresh team indices, so no team key repeats within
    a batch.  Passing ``seed`` makes the batch reproducible.

    Raises:
        ValueError: if n is negative.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")

    rng = np.random.default_rng(seed)
    results: List[MatchPrediction] = []
    per_match = ALLIANCE_SIZE * 2

    for i in range(n):
        base = i * per_match
        red = [random_team(rng, base + k) for k in range(ALLIANCE_SIZE)]
        blue = [random_team(rng, base + ALLIANCE_SIZE + k) for k in range(ALLIANCE_SIZE)]
        results.append(predict_match(f"sim{i + 1}", red, blue, config))

    logger.info("Simulated %d matches (seed=%s)", n, seed)
    return results


def summarize(predictions: List[MatchPrediction]) -> SimulationSummary:
    """Summarise a batch of predictions.  An empty batch yields all zeros."""
    if not predictions:
        return SimulationSummary(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    lines = np.array([p.suggestion.match_line for p in predictions])
    red_payouts = np.array(
        [p.suggestion.per_alliance["red"].payout_multiplier for p in predictions]
    )
    blue_payouts = np.array(
        [p.suggestion.per_alliance["blue"].payout_multiplier for p in predictions]
    )
    red_favoured = np.array(
        [p.red.alliance_value > p.blue.alliance_value for p in predictions]
    )

    return SimulationSummary(
        matches=len(predictions),
        mean_match_line=round(float(lines.mean()), 2),
        min_match_line=float(lines.min()),
        max_match_line=float(lines.max()),
        mean_red_payout=round(float(red_payouts.mean()), 3),
        mean_blue_payout=round(float(blue_payouts.mean()), 3),
        red_favoured_pct=round(float(red_favoured.mean()) * 100, 1),
    )
