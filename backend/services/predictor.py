"""
Match prediction pipeline.

TeamInput (per team) → valuate_team → aggregate_alliance (per alliance)
→ suggest_line (pairwise) → MatchPrediction.

Stateless: the only input besides the teams is the immutable config.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from backend.core.line_math import LineSuggestion, suggest_line
from backend.core.valuation import AllianceValuation, TeamInput, aggregate_alliance
from backend.core.valuation_config import ValuationConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchPrediction:
    match_id: Optional[str]
    red: AllianceValuation
    blue: AllianceValuation
    suggestion: LineSuggestion

    def to_dict(self) -> Dict:
        return {
            "match_id": self.match_id,
            "red": self.red.to_dict(),
            "blue": self.blue.to_dict(),
            "suggestion": self.suggestion.to_dict(),
        }


def predict_match(
    match_id: Optional[str],
    red: Iterable[TeamInput],
    blue: Iterable[TeamInput],
    config: ValuationConfig,
) -> MatchPrediction:
    """Value both alliances and derive the line for one match."""
    red_val = aggregate_alliance(list(red), config)
    blue_val = aggregate_alliance(list(blue), config)
    suggestion = suggest_line(red_val, blue_val, config)

    logger.info(
        "Predicted %s: red %.3f vs blue %.3f, base line %.1f, match line %.1f",
        match_id,
        red_val.alliance_value,
        blue_val.alliance_value,
        suggestion.base_line,
        suggestion.match_line,
    )

    return MatchPrediction(
        match_id=match_id,
        red=red_val,
        blue=blue_val,
        suggestion=suggestion,
    )
