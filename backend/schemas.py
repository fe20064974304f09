"""
Pydantic request/response schemas for the FRC line maker API.

Structural validation (required fields, enum values, positive stakes) happens
here so the pricing core only ever sees well-shaped inputs.  The core itself
tolerates any finite numeric values, so ranks and win probabilities are not
range-checked.  Infinity and NaN are rejected.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from backend.core.valuation import TeamInput


# ---------------------------------------------------------------------------
# Prediction
# ---------------------------------------------------------------------------

class TeamIn(BaseModel):
    """One team's signals as supplied by the caller."""

    team_key: str = Field("", max_length=32, description='e.g. "frc254"')
    rank: Optional[int] = Field(None, description="Event rank, 1 = best")
    epa: Optional[float] = Field(
        None, allow_inf_nan=False, description="Expected Points Added"
    )
    win_prob: Optional[float] = Field(
        None, allow_inf_nan=False, description="Predicted win probability"
    )

    def to_team_input(self) -> TeamInput:
        return TeamInput(
            team_key=self.team_key,
            rank=self.rank,
            epa=self.epa,
            win_probability=self.win_prob,
        )


class AlliancesIn(BaseModel):
    red: list[TeamIn]
    blue: list[TeamIn]


class PredictRequest(BaseModel):
    """Payload for POST /predict."""

    match_id: Optional[str] = Field(None, max_length=64)
    alliances: AlliancesIn

    model_config = {
        "json_schema_extra": {
            "example": {
                "match_id": "qm1",
                "alliances": {
                    "red": [
                        {"team_key": "frc254", "rank": 1, "epa": 38.5, "win_prob": 0.78},
                        {"team_key": "frc1678", "rank": 3, "epa": 28.4, "win_prob": 0.62},
                        {"team_key": "frc971", "rank": 5, "epa": 15.2, "win_prob": 0.43},
                    ],
                    "blue": [
                        {"team_key": "frc1114", "rank": 2, "epa": 34.1, "win_prob": 0.73},
                        {"team_key": "frc2056", "rank": 4, "epa": 26.0, "win_prob": 0.59},
                        {"team_key": "frc148", "rank": 6, "epa": 14.9, "win_prob": 0.41},
                    ],
                },
            }
        }
    }


# ---------------------------------------------------------------------------
# Bets
# ---------------------------------------------------------------------------

class BetCreate(BaseModel):
    """Payload for POST /bet."""

    user: str = Field(..., min_length=1, max_length=64)
    match_id: str = Field(..., min_length=1, max_length=64)
    alliance: Literal["red", "blue"]
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Stake")
    type: Literal["over", "under"] = Field(..., description="Side of the line")
    line: Optional[float] = Field(
        None, allow_inf_nan=False, description="Line the bet was taken at"
    )

    @field_validator("amount")
    @classmethod
    def round_amount(cls, v: float) -> float:
        # Runs after gt=0, so a sub-cent stake must be re-checked once rounded
        v = round(v, 2)
        if v <= 0:
            raise ValueError("amount must be at least 0.01")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "user": "alice",
                "match_id": "qm1",
                "alliance": "red",
                "amount": 25.0,
                "type": "over",
                "line": 78.6,
            }
        }
    }


class BetOut(BaseModel):
    id: int
    user: str
    match_id: str
    alliance: str
    amount: float
    type: str
    line: Optional[float]
    time: str


class BetResponse(BaseModel):
    """Response for POST /bet."""
    status: str
    bet: BetOut


class BetsResponse(BaseModel):
    """Response for GET /bets."""
    count: int
    bets: list[BetOut]


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

class SimulateRequest(BaseModel):
    """Payload for POST /simulate."""

    n: int = Field(10, ge=0, le=1000, description="Number of random matches")
    seed: Optional[int] = Field(None, description="RNG seed for reproducible runs")
