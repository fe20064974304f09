"""
FastAPI application for the FRC line maker
Exposes prediction, bet ledger, and simulation endpoints
"""

from fastapi import FastAPI, Depends, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging
import os

from backend.core.valuation_config import ValuationConfig
from backend.services.bet_ledger import BetLedger, BetNotFoundError, get_bet_ledger
from backend.services.predictor import predict_match
from backend.services.simulator import simulate_matches, summarize
from backend.schemas import (
    BetCreate,
    BetResponse,
    BetsResponse,
    PredictRequest,
    SimulateRequest,
)

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

APP_NAME = "FRC Line Maker"
APP_VERSION = "1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Config is read once and stays immutable for the life of the process
    app.state.config = ValuationConfig.from_env()
    logger.info("Starting %s with %r", APP_NAME, app.state.config)

    yield

    logger.info("Shutting down %s (%d bets recorded)", APP_NAME, len(get_bet_ledger()))


app = FastAPI(
    title=APP_NAME,
    description="Over/under lines and payouts for FRC matches from EPA, rank and win probability",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:8501"],  # Streamlit
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_config(request: Request) -> ValuationConfig:
    config = getattr(request.app.state, "config", None)
    if config is None:
        # Lifespan did not run (e.g. a bare TestClient without a context manager)
        config = ValuationConfig.from_env()
        request.app.state.config = config
    return config


def get_ledger() -> BetLedger:
    return get_bet_ledger()


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """App banner"""
    return {
        "app": APP_NAME,
        "version": APP_VERSION,
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "now": datetime.now(timezone.utc).isoformat()}


@app.get("/config")
async def get_valuation_config(config: ValuationConfig = Depends(get_config)):
    """Return the valuation constants in effect."""
    return config.to_dict()


# ============================================================================
# PREDICTIONS
# ============================================================================

@app.post("/predict")
async def predict(
    payload: PredictRequest,
    config: ValuationConfig = Depends(get_config),
):
    """
    Value both alliances and suggest an over/under line.

    Every team in the response carries its computed breakdown
    (epa_factor, rank_multiplier, win_factor) alongside the final value.
    """
    prediction = predict_match(
        payload.match_id,
        [t.to_team_input() for t in payload.alliances.red],
        [t.to_team_input() for t in payload.alliances.blue],
        config,
    )
    return prediction.to_dict()


@app.post("/simulate")
async def simulate(
    payload: Optional[SimulateRequest] = None,
    config: ValuationConfig = Depends(get_config),
):
    """Run the prediction pipeline over N randomly generated matches (demo)."""
    payload = payload or SimulateRequest()
    results = simulate_matches(payload.n, config, seed=payload.seed)
    return {
        "results": [
            {
                "match": p.match_id,
                "red": p.red.to_dict(),
                "blue": p.blue.to_dict(),
                "suggestion": p.suggestion.to_dict(),
            }
            for p in results
        ],
        "summary": summarize(results).to_dict(),
    }


# ============================================================================
# BETS
# ============================================================================

@app.post("/bet", response_model=BetResponse)
async def place_bet(
    bet_data: BetCreate,
    ledger: BetLedger = Depends(get_ledger),
):
    """Record a bet in the ledger."""
    bet = ledger.place(
        user=bet_data.user,
        match_id=bet_data.match_id,
        alliance=bet_data.alliance,
        amount=bet_data.amount,
        bet_type=bet_data.type,
        line=bet_data.line,
    )
    return {"status": "ok", "bet": bet.to_dict()}


@app.get("/bets", response_model=BetsResponse)
async def list_bets(
    match_id: Optional[str] = Query(default=None),
    user: Optional[str] = Query(default=None),
    ledger: BetLedger = Depends(get_ledger),
):
    """List placed bets, optionally filtered by match or user."""
    bets = ledger.list(match_id=match_id, user=user)
    return {"count": len(bets), "bets": [b.to_dict() for b in bets]}


@app.get("/bets/{bet_id}")
async def get_bet(
    bet_id: int,
    ledger: BetLedger = Depends(get_ledger),
):
    """Return a single bet."""
    try:
        return ledger.get(bet_id).to_dict()
    except BetNotFoundError:
        raise HTTPException(status_code=404, detail="Bet not found")


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Catch-all exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": type(exc).__name__}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
