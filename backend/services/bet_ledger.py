"""
Append-only bet ledger.

Bets are recorded, listed, and looked up by id; they are never mutated or
deleted.  Settlement is out of scope: a Bet records intent only.

The API talks to the BetLedger interface, not to a concrete store, so a
durable implementation can replace InMemoryBetLedger without touching the
routes.  The in-memory store lives for the lifetime of the process.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class BetNotFoundError(KeyError):
    """Raised when a bet id is not in the ledger."""


@dataclass(frozen=True)
class Bet:
    id: int
    user: str
    match_id: str
    alliance: str           # "red" | "blue"
    amount: float
    bet_type: str           # "over" | "under"
    line: Optional[float]
    timestamp: datetime

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "user": self.user,
            "match_id": self.match_id,
            "alliance": self.alliance,
            "amount": self.amount,
            "type": self.bet_type,
            "line": self.line,
            "time": self.timestamp.isoformat(),
        }


class BetLedger(ABC):
    """Storage contract for placed bets."""

    @abstractmethod
    def place(
        self,
        user: str,
        match_id: str,
        alliance: str,
        amount: float,
        bet_type: str,
        line: Optional[float] = None,
    ) -> Bet:
        """Append a bet and return it with its assigned id."""

    @abstractmethod
    def get(self, bet_id: int) -> Bet:
        """Return one bet.  Raises BetNotFoundError if unknown."""

    @abstractmethod
    def list(self, match_id: Optional[str] = None, user: Optional[str] = None) -> List[Bet]:
        """Return bets in placement order, optionally filtered."""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryBetLedger(BetLedger):
    """
    Process-local ledger.

    Appends are serialised by a lock so concurrent requests always receive
    consecutive ids starting at 1.
    """

    def __init__(self):
        self._bets: List[Bet] = []
        self._lock = threading.Lock()

    def place(
        self,
        user: str,
        match_id: str,
        alliance: str,
        amount: float,
        bet_type: str,
        line: Optional[float] = None,
    ) -> Bet:
        with self._lock:
            bet = Bet(
                id=len(self._bets) + 1,
                user=user,
                match_id=match_id,
                alliance=alliance,
                amount=amount,
                bet_type=bet_type,
                line=line,
                timestamp=datetime.now(timezone.utc),
            )
            self._bets.append(bet)

        logger.info(
            "Bet %d placed: %s %s %s $%.2f on %s (line %s)",
            bet.id, user, alliance, bet_type, amount, match_id, line,
        )
        return bet

    def get(self, bet_id: int) -> Bet:
        with self._lock:
            if 1 <= bet_id <= len(self._bets):
                return self._bets[bet_id - 1]
        raise BetNotFoundError(bet_id)

    def list(self, match_id: Optional[str] = None, user: Optional[str] = None) -> List[Bet]:
        with self._lock:
            bets = list(self._bets)
        if match_id is not None:
            bets = [b for b in bets if b.match_id == match_id]
        if user is not None:
            bets = [b for b in bets if b.user == user]
        return bets

    def __len__(self) -> int:
        with self._lock:
            return len(self._bets)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_bet_ledger: Optional[BetLedger] = None


def get_bet_ledger() -> BetLedger:
    global _bet_ledger
    if _bet_ledger is None:
        _bet_ledger = InMemoryBetLedger()
    return _bet_ledger


def reset_bet_ledger() -> None:
    """Drop the process ledger.  Intended for tests."""
    global _bet_ledger
    _bet_ledger = None
