"""Tests for the append-only bet ledger."""

import threading

import pytest

from backend.services.bet_ledger import (
    BetNotFoundError,
    InMemoryBetLedger,
    get_bet_ledger,
    reset_bet_ledger,
)


def _place(ledger, user="alice", match_id="qm1", alliance="red", amount=10.0, bet_type="over", line=78.6):
    return ledger.place(
        user=user,
        match_id=match_id,
        alliance=alliance,
        amount=amount,
        bet_type=bet_type,
        line=line,
    )


# ---------------------------------------------------------------------------
# place / get
# ---------------------------------------------------------------------------

def test_ids_start_at_one_and_increment():
    ledger = InMemoryBetLedger()
    assert _place(ledger).id == 1
    assert _place(ledger).id == 2
    assert len(ledger) == 2


def test_bet_fields_recorded():
    ledger = InMemoryBetLedger()
    bet = _place(ledger, user="bob", match_id="qm7", alliance="blue", amount=5.0, bet_type="under", line=None)

    assert bet.user == "bob"
    assert bet.match_id == "qm7"
    assert bet.alliance == "blue"
    assert bet.amount == 5.0
    assert bet.bet_type == "under"
    assert bet.line is None
    assert bet.timestamp.tzinfo is not None


def test_get_returns_placed_bet():
    ledger = InMemoryBetLedger()
    _place(ledger)
    second = _place(ledger, user="bob")
    assert ledger.get(2) == second


@pytest.mark.parametrize("bet_id", [0, -1, 2, 99])
def test_get_unknown_raises(bet_id):
    ledger = InMemoryBetLedger()
    _place(ledger)
    with pytest.raises(BetNotFoundError):
        ledger.get(bet_id)


def test_not_found_is_a_key_error():
    with pytest.raises(KeyError):
        InMemoryBetLedger().get(1)


def test_to_dict_uses_api_field_names():
    d = _place(InMemoryBetLedger()).to_dict()
    assert d["type"] == "over"
    assert d["id"] == 1
    assert "time" in d


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------

def test_list_in_placement_order():
    ledger = InMemoryBetLedger()
    for user in ("a", "b", "c"):
        _place(ledger, user=user)
    assert [b.user for b in ledger.list()] == ["a", "b", "c"]


def test_list_filters():
    ledger = InMemoryBetLedger()
    _place(ledger, user="alice", match_id="qm1")
    _place(ledger, user="bob", match_id="qm1")
    _place(ledger, user="alice", match_id="qm2")

    assert [b.id for b in ledger.list(match_id="qm1")] == [1, 2]
    assert [b.id for b in ledger.list(user="alice")] == [1, 3]
    assert [b.id for b in ledger.list(match_id="qm2", user="alice")] == [3]
    assert ledger.list(user="carol") == []


def test_list_returns_a_copy():
    ledger = InMemoryBetLedger()
    _place(ledger)
    ledger.list().clear()
    assert len(ledger) == 1


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

def test_concurrent_appends_get_consecutive_ids():
    ledger = InMemoryBetLedger()
    per_thread, threads = 50, 8

    def worker(n):
        for _ in range(per_thread):
            _place(ledger, user=f"user{n}")

    pool = [threading.Thread(target=worker, args=(n,)) for n in range(threads)]
    for t in pool:
        t.start()
    for t in pool:
        t.join()

    ids = [b.id for b in ledger.list()]
    assert ids == list(range(1, per_thread * threads + 1))


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

def test_singleton_and_reset():
    reset_bet_ledger()
    ledger = get_bet_ledger()
    assert get_bet_ledger() is ledger
    _place(ledger)

    reset_bet_ledger()
    assert get_bet_ledger() is not ledger
    assert len(get_bet_ledger()) == 0
