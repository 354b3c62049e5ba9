from decimal import Decimal

import pytest

from core.exceptions import InsufficientFunds, InvalidAmount
from core.ledger import Ledger

RATE = Decimal("0.01")


def test_debit_and_credit():
    ledger = Ledger(1000, RATE)
    ledger.debit(400)
    ledger.credit(81)
    assert ledger.balance == 681


def test_debit_beyond_balance_raises():
    ledger = Ledger(100, RATE)
    with pytest.raises(InsufficientFunds):
        ledger.debit(101)
    assert ledger.balance == 100


def test_negative_amounts_rejected():
    ledger = Ledger(100, RATE)
    with pytest.raises(InvalidAmount):
        ledger.credit(-1)
    with pytest.raises(InvalidAmount):
        ledger.debit(-1)


def test_withdraw_all_zeroes_balance():
    ledger = Ledger(1000, RATE)
    assert ledger.withdraw_all() == 1000
    assert ledger.balance == 0
    assert ledger.withdraw_all() == 0
    assert ledger.withdrawn_coins == 1000


def test_net_result_tracks_applied_changes():
    ledger = Ledger(1000, RATE)
    ledger.deposit(5000)
    ledger.debit(500)
    ledger.credit(490)
    assert ledger.net_result == -10
    ledger.withdraw_all()
    assert ledger.net_result == -10


def test_snapshot_reports_cash():
    ledger = Ledger(1000, RATE)
    ledger.deposit(250)
    snapshot = ledger.snapshot()
    assert snapshot.balance == 1250
    assert snapshot.balance_cash == Decimal("12.50")
    assert snapshot.lifetime_deposited == Decimal("2.50")
    assert snapshot.lifetime_withdrawn == Decimal("0.00")
    assert snapshot.net_result == 0
