from decimal import Decimal

import pytest

from models import RoundStatus
from services.payoff_service import (
    house_fee,
    payout_multiplier,
    per_pair_reward,
    pot_value,
    quote_round,
    settlement_payout,
)

FEE = Decimal("0.02")


# ── House fee ──────────────────────────────────────────────


def test_house_fee_scenario():
    assert house_fee(500, FEE) == 10


def test_house_fee_floors_instead_of_rounding():
    assert house_fee(49, FEE) == 0
    assert house_fee(99, FEE) == 1
    assert house_fee(150, FEE) == 3
    assert house_fee(1450, Decimal("0.29")) == 420


# ── Multiplier ─────────────────────────────────────────────


def test_multiplier_breakpoints():
    assert payout_multiplier(0, 12, 2) == 2
    assert payout_multiplier(6, 12, 2) == 1
    assert payout_multiplier(12, 12, 2) == 0


def test_multiplier_clamps_outside_range():
    assert payout_multiplier(-3, 12, 2) == 2
    assert payout_multiplier(40, 12, 2) == 0


def test_multiplier_is_monotonic():
    values = [payout_multiplier(m, 12, 2) for m in range(-2, 20)]
    for earlier, later in zip(values, values[1:]):
        assert earlier >= later


def test_multiplier_is_linear_between_breakpoints():
    step = 2 / 12
    for m in range(12):
        drop = float(payout_multiplier(m, 12, 2) - payout_multiplier(m + 1, 12, 2))
        assert abs(drop - step) < 1e-9


# ── Pot and per-pair reward ────────────────────────────────


def test_pot_value_floors():
    assert pot_value(500, Decimal("0.98")) == 490
    assert pot_value(500, 2) == 1000
    assert pot_value(333, Decimal("1.5")) == 499


def test_per_pair_reward_scenario():
    assert per_pair_reward(490, 6) == (81, 4)


def test_remainder_is_conserved():
    for pot in range(0, 5000, 37):
        for total_pairs in range(1, 9):
            reward, remainder = per_pair_reward(pot, total_pairs)
            assert reward * total_pairs + remainder == pot
            assert 0 <= remainder < total_pairs


def test_per_pair_reward_rejects_zero_pairs():
    with pytest.raises(ValueError):
        per_pair_reward(490, 0)


# ── Settlement ─────────────────────────────────────────────


def test_win_pays_full_pot_including_remainder():
    assert settlement_payout(490, 81, 6, RoundStatus.WON) == 490


def test_loss_pays_only_matched_pairs():
    assert settlement_payout(490, 81, 2, RoundStatus.LOST) == 162
    assert settlement_payout(490, 81, 0, RoundStatus.LOST) == 0


def test_settlement_requires_finished_outcome():
    with pytest.raises(ValueError):
        settlement_payout(490, 81, 2, RoundStatus.ACTIVE)


# ── Round quote ────────────────────────────────────────────


def test_quote_round_scenario():
    quote = quote_round(500, FEE, 6)
    assert quote.house_fee == 10
    assert quote.pot == 490
    assert quote.per_pair_reward == 81
    assert quote.remainder == 4


def test_pot_plus_fee_equals_bet():
    for bet in range(50, 20000, 97):
        quote = quote_round(bet, FEE, 6)
        assert quote.pot + quote.house_fee == bet
        assert quote.per_pair_reward * 6 + quote.remainder == quote.pot
