"""
計分服務：回合經濟的 Payout 計算邏輯

純計算邏輯，沒有副作用。
所有金額都是 coins（整數），一律用 floor 除法，不做四捨五入。
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Tuple, Union

from models import RoundStatus

Number = Union[int, Decimal]


def _floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def house_fee(bet: int, fee_rate: Decimal) -> int:
    """
    每回合抽取的手續費

    範例：
        house_fee(500, Decimal("0.02")) -> 10
    """
    return _floor(Decimal(bet) * Decimal(fee_rate))


def payout_multiplier(mistakes: int, max_mistakes: int, perfect_multiplier: Number) -> Decimal:
    """
    依失誤次數計算 Payout 倍率（線性遞減）

    規則：
    - 0 次失誤: perfect_multiplier
    - max_mistakes 次以上: 0
    - 中間: perfect - mistakes * perfect / max_mistakes

    範例（max_mistakes=12, perfect=2）：
        0 -> 2, 6 -> 1（打平）, 12 -> 0
    """
    perfect = Decimal(perfect_multiplier)
    if mistakes <= 0:
        return perfect
    if mistakes >= max_mistakes:
        return Decimal(0)
    return max(Decimal(0), perfect - Decimal(mistakes) * perfect / Decimal(max_mistakes))


def pot_value(bet: int, multiplier: Number) -> int:
    return _floor(Decimal(bet) * Decimal(multiplier))


def per_pair_reward(pot: int, total_pairs: int) -> Tuple[int, int]:
    """
    把彩池平均分給每一組牌

    返回：
        (reward, remainder)，reward * total_pairs + remainder == pot

    注意：
        - remainder 只有在全部配對完成（WON）時才發放，不會因為取整而消失
    """
    if total_pairs < 1:
        raise ValueError("total_pairs must be >= 1")
    reward = pot // total_pairs
    return reward, pot - reward * total_pairs


def settlement_payout(pot: int, reward: int, matched_pairs: int, outcome: RoundStatus) -> int:
    """
    回合結算的總 Payout

    - WON: 整個彩池（含 remainder）
    - LOST: 只有已配對的部分，remainder 和未配對的彩池都沒收
    """
    if outcome == RoundStatus.WON:
        return pot
    if outcome == RoundStatus.LOST:
        return reward * matched_pairs
    raise ValueError(f"Round outcome must be WON or LOST, got {outcome}")


@dataclass(frozen=True)
class RoundQuote:
    bet: int
    house_fee: int
    pot: int
    per_pair_reward: int
    remainder: int
    total_pairs: int


def quote_round(bet: int, fee_rate: Decimal, total_pairs: int) -> RoundQuote:
    """
    回合開始時鎖定的金額

    彩池以淨投注（bet - house_fee）計算，倍率為 1，
    所以 pot + house_fee == bet。

    範例：
        bet=500, fee_rate=0.02, total_pairs=6
        -> house_fee=10, pot=490, per_pair_reward=81, remainder=4
    """
    fee = house_fee(bet, fee_rate)
    pot = pot_value(bet - fee, 1)
    reward, remainder = per_pair_reward(pot, total_pairs)
    return RoundQuote(
        bet=bet,
        house_fee=fee,
        pot=pot,
        per_pair_reward=reward,
        remainder=remainder,
        total_pairs=total_pairs,
    )
