"""
格式化服務：把 coins 轉成 UI / 事件紀錄用的文字
"""
from decimal import Decimal, ROUND_HALF_UP


def format_coins(amount: int) -> str:
    """1234567 -> "1,234,567" """
    return f"{amount:,}"


def format_signed_coins(amount: int) -> str:
    """490 -> "+490", -10 -> "-10" """
    return f"{amount:+,}"


def to_cash(coins: int, rate: Decimal) -> Decimal:
    return (Decimal(coins) * rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_cash(coins: int, rate: Decimal) -> str:
    """1000 coins @ 0.01 -> "$10.00" """
    cash = to_cash(coins, rate)
    sign = "-" if cash < 0 else ""
    return f"{sign}${abs(cash):,.2f}"
