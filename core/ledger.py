"""
Ledger：玩家的 coin 餘額與累計儲值 / 提領

職責：
1. 扣款 / 入帳（餘額永遠 >= 0）
2. 儲值（購買 coins）與全額提領
3. 推導淨損益

注意：
    - 累計金額以 coins 記錄（整數、精確），snapshot 時才換算成現金
    - 本類別不加鎖，所有呼叫都經過 GameSession 的 session lock
"""
from decimal import Decimal
import logging

from models import LedgerSnapshot
from core.exceptions import InsufficientFunds, InvalidAmount
from services.formatting_service import to_cash

logger = logging.getLogger(__name__)


class Ledger:
    """單一玩家的帳本"""

    def __init__(self, initial_grant: int, coin_to_currency_rate: Decimal):
        if initial_grant < 0:
            raise InvalidAmount(f"Initial grant must be >= 0, got {initial_grant}")
        self.initial_grant = initial_grant
        self.rate = coin_to_currency_rate
        self.balance = initial_grant
        self.deposited_coins = 0
        self.withdrawn_coins = 0

    def debit(self, amount: int) -> None:
        """
        扣款

        異常：
            InvalidAmount: amount 為負數
            InsufficientFunds: amount 大於餘額
        """
        if amount < 0:
            raise InvalidAmount(f"Debit amount must be >= 0, got {amount}")
        if amount > self.balance:
            raise InsufficientFunds(amount, self.balance)
        self.balance -= amount

    def credit(self, amount: int) -> None:
        if amount < 0:
            raise InvalidAmount(f"Credit amount must be >= 0, got {amount}")
        self.balance += amount

    def deposit(self, amount: int) -> None:
        """購買 coins：入帳並累計儲值金額"""
        self.credit(amount)
        self.deposited_coins += amount
        logger.info(f"Deposited {amount} coins, balance {self.balance}")

    def withdraw_all(self) -> int:
        """
        全額提領

        返回：
            提領的 coins（餘額為 0 時回傳 0，不做任何事）
        """
        amount = self.balance
        if amount == 0:
            return 0
        self.withdrawn_coins += amount
        self.balance = 0
        logger.info(f"Withdrew {amount} coins")
        return amount

    @property
    def net_result(self) -> int:
        """
        淨損益（coins）

        balance - 初始贈送 - 累計儲值 + 累計提領
        """
        return self.balance - self.initial_grant - self.deposited_coins + self.withdrawn_coins

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            balance=self.balance,
            balance_cash=to_cash(self.balance, self.rate),
            lifetime_deposited=to_cash(self.deposited_coins, self.rate),
            lifetime_withdrawn=to_cash(self.withdrawn_coins, self.rate),
            net_result=self.net_result,
            net_result_cash=to_cash(self.net_result, self.rate),
        )
