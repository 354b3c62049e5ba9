"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理

注意：
    - 無效的翻牌、重複確認等 UI 競態輸入不是錯誤，引擎會直接忽略
"""


class HeroMatchException(Exception):
    """所有遊戲異常的基類"""
    pass


# ============ 下注 / 帳本相關異常 ============

class InvalidBet(HeroMatchException):
    """下注金額超出 [min_bet, min(max_bet, balance)]"""
    def __init__(self, bet, reason):
        self.bet = bet
        self.reason = reason
        super().__init__(f"Invalid bet {bet}: {reason}")


class InsufficientFunds(HeroMatchException):
    """扣款金額大於餘額"""
    def __init__(self, amount, balance):
        self.amount = amount
        self.balance = balance
        super().__init__(f"Cannot debit {amount} coins, balance is {balance}")


class InvalidAmount(HeroMatchException):
    """金額為負數"""
    pass


# ============ 狀態轉換異常 ============

class InvalidStateTransition(HeroMatchException):
    """非法的狀態轉換"""
    pass


# ============ Session 相關異常 ============

class SessionNotFound(HeroMatchException):
    """Session 不存在"""
    def __init__(self, session_id):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")
