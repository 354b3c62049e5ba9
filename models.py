"""
資料模型

只存在於記憶體中（不做跨程序持久化），所以用 dataclass 取代 ORM model。
Snapshot 類別都是 frozen，交給 UI 層渲染時不會被意外修改。
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple


class RoundStatus(str, enum.Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    RESOLVING = "RESOLVING"
    WON = "WON"
    LOST = "LOST"


class LogCategory(str, enum.Enum):
    BET = "bet"
    WIN = "win"
    MATCH = "match"
    PURCHASE = "purchase"
    WITHDRAW = "withdraw"
    SYSTEM = "system"
    INFO = "info"


CRITICAL_CATEGORIES = frozenset({
    LogCategory.BET,
    LogCategory.WIN,
    LogCategory.PURCHASE,
    LogCategory.WITHDRAW,
    LogCategory.SYSTEM,
})


@dataclass(frozen=True)
class Hero:
    name: str
    symbol: str
    color: str


@dataclass
class Tile:
    """
    牌面上的一張牌

    同一個英雄有兩張牌，共用 pair_key。
    is_matched 一旦為 True 就不會再變回 False。
    """
    id: str
    pair_key: str
    face_symbol: str
    color: str
    is_flipped: bool = False
    is_matched: bool = False


@dataclass(frozen=True)
class LogEntry:
    timestamp: float  # epoch seconds
    category: LogCategory
    message: str

    @property
    def time_label(self) -> str:
        return datetime.fromtimestamp(self.timestamp).strftime("%H:%M:%S")


@dataclass(frozen=True)
class RoundSummary:
    """WON / LOST 之後給 UI 顯示的結算摘要"""
    outcome: RoundStatus
    bet: int
    house_fee: int
    payout: int
    net: int
    mistakes: int
    pairs: int
    payout_multiplier: Decimal


@dataclass(frozen=True)
class RoundSnapshot:
    status: RoundStatus
    bet: int = 0
    house_fee: int = 0
    pot: int = 0
    per_pair_reward: int = 0
    remainder: int = 0
    paid_out: int = 0
    mistake_count: int = 0
    matched_pair_count: int = 0
    total_pairs: int = 0
    payout_multiplier: Decimal = Decimal(0)
    deck: Tuple[Tile, ...] = field(default_factory=tuple)
    flip_selection: Tuple[str, ...] = field(default_factory=tuple)
    summary: Optional[RoundSummary] = None

    @property
    def pot_remaining(self) -> int:
        return self.pot - self.paid_out


@dataclass(frozen=True)
class LedgerSnapshot:
    balance: int
    balance_cash: Decimal
    lifetime_deposited: Decimal
    lifetime_withdrawn: Decimal
    net_result: int
    net_result_cash: Decimal


@dataclass(frozen=True)
class SessionSnapshot:
    """同一把 lock 內取得的回合 / 帳本 / 事件紀錄，三者一致"""
    round: RoundSnapshot
    ledger: LedgerSnapshot
    log: Tuple[LogEntry, ...]
