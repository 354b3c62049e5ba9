"""
API request / response schemas

HTTP 視圖會隱藏蓋著的牌的 pair_key 和牌面。
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from models import (
    LedgerSnapshot,
    LogCategory,
    LogEntry,
    RoundSnapshot,
    RoundStatus,
    RoundSummary,
    Tile,
)


# ============ Requests ============

class BetRequest(BaseModel):
    bet: int


class FlipRequest(BaseModel):
    tile_id: str


class PurchaseRequest(BaseModel):
    amount: int


# ============ Responses ============

class TileResponse(BaseModel):
    id: str
    pair_key: Optional[str] = None
    face_symbol: Optional[str] = None
    color: Optional[str] = None
    is_flipped: bool
    is_matched: bool

    @classmethod
    def from_tile(cls, tile: Tile) -> "TileResponse":
        face_up = tile.is_flipped or tile.is_matched
        return cls(
            id=tile.id,
            pair_key=tile.pair_key if face_up else None,
            face_symbol=tile.face_symbol if face_up else None,
            color=tile.color if face_up else None,
            is_flipped=tile.is_flipped,
            is_matched=tile.is_matched,
        )


class RoundSummaryResponse(BaseModel):
    outcome: RoundStatus
    bet: int
    house_fee: int
    payout: int
    net: int
    mistakes: int
    pairs: int
    payout_multiplier: float

    @classmethod
    def from_summary(cls, summary: RoundSummary) -> "RoundSummaryResponse":
        return cls(
            outcome=summary.outcome,
            bet=summary.bet,
            house_fee=summary.house_fee,
            payout=summary.payout,
            net=summary.net,
            mistakes=summary.mistakes,
            pairs=summary.pairs,
            payout_multiplier=float(summary.payout_multiplier),
        )


class RoundStateResponse(BaseModel):
    status: RoundStatus
    bet: int
    house_fee: int
    pot: int
    per_pair_reward: int
    remainder: int
    paid_out: int
    pot_remaining: int
    mistake_count: int
    matched_pair_count: int
    total_pairs: int
    payout_multiplier: float
    deck: List[TileResponse]
    flip_selection: List[str]
    summary: Optional[RoundSummaryResponse] = None

    @classmethod
    def from_snapshot(cls, snapshot: RoundSnapshot) -> "RoundStateResponse":
        return cls(
            status=snapshot.status,
            bet=snapshot.bet,
            house_fee=snapshot.house_fee,
            pot=snapshot.pot,
            per_pair_reward=snapshot.per_pair_reward,
            remainder=snapshot.remainder,
            paid_out=snapshot.paid_out,
            pot_remaining=snapshot.pot_remaining,
            mistake_count=snapshot.mistake_count,
            matched_pair_count=snapshot.matched_pair_count,
            total_pairs=snapshot.total_pairs,
            payout_multiplier=float(snapshot.payout_multiplier),
            deck=[TileResponse.from_tile(tile) for tile in snapshot.deck],
            flip_selection=list(snapshot.flip_selection),
            summary=(
                RoundSummaryResponse.from_summary(snapshot.summary)
                if snapshot.summary else None
            ),
        )


class LedgerResponse(BaseModel):
    balance: int
    balance_cash: Decimal
    lifetime_deposited: Decimal
    lifetime_withdrawn: Decimal
    net_result: int
    net_result_cash: Decimal

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot) -> "LedgerResponse":
        return cls(
            balance=snapshot.balance,
            balance_cash=snapshot.balance_cash,
            lifetime_deposited=snapshot.lifetime_deposited,
            lifetime_withdrawn=snapshot.lifetime_withdrawn,
            net_result=snapshot.net_result,
            net_result_cash=snapshot.net_result_cash,
        )


class LogEntryResponse(BaseModel):
    timestamp: float
    time: str
    category: LogCategory
    message: str

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "LogEntryResponse":
        return cls(
            timestamp=entry.timestamp,
            time=entry.time_label,
            category=entry.category,
            message=entry.message,
        )


class SessionResponse(BaseModel):
    session_id: str
    round: RoundStateResponse
    ledger: LedgerResponse
    log: List[LogEntryResponse]
