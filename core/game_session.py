"""
Game Session：一位玩家的完整遊戲引擎

職責：
1. 回合生命週期（開始 -> 翻牌 -> 比對 -> 勝 / 負 -> 確認）
2. 延遲比對（Match Resolver），可取消、可重複呼叫（冪等）
3. 購買 coins / 全額提領
4. 提供唯讀 snapshot 給 UI 層

原則：
- 所有狀態變更經過 RoundStateMachine
- 所有公開操作都在同一把 session lock 內執行（包括 timer callback）
- 先驗證再變更：InvalidBet 發生時不修改任何狀態
- UI 競態造成的無效輸入（重複點擊、比對中翻牌）直接忽略，不拋異常
"""
from dataclasses import replace
from typing import List, Optional
import logging
import random

from models import (
    LedgerSnapshot,
    LogCategory,
    LogEntry,
    RoundSnapshot,
    RoundStatus,
    RoundSummary,
    SessionSnapshot,
    Tile,
)
from settings import Settings, get_settings
from core.event_log import EventLog
from core.exceptions import InvalidBet
from core.ledger import Ledger
from core.locks import new_session_lock, serialized
from core.scheduler import TimerScheduler
from core.state_machine import RoundStateMachine
from services.deck_service import generate_deck, select_heroes
from services.formatting_service import format_cash, format_coins, format_signed_coins
from services.payoff_service import payout_multiplier, quote_round, settlement_payout

logger = logging.getLogger(__name__)

IN_PROGRESS = (RoundStatus.ACTIVE, RoundStatus.RESOLVING)
FINISHED = (RoundStatus.WON, RoundStatus.LOST)


class GameSession:
    """單一玩家的回合經濟與配對引擎"""

    def __init__(self, settings: Settings, scheduler=None, rng: Optional[random.Random] = None, clock=None):
        self.settings = settings
        self.heroes = select_heroes(settings.pair_count)
        self._scheduler = scheduler or TimerScheduler()
        self._rng = rng or random.Random()
        self._lock = new_session_lock()
        # 跨 reset 持續遞增，舊 timer 永遠對不上新回合
        self._round_id = 0
        self.log = EventLog(settings.log_capacity, settings.log_dedup_window_ms, clock)
        self._init_state()

    @classmethod
    def create(cls, settings: Optional[Settings] = None, **kwargs) -> "GameSession":
        return cls(settings or get_settings(), **kwargs)

    def _init_state(self) -> None:
        self.ledger = Ledger(self.settings.initial_coins, self.settings.coin_to_currency_rate)
        self._machine = RoundStateMachine()
        self._quote = None
        self._deck: List[Tile] = []
        self._selection: List[str] = []
        self._mistakes = 0
        self._matched = 0
        self._paid_out = 0
        self._summary: Optional[RoundSummary] = None
        self._pending = None
        self.log.append(
            f"💎 Welcome! Starting balance: {format_coins(self.ledger.balance)} coins "
            f"({self._cash(self.ledger.balance)})",
            LogCategory.SYSTEM,
        )

    # ============================================================
    # LIFECYCLE
    # ============================================================
    @serialized
    def reset(self) -> None:
        """回到剛建立時的狀態：取消待比對任務、還原初始餘額、清空紀錄"""
        self._cancel_pending()
        self.log.clear()
        self._init_state()
        logger.info("Session reset")

    @serialized
    def close(self) -> None:
        self._cancel_pending()

    @property
    def status(self) -> RoundStatus:
        return self._machine.status

    @property
    def round_id(self) -> int:
        return self._round_id

    @property
    def total_pairs(self) -> int:
        return len(self.heroes)

    # ============================================================
    # ROUND
    # ============================================================
    @serialized
    def start_round(self, bet: int) -> RoundSnapshot:
        """
        開始新回合

        流程：
        1. 驗證下注金額（失敗時不修改任何狀態）
        2. 放棄進行中的回合（取消待比對任務）
        3. 扣款、鎖定手續費 / 彩池 / 每組獎勵
        4. 產生新牌組，狀態轉為 ACTIVE

        參數：
            bet: 下注 coins

        返回：
            新回合的 RoundSnapshot

        異常：
            InvalidBet: bet 不在 [min_bet, min(max_bet, balance)]
        """
        self._validate_bet(bet)
        self._abandon_round()

        quote = quote_round(bet, self.settings.house_fee_rate, self.total_pairs)
        self.ledger.debit(bet)

        self._round_id += 1
        self._quote = quote
        self._deck = generate_deck(self.heroes, self._rng)
        self._selection = []
        self._mistakes = 0
        self._matched = 0
        self._paid_out = 0
        self._summary = None
        self._machine.transition(RoundStatus.ACTIVE)

        self.log.append(
            f"🎲 Round Started - Bet: {format_coins(bet)} coins. "
            f"Pot: {format_coins(quote.pot)} coins after {format_coins(quote.house_fee)} coins house fee",
            LogCategory.BET,
        )
        logger.info(
            f"Round {self._round_id} started: bet={bet} fee={quote.house_fee} "
            f"pot={quote.pot} per_pair={quote.per_pair_reward} remainder={quote.remainder}"
        )
        return self._snapshot()

    def _validate_bet(self, bet: int) -> None:
        if bet < self.settings.min_bet:
            raise InvalidBet(bet, f"minimum bet is {self.settings.min_bet}")
        if bet > self.settings.max_bet:
            raise InvalidBet(bet, f"maximum bet is {self.settings.max_bet}")
        if bet > self.ledger.balance:
            raise InvalidBet(bet, f"balance is only {self.ledger.balance}")

    def _abandon_round(self) -> None:
        self._cancel_pending()
        status = self._machine.status
        if status in IN_PROGRESS:
            forfeited = self._quote.pot - self._paid_out
            self.log.append(
                f"⚠️ Round abandoned after {self._matched}/{self.total_pairs} pairs. "
                f"{format_coins(forfeited)} coins of unpaid pot forfeited.",
                LogCategory.SYSTEM,
            )
            logger.info(f"Round {self._round_id} abandoned, forfeited={forfeited}")
        if status != RoundStatus.IDLE:
            self._machine.transition(RoundStatus.IDLE)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    @serialized
    def flip(self, tile_id: str) -> None:
        """
        翻開一張牌

        以下情況直接忽略（不是錯誤）：
        - 狀態不是 ACTIVE（包括 RESOLVING，牌面鎖定中）
        - 已經翻開兩張
        - 牌不存在、已翻開或已配對
        """
        if self._machine.status != RoundStatus.ACTIVE:
            return
        if len(self._selection) >= 2:
            return
        tile = self._find_tile(tile_id)
        if tile is None or tile.is_flipped or tile.is_matched:
            return

        tile.is_flipped = True
        self._selection.append(tile.id)

        if len(self._selection) == 2:
            self._machine.transition(RoundStatus.RESOLVING)
            self._schedule_resolution()

    def _schedule_resolution(self) -> None:
        first_id, second_id = self._selection
        round_id = self._round_id
        delay = self.settings.resolution_delay_ms / 1000
        self._pending = self._scheduler.schedule(
            delay, lambda: self.resolve(round_id, first_id, second_id)
        )

    @serialized
    def resolve(self, round_id: int, first_id: str, second_id: str) -> bool:
        """
        比對兩張翻開的牌（Match Resolver）

        冪等：只有在回合、選牌和牌面狀態都和排程時一致才會生效，
        重複呼叫或舊回合的任務會被跳過。

        返回：
            True 如果這次呼叫套用了比對結果，False 否則
        """
        if (
            round_id != self._round_id
            or self._machine.status != RoundStatus.RESOLVING
            or self._selection != [first_id, second_id]
        ):
            logger.debug(f"Skipping stale resolution round={round_id} tiles=({first_id}, {second_id})")
            return False

        first = self._find_tile(first_id)
        second = self._find_tile(second_id)
        if (
            first is None
            or second is None
            or first is second
            or not (first.is_flipped and second.is_flipped)
            or first.is_matched
            or second.is_matched
        ):
            logger.warning(f"Resolution pre-state mismatch round={round_id} tiles=({first_id}, {second_id})")
            return False

        self._pending = None
        self._selection = []

        if first.pair_key == second.pair_key:
            first.is_matched = True
            second.is_matched = True
            self._matched += 1
            reward = self._quote.per_pair_reward
            self.ledger.credit(reward)
            self._paid_out += reward
            self.log.append(
                f"✅ Matched {first.pair_key} {first.face_symbol} (+{format_coins(reward)} coins)",
                LogCategory.MATCH,
            )
            if self._matched == self.total_pairs:
                self._settle(RoundStatus.WON)
                return True
        else:
            first.is_flipped = False
            second.is_flipped = False
            self._mistakes += 1
            if self._mistakes >= self.settings.loss_mistake_threshold:
                self._settle(RoundStatus.LOST)
                return True

        self._machine.transition(RoundStatus.ACTIVE)
        return True

    def _settle(self, outcome: RoundStatus) -> None:
        quote = self._quote
        payout = settlement_payout(quote.pot, quote.per_pair_reward, self._matched, outcome)
        owed = payout - self._paid_out
        if owed > 0:
            self.ledger.credit(owed)
            self._paid_out += owed

        multiplier = self._multiplier()
        profit = payout - quote.bet
        self._machine.transition(outcome)
        self._summary = RoundSummary(
            outcome=outcome,
            bet=quote.bet,
            house_fee=quote.house_fee,
            payout=payout,
            net=profit,
            mistakes=self._mistakes,
            pairs=self._matched,
            payout_multiplier=multiplier,
        )

        if outcome == RoundStatus.WON:
            self.log.append(
                f"🎉 ROUND WON! Collected final pot: {format_coins(owed)} coins. "
                f"Total won: {format_coins(payout)} coins (x{multiplier:.2f} at {self._mistakes} mistakes), "
                f"{format_signed_coins(profit)} profit",
                LogCategory.WIN,
            )
            self.log.append(
                f"✨ You matched all {self.total_pairs} pairs and won {format_coins(payout)} coins "
                f"({self._cash(payout)})",
                LogCategory.SYSTEM,
            )
        else:
            self.log.append(
                f"💔 Round LOST ({self._mistakes} mistakes). Kept {format_coins(payout)} coins "
                f"from {self._matched} matched pairs.",
                LogCategory.SYSTEM,
            )
            self.log.append(
                f"🏦 House keeps {format_coins(quote.house_fee)} coins fee. Better luck next time!",
                LogCategory.SYSTEM,
            )
        logger.info(
            f"Round {self._round_id} {outcome.value}: payout={payout} net={profit} "
            f"mistakes={self._mistakes} pairs={self._matched}"
        )

    @serialized
    def acknowledge_round_end(self) -> None:
        """WON / LOST -> IDLE；其他狀態直接忽略，不碰 ledger"""
        if self._machine.status not in FINISHED:
            return
        self._machine.transition(RoundStatus.IDLE)
        self._summary = None

    # ============================================================
    # WALLET
    # ============================================================
    @serialized
    def purchase_coins(self, amount: int) -> LedgerSnapshot:
        """購買 coins，金額會被限制在 [min_bet, max_purchase]"""
        amount = min(max(self.settings.min_bet, amount), self.settings.max_purchase)
        self.ledger.deposit(amount)
        self.log.append(
            f"💰 Purchased {format_coins(amount)} coins ({self._cash(amount)})",
            LogCategory.PURCHASE,
        )
        return self.ledger.snapshot()

    @serialized
    def withdraw_all(self) -> LedgerSnapshot:
        amount = self.ledger.withdraw_all()
        if amount:
            self.log.append(
                f"💸 Withdrew {format_coins(amount)} coins ({self._cash(amount)})",
                LogCategory.WITHDRAW,
            )
        return self.ledger.snapshot()

    # ============================================================
    # SNAPSHOTS
    # ============================================================
    @serialized
    def get_round_state(self) -> RoundSnapshot:
        return self._snapshot()

    @serialized
    def get_ledger(self) -> LedgerSnapshot:
        return self.ledger.snapshot()

    @serialized
    def get_log_view(self) -> List[LogEntry]:
        return self.log.critical_view()

    @serialized
    def get_log_entries(self) -> List[LogEntry]:
        return self.log.entries()

    @serialized
    def get_state(self) -> SessionSnapshot:
        """回合、帳本、重點事件一次取得（不會夾著一次比對結果）"""
        return SessionSnapshot(
            round=self._snapshot(),
            ledger=self.ledger.snapshot(),
            log=tuple(self.log.critical_view()),
        )

    def _snapshot(self) -> RoundSnapshot:
        status = self._machine.status
        deck = tuple(replace(tile) for tile in self._deck)
        if status not in IN_PROGRESS:
            return RoundSnapshot(
                status=status,
                total_pairs=self.total_pairs,
                deck=deck,
                summary=self._summary,
            )
        quote = self._quote
        return RoundSnapshot(
            status=status,
            bet=quote.bet,
            house_fee=quote.house_fee,
            pot=quote.pot,
            per_pair_reward=quote.per_pair_reward,
            remainder=quote.remainder,
            paid_out=self._paid_out,
            mistake_count=self._mistakes,
            matched_pair_count=self._matched,
            total_pairs=self.total_pairs,
            payout_multiplier=self._multiplier(),
            deck=deck,
            flip_selection=tuple(self._selection),
        )

    def _multiplier(self):
        return payout_multiplier(
            self._mistakes, self.settings.max_mistakes, self.settings.perfect_multiplier
        )

    def _find_tile(self, tile_id: str) -> Optional[Tile]:
        for tile in self._deck:
            if tile.id == tile_id:
                return tile
        return None

    def _cash(self, coins: int) -> str:
        return format_cash(coins, self.settings.coin_to_currency_rate)
