"""
回合狀態機：集中管理所有狀態轉換

IDLE -> ACTIVE -> RESOLVING -> ACTIVE | WON | LOST
WON / LOST -> IDLE
ACTIVE / RESOLVING -> IDLE（新回合開始時放棄進行中的回合）

所有狀態變更都必須經過 transition()，非法轉換一律拋出 InvalidStateTransition
"""
import logging

from models import RoundStatus
from core.exceptions import InvalidStateTransition

logger = logging.getLogger(__name__)


class RoundStateMachine:
    """回合狀態轉換表"""

    TRANSITIONS = {
        RoundStatus.IDLE: {RoundStatus.ACTIVE},
        RoundStatus.ACTIVE: {RoundStatus.RESOLVING, RoundStatus.IDLE},
        RoundStatus.RESOLVING: {
            RoundStatus.ACTIVE,
            RoundStatus.WON,
            RoundStatus.LOST,
            RoundStatus.IDLE,
        },
        RoundStatus.WON: {RoundStatus.IDLE},
        RoundStatus.LOST: {RoundStatus.IDLE},
    }

    def __init__(self):
        self.status = RoundStatus.IDLE

    @classmethod
    def can_transition(cls, current: RoundStatus, target: RoundStatus) -> bool:
        return target in cls.TRANSITIONS.get(current, set())

    def transition(self, target: RoundStatus) -> RoundStatus:
        """
        執行狀態轉換

        參數：
            target: 目標狀態

        返回：
            轉換後的狀態

        異常：
            InvalidStateTransition: current -> target 不在轉換表內
        """
        if not self.can_transition(self.status, target):
            raise InvalidStateTransition(
                f"Cannot transition round from {self.status.value} to {target.value}"
            )
        logger.debug(f"Round state {self.status.value} -> {target.value}")
        self.status = target
        return self.status
