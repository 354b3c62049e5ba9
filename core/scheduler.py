"""
延遲任務排程：翻開兩張牌之後，等一段時間再比對

- TimerScheduler：正式環境，用 daemon thread timer
- ManualScheduler：測試或需要決定性結果的宿主，手動觸發

兩者都回傳可取消的 ScheduledTask。
"""
from typing import Callable, List
import logging
import threading

logger = logging.getLogger(__name__)


class ScheduledTask:
    """可取消的延遲任務 handle"""

    def __init__(self, callback: Callable[[], None], delay: float):
        self.callback = callback
        self.delay = delay
        self.cancelled = False
        self.done = False
        self._timer = None

    def cancel(self) -> None:
        if self.done or self.cancelled:
            return
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        logger.debug(f"Cancelled scheduled task (delay={self.delay}s)")

    def run(self) -> None:
        """執行 callback（已取消或已執行過則跳過）"""
        if self.cancelled or self.done:
            return
        self.done = True
        self.callback()

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)


class TimerScheduler:

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(callback, delay)
        timer = threading.Timer(delay, task.run)
        timer.daemon = True
        task._timer = timer
        timer.start()
        return task


class ManualScheduler:
    """
    不會自己觸發的排程器

    用途：
        測試時呼叫 run_pending() 模擬「延遲時間到了」
    """

    def __init__(self):
        self.tasks: List[ScheduledTask] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(callback, delay)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> List[ScheduledTask]:
        return [task for task in self.tasks if task.pending]

    def run_pending(self) -> int:
        """
        執行所有尚未取消的任務

        返回：
            實際執行的任務數
        """
        ran = 0
        for task in self.pending:
            task.run()
            ran += 1
        return ran
