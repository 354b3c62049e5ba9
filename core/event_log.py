"""
Event Log：記錄所有有經濟意義的事件

- 只能 append，寫入後不會再修改
- 容量有上限，超過時從最舊的開始淘汰（FIFO）
- 500ms 內重複的訊息直接丟掉（防洗版）
"""
from collections import deque
from typing import Callable, List, Optional
import logging
import time

from models import CRITICAL_CATEGORIES, LogCategory, LogEntry

logger = logging.getLogger(__name__)

CRITICAL_VIEW_SIZE = 6


class EventLog:

    def __init__(
        self,
        capacity: int,
        dedup_window_ms: int = 500,
        clock: Optional[Callable[[], float]] = None,
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.dedup_window = dedup_window_ms / 1000
        self._clock = clock or time.time
        self._entries = deque(maxlen=capacity)
        self._last_message: Optional[str] = None
        self._last_time: Optional[float] = None

    def append(self, message: str, category: LogCategory = LogCategory.INFO) -> Optional[LogEntry]:
        """
        新增一筆紀錄

        去重規則只比較訊息文字和時間，不比較 category。

        返回：
            新增的 LogEntry；被去重丟掉時回傳 None
        """
        now = self._clock()
        if (
            self._last_message == message
            and self._last_time is not None
            and now - self._last_time < self.dedup_window
        ):
            logger.debug(f"Dropped duplicate log entry: {message!r}")
            return None

        self._last_message = message
        self._last_time = now
        entry = LogEntry(timestamp=now, category=LogCategory(category), message=message)
        # deque(maxlen) 會自動淘汰最舊的一筆
        self._entries.append(entry)
        return entry

    def entries(self) -> List[LogEntry]:
        """全部紀錄，舊到新"""
        return list(self._entries)

    def critical_view(self) -> List[LogEntry]:
        """
        給 UI 的重點事件

        規則：
        - 新到舊
        - 只保留 bet / win / purchase / withdraw / system
        - 同一 category 在同一秒內只留最新的一筆
        - 最多 6 筆
        """
        seen = set()
        view = []
        for entry in reversed(self._entries):
            if entry.category not in CRITICAL_CATEGORIES:
                continue
            key = (entry.category, int(entry.timestamp))
            if key in seen:
                continue
            seen.add(key)
            view.append(entry)
            if len(view) == CRITICAL_VIEW_SIZE:
                break
        return view

    def clear(self) -> None:
        self._entries.clear()
        self._last_message = None
        self._last_time = None

    def __len__(self):
        return len(self._entries)
