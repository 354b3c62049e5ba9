"""
並發控制工具

所有 ledger 變更和回合狀態轉換都必須在同一個 session lock 內完成，
包括延遲比對的 timer callback（它跑在另一個 thread）。
"""
from functools import wraps
import threading


def new_session_lock():
    """
    每個玩家 session 一把 RLock

    使用 RLock：同一個 thread 內巢狀呼叫公開操作不會死鎖
    """
    return threading.RLock()


def serialized(func):
    """
    Session lock decorator：確保操作之間互斥

    使用方式：
        class GameSession:
            def __init__(self):
                self._lock = new_session_lock()

            @serialized
            def start_round(self, bet):
                ...

    如果函式內發生異常：
        - lock 會被釋放
        - 異常會被重新拋出（讓上層處理）

    注意：
        - 物件必須有 _lock 屬性
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        lock = getattr(self, "_lock", None)
        if lock is None:
            raise ValueError(
                f"@serialized requires '_lock' on {type(self).__name__}"
            )
        with lock:
            return func(self, *args, **kwargs)

    return wrapper
