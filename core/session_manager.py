"""
Session Manager：管理玩家 GameSession 的生命週期

職責：
1. 建立 Session（每位玩家一個引擎實例、一把 lock）
2. 查詢 Session
3. 關閉 Session（取消待比對任務）
"""
from functools import lru_cache
from typing import Dict, Tuple
from uuid import uuid4
import logging
import threading

from settings import Settings, get_settings
from core.exceptions import SessionNotFound
from core.game_session import GameSession
from core.scheduler import TimerScheduler

logger = logging.getLogger(__name__)


class SessionManager:
    """GameSession 註冊表"""

    def __init__(self, settings: Settings, scheduler=None):
        self.settings = settings
        self.scheduler = scheduler or TimerScheduler()
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create_session(self) -> Tuple[str, GameSession]:
        """
        建立新 Session

        返回：
            (session_id, GameSession) tuple
        """
        session_id = uuid4().hex
        session = GameSession.create(self.settings, scheduler=self.scheduler)
        with self._lock:
            self._sessions[session_id] = session
        logger.info(f"Created session {session_id}")
        return session_id, session

    def get_session(self, session_id: str) -> GameSession:
        """
        異常：
            SessionNotFound: Session 不存在
        """
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def close_session(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        session.close()
        logger.info(f"Closed session {session_id}")

    def shutdown(self) -> None:
        """關閉所有 Session（應用程式結束時呼叫）"""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()
        logger.info(f"Shut down {len(sessions)} sessions")

    def __len__(self):
        with self._lock:
            return len(self._sessions)


@lru_cache()
def get_session_manager():
    """FastAPI dependency：全域唯一的 SessionManager"""
    return SessionManager(get_settings())
