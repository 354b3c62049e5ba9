"""
Session API Endpoints

職責：
1. 建立 / 重設玩家 Session
2. 錢包操作（購買 coins、全額提領）
3. 查詢帳本與事件紀錄

前端靠短輪詢 GET /{session_id} 取得完整狀態
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
import logging

from schemas import (
    LedgerResponse,
    LogEntryResponse,
    PurchaseRequest,
    RoundStateResponse,
    SessionResponse,
)
from core.exceptions import SessionNotFound
from core.game_session import GameSession
from core.session_manager import SessionManager, get_session_manager

router = APIRouter(prefix="/api/sessions", tags=["sessions"])
logger = logging.getLogger(__name__)


def build_session_response(session_id: str, session: GameSession) -> SessionResponse:
    state = session.get_state()
    return SessionResponse(
        session_id=session_id,
        round=RoundStateResponse.from_snapshot(state.round),
        ledger=LedgerResponse.from_snapshot(state.ledger),
        log=[LogEntryResponse.from_entry(entry) for entry in state.log],
    )


@router.post("", response_model=SessionResponse)
def create_session(manager: SessionManager = Depends(get_session_manager)):
    """
    建立新 Session

    返回：
        session_id 加上初始狀態（餘額為 initial_coins，回合為 IDLE）
    """
    try:
        session_id, session = manager.create_session()
        return build_session_response(session_id, session)

    except Exception as e:
        logger.error(f"Failed to create session: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{session_id}", response_model=SessionResponse)
def get_session_state(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    try:
        session = manager.get_session(session_id)
        return build_session_response(session_id, session)

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to get session state: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{session_id}/reset", response_model=SessionResponse)
def reset_session(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    """
    重設 Session

    取消待比對任務、還原初始餘額、清空累計金額與事件紀錄
    """
    try:
        session = manager.get_session(session_id)
        session.reset()
        return build_session_response(session_id, session)

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to reset session: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/{session_id}")
def close_session(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    try:
        manager.close_session(session_id)
        return {"status": "ok"}

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to close session: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{session_id}/ledger", response_model=LedgerResponse)
def get_ledger(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    try:
        session = manager.get_session(session_id)
        return LedgerResponse.from_snapshot(session.get_ledger())

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to get ledger: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{session_id}/purchase", response_model=LedgerResponse)
def purchase_coins(
    session_id: str,
    purchase: PurchaseRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """
    購買 coins

    金額會被限制在 [min_bet, max_purchase]，超出範圍不會報錯
    """
    try:
        session = manager.get_session(session_id)
        return LedgerResponse.from_snapshot(session.purchase_coins(purchase.amount))

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to purchase coins: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{session_id}/withdraw", response_model=LedgerResponse)
def withdraw_all(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    try:
        session = manager.get_session(session_id)
        return LedgerResponse.from_snapshot(session.withdraw_all())

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to withdraw: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{session_id}/log", response_model=List[LogEntryResponse])
def get_log_view(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    """重點事件（最多 6 筆，新到舊）"""
    try:
        session = manager.get_session(session_id)
        return [LogEntryResponse.from_entry(entry) for entry in session.get_log_view()]

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to get log view: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{session_id}/log/all", response_model=List[LogEntryResponse])
def get_all_log_entries(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    """全部事件紀錄（舊到新）"""
    try:
        session = manager.get_session(session_id)
        return [LogEntryResponse.from_entry(entry) for entry in session.get_log_entries()]

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to get log entries: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
