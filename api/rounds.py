"""
Round API Endpoints - 短輪詢版

重點：
1. flip / acknowledge 對無效輸入直接忽略，永遠回傳目前狀態
2. 所有業務邏輯集中在 GameSession
3. 延遲比對在背景 timer 完成，前端靠 GET /rounds/current 取得結果
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from schemas import BetRequest, FlipRequest, RoundStateResponse
from core.exceptions import InvalidBet, SessionNotFound
from core.session_manager import SessionManager, get_session_manager

router = APIRouter(prefix="/api/sessions", tags=["rounds"])
logger = logging.getLogger(__name__)


@router.post("/{session_id}/rounds", response_model=RoundStateResponse)
def start_round(
    session_id: str,
    bet_data: BetRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """
    開始新回合

    前置條件：
    - min_bet <= bet <= min(max_bet, balance)

    注意：
    - 進行中的回合會被放棄（未發放的彩池沒收）

    返回：
        新回合的狀態（ACTIVE）
    """
    try:
        session = manager.get_session(session_id)
        logger.info(f"Starting round for session {session_id} with bet {bet_data.bet}")
        return RoundStateResponse.from_snapshot(session.start_round(bet_data.bet))

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except InvalidBet as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to start round: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{session_id}/rounds/current", response_model=RoundStateResponse)
def get_current_round(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    try:
        session = manager.get_session(session_id)
        return RoundStateResponse.from_snapshot(session.get_round_state())

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to get current round: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{session_id}/rounds/flip", response_model=RoundStateResponse)
def flip_tile(
    session_id: str,
    flip_data: FlipRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """
    翻牌

    比對中、重複點擊、已配對的牌都會被忽略（不回傳錯誤）
    """
    try:
        session = manager.get_session(session_id)
        session.flip(flip_data.tile_id)
        return RoundStateResponse.from_snapshot(session.get_round_state())

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to flip tile: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{session_id}/rounds/acknowledge", response_model=RoundStateResponse)
def acknowledge_round_end(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    try:
        session = manager.get_session(session_id)
        session.acknowledge_round_end()
        return RoundStateResponse.from_snapshot(session.get_round_state())

    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Failed to acknowledge round end: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
