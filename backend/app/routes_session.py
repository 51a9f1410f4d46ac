# backend/app/routes_session.py
from __future__ import annotations
import logging
from typing import Dict, List, Literal, Optional
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from backend.app.dependencies import get_analysis_service, get_session
from backend.core.config import SPEECH_ENABLED
from backend.domain.models import AnalysisResult, HistoryItem
from backend.domain.session import AnalysisSession
from backend.exceptions import HistoryNotFoundError
from backend.infra.example_repo import load_sector_examples
from backend.services.analysis_service import AnalysisService

logger = logging.getLogger(__name__)
router = APIRouter()


class HistoryEntry(BaseModel):
    """사이드바 히스토리 목록 한 줄 (결과 본문은 select 로 가져옴)."""
    id: str
    timestamp: str
    text: str
    sentiment: str

    @classmethod
    def from_item(cls, item: HistoryItem) -> "HistoryEntry":
        return cls(
            id=item.id,
            timestamp=item.timestamp,
            text=item.text,
            sentiment=item.result.sentiment.label,
        )


class SessionState(BaseModel):
    text: str
    loading: bool
    listening: bool
    error: Optional[str] = None
    speech_enabled: bool
    result: Optional[AnalysisResult] = None


class SelectResponse(BaseModel):
    status: Literal["ok"] = "ok"
    text: str
    result: AnalysisResult


def _state(session: AnalysisSession) -> SessionState:
    return SessionState(
        text=session.text,
        loading=session.loading,
        listening=session.listening,
        error=session.error,
        speech_enabled=SPEECH_ENABLED,
        result=session.current_result,
    )


@router.get("/history", response_model=List[HistoryEntry])
async def list_history(session: AnalysisSession = Depends(get_session)):
    """현재 세션 히스토리 (최신순, 최대 10개)."""
    return [HistoryEntry.from_item(item) for item in session.history.items()]


@router.post("/history/{item_id}/select", response_model=SelectResponse)
async def select_history(
    item_id: str,
    session: AnalysisSession = Depends(get_session),
    service: AnalysisService = Depends(get_analysis_service),
):
    """히스토리 항목을 현재 결과로 복원한다. (엔진 재호출 없음)"""
    try:
        item = service.select_history(session, item_id)
    except HistoryNotFoundError:
        return JSONResponse(
            status_code=404,
            content={"status": "error", "error_type": "not_found", "message": "History item not found."},
        )
    return SelectResponse(text=item.text, result=item.result)


@router.post("/clear", response_model=SessionState)
async def clear_session(
    session: AnalysisSession = Depends(get_session),
    service: AnalysisService = Depends(get_analysis_service),
):
    """입력/결과/오류 초기화. 히스토리는 남는다."""
    service.clear(session)
    return _state(session)


@router.get("/state", response_model=SessionState)
async def session_state(session: AnalysisSession = Depends(get_session)):
    """현재 입력 텍스트, 진행 상태, 음성 입력 여부 등 (프론트 폴링용)."""
    return _state(session)


@router.get("/examples", response_model=List[Dict[str, str]])
async def list_examples():
    return load_sector_examples()
