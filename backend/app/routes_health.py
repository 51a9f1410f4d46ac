# backend/app/routes_health.py

from __future__ import annotations
from fastapi import APIRouter, Depends

from backend.app.dependencies import get_session_store
from backend.core.config import SPEECH_ENABLED
from backend.domain.session import SessionStore

router = APIRouter()

@router.get("/health")
async def health(store: SessionStore = Depends(get_session_store)):
    """
    단순 헬스 체크 엔드포인트.

    - 서버가 살아있는지 + 메모리에 떠 있는 세션 수
    - LLM 키 유효성은 여기서 검사하지 않음 (실제 분석 요청 시점에만 실패)
    """
    return {
        "status": "ok",
        "service": "text-insight-analyzer",
        "sessions": len(store),
        "speech_enabled": SPEECH_ENABLED,
    }
