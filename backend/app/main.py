#backend/app/main.py
from __future__ import annotations
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend.core.config import CORS_ORIGINS, STATIC_DIR, LOG_LEVEL, SESSION_COOKIE
from backend.app.routes_analysis import router as analysis_router
from backend.app.routes_pages import router as pages_router
from backend.app.routes_health import router as health_router
from backend.app.routes_session import router as session_router
from backend.app.routes_speech import router as speech_router
from backend.domain.session import SessionStore
from backend.infra.llm_client import AnalysisProvider, TogetherAnalysisProvider
from backend.services.analysis_service import AnalysisService

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)

def create_app(provider: Optional[AnalysisProvider] = None) -> FastAPI:
    """
    provider 를 넘기면 그 분석 엔진을 사용 (테스트용 stub 등).
    없으면 Together 기반 엔진. API 키는 첫 분석 요청 때 읽는다.
    """
    app = FastAPI(
        title="Text Insight Analyzer",
        version="0.1.0",
    )

    app.state.sessions = SessionStore()
    app.state.analysis_service = AnalysisService(provider or TogetherAnalysisProvider())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def session_cookie(request: Request, call_next):
        # 브라우저 세션 쿠키(만료시간 없음) 기준으로 세션을 찾거나 새로 만든다
        cookie_id = request.cookies.get(SESSION_COOKIE)
        session = app.state.sessions.get_or_create(cookie_id)
        request.state.session = session

        response = await call_next(request)
        if cookie_id != session.session_id:
            response.set_cookie(SESSION_COOKIE, session.session_id, httponly=True, samesite="lax")
        return response

    app.include_router(pages_router)
    app.include_router(analysis_router)
    app.include_router(session_router)
    app.include_router(speech_router)
    app.include_router(health_router)

    app.mount(
        "/static",
        StaticFiles(directory=str(STATIC_DIR)),
        name="static",
    )

    logger.info("FastAPI 앱이 초기화되었습니다. (log_level=%s)", LOG_LEVEL)
    return app

app = create_app()
