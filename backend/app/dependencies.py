# backend/app/dependencies.py
from __future__ import annotations

from fastapi import Request

from backend.domain.session import AnalysisSession, SessionStore
from backend.services.analysis_service import AnalysisService


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


def get_session(request: Request) -> AnalysisSession:
    """session_cookie 미들웨어가 요청마다 붙여 둔 세션."""
    return request.state.session
