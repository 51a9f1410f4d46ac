# backend/app/routes_pages.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from backend.app.dependencies import get_session
from backend.core.config import SPEECH_ENABLED, TEMPLATES_DIR
from backend.domain.session import AnalysisSession
from backend.infra.example_repo import load_sector_examples
from backend.infra.file_extract import ACCEPTED_EXTENSIONS
from backend.services.report_renderer import build_report, render_charts

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse)
async def show_index(request: Request, session: AnalysisSession = Depends(get_session)):
    """
    입력 화면.

    텍스트 입력/붙여넣기, 파일 업로드, (지원 시) 음성 입력,
    섹터 예시, 세션 히스토리 사이드바를 보여준다.
    """
    return templates.TemplateResponse(
        request,
        "input.html",
        {
            "session": session,
            "history": session.history.items(),
            "examples": load_sector_examples(),
            "speech_enabled": SPEECH_ENABLED,
            "accept": ",".join(ACCEPTED_EXTENSIONS),
        },
    )


@router.get("/result", response_class=HTMLResponse)
async def show_result(request: Request, session: AnalysisSession = Depends(get_session)):
    """
    분석 결과 페이지.

    세션의 현재 결과로 리포트를 만들고 차트는 서버에서 SVG 로 그려 넣는다.
    결과가 없으면 입력 화면으로 돌려보낸다.
    """
    if session.current_result is None:
        return RedirectResponse(url="/", status_code=303)

    report = build_report(session.current_result)
    return templates.TemplateResponse(
        request,
        "result.html",
        {
            "session": session,
            "history": session.history.items(),
            "report": report,
            "charts": render_charts(report),
        },
    )
