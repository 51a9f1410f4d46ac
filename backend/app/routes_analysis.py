# backend/app/routes_analysis.py
from __future__ import annotations
import logging
from typing import Literal, Optional, Union
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from backend.app.dependencies import get_analysis_service, get_session
from backend.domain.models import AnalysisResult, HistoryItem
from backend.domain.session import AnalysisSession
from backend.exceptions import (
    AnalysisBusyError,
    AnalysisError,
    ExampleNotFoundError,
    ExtractionError,
)
from backend.services.analysis_service import AnalysisService

logger = logging.getLogger(__name__)
router = APIRouter()

# ---------------------------
# 요청(Request) 스키마
# ---------------------------

class AnalyzeRequest(BaseModel):
    text: str = Field(..., description="분석할 원문 (앞 5000자만 엔진으로 전송)")

# ---------------------------
# 응답(Response) 스키마
# ---------------------------

class AnalyzeSuccessResponse(BaseModel):
    status: Literal["ok"] = "ok"
    history_id: str
    timestamp: str
    result: AnalysisResult


class AnalyzeSkippedResponse(BaseModel):
    """빈 입력/공백 입력: 분석하지 않음 (오류 아님)."""
    status: Literal["skipped"] = "skipped"


class AnalyzeErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error_type: str
    message: str


AnalyzeResponse = Union[AnalyzeSuccessResponse, AnalyzeSkippedResponse, AnalyzeErrorResponse]


def _error(error_type: str, message: str, status_code: int = 200) -> JSONResponse:
    body = AnalyzeErrorResponse(error_type=error_type, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _success(item: Optional[HistoryItem]) -> AnalyzeResponse:
    if item is None:
        return AnalyzeSkippedResponse()
    return AnalyzeSuccessResponse(
        history_id=item.id,
        timestamp=item.timestamp,
        result=item.result,
    )

# ---------------------------
# 라우트
# ---------------------------

@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_text_route(
    req: AnalyzeRequest,
    session: AnalysisSession = Depends(get_session),
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    텍스트 분석 API.

    - 입력: 원문 텍스트
    - 출력: 분석 결과 + 히스토리 id (세션 히스토리에 기록됨)
    """
    try:
        item = await service.analyze(session, req.text)
        return _success(item)

    except AnalysisBusyError as e:
        return _error("busy", str(e), status_code=409)

    except AnalysisError as e:
        return _error("analysis_error", str(e))

    except Exception:
        logger.exception("예상치 못한 내부 오류")
        return _error("internal_error", "Internal server error. Please try again later.")


@router.post("/analyze/file", response_model=AnalyzeResponse)
async def analyze_file_route(
    file: UploadFile = File(...),
    session: AnalysisSession = Depends(get_session),
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    파일 업로드 → 텍스트 추출 → 바로 분석.

    .pdf (앞 10페이지), .docx, .txt 및 기타 텍스트 파일
    """
    try:
        data = await file.read()
        item = await service.analyze_file(session, file.filename or "", data)
        return _success(item)

    except AnalysisBusyError as e:
        return _error("busy", str(e), status_code=409)

    except ExtractionError as e:
        return _error("extraction_error", str(e))

    except AnalysisError as e:
        return _error("analysis_error", str(e))

    except Exception:
        logger.exception("파일 처리 중 예상치 못한 오류")
        session.error = "Failed to process file."
        return _error("internal_error", "Failed to process file.")

    finally:
        await file.close()


@router.post("/analyze/example/{title}", response_model=AnalyzeResponse)
async def analyze_example_route(
    title: str,
    session: AnalysisSession = Depends(get_session),
    service: AnalysisService = Depends(get_analysis_service),
):
    """섹터 예시(Finance, Healthcare, ...)를 입력으로 넣고 바로 분석."""
    try:
        item = await service.analyze_example(session, title)
        return _success(item)

    except ExampleNotFoundError:
        return _error("not_found", f"Unknown example: {title}", status_code=404)

    except AnalysisBusyError as e:
        return _error("busy", str(e), status_code=409)

    except AnalysisError as e:
        return _error("analysis_error", str(e))

    except Exception:
        logger.exception("예상치 못한 내부 오류")
        return _error("internal_error", "Internal server error. Please try again later.")
