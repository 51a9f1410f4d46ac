# backend/services/analysis_service.py
from __future__ import annotations

import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from backend.domain.models import HistoryItem
from backend.domain.session import AnalysisSession
from backend.exceptions import (
    AnalysisBusyError,
    AnalysisError,
    ExampleNotFoundError,
    ExtractionError,
    LLMError,
)
from backend.infra.example_repo import find_sector_example
from backend.infra.file_extract import extract_text
from backend.infra.llm_client import AnalysisProvider

logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Analysis failed. The engine might be under heavy load."
BUSY_MESSAGE = "An analysis is already in progress."


class AnalysisService:
    """
    입력 → 분석 요청 → 히스토리 기록 흐름을 담당하는 서비스 진입점.

    - 세션 상태(AnalysisSession)는 호출자가 넘겨준다 (전역 상태 X)
    - 세션당 분석 요청은 동시에 1개만. 진행 중에 들어온 요청은 AnalysisBusyError 로 거절
    - 빈 입력/공백 입력은 provider 를 부르지 않고 None 반환 (오류 아님)
    - 실패해도 세션은 다시 입력 가능한 상태로 돌아간다 (loading 해제)
    """

    def __init__(self, provider: AnalysisProvider):
        self.provider = provider

    def _begin(self, session: AnalysisSession) -> None:
        if session.loading:
            raise AnalysisBusyError(BUSY_MESSAGE)
        session.loading = True
        session.error = None

    async def _run_provider(self, session: AnalysisSession, text: str) -> HistoryItem:
        try:
            # SDK 호출이 blocking 이므로 스레드풀에서 실행
            result = await run_in_threadpool(self.provider.analyze, text)
        except LLMError as e:
            logger.warning("분석 실패 (session=%s): %s", session.session_id, e)
            session.error = ANALYSIS_FAILED
            raise AnalysisError(ANALYSIS_FAILED) from e
        except Exception as e:
            # provider 구현이 LLMError 로 감싸지 못한 예외도 호출자에게는 같은 실패 하나
            logger.exception("분석 엔진 예기치 못한 오류 (session=%s)", session.session_id)
            session.error = ANALYSIS_FAILED
            raise AnalysisError(ANALYSIS_FAILED) from e

        session.current_result = result
        item = session.history.record(text, result)
        logger.info(
            "분석 완료 (session=%s, history_id=%s, sentiment=%s)",
            session.session_id,
            item.id,
            result.sentiment.label,
        )
        return item

    async def analyze(
        self,
        session: AnalysisSession,
        text: Optional[str] = None,
    ) -> Optional[HistoryItem]:
        """
        텍스트 분석. text 를 주면 세션 입력 텍스트도 그 값으로 바꾼다.

        진행 중인 분석이 있으면 세션을 건드리지 않고 AnalysisBusyError.
        """
        candidate = session.text if text is None else text

        if not candidate or not candidate.strip():
            if text is not None and not session.loading:
                session.text = text
            return None

        self._begin(session)
        session.text = candidate
        text = candidate
        try:
            return await self._run_provider(session, text)
        finally:
            session.loading = False

    async def analyze_file(
        self,
        session: AnalysisSession,
        filename: str,
        data: bytes,
    ) -> Optional[HistoryItem]:
        """
        업로드 파일에서 텍스트를 뽑고 바로 분석한다. (auto-analyze-on-upload)

        추출 실패 시 session.error 에 사용자 메시지를 남기고 ExtractionError 를 그대로 올린다.
        """
        self._begin(session)
        try:
            try:
                text = await run_in_threadpool(extract_text, filename, data)
            except ExtractionError as e:
                session.error = str(e)
                raise

            session.text = text
            if not text.strip():
                return None
            return await self._run_provider(session, text)
        finally:
            session.loading = False

    async def analyze_example(self, session: AnalysisSession, title: str) -> Optional[HistoryItem]:
        example = find_sector_example(title)
        if example is None:
            raise ExampleNotFoundError(title)
        return await self.analyze(session, example["text"])

    def select_history(self, session: AnalysisSession, item_id: str) -> HistoryItem:
        """히스토리 항목을 현재 화면 상태로 복원. provider 호출 없음."""
        item = session.history.select(item_id)
        session.current_result = item.result
        session.text = item.text
        session.error = None
        return item

    def clear(self, session: AnalysisSession) -> None:
        """입력/결과/오류 초기화. 히스토리는 유지."""
        session.text = ""
        session.current_result = None
        session.error = None
