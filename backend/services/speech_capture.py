# backend/services/speech_capture.py
"""
음성 입력(speech-to-text) 세션.

브라우저의 SpeechRecognition(continuous + interimResults)이 보내는 이벤트를
비동기 스트림으로 받아, 확정(final)된 구간만 세션 텍스트 뒤에 공백 하나로 이어 붙인다.

- 중간(interim) 결과는 무시
- stop() 호출, 스트림 종료(end), 인식 오류(error) 중 무엇이든 listening 은 False 로 돌아간다
- 세션당 동시에 하나만 듣는다
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from typing import AsyncIterator, Literal, Optional

from backend.domain.session import AnalysisSession
from backend.exceptions import SpeechCaptureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeechEvent:
    """인식 이벤트 1건.

    - kind: "result" (인식 결과) / "error" (인식 오류) / "end" (인식 종료)
    - transcript: 인식된 문장
    - is_final: 확정 결과 여부
    """

    kind: Literal["result", "error", "end"] = "result"
    transcript: str = ""
    is_final: bool = False


def append_transcript(text: str, transcript: str) -> str:
    """기존 텍스트 뒤에 공백 하나를 두고 붙인다. (비어 있으면 공백 없이)"""
    return text + (" " if text else "") + transcript


class SpeechCapture:
    def __init__(self, session: AnalysisSession, events: AsyncIterator[SpeechEvent]):
        self.session = session
        self._events = events
        self._task: Optional[asyncio.Task] = None
        self.listening = False
        self.error: Optional[str] = None

    def start(self) -> asyncio.Task:
        if self._task is not None:
            raise SpeechCaptureError("이미 시작된 음성 입력 세션입니다.")
        self.listening = True
        self._task = asyncio.create_task(self._run())
        return self._task

    async def _run(self) -> None:
        try:
            async for event in self._events:
                if event.kind == "error":
                    self.error = event.transcript or "recognition error"
                    logger.info("음성 인식 오류로 종료: %s", self.error)
                    break
                if event.kind == "end":
                    break
                if event.is_final and event.transcript:
                    self.session.text = append_transcript(self.session.text, event.transcript)
        finally:
            self.listening = False

    async def stop(self) -> None:
        """사용자 중지. 진행 중인 수신 task 를 취소하고 끝날 때까지 기다린다."""
        self.listening = False
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task

    async def wait(self) -> None:
        """수신이 끝날 때까지 기다린다. stop() 으로 취소된 경우도 정상 종료로 본다."""
        if self._task is None:
            return
        await asyncio.wait({self._task})
        if not self._task.cancelled() and self._task.exception() is not None:
            raise self._task.exception()


def start_speech_capture(
    session: AnalysisSession,
    events: AsyncIterator[SpeechEvent],
) -> SpeechCapture:
    """세션에 새 음성 입력을 붙여 시작한다. 이미 듣는 중이면 SpeechCaptureError."""
    if session.listening:
        raise SpeechCaptureError("이미 음성 입력이 진행 중입니다.")
    capture = SpeechCapture(session, events)
    session.speech = capture
    capture.start()
    return capture
