# backend/app/routes_speech.py
"""
브라우저 음성 인식 이벤트 수신용 websocket.

브라우저(SpeechRecognition)가 보내는 JSON 프레임
- {"transcript": "...", "isFinal": true}   인식 결과
- {"type": "error"} / {"type": "end"}      인식 오류 / 종료
- {"type": "stop"}                         사용자 중지
을 SpeechEvent 스트림으로 바꿔 SpeechCapture 에 넘긴다.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from backend.app.dependencies import get_session
from backend.core.config import SESSION_COOKIE, SPEECH_ENABLED
from backend.domain.session import AnalysisSession
from backend.exceptions import SpeechCaptureError
from backend.services.speech_capture import SpeechEvent, start_speech_capture

logger = logging.getLogger(__name__)
router = APIRouter()


async def _speech_events(websocket: WebSocket) -> AsyncIterator[SpeechEvent]:
    try:
        while True:
            frame = await websocket.receive_json()
            if not isinstance(frame, dict):
                continue
            kind = frame.get("type", "result")
            if kind == "stop":
                return
            if kind not in ("result", "error", "end"):
                continue
            yield SpeechEvent(
                kind=kind,
                transcript=str(frame.get("transcript") or ""),
                is_final=bool(frame.get("isFinal")),
            )
    except WebSocketDisconnect:
        return


@router.websocket("/ws/speech")
async def speech_socket(websocket: WebSocket):
    store = websocket.app.state.sessions
    session = store.get(websocket.cookies.get(SESSION_COOKIE) or "")
    await websocket.accept()

    # 음성 기능이 꺼져 있거나 세션이 없으면 조용히 닫는다 (오류 표시 X)
    if not SPEECH_ENABLED or session is None:
        await websocket.close()
        return

    try:
        capture = start_speech_capture(session, _speech_events(websocket))
    except SpeechCaptureError as e:
        await websocket.send_json({"type": "error", "message": str(e)})
        await websocket.close()
        return

    await websocket.send_json({"type": "listening"})
    await capture.wait()
    logger.info("음성 입력 종료 (session=%s)", session.session_id)

    if websocket.client_state == WebSocketState.CONNECTED:
        await websocket.send_json({"type": "stopped", "text": session.text})
        await websocket.close()


@router.post("/speech/stop")
async def stop_speech(session: AnalysisSession = Depends(get_session)):
    """진행 중인 음성 입력을 멈춘다. 듣고 있지 않으면 아무 일도 없음."""
    if session.speech is not None:
        await session.speech.stop()
    return {"status": "ok", "listening": session.listening, "text": session.text}
