# backend/domain/session.py
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from backend.domain.history import SessionHistory
from backend.domain.models import AnalysisResult

if TYPE_CHECKING:
    from backend.services.speech_capture import SpeechCapture


@dataclass
class AnalysisSession:
    """브라우저 세션 하나의 상태.

    - text: 현재 입력 텍스트
    - current_result: 현재 화면에 보여줄 분석 결과 (없으면 입력 화면)
    - history: 최근 분석 히스토리 (세션 전용)
    - loading: 분석 요청 진행 중 여부. True 인 동안 새 분석은 거절된다.
    - error: 사용자에게 보여줄 마지막 오류 메시지
    - speech: 현재 음성 입력 세션 (최대 1개)
    """

    session_id: str
    text: str = ""
    current_result: Optional[AnalysisResult] = None
    history: SessionHistory = field(default_factory=SessionHistory)
    loading: bool = False
    error: Optional[str] = None
    speech: Optional["SpeechCapture"] = None

    @property
    def listening(self) -> bool:
        return self.speech is not None and self.speech.listening


class SessionStore:
    """session_id(쿠키) -> AnalysisSession 매핑. app.state 에 하나만 둔다."""

    def __init__(self):
        self._sessions: Dict[str, AnalysisSession] = {}

    def get_or_create(self, session_id: Optional[str]) -> AnalysisSession:
        if session_id and session_id in self._sessions:
            return self._sessions[session_id]
        # 모르는 id(서버 재시작 등)는 그대로 쓰지 않고 새로 발급
        new_id = uuid.uuid4().hex
        session = AnalysisSession(session_id=new_id)
        self._sessions[new_id] = session
        return session

    def get(self, session_id: str) -> Optional[AnalysisSession]:
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
