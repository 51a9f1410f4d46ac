# backend/domain/history.py
from __future__ import annotations

import time
from datetime import datetime
from typing import Callable, List, Optional

from backend.core.config import HISTORY_LIMIT, HISTORY_TEXT_CHARS
from backend.domain.models import AnalysisResult, HistoryItem
from backend.exceptions import HistoryNotFoundError


class SessionHistory:
    """
    세션 단위 분석 히스토리 (메모리 전용).

    - 최신 항목이 맨 앞 (most-recent-first)
    - 최대 HISTORY_LIMIT(10)개, 넘치면 가장 오래된 것부터 버림
    - 삭제/수정/영속화 없음. 세션이 사라지면 같이 사라진다.
    """

    def __init__(
        self,
        limit: int = HISTORY_LIMIT,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.limit = limit
        self._clock = clock or time.time
        self._items: List[HistoryItem] = []
        self._last_ms: int = -1
        self._same_ms_seq: int = 0

    def _next_id(self, now: float) -> str:
        # 캡처 시각(ms) 기반 id. 같은 ms 안에서 두 번 기록되면 "-1", "-2" 접미사로 구분
        ms = int(now * 1000)
        if ms == self._last_ms:
            self._same_ms_seq += 1
            return f"{ms}-{self._same_ms_seq}"
        self._last_ms = ms
        self._same_ms_seq = 0
        return str(ms)

    def record(self, text: str, result: AnalysisResult) -> HistoryItem:
        """새 분석 결과를 맨 앞에 추가하고 목록을 limit 개로 자른다."""
        now = self._clock()
        item = HistoryItem(
            id=self._next_id(now),
            timestamp=datetime.fromtimestamp(now).strftime("%H:%M:%S"),
            text=text[:HISTORY_TEXT_CHARS],
            result=result,
        )
        self._items = [item, *self._items][: self.limit]
        return item

    def select(self, item_id: str) -> HistoryItem:
        """저장된 스냅샷을 그대로 돌려준다. (provider 재호출 X)"""
        for item in self._items:
            if item.id == item_id:
                return item
        raise HistoryNotFoundError(item_id)

    def items(self) -> List[HistoryItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
