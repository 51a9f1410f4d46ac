"""공용 fixture: 고정 분석 결과, stub 분석 엔진, TestClient."""

import copy
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from backend.app.main import create_app
from backend.domain.models import AnalysisResult
from backend.exceptions import LLMError
from backend.infra.llm_client import parse_analysis_payload

FINANCE_TEXT = (
    "Global equity markets experienced significant volatility today as central banks "
    "signaled a more hawkish stance on interest rates. While tech stocks led the morning "
    "decline, energy sectors rebounded slightly due to supply constraints. Analysts predict "
    "a 'wait-and-see' approach for the next quarter as inflation data stabilizes."
)

SAMPLE_PAYLOAD: Dict[str, Any] = {
    "language": "English",
    "sentiment": {"label": "NEUTRAL", "score": 50},
    "sentimentProgression": [
        {"segment": "Opening", "score": 40},
        {"segment": "Decline", "score": 30},
        {"segment": "Rebound", "score": 60},
        {"segment": "Outlook", "score": 55},
        {"segment": "Close", "score": 50},
    ],
    "entityDistribution": [
        {"type": "ORGANIZATION", "count": 2},
        {"type": "CONCEPT", "count": 3},
    ],
    "emotions": [
        {"label": "Joy", "score": 10, "emoji": "😊"},
        {"label": "Trust", "score": 40, "emoji": "🤝"},
        {"label": "Fear", "score": 55, "emoji": "😨"},
        {"label": "Surprise", "score": 20, "emoji": "😲"},
        {"label": "Sadness", "score": 15, "emoji": "😢"},
        {"label": "Disgust", "score": 5, "emoji": "🤢"},
        {"label": "Anger", "score": 5, "emoji": "😠"},
        {"label": "Anticipation", "score": 70, "emoji": "🤔"},
    ],
    "topics": [
        {"id": 1, "label": "Interest Rates", "relevance": 90},
        {"id": 2, "label": "Equity Markets", "relevance": 80},
    ],
    "keywords": ["volatility", "hawkish", "inflation"],
    "entities": [
        {"type": "ORGANIZATION", "name": "central banks", "count": 1},
        {"type": "CONCEPT", "name": "tech stocks", "count": 1},
        {"type": "CONCEPT", "name": "energy sectors", "count": 1},
    ],
    "summary": {
        "ultraConcise": "Markets wobble on hawkish rate signals.",
        "detailed": ["Tech led declines.", "Energy rebounded on supply limits."],
    },
    "intent": "Inform",
    "insights": ["Expect cautious positioning until inflation data settles."],
    "preprocessing": {
        "tokens": ["global", "equity", "markets"],
        "stopsRemoved": 12,
        "lemmas": ["market", "signal"],
    },
}


def make_payload(**overrides: Any) -> Dict[str, Any]:
    payload = copy.deepcopy(SAMPLE_PAYLOAD)
    payload.update(overrides)
    return payload


class FakeProvider:
    """AnalysisProvider stub. raw 를 주면 실제 파싱 경로를 그대로 탄다."""

    def __init__(
        self,
        payload: Optional[Dict[str, Any]] = None,
        raw: Optional[str] = None,
        error: Optional[Exception] = None,
    ):
        self.payload = payload if payload is not None else make_payload()
        self.raw = raw
        self.error = error
        self.calls: List[str] = []

    def analyze(self, text: str) -> AnalysisResult:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return parse_analysis_payload(self.raw)
        return AnalysisResult.model_validate(self.payload)


class FakeCompletions:
    def __init__(self, content: Any = None, error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeTogether:
    """together.Together 의 chat.completions.create 만 흉내낸다."""

    def __init__(self, content: Any = None, error: Optional[Exception] = None):
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    return make_payload()


@pytest.fixture
def sample_result() -> AnalysisResult:
    return AnalysisResult.model_validate(make_payload())


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def failing_provider() -> FakeProvider:
    return FakeProvider(error=LLMError("boom"))


@pytest.fixture
def client(provider):
    app = create_app(provider=provider)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def payload_json() -> str:
    return json.dumps(make_payload())
