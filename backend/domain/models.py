# backend/domain/models.py
# LLM 분석 엔진이 돌려주는 구조화 결과(응답 계약)와 세션 히스토리 항목.
# 필드명은 provider 응답(JSON) 그대로 camelCase 를 유지한다.

from __future__ import annotations

from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict

SentimentLabel = Literal["POSITIVE", "NEGATIVE", "NEUTRAL"]


class _Contract(BaseModel):
    """응답 계약 공통 설정: 모든 필드 필수, 모르는 필드는 무시."""
    model_config = ConfigDict(extra="ignore")


class Sentiment(_Contract):
    label: SentimentLabel
    score: float                 # 0~100 강도 (로컬에서 정규화하지 않음)


class SentimentSegment(_Contract):
    segment: str
    score: float


class EntityTypeCount(_Contract):
    type: str
    count: float


class Emotion(_Contract):
    label: str
    score: float
    emoji: str


class Topic(_Contract):
    id: Union[int, float]   # 정수 id 는 int 그대로 유지
    label: str
    relevance: float


class Entity(_Contract):
    type: str
    name: str
    count: float


class Summary(_Contract):
    ultraConcise: str
    detailed: List[str]


class Preprocessing(_Contract):
    """provider 내부 전처리 결과 (로컬 계산 X, 진단용)"""
    tokens: List[str]
    stopsRemoved: float
    lemmas: List[str]


class AnalysisResult(_Contract):
    """분석 엔진 응답 전체. 필드가 하나라도 빠지면 검증 실패."""
    language: str
    sentiment: Sentiment
    sentimentProgression: List[SentimentSegment]
    entityDistribution: List[EntityTypeCount]
    emotions: List[Emotion]
    topics: List[Topic]
    keywords: List[str]
    entities: List[Entity]
    summary: Summary
    intent: str
    insights: List[str]
    preprocessing: Preprocessing


class HistoryItem(BaseModel):
    """세션 히스토리 한 건 (불변 스냅샷)."""
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str               # 화면 표시용 캡처 시각 (HH:MM:SS)
    text: str                    # 원문 앞 100자
    result: AnalysisResult
