# backend/infra/llm_client.py

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError
from together import Together

from backend.core.config import (
    MAX_INPUT_CHARS,
    TOGETHER_CHAT_MODEL,
    TOGETHER_MAX_TOKENS,
    TOGETHER_TEMPERATURE,
)
from backend.domain.models import AnalysisResult
from backend.exceptions import LLMError
from backend.infra.paths import KEY_PATH
from backend.infra.prompts import load_system_prompt, render_user_prompt

logger = logging.getLogger(__name__)

STRUCTURED_DATA_ERROR = "Analysis engine failed to return structured data."

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class AnalysisProvider(Protocol):
    """분석 엔진 인터페이스. 실패는 전부 LLMError 하나로 올린다."""

    def analyze(self, text: str) -> AnalysisResult:
        ...


def truncate_input(text: str) -> str:
    """provider 로 보내기 전 앞 MAX_INPUT_CHARS(5000)자만 남긴다. (경고 없음)"""
    return text[:MAX_INPUT_CHARS]


@lru_cache
def analysis_response_schema() -> Dict[str, Any]:
    """구조화 출력 모드에 넘기는 JSON 스키마 (AnalysisResult 의 모든 필드 required)."""
    return AnalysisResult.model_json_schema()


def _load_together_api_key() -> str:
    """
    Together API 키를 로딩한다.
    1순위: 환경변수 TOGETHER_API_KEY
    2순위: conf/key-togetherai.txt
    둘 다 없으면 LLMError 발생. (요청 시점에만 검사)
    """
    key = os.getenv("TOGETHER_API_KEY")
    if key:
        return key.strip()

    if KEY_PATH.exists():
        content = KEY_PATH.read_text(encoding="utf-8").strip()
        if content:
            return content

    raise LLMError(
        "Together API 키를 찾을 수 없습니다. "
        "환경변수 TOGETHER_API_KEY 또는 conf/key-togetherai.txt를 설정해 주세요."
    )


def build_user_message(text: str) -> str:
    """5000자로 자른 입력을 유저 프롬프트 템플릿에 넣어 최종 user 메시지를 만든다."""
    return render_user_prompt(truncate_input(text))


def _message_text(response: Any) -> str:
    """SDK 응답에서 content 문자열만 꺼낸다."""
    message = response.choices[0].message
    content = getattr(message, "content", None)

    if not content:
        raise ValueError("LLM 응답 content가 비어 있습니다.")

    # 일부 버전에서 content가 list일 수 있으므로 텍스트 조각만 합친다
    if isinstance(content, list):
        merged: list[str] = []
        for part in content:
            if isinstance(part, dict):
                text = part.get("text")
                if text:
                    merged.append(text)
            elif isinstance(part, str):
                merged.append(part)
        return "".join(merged).strip()

    return str(content).strip()


def parse_analysis_payload(raw: str) -> AnalysisResult:
    """
    provider 원문을 AnalysisResult 로 파싱/검증한다.

    - ```json ... ``` 코드블럭은 벗겨낸다
    - JSON 파싱 실패 / 필드 누락 / 타입 불일치 → LLMError (부분 결과 허용 X)
    """
    payload = (raw or "").strip()
    m = _FENCE_RE.match(payload)
    if m:
        payload = m.group(1)

    try:
        return AnalysisResult.model_validate_json(payload)
    except ValidationError as e:
        logger.error("분석 응답 스키마 검증 실패: %s", e.errors()[:3])
        raise LLMError(STRUCTURED_DATA_ERROR) from e


class TogetherAnalysisProvider:
    """
    Together chat completions 기반 분석 엔진.

    - system: analysis-system-prompt.txt
    - user:   analysis-user-prompt.txt (+ {{text}} 치환, 5000자 제한)
    - response_format: AnalysisResult JSON 스키마 (구조화 출력 모드)

    재시도/백오프/타임아웃 없음. 호출 1번 = 성공 또는 LLMError.
    """

    def __init__(
        self,
        model: str = TOGETHER_CHAT_MODEL,
        temperature: float = TOGETHER_TEMPERATURE,
        max_tokens: int = TOGETHER_MAX_TOKENS,
        client: Optional[Together] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    def _get_client(self) -> Together:
        # 키 검사는 실제 요청 시점까지 미룬다
        if self._client is None:
            self._client = Together(api_key=_load_together_api_key())
            logger.info("Together 클라이언트가 초기화되었습니다.")
        return self._client

    def build_request(self, text: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": load_system_prompt()},
                {"role": "user", "content": build_user_message(text)},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "response_format": {
                "type": "json_object",
                "schema": analysis_response_schema(),
            },
        }

    def analyze(self, text: str) -> AnalysisResult:
        request = self.build_request(text)
        client = self._get_client()

        # ====== LLM 호출 ======
        try:
            logger.info(
                "Together LLM 호출 시작: model=%s, temperature=%s, max_tokens=%s",
                self.model,
                self.temperature,
                self.max_tokens,
            )
            response = client.chat.completions.create(**request)
        except Exception as e:
            # 네트워크, 인증 실패 등 모든 예외를 LLMError로 래핑
            logger.exception("LLM 호출 중 예외 발생")
            raise LLMError(f"LLM 호출 중 오류가 발생했습니다: {e}") from e

        # ====== 응답 파싱 ======
        # choices 가 None / 비어 있음 / message 누락 등 응답 모양이 깨진 경우 전부 포함
        try:
            raw = _message_text(response)
        except Exception as e:
            logger.exception("LLM 응답 파싱 중 예외 발생")
            raise LLMError(STRUCTURED_DATA_ERROR) from e

        return parse_analysis_payload(raw)
