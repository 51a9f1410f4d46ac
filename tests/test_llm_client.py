import json
from types import SimpleNamespace

import pytest

from backend.core.config import MAX_INPUT_CHARS
from backend.exceptions import LLMError
from backend.infra import llm_client
from backend.infra.llm_client import (
    STRUCTURED_DATA_ERROR,
    TogetherAnalysisProvider,
    analysis_response_schema,
    build_user_message,
    parse_analysis_payload,
    truncate_input,
)
from tests.conftest import FakeTogether, make_payload


class TestTruncation:
    def test_short_text_untouched(self):
        assert truncate_input("hello") == "hello"

    def test_long_text_cut_at_limit(self):
        text = "a" * MAX_INPUT_CHARS + "TAIL"
        assert truncate_input(text) == "a" * MAX_INPUT_CHARS

    def test_user_message_never_contains_text_past_limit(self):
        text = "x" * MAX_INPUT_CHARS + "SECRET-BEYOND-LIMIT"
        message = build_user_message(text)
        assert "SECRET" not in message
        assert "x" * MAX_INPUT_CHARS in message
        assert message.startswith("Analyze this text:")


class TestParsePayload:
    def test_valid_json(self, payload_json):
        result = parse_analysis_payload(payload_json)
        assert result.intent == "Inform"

    def test_json_code_fence_stripped(self, payload_json):
        result = parse_analysis_payload(f"```json\n{payload_json}\n```")
        assert result.language == "English"

    def test_not_json_is_structured_data_error(self):
        with pytest.raises(LLMError, match="failed to return structured data"):
            parse_analysis_payload("Sorry, I cannot help with that.")

    def test_missing_field_is_total_failure(self):
        payload = make_payload()
        del payload["insights"]
        with pytest.raises(LLMError) as exc:
            parse_analysis_payload(json.dumps(payload))
        assert str(exc.value) == STRUCTURED_DATA_ERROR


class TestTogetherProvider:
    def test_request_contract(self, payload_json):
        fake = FakeTogether(content=payload_json)
        provider = TogetherAnalysisProvider(model="test-model", temperature=0.1, max_tokens=100, client=fake)

        provider.analyze("y" * (MAX_INPUT_CHARS + 10) + "OVERFLOW")

        call = fake.completions.calls[0]
        assert call["model"] == "test-model"
        assert call["temperature"] == 0.1
        assert call["messages"][0]["role"] == "system"
        assert "Emotions" in call["messages"][0]["content"]
        assert "OVERFLOW" not in call["messages"][1]["content"]
        assert call["response_format"]["type"] == "json_object"
        assert call["response_format"]["schema"] == analysis_response_schema()

    def test_returns_validated_result(self, payload_json):
        provider = TogetherAnalysisProvider(client=FakeTogether(content=payload_json))
        result = provider.analyze("some text")
        assert result.sentiment.label == "NEUTRAL"
        assert result.sentiment.score == 50

    def test_list_content_parts_are_merged(self, payload_json):
        half = len(payload_json) // 2
        content = [{"type": "text", "text": payload_json[:half]}, payload_json[half:]]
        provider = TogetherAnalysisProvider(client=FakeTogether(content=content))
        assert provider.analyze("text").intent == "Inform"

    def test_transport_error_wrapped(self):
        provider = TogetherAnalysisProvider(client=FakeTogether(error=ConnectionError("down")))
        with pytest.raises(LLMError):
            provider.analyze("text")

    @pytest.mark.parametrize(
        "response",
        [
            SimpleNamespace(choices=None),
            SimpleNamespace(choices=[]),
            SimpleNamespace(choices=[SimpleNamespace()]),
        ],
    )
    def test_malformed_response_is_structured_data_error(self, response):
        fake = FakeTogether()
        fake.completions.create = lambda **kwargs: response
        with pytest.raises(LLMError, match="structured data"):
            TogetherAnalysisProvider(client=fake).analyze("text")

    def test_empty_content_is_structured_data_error(self):
        provider = TogetherAnalysisProvider(client=FakeTogether(content=""))
        with pytest.raises(LLMError, match="structured data"):
            provider.analyze("text")

    def test_missing_key_fails_only_on_request(self, monkeypatch, tmp_path):
        monkeypatch.delenv("TOGETHER_API_KEY", raising=False)
        monkeypatch.setattr(llm_client, "KEY_PATH", tmp_path / "missing.txt")

        provider = TogetherAnalysisProvider()  # 생성 시점에는 실패하지 않음
        with pytest.raises(LLMError):
            provider.analyze("text")
