# backend/infra/prompts.py
"""
분석 엔진 프롬프트 로딩.

- system: conf/instruct/analysis-system-prompt.txt (고정 지시문)
- user:   conf/instruct/analysis-user-prompt.txt ({{text}} 자리에 입력 텍스트)
"""
from functools import lru_cache
from pathlib import Path

from backend.exceptions import ConfigError
from backend.infra.paths import PROMPTS_SYSTEM_PATH, PROMPTS_USER_PATH

TEXT_PLACEHOLDER = "{{text}}"


def _read_prompt(path: Path, kind: str) -> str:
    if not path.exists():
        raise ConfigError(f"{kind} 프롬프트 파일이 없습니다: {path.name}")
    content = path.read_text(encoding="utf-8").strip()
    if not content:
        raise ConfigError(f"{kind} 프롬프트 파일이 비어 있습니다: {path.name}")
    return content


@lru_cache
def load_system_prompt() -> str:
    return _read_prompt(PROMPTS_SYSTEM_PATH, "system")


@lru_cache
def load_user_prompt() -> str:
    return _read_prompt(PROMPTS_USER_PATH, "user")


def render_user_prompt(text: str) -> str:
    """유저 프롬프트 템플릿에 텍스트를 끼워 넣는다. (placeholder 가 없으면 뒤에 붙임)"""
    template = load_user_prompt()
    if TEXT_PLACEHOLDER in template:
        return template.replace(TEXT_PLACEHOLDER, text)
    return f'{template}\n\nAnalyze this text: "{text}"'
