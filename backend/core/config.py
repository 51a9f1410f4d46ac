# backend/core/config.py
from pathlib import Path
import os

from dotenv import load_dotenv

# 프로젝트 루트 디렉토리
BASE_DIR = Path(__file__).resolve().parents[2]

# 프론트엔드 템플릿 / 정적 파일 경로
TEMPLATES_DIR = BASE_DIR / "frontend" / "templates"
STATIC_DIR = BASE_DIR / "frontend" / "static"

# .env 로딩
ENV_PATH = BASE_DIR / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


# 로그 레벨 (.env의 LOG_LEVEL로 조절, 기본 INFO)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS 설정
# - .env 에 CORS_ORIGINS="http://localhost:3000,http://127.0.0.1:8000" 처럼 넣으면 그 값 사용
# - 없으면 기본으로 전부 허용(["*"])
_cors_raw = os.getenv("CORS_ORIGINS", "")
if _cors_raw:
    CORS_ORIGINS = [o.strip() for o in _cors_raw.split(",") if o.strip()]
else:
    CORS_ORIGINS = ["*"]

# LLM(Together) 설정
# - 분석 지연을 줄이기 위해 reasoning 모델이 아닌 instruct 모델 + 낮은 temperature 사용
TOGETHER_CHAT_MODEL = os.getenv(
    "TOGETHER_CHAT_MODEL",
    "meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo",
)
TOGETHER_TEMPERATURE = _env_float("TOGETHER_TEMPERATURE", 0.1)
TOGETHER_MAX_TOKENS = _env_int("TOGETHER_MAX_TOKENS", 4096)

# 분석 입력/히스토리 한도 (고정값)
MAX_INPUT_CHARS = 5000
HISTORY_LIMIT = 10
HISTORY_TEXT_CHARS = 100
PDF_MAX_PAGES = 10

# 브라우저 음성 인식 사용 여부 (끄면 마이크 버튼이 숨겨짐)
SPEECH_ENABLED = _env_bool("SPEECH_ENABLED", True)

# 세션 쿠키 이름
SESSION_COOKIE = "session_id"
