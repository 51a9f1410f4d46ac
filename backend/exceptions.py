# backend/exceptions.py
"""
프로젝트 전역에서 공통으로 사용하는 예외 정의 모듈.

- ConfigError          : 설정/환경(.env, 키 파일, 프롬프트 파일 등) 문제
- ExtractionError      : 업로드 파일(PDF/DOCX/텍스트)에서 텍스트 추출 실패
- AnalysisError        : 분석 흐름(세션/오케스트레이션) 전체 실패
- AnalysisBusyError    : 같은 세션에서 이미 분석 요청이 진행 중
- HistoryNotFoundError : 세션 히스토리에 없는 항목 선택
- ExampleNotFoundError : 없는 섹터 예시 선택
- SpeechCaptureError   : 음성 입력 세션 시작/중복 문제
- LLMError             : LLM 호출 및 응답 파싱/스키마 검증 실패
"""


class ConfigError(RuntimeError):
    """환경 설정(.env, 키 파일, 프롬프트 파일 등) 문제."""
    pass


class ExtractionError(ValueError):
    """업로드 파일 텍스트 추출 실패. message 는 그대로 사용자에게 노출된다."""
    pass


class AnalysisError(RuntimeError):
    """분석 흐름 전체 실패."""
    pass


class AnalysisBusyError(AnalysisError):
    """이미 분석이 진행 중인 세션에 새 분석 요청이 들어옴."""
    pass


class HistoryNotFoundError(KeyError):
    """세션 히스토리에 존재하지 않는 항목."""
    pass


class ExampleNotFoundError(KeyError):
    """존재하지 않는 섹터 예시."""
    pass


class SpeechCaptureError(RuntimeError):
    """음성 입력 세션 관련 오류."""
    pass


class LLMError(RuntimeError):
    """LLM 호출, 응답 포맷, 파싱 과정에서 발생하는 오류."""
    pass
