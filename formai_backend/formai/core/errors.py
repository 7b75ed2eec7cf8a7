# formai/core/errors.py
"""
분석 API의 에러 분류 체계.

모든 실패는 AnalysisError 하위 예외로 표현되며, 라우트(또는 전역 에러 핸들러)에서
{"error": ..., "error_code": ..., "details": ...} JSON과 HTTP 상태 코드로 변환됩니다.
"""
from typing import Any, Dict, Optional


class AnalysisError(Exception):
    """분석 파이프라인에서 발생하는 모든 실패의 기반 클래스."""
    status_code = 500
    error_code = "ANALYSIS_FAILED"
    default_message = "분석 처리 중 오류가 발생했습니다."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "error_code": self.error_code}
        if self.details:
            body["details"] = self.details
        return body


class RateLimitedError(AnalysisError):
    status_code = 429
    error_code = "RATE_LIMITED"
    default_message = "요청 한도를 초과했습니다. 잠시 후 다시 시도해주세요."


class MissingInputError(AnalysisError):
    status_code = 422
    error_code = "MISSING_INPUT"
    default_message = "요청에 이미지가 없습니다."


class MalformedRequestError(AnalysisError):
    status_code = 400
    error_code = "MALFORMED_REQUEST"
    default_message = "잘못된 요청 형식입니다."


class ServiceUnavailableError(AnalysisError):
    """OpenAI 자격 증명이 설정되지 않은 경우."""
    status_code = 500
    error_code = "SERVICE_UNAVAILABLE"
    default_message = "서버에 OPENAI_API_KEY가 설정되지 않았습니다. 설정 후 다시 배포해주세요."


class UpstreamTimeoutError(AnalysisError):
    status_code = 500
    error_code = "UPSTREAM_TIMEOUT"
    default_message = "AI 응답 시간이 초과되었습니다. 다시 시도해주세요."


class UpstreamError(AnalysisError):
    """모델 제공자의 전송/HTTP 오류 (타임아웃 제외)."""
    status_code = 500
    error_code = "UPSTREAM_ERROR"
    default_message = "AI 서비스 호출에 실패했습니다."

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None):
        details = {"upstreamStatus": upstream_status} if upstream_status is not None else None
        super().__init__(message, details)
        self.upstream_status = upstream_status


class ValidationFailedError(AnalysisError):
    """재시도 후에도 AI 응답이 스키마 검증을 통과하지 못한 경우."""
    status_code = 500
    error_code = "VALIDATION_FAILED"
    default_message = "AI 응답(JSON)을 파싱/검증하지 못했습니다."
