# formai/api/analyze/services.py
import logging
from typing import Optional

from formai.api.analyze.coercion import CoercionResult, ResponseCoercer
from formai.api.analyze.fixtures import demo_analysis
from formai.api.analyze.prompts import build_analysis_messages, build_retry_messages
from formai.core.errors import (
    MissingInputError, RateLimitedError, ServiceUnavailableError, ValidationFailedError
)
from formai.models.analysis_request import AnalysisRequest
from formai.models.analysis_result import AnalysisResult
from formai.services.openai_service import OpenAIService
from formai.services.rate_limiter import RateLimiter
from formai.utils.naming import canonicalize_exercise_name

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    기구 사진 분석 파이프라인을 담당하는 서비스.

    요청 한도 확인 -> 입력 확인 -> (데모 응답 | 모델 호출) -> 응답 검증
    -> 검증 실패 시 출력 형태만 강조한 프롬프트로 1회 재시도 -> 이름 정규화

    재시도는 검증 실패에만 적용됩니다. 모델 호출 자체가 실패(타임아웃/HTTP 오류)하면
    재시도하지 않고 바로 실패로 처리합니다.
    """

    def __init__(self,
                 model_client: OpenAIService,
                 rate_limiter: RateLimiter,
                 coercer: Optional[ResponseCoercer] = None):
        self.model_client = model_client
        self.rate_limiter = rate_limiter
        self.coercer = coercer or ResponseCoercer()
        logger.info("AnalysisService initialized with dependencies.")

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        분석 요청 한 건을 처리합니다.

        :param request: 분석 요청
        :return: 검증 및 이름 정규화가 끝난 분석 결과
        :raises AnalysisError: 실패 종류별 하위 예외 (RateLimitedError, MissingInputError 등)
        """
        self.enforce_rate_limit(request.client_key)
        return self.process(request)

    def enforce_rate_limit(self, client_key: str):
        """
        요청 한도를 확인하고 이번 요청을 기록합니다.
        라우트는 요청 본문을 해석하기 전에 이 메서드를 호출합니다.

        :raises RateLimitedError: 윈도우 내 한도 초과
        """
        if not self.rate_limiter.check(client_key):
            logger.warning(f"요청 한도 초과: client={client_key}")
            raise RateLimitedError()

    def process(self, request: AnalysisRequest) -> AnalysisResult:
        """요청 한도 확인을 마친 요청을 분석합니다."""
        if not request.demo_mode and not request.image_data:
            raise MissingInputError()

        if request.demo_mode:
            return self._demo_result()

        if not self.model_client.is_configured:
            raise ServiceUnavailableError()

        coerced = self._attempt(build_analysis_messages(request.image_data, request.user_note), attempt=1)
        if not coerced.ok:
            logger.info("AI 응답 검증 실패, 출력 형태 프롬프트로 재시도합니다.")
            coerced = self._attempt(build_retry_messages(request.image_data), attempt=2)

        if not coerced.ok:
            logger.error(f"재시도 후에도 AI 응답 검증 실패: {coerced.error}")
            raise ValidationFailedError(details=coerced.error.to_dict())

        return self._canonicalize(coerced.data)

    def _attempt(self, messages, attempt: int) -> CoercionResult:
        logger.info(f"모델 호출 attempt={attempt} model={self.model_client.model}")
        content = self.model_client.complete_json(messages)
        return self.coercer.coerce(content)

    def _demo_result(self) -> AnalysisResult:
        coerced = self.coercer.coerce(demo_analysis())
        if not coerced.ok:
            raise ValidationFailedError(details=coerced.error.to_dict())
        return self._canonicalize(coerced.data)

    @staticmethod
    def _canonicalize(result: AnalysisResult) -> AnalysisResult:
        result.machine.name = canonicalize_exercise_name(result.machine.name)
        return result
