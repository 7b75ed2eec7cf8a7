# formai/services/openai_service.py
import logging
from typing import Any, Dict, List, Optional
from flask import Flask
from openai import OpenAI
from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAIError

from formai.core.errors import ServiceUnavailableError, UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)


class OpenAIService:
    """
    OpenAI Chat Completions(비전) API 연동을 담당하는 서비스 클래스.
    이미지와 지시문을 보내고 JSON 텍스트 응답 하나를 돌려받습니다.

    - 호출은 요청을 처리하는 스레드에서 바로 실행되며, 호출 1회마다 독립적인 제한 시간이 적용됩니다.
      제한 시간이 지나면 SDK가 요청을 중단하고 응답은 사용되지 않습니다.
    - SDK 자체의 자동 재시도는 끕니다. (재시도 정책은 AnalysisService가 결정)
    """

    def __init__(self):
        """
        OpenAI 클라이언트를 None으로 초기화합니다.
        실제 클라이언트는 init_app 메서드를 통해 설정됩니다.
        """
        self.client = None
        self.model = 'gpt-4o'
        self.timeout_seconds = 25.0
        self.temperature = 0.2

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.
        키가 없어도 앱은 기동됩니다. (데모 모드는 키 없이 동작해야 하므로)

        :param app: Flask 애플리케이션 객체
        """
        self.model = app.config.get('OPENAI_MODEL', self.model)
        self.timeout_seconds = float(app.config.get('OPENAI_TIMEOUT_SECONDS', self.timeout_seconds))
        self.temperature = float(app.config.get('OPENAI_TEMPERATURE', self.temperature))

        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            logger.warning("OpenAIService: OPENAI_API_KEY가 없습니다. 데모 모드만 사용할 수 있습니다.")
            return

        self.client = OpenAI(api_key=api_key, max_retries=0, timeout=self.timeout_seconds)
        logger.info(f"OpenAIService: OpenAI API 서비스가 초기화되었습니다. (model={self.model})")

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def complete_json(self, messages: List[Dict[str, Any]], timeout: Optional[float] = None) -> str:
        """
        메시지를 전송하고 모델의 텍스트 응답을 반환합니다. 응답이 비어 있으면 빈 문자열을 반환합니다.

        :param messages: system/user 메시지 목록 (user content에는 text와 image_url이 섞일 수 있음)
        :param timeout: 이번 호출의 제한 시간(초). 생략 시 설정값 사용
        :raises ServiceUnavailableError: 클라이언트가 설정되지 않은 경우
        :raises UpstreamTimeoutError: 제한 시간 초과
        :raises UpstreamError: 그 외 전송/HTTP 오류
        """
        if not self.client:
            raise ServiceUnavailableError()

        timeout = timeout or self.timeout_seconds
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                response_format={"type": "json_object"},
                timeout=timeout,
            )
        except APITimeoutError:
            logger.warning(f"OpenAI 호출 제한 시간 초과 ({timeout}s)")
            raise UpstreamTimeoutError()
        except APIStatusError as e:
            logger.error(f"OpenAI HTTP 오류: {e.status_code} {e.message}")
            raise UpstreamError(f"OpenAI error: {e.status_code} {e.message}", upstream_status=e.status_code)
        except APIConnectionError as e:
            logger.error(f"OpenAI 연결 실패: {e}")
            raise UpstreamError(f"OpenAI connection error: {e}")
        except OpenAIError as e:
            logger.error(f"OpenAI 호출 실패: {e}", exc_info=True)
            raise UpstreamError(f"OpenAI error: {e}")

        usage = getattr(response, "usage", None)
        if usage:
            logger.info(
                f"[openai] model={self.model} "
                f"prompt_tokens={getattr(usage, 'prompt_tokens', None)} "
                f"completion_tokens={getattr(usage, 'completion_tokens', None)}"
            )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
