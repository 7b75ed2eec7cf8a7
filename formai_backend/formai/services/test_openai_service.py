# formai/services/test_openai_service.py
"""
OpenAIService 테스트 (SDK 호출은 모두 mock)

사용법: python -m pytest formai/services/test_openai_service.py -v
"""
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from flask import Flask
from openai import APIConnectionError, APIStatusError, APITimeoutError

from formai.core.errors import ServiceUnavailableError, UpstreamError, UpstreamTimeoutError
from formai.services.openai_service import OpenAIService

MESSAGES = [{"role": "user", "content": "hi"}]
_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


@pytest.fixture
def service():
    svc = OpenAIService()
    svc.client = MagicMock()
    svc.timeout_seconds = 5.0
    return svc


def test_init_app_without_key_leaves_service_unconfigured():
    app = Flask(__name__)
    app.config.update(OPENAI_API_KEY=None, OPENAI_MODEL="gpt-4o-mini", OPENAI_TIMEOUT_SECONDS=12)

    svc = OpenAIService()
    svc.init_app(app)

    assert not svc.is_configured
    assert svc.model == "gpt-4o-mini"
    assert svc.timeout_seconds == 12.0
    with pytest.raises(ServiceUnavailableError):
        svc.complete_json(MESSAGES)


def test_init_app_with_key_creates_client():
    app = Flask(__name__)
    app.config.update(OPENAI_API_KEY="sk-test")

    svc = OpenAIService()
    svc.init_app(app)

    assert svc.is_configured


def test_complete_json_sends_json_mode_request(service):
    service.client.chat.completions.create.return_value = _completion('{"ok": true}')

    assert service.complete_json(MESSAGES, timeout=3) == '{"ok": true}'

    kwargs = service.client.chat.completions.create.call_args.kwargs
    assert kwargs["messages"] == MESSAGES
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["timeout"] == 3
    assert kwargs["temperature"] == 0.2


def test_empty_content_becomes_empty_string(service):
    service.client.chat.completions.create.return_value = _completion(None)
    assert service.complete_json(MESSAGES) == ""


def test_sdk_timeout_maps_to_upstream_timeout(service):
    service.client.chat.completions.create.side_effect = APITimeoutError(request=_REQUEST)
    with pytest.raises(UpstreamTimeoutError):
        service.complete_json(MESSAGES)


def test_http_error_maps_to_upstream_error_with_status(service):
    response = httpx.Response(429, request=_REQUEST)
    service.client.chat.completions.create.side_effect = APIStatusError(
        "Rate limit reached", response=response, body=None
    )

    with pytest.raises(UpstreamError) as exc_info:
        service.complete_json(MESSAGES)

    assert exc_info.value.upstream_status == 429
    assert "429" in exc_info.value.message


def test_connection_error_maps_to_upstream_error(service):
    service.client.chat.completions.create.side_effect = APIConnectionError(request=_REQUEST)
    with pytest.raises(UpstreamError) as exc_info:
        service.complete_json(MESSAGES)
    assert exc_info.value.upstream_status is None


def test_init_app_disables_sdk_retries_and_sets_timeout():
    app = Flask(__name__)
    app.config.update(OPENAI_API_KEY="sk-test", OPENAI_TIMEOUT_SECONDS=7)

    svc = OpenAIService()
    svc.init_app(app)

    assert svc.client.max_retries == 0
    assert svc.client.timeout == 7.0


def test_concurrent_calls_each_get_their_own_deadline(service):
    """동시에 여러 요청이 들어와도 대기 시간이 다른 호출의 제한 시간을 잡아먹지 않아야 함"""
    concurrent_calls = 12
    started = threading.Barrier(concurrent_calls)

    def slow_call(**kwargs):
        started.wait(5)
        time.sleep(0.3)
        return _completion('{"ok": true}')

    service.client.chat.completions.create.side_effect = slow_call

    with ThreadPoolExecutor(max_workers=concurrent_calls) as pool:
        results = list(pool.map(lambda _: service.complete_json(MESSAGES, timeout=0.5), range(concurrent_calls)))

    assert results == ['{"ok": true}'] * concurrent_calls
    for call in service.client.chat.completions.create.call_args_list:
        assert call.kwargs["timeout"] == 0.5
