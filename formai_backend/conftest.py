# conftest.py
"""
공용 pytest 픽스처.
실제 OpenAI를 호출하지 않도록 스크립트된 가짜 모델 클라이언트를 제공합니다.
"""
import json

import pytest

from formai import create_app
from formai.api.analyze.services import AnalysisService
from formai.services.rate_limiter import RateLimiter


def valid_payload(**overrides):
    """스키마를 통과하는 모델 응답 예시 (id/createdAt 제외)"""
    payload = {
        "machine": {
            "name": "Seated Chest Press",
            "confidence": 0.81,
            "muscles": {"primary": ["Pectoralis major"], "secondary": ["Triceps brachii", "Anterior deltoids"]},
        },
        "howItWorks": "A seated machine that guides a pressing motion away from the chest.",
        "steps": ["Adjust the seat so handles are at mid-chest.", "Press forward without locking elbows."],
        "safetyRisks": ["Do not let the weight stack slam."],
        "commonMistakes": ["Seat too low."],
        "alternatives": ["Dumbbell Bench Press"],
        "quickCoach": "Keep shoulder blades back and press smoothly.",
    }
    payload.update(overrides)
    return payload


class FakeModelClient:
    """
    OpenAIService 대역. responses에 넣은 값을 호출 순서대로 돌려주며,
    예외 인스턴스를 넣으면 해당 호출에서 그 예외를 발생시킵니다.
    """
    model = "fake-vision"

    def __init__(self, responses=None, configured=True):
        self.responses = list(responses or [])
        self.calls = []
        self.configured = configured

    @property
    def is_configured(self):
        return self.configured

    def complete_json(self, messages, timeout=None):
        self.calls.append(messages)
        if not self.responses:
            raise AssertionError("예상보다 많은 모델 호출")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return json.dumps(response)
        return response


@pytest.fixture
def fake_model():
    return FakeModelClient()


@pytest.fixture
def rate_limiter():
    return RateLimiter(max_requests=20, window_seconds=600)


@pytest.fixture
def analysis_service(fake_model, rate_limiter):
    return AnalysisService(model_client=fake_model, rate_limiter=rate_limiter)


@pytest.fixture
def app(fake_model, rate_limiter, analysis_service):
    app = create_app('testing')
    app.services['rate_limiter'] = rate_limiter
    app.services['analysis'] = analysis_service
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def payload_factory():
    return valid_payload
