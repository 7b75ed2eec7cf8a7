# formai/api/analyze/coercion.py
"""
AI 출력 보정(coercion) 및 검증.

모델 응답 문자열을 JSON으로 파싱하고, 서버가 만들어도 되는 필드(id, createdAt)만 채운 뒤
AnalysisResultSchema로 엄격하게 검증합니다. 어떤 입력이 와도 예외를 밖으로 던지지 않고
CoercionResult로 결과를 돌려줍니다.
"""
import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from marshmallow import ValidationError

from formai.api.analyze.schemas import AnalysisResultSchema
from formai.models.analysis_result import AnalysisResult
from formai.utils.datetime_utils import now_iso

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r'^```(?:json|JSON)?\s*')
_FENCE_CLOSE = re.compile(r'\s*```$')


@dataclass
class CoercionError:
    """검증 실패 상세. 원본 모델 출력은 담지 않고 필드 경로와 사유만 보관합니다."""
    issues: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"issues": list(self.issues)}

    def __str__(self) -> str:
        return "; ".join(f"{i['path']}: {i['message']}" for i in self.issues)


@dataclass
class CoercionResult:
    ok: bool
    data: Optional[AnalysisResult] = None
    error: Optional[CoercionError] = None


def strip_code_fences(text: str) -> str:
    """```json ... ``` 로 감싼 응답에서 본문만 꺼냅니다."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub('', cleaned)
        cleaned = _FENCE_CLOSE.sub('', cleaned)
    return cleaned.strip()


def flatten_messages(messages: Any, prefix: str = "") -> List[Dict[str, str]]:
    """marshmallow의 중첩 에러 메시지를 {path, message} 목록으로 평탄화합니다."""
    issues = []
    if isinstance(messages, dict):
        for key, value in messages.items():
            if key == "_schema":
                path = prefix or "$"
            elif isinstance(key, int):
                path = f"{prefix}[{key}]"
            else:
                path = f"{prefix}.{key}" if prefix else str(key)
            issues.extend(flatten_messages(value, path))
    elif isinstance(messages, list):
        for message in messages:
            if isinstance(message, (dict, list)):
                issues.extend(flatten_messages(message, prefix))
            else:
                issues.append({"path": prefix or "$", "message": str(message)})
    else:
        issues.append({"path": prefix or "$", "message": str(messages)})
    return issues


class ResponseCoercer:

    def __init__(self,
                 id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
                 timestamp_factory: Callable[[], str] = now_iso):
        self.schema = AnalysisResultSchema()
        self._id_factory = id_factory
        self._timestamp_factory = timestamp_factory

    def coerce(self, raw: Any) -> CoercionResult:
        """
        모델 출력(문자열 또는 딕셔너리)을 검증된 AnalysisResult로 변환합니다.

        :param raw: JSON 문자열, 딕셔너리, 또는 이미 검증된 AnalysisResult
        :return: 성공 시 data, 실패 시 error가 채워진 CoercionResult
        """
        if isinstance(raw, AnalysisResult):
            raw = self.schema.dump(raw)

        if isinstance(raw, str):
            try:
                raw = json.loads(strip_code_fences(raw))
            except json.JSONDecodeError as e:
                return self._fail([{
                    "path": "$",
                    "message": f"Model output is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
                }])

        if not isinstance(raw, dict):
            return self._fail([{"path": "$", "message": "Expected a JSON object."}])

        payload = dict(raw)
        if not payload.get("id"):
            payload["id"] = self._id_factory()
        if not payload.get("createdAt"):
            payload["createdAt"] = self._timestamp_factory()

        try:
            result = self.schema.load(payload)
        except ValidationError as err:
            return self._fail(flatten_messages(err.messages))

        return CoercionResult(ok=True, data=result)

    def _fail(self, issues: List[Dict[str, str]]) -> CoercionResult:
        logger.info(f"AI 응답 검증 실패: {len(issues)}개 항목")
        return CoercionResult(ok=False, error=CoercionError(issues=issues))
