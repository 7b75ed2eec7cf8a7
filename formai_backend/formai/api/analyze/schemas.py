# formai/api/analyze/schemas.py
import uuid
from marshmallow import Schema, fields, validate, post_load, post_dump, ValidationError, EXCLUDE

from formai.models.analysis_result import AnalysisResult, Machine, MuscleGroups
from formai.utils.datetime_utils import DateTimeUtils


class StrictFloat(fields.Float):
    """JSON 숫자만 허용하는 Float 필드. ("0.9" 같은 문자열이나 true/false는 거부)"""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self.make_error("invalid")
        return super()._deserialize(value, attr, data, **kwargs)


def validate_uuid(value: str):
    # 하이픈이 들어간 표준 형식만 허용 (중괄호, urn:uuid:, 32자리 hex 거부)
    try:
        canonical = str(uuid.UUID(value))
    except (ValueError, TypeError, AttributeError):
        raise ValidationError("Not a valid UUID.")
    if canonical != value.lower():
        raise ValidationError("Not a valid UUID.")


def validate_iso_datetime(value: str):
    if not DateTimeUtils.is_iso_datetime(value):
        raise ValidationError("Not a valid ISO-8601 datetime.")


_NON_EMPTY = validate.Length(min=1)


class MuscleGroupsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    primary = fields.List(fields.Str(), required=True)
    secondary = fields.List(fields.Str(), required=True)

    @post_load
    def make_object(self, data, **kwargs):
        return MuscleGroups(**data)


class MachineSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=_NON_EMPTY)
    confidence = StrictFloat(required=True, validate=validate.Range(min=0, max=1))
    muscles = fields.Nested(MuscleGroupsSchema, required=True)

    @post_load
    def make_object(self, data, **kwargs):
        return Machine(**data)


class AnalysisResultSchema(Schema):
    """
    POST /api/analyze 성공 응답이자 AI 출력의 엄격한 검증 스키마.
    모델이 추가로 넣은 알 수 없는 키는 버리고, 필수 필드 누락/타입 오류는 모두 실패로 처리합니다.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True, validate=validate_uuid)
    machine = fields.Nested(MachineSchema, required=True)
    how_it_works = fields.Str(required=True, data_key="howItWorks", validate=_NON_EMPTY)
    steps = fields.List(fields.Str(), required=True)
    safety_risks = fields.List(fields.Str(), required=True, data_key="safetyRisks")
    common_mistakes = fields.List(fields.Str(), required=True, data_key="commonMistakes")
    alternatives = fields.List(fields.Str(), required=True)
    quick_coach = fields.Str(required=True, data_key="quickCoach", validate=_NON_EMPTY)
    raw_model_notes = fields.Str(data_key="rawModelNotes")
    created_at = fields.Str(required=True, data_key="createdAt", validate=validate_iso_datetime)

    @post_load
    def make_object(self, data, **kwargs):
        return AnalysisResult(**data)

    @post_dump
    def drop_empty_notes(self, data, **kwargs):
        # rawModelNotes는 값이 있을 때만 응답에 포함
        if data.get("rawModelNotes") is None:
            data.pop("rawModelNotes", None)
        return data


class AnalyzeJsonRequestSchema(Schema):
    """
    POST /api/analyze (application/json) 요청 본문.
    image는 data URL 또는 공개 이미지 URL 문자열입니다.
    """
    class Meta:
        unknown = EXCLUDE

    image = fields.Str(allow_none=True, load_default=None)
    user_note = fields.Str(allow_none=True, load_default=None, data_key="userNote")
    demo = fields.Bool(load_default=False)
