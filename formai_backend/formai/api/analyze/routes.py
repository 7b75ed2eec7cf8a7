# formai/api/analyze/routes.py
import base64
import logging
from typing import Optional
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError
from werkzeug.exceptions import BadRequest, HTTPException

from formai.api.analyze.schemas import AnalysisResultSchema, AnalyzeJsonRequestSchema
from formai.core.errors import AnalysisError, MalformedRequestError
from formai.core.security import resolve_client_key
from formai.models.analysis_request import AnalysisRequest

logger = logging.getLogger(__name__)

analyze_bp = Blueprint('analyze_bp', __name__)

_TRUTHY = ('1', 'true')


def _file_to_data_url(file_storage) -> Optional[str]:
    """업로드된 이미지 파일을 data:<mime>;base64,... URL로 변환합니다."""
    payload = file_storage.read()
    if not payload:
        return None
    mime = file_storage.mimetype or 'image/jpeg'
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def parse_analysis_request(req, client_key: str) -> AnalysisRequest:
    """
    multipart/form-data 또는 JSON 요청을 AnalysisRequest로 정규화합니다.
    데모 모드는 쿼리 파라미터(?demo=1)로도 켤 수 있습니다.

    :raises MalformedRequestError: 본문을 해석할 수 없는 경우
    """
    query_demo = (req.args.get('demo') or '').lower() in _TRUTHY

    try:
        if req.is_json:
            body = req.get_json()
            if not isinstance(body, dict):
                raise MalformedRequestError("요청 본문은 JSON 객체여야 합니다.")
            data = AnalyzeJsonRequestSchema().load(body)
            return AnalysisRequest(
                client_key=client_key,
                image_data=data['image'] or None,
                user_note=data['user_note'],
                demo_mode=bool(data['demo']) or query_demo,
            )

        # multipart/form-data (또는 본문 없는 요청)
        image_file = req.files.get('image')
        return AnalysisRequest(
            client_key=client_key,
            image_data=_file_to_data_url(image_file) if image_file else None,
            user_note=req.form.get('userNote') or None,
            demo_mode=(req.form.get('demo') or '').lower() in _TRUTHY or query_demo,
        )
    except ValidationError as err:
        raise MalformedRequestError(details=err.messages)
    except BadRequest:
        raise MalformedRequestError()


@analyze_bp.route('', methods=['GET'])
def get_analyze_info():
    """
    분석 API 상태 정보를 반환합니다. (키 설정 여부, 모델, 요청 한도)
    """
    openai_service = current_app.services['openai']
    rate_limiter = current_app.services['rate_limiter']
    return jsonify({
        "ok": True,
        "hasKey": openai_service.is_configured,
        "model": openai_service.model,
        "limits": {
            "perWindow": rate_limiter.max_requests,
            "windowSeconds": rate_limiter.window_seconds,
        },
    }), 200


@analyze_bp.route('', methods=['POST'])
def analyze_image():
    """
    운동 기구 사진을 분석하여 기구 이름, 타깃 근육, 사용법, 주의사항 등을 반환합니다.
    - 성공: 200 + AnalysisResult
    - 실패: {"error", "error_code", "details"?} + 상태 코드 (429/422/400/500)
    """
    analysis_service = current_app.services['analysis']
    client_key = resolve_client_key(request.headers)
    try:
        analysis_service.enforce_rate_limit(client_key)
        analysis_request = parse_analysis_request(request, client_key)
        result = analysis_service.process(analysis_request)
        return jsonify(AnalysisResultSchema().dump(result)), 200
    except AnalysisError as e:
        if e.status_code >= 500:
            logger.error(f"기구 분석 실패 ({e.error_code}): {e.message}")
        return jsonify(e.to_dict()), e.status_code
    except HTTPException:
        # 413 등 HTTP 예외는 전역 핸들러가 처리
        raise
    except Exception:
        # 에러 발생 시, 상세한 Traceback을 터미널에 기록합니다.
        current_app.logger.exception("기구 분석 중 예상치 못한 오류:")
        return jsonify({"error": "분석 처리 중 오류가 발생했습니다.", "error_code": "INTERNAL_SERVER_ERROR"}), 500
