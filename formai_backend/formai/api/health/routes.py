# formai/api/health/routes.py
from flask import Blueprint, jsonify, current_app

health_bp = Blueprint('health_bp', __name__)


@health_bp.route('', methods=['GET'])
def health_check():
    """서버 진단용: OpenAI 키 설정 여부와 사용 모델"""
    openai_service = current_app.services['openai']
    return jsonify({
        "ok": True,
        "hasKey": openai_service.is_configured,
        "model": openai_service.model,
    }), 200
