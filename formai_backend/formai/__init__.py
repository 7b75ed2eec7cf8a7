# formai/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

# - 설정 / 에러
from formai.core.config import config_by_name
from formai.core.errors import AnalysisError

# - API 블루프린트
from formai.api.analyze.routes import analyze_bp
from formai.api.health.routes import health_bp

# - 서비스 모듈
from formai.services.openai_service import OpenAIService
from formai.services.rate_limiter import RateLimiter
from formai.api.analyze.services import AnalysisService


def create_app(config_name: Optional[str] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production'. 생략 시 FLASK_ENV 사용
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')
    if config_name not in config_by_name:
        raise ValueError(f"알 수 없는 설정 이름입니다: {config_name}")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 4-1. 다른 서비스의 기반이 되는 공용 서비스 먼저 생성
    openai_instance = OpenAIService()
    openai_instance.init_app(app)
    app.services['openai'] = openai_instance

    # 요청 한도 카운터는 프로세스당 하나만 만들어 분석 서비스에 주입합니다.
    app.services['rate_limiter'] = RateLimiter(
        max_requests=app.config['ANALYZE_RATE_LIMIT_MAX'],
        window_seconds=app.config['ANALYZE_RATE_LIMIT_WINDOW_SECONDS'],
        sweep_interval_seconds=app.config['ANALYZE_RATE_LIMIT_SWEEP_SECONDS'],
    )

    # 4-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['analysis'] = AnalysisService(
        model_client=app.services['openai'],
        rate_limiter=app.services['rate_limiter'],
    )

    # =====================================================================================
    # 5. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(analyze_bp, url_prefix='/api/analyze')
    app.register_blueprint(health_bp, url_prefix='/api/health')

    # =====================================================================================
    # 6. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(AnalysisError)
    def handle_analysis_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error": "잘못된 요청 형식입니다.", "error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error": err.description, "error_code": err.name.upper().replace(' ', '_')}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error": "서버 내부에서 예상치 못한 오류가 발생했습니다.", "error_code": "INTERNAL_SERVER_ERROR"}
        return jsonify(response), 500

    # =====================================================================================
    # 7. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
