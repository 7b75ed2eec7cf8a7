# formai/core/config.py

import os # 'os' 모듈: 환경 변수를 읽기 위해 사용합니다.


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    return int(value) if value else default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    return float(value) if value else default


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # OpenAI API 키. 비어 있어도 앱은 기동되며, 데모 모드가 아닌 분석 요청만 실패합니다.
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    # 이미지 인식에 사용할 비전 모델 이름
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o')
    # 모델 호출 1회당 제한 시간(초). 첫 호출과 재시도 호출에 각각 적용됩니다.
    OPENAI_TIMEOUT_SECONDS = _env_float('OPENAI_TIMEOUT_SECONDS', 25.0)
    OPENAI_TEMPERATURE = _env_float('OPENAI_TEMPERATURE', 0.2)

    # 분석 API 요청 제한: 클라이언트별 고정 윈도우(기본 10분에 20회)
    ANALYZE_RATE_LIMIT_MAX = _env_int('ANALYZE_RATE_LIMIT_MAX', 20)
    ANALYZE_RATE_LIMIT_WINDOW_SECONDS = _env_float('ANALYZE_RATE_LIMIT_WINDOW_SECONDS', 600.0)
    # 만료된 카운터를 정리하는 최소 간격(초)
    ANALYZE_RATE_LIMIT_SWEEP_SECONDS = _env_float('ANALYZE_RATE_LIMIT_SWEEP_SECONDS', 600.0)

    # 업로드 이미지 최대 크기 (10MB)
    MAX_CONTENT_LENGTH = _env_int('MAX_CONTENT_LENGTH', 10 * 1024 * 1024)


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다. Config 클래스를 상속받아 공통 설정을 그대로 사용합니다."""
    # DEBUG = True: 코드가 변경될 때마다 서버가 자동으로 재시작되고, 에러 발생 시 상세한 디버그 정보가 표시됩니다.
    DEBUG = True


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    # 테스트는 실제 OpenAI를 호출하지 않습니다. 필요한 테스트에서만 키를 주입합니다.
    OPENAI_API_KEY = None
    OPENAI_MODEL = 'gpt-4o'
    ANALYZE_RATE_LIMIT_MAX = 20
    ANALYZE_RATE_LIMIT_WINDOW_SECONDS = 600.0


class ProductionConfig(Config):
    """운영 환경 설정입니다."""
    DEBUG = False


# config_by_name: 문자열 키와 해당 환경의 설정 클래스를 매핑하는 딕셔너리입니다.
# formai/__init__.py의 create_app 함수에서 FLASK_ENV 값에 따라 적절한 설정을 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
