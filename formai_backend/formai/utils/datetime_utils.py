# formai/utils/datetime_utils.py
"""
분석 결과의 생성 시각(createdAt)을 일관되게 다루기 위한 시간 유틸리티 모듈

이 모듈의 목적:
1. 백엔드의 모든 타임스탬프를 UTC로 통일
2. AI 응답에 포함된 ISO-8601 문자열의 파싱/검증
"""

import logging
from datetime import datetime, timezone
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """시간 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            # 'Z' 접미사 처리 (UTC 표시)
            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)

            # timezone-naive인 경우 UTC로 가정
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)

            return dt.astimezone(timezone.utc)

        except (ValueError, TypeError, OverflowError) as e:
            logger.debug(f"ISO datetime 파싱 실패: {iso_string!r} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 ISO 포맷 문자열로 변환 (Z 접미사, 밀리초 정밀도)"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    @staticmethod
    def is_iso_datetime(value) -> bool:
        """값이 파싱 가능한 ISO-8601 문자열인지 확인"""
        if not isinstance(value, str):
            return False
        try:
            DateTimeUtils.parse_iso_datetime(value)
        except ValueError:
            return False
        return True


# 편의 함수
def now_iso() -> str:
    """현재 UTC 시각의 ISO 문자열"""
    return DateTimeUtils.to_iso_string(DateTimeUtils.now())
