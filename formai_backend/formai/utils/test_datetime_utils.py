# formai/utils/test_datetime_utils.py
"""
시간 유틸리티 기능 테스트

사용법: python -m pytest formai/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, timezone
from formai.utils.datetime_utils import DateTimeUtils, now_iso


def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함


def test_to_iso_string_uses_z_suffix():
    dt = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-15T10:30:00.000Z"


def test_now_iso_round_trips():
    value = now_iso()
    assert value.endswith("Z")
    assert DateTimeUtils.is_iso_datetime(value)


def test_is_iso_datetime_rejects_garbage():
    assert not DateTimeUtils.is_iso_datetime("yesterday-ish")
    assert not DateTimeUtils.is_iso_datetime("")
    assert not DateTimeUtils.is_iso_datetime(12345)
    assert not DateTimeUtils.is_iso_datetime(None)


def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
