# formai/services/test_rate_limiter.py
"""
고정 윈도우 요청 제한 테스트

사용법: python -m pytest formai/services/test_rate_limiter.py -v
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from formai.services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_denies_after_max_requests_in_window(clock):
    limiter = RateLimiter(max_requests=3, window_seconds=60, clock=clock)

    assert [limiter.check("1.2.3.4") for _ in range(3)] == [True, True, True]
    assert limiter.check("1.2.3.4") is False
    # 거부된 요청은 카운트를 올리지 않음
    assert limiter.get_entry("1.2.3.4").count == 3


def test_resets_after_window_expires(clock):
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
    limiter.check("k")
    limiter.check("k")
    assert limiter.check("k") is False

    # 경계값(정확히 60초)은 아직 같은 윈도우
    clock.advance(60)
    assert limiter.check("k") is False

    clock.advance(0.001)
    assert limiter.check("k") is True
    entry = limiter.get_entry("k")
    assert entry.count == 1
    assert entry.window_start == clock.now


def test_keys_are_independent(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    assert limiter.check("a") is True
    assert limiter.check("a") is False
    assert limiter.check("b") is True


def test_sweep_evicts_only_expired_entries(clock):
    limiter = RateLimiter(max_requests=5, window_seconds=60, sweep_interval_seconds=3600, clock=clock)
    limiter.check("old")
    clock.advance(30)
    limiter.check("fresh")
    clock.advance(31)

    assert limiter.sweep() == 1
    assert limiter.get_entry("old") is None
    assert limiter.get_entry("fresh") is not None
    assert len(limiter) == 1


def test_check_sweeps_periodically(clock):
    limiter = RateLimiter(max_requests=5, window_seconds=10, sweep_interval_seconds=100, clock=clock)
    for i in range(10):
        limiter.check(f"client-{i}")
    clock.advance(50)
    limiter.check("trigger")
    assert len(limiter) == 11  # 아직 sweep 간격 전

    clock.advance(50)
    limiter.check("trigger")
    assert len(limiter) == 1


def test_invalid_configuration():
    with pytest.raises(ValueError):
        RateLimiter(max_requests=0)
    with pytest.raises(ValueError):
        RateLimiter(window_seconds=0)


def test_concurrent_distinct_keys_do_not_leak(clock):
    """50개 클라이언트가 동시에 요청해도 각자의 윈도우로만 제한되어야 함"""
    max_requests = 4
    limiter = RateLimiter(max_requests=max_requests, window_seconds=600, clock=clock)
    keys = [f"10.0.0.{i}" for i in range(50)]
    attempts_per_key = max_requests + 3
    barrier = threading.Barrier(len(keys))

    def hammer(key):
        barrier.wait()
        return key, [limiter.check(key) for _ in range(attempts_per_key)]

    with ThreadPoolExecutor(max_workers=len(keys)) as pool:
        results = dict(pool.map(hammer, keys))

    for key in keys:
        assert results[key].count(True) == max_requests
        assert results[key][:max_requests] == [True] * max_requests
        assert limiter.get_entry(key).count == max_requests


def test_concurrent_same_key_never_exceeds_max(clock):
    limiter = RateLimiter(max_requests=20, window_seconds=600, clock=clock)

    with ThreadPoolExecutor(max_workers=16) as pool:
        allowed = list(pool.map(lambda _: limiter.check("shared"), range(200)))

    assert allowed.count(True) == 20
