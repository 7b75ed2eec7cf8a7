# formai/services/rate_limiter.py
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class RateWindowEntry:
    count: int
    window_start: float


class RateLimiter:
    """
    클라이언트 키별 고정 윈도우 요청 카운터.

    - 카운터는 프로세스 메모리에만 존재하며 재시작 시 초기화됩니다.
      (요청 한도는 보안 장치가 아니라 비용 관리용 권고치입니다.)
    - Flask는 요청을 여러 스레드에서 처리하므로 확인-갱신 구간은 하나의 Lock으로 보호합니다.
    - 만료된 엔트리는 sweep 간격마다 정리하여 맵이 무한히 커지지 않도록 합니다.
    """

    def __init__(self,
                 max_requests: int = 20,
                 window_seconds: float = 600.0,
                 sweep_interval_seconds: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        if max_requests < 1:
            raise ValueError("max_requests는 1 이상이어야 합니다.")
        if window_seconds <= 0:
            raise ValueError("window_seconds는 0보다 커야 합니다.")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_interval_seconds = (
            window_seconds if sweep_interval_seconds is None else sweep_interval_seconds
        )
        self._clock = clock
        self._entries: Dict[str, RateWindowEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def check(self, client_key: str) -> bool:
        """
        요청을 허용할지 판단하고, 허용하는 경우 카운트를 기록합니다.

        :param client_key: 클라이언트 식별자 (예: IP 주소)
        :return: 허용 여부
        """
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.sweep_interval_seconds:
                self._sweep_locked(now)

            entry = self._entries.get(client_key)
            if entry is None or now - entry.window_start > self.window_seconds:
                self._entries[client_key] = RateWindowEntry(count=1, window_start=now)
                return True

            if entry.count >= self.max_requests:
                return False

            entry.count += 1
            return True

    def sweep(self) -> int:
        """윈도우가 만료된 엔트리를 모두 제거하고 제거한 개수를 반환합니다."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        stale = [key for key, entry in self._entries.items()
                 if now - entry.window_start > self.window_seconds]
        for key in stale:
            del self._entries[key]
        self._last_sweep = now
        if stale:
            logger.info(f"RateLimiter: 만료된 카운터 {len(stale)}개 정리")
        return len(stale)

    def get_entry(self, client_key: str) -> Optional[RateWindowEntry]:
        with self._lock:
            entry = self._entries.get(client_key)
            return RateWindowEntry(entry.count, entry.window_start) if entry else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
