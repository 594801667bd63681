from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """고정 윈도우 rate limit 설정.

    name 은 엔드포인트 종류(login, upload 등)이며, 같은 identity 라도
    name 이 다르면 서로 다른 윈도우로 집계한다.
    """

    name: str
    window_seconds: float
    max_requests: int


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    # 현재 윈도우가 끝날 때까지 남은 초 (올림)
    retry_after: int


@dataclass(slots=True)
class _Window:
    count: int
    window_start: float
    window_seconds: float

    def expired(self, now: float) -> bool:
        return now - self.window_start > self.window_seconds


class FixedWindowRateLimiter:
    """identity 별 고정 윈도우 요청 카운터.

    - now - window_start > window 이면 카운트를 0으로, window_start 를 now 로 초기화한다.
    - 카운트를 먼저 증가시키고, max_requests 를 넘으면 거절한다. 거절된 요청도 카운트된다.
    - 윈도우 테이블이 max_tracked_identities 를 넘으면 만료된 윈도우를 정리한다.
    - 프로세스 메모리에만 유지되며 재시작 시 초기화된다.

    동시성: 락 없는 갱신 대신 짧은 threading.Lock 으로 카운터의 read-modify-write 만 묶는다.
    FastAPI 의 동기 핸들러는 스레드풀에서 실행되므로 원자적 증가가 필요하고,
    락 구간에는 I/O 가 없어 다른 요청을 오래 막지 않는다.
    """

    def __init__(
        self,
        clock: Clock = time.monotonic,
        max_tracked_identities: int = 10_000,
    ) -> None:
        self._clock = clock
        self._max_tracked = max_tracked_identities
        self._windows: dict[tuple[str, str], _Window] = {}
        # read-modify-write 구간만 보호한다. I/O 는 절대 이 락 안에서 하지 않는다.
        self._lock = threading.Lock()

    def check(self, identity: str, config: RateLimitConfig) -> RateLimitDecision:
        key = (config.name, identity)
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None:
                if len(self._windows) >= self._max_tracked:
                    self._prune_expired_locked(now)
                window = _Window(
                    count=0,
                    window_start=now,
                    window_seconds=config.window_seconds,
                )
                self._windows[key] = window
            elif now - window.window_start > config.window_seconds:
                window.count = 0
                window.window_start = now
                window.window_seconds = config.window_seconds

            window.count += 1
            count = window.count
            window_end = window.window_start + config.window_seconds

        retry_after = max(0, math.ceil(window_end - now))
        if count > config.max_requests:
            logger.warning(
                "rate limit exceeded (limiter=%s count=%d max=%d)",
                config.name,
                count,
                config.max_requests,
                extra={"client_ip": identity},
            )
            return RateLimitDecision(
                allowed=False,
                limit=config.max_requests,
                remaining=0,
                retry_after=max(1, retry_after),
            )

        return RateLimitDecision(
            allowed=True,
            limit=config.max_requests,
            remaining=config.max_requests - count,
            retry_after=retry_after,
        )

    def reset(self, identity: str, config: RateLimitConfig) -> None:
        with self._lock:
            self._windows.pop((config.name, identity), None)

    def prune_expired(self) -> int:
        """만료된 윈도우를 제거하고 제거 개수를 반환한다."""

        with self._lock:
            return self._prune_expired_locked(self._clock())

    def _prune_expired_locked(self, now: float) -> int:
        stale = [key for key, window in self._windows.items() if window.expired(now)]
        for key in stale:
            del self._windows[key]
        if stale:
            logger.info("pruned %d expired rate limit windows", len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._windows)
