from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """프로세스 내 key/value 캐시 (엔트리별 만료 시각).

    - 만료된 엔트리는 읽는 시점에 제거한다 (lazy eviction).
    - 모든 연산은 dict 단일 연산으로만 상태를 바꾸므로 락 없이 동시 요청에서 사용할 수 있다.
    - get_or_compute 는 같은 키에 대한 동시 miss 를 합치지 않는다(single-flight 없음).
      동시에 miss 가 나면 compute 가 중복 실행되고 마지막 set 이 남는다.
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._clock = clock

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            # 다른 요청이 같은 키를 새로 set 했을 수 있으므로 본 엔트리일 때만 지운다.
            if self._entries.get(key) is entry:
                self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._entries[key] = CacheEntry(
            value=value,
            expires_at=self._clock() + ttl_seconds,
        )

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def delete_many(self, *keys: str) -> None:
        for key in keys:
            self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """prefix 로 시작하는 모든 키를 삭제하고 삭제 개수를 반환한다."""

        removed = 0
        for key in list(self._entries):
            if key.startswith(prefix) and self._entries.pop(key, None) is not None:
                removed += 1
        return removed

    def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], T],
        ttl_seconds: float,
    ) -> T:
        """캐시에 있으면 반환하고, 없으면 compute_fn 결과를 저장 후 반환한다.

        compute_fn 이 예외를 던지면 그대로 전파하며 캐시에는 아무것도 남기지 않는다.
        None 결과는 캐시하지 않는다 (miss 와 구분할 수 없으므로).
        """

        cached = self.get(key)
        if cached is not None:
            logger.debug("cache hit", extra={"cache_key": key})
            return cached

        logger.debug("cache miss", extra={"cache_key": key})
        value = compute_fn()
        if value is not None:
            self.set(key, value, ttl_seconds)
        return value

    def purge_expired(self) -> int:
        """만료된 엔트리를 일괄 제거한다."""

        now = self._clock()
        removed = 0
        for key, entry in list(self._entries.items()):
            if now >= entry.expires_at and self._entries.get(key) is entry:
                self._entries.pop(key, None)
                removed += 1
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
