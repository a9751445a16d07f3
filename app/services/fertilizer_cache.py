"""
In-process fertilizer response cache and per-client sliding-window rate limiter.

Both maps are shared by concurrent requests and guarded by a lock. Both are
bounded: when a map outgrows its limit, stale entries are swept first and the
oldest remaining entries are evicted after that.
"""

import logging
import math
import threading
import time
from collections import OrderedDict, deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional

from app.models.fertilizer import FertilizerResponse

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_ENTRIES = 1000
DEFAULT_RATE_LIMIT = 10
DEFAULT_WINDOW_SECONDS = 60 * 60
DEFAULT_MAX_KEYS = 10000


def make_cache_key(
    location: str,
    crop: str,
    soil: str,
    expected_yield: Optional[str] = None,
    *,
    include_yield: bool = False,
) -> str:
    """
    Deterministic cache key from the request fields, e.g. "ranchi-wheat-alluvial".

    With include_yield the expected yield becomes a fourth part, "unknown" when missing.
    """
    parts = [location, crop, soil]
    if include_yield:
        parts.append(expected_yield or "unknown")
    return "-".join(str(part).strip() for part in parts).lower()


@dataclass
class CacheEntry:
    value: FertilizerResponse
    timestamp: float


class FertilizerCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp < self.ttl_seconds

    def get(self, key: str) -> Optional[FertilizerResponse]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not self._is_fresh(entry, self._clock()):
                return None
            return entry.value

    def put(self, key: str, value: FertilizerResponse) -> None:
        with self._lock:
            now = self._clock()
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(value=value, timestamp=now)
            if len(self._entries) > self.max_entries:
                self._evict(now)

    def _evict(self, now: float) -> None:
        stale = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in stale:
            del self._entries[key]
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        logger.debug("Fertilizer cache swept, %d entries remain", len(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: int = 0


class RateLimiter:
    """At most `limit` calls per client key within any trailing `window_seconds`."""

    def __init__(
        self,
        limit: int = DEFAULT_RATE_LIMIT,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_keys: int = DEFAULT_MAX_KEYS,
        clock: Clock = time.time,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, timestamps: Deque[float], now: float) -> None:
        while timestamps and now - timestamps[0] >= self.window_seconds:
            timestamps.popleft()

    def allow(self, client_key: str) -> RateLimitDecision:
        with self._lock:
            now = self._clock()
            timestamps = self._requests.setdefault(client_key, deque())
            self._prune(timestamps, now)

            if len(timestamps) >= self.limit:
                retry_after = math.ceil(timestamps[0] + self.window_seconds - now)
                return RateLimitDecision(allowed=False, retry_after=max(1, retry_after))

            timestamps.append(now)
            if len(self._requests) > self.max_keys:
                self._sweep(now, keep=client_key)
            return RateLimitDecision(allowed=True)

    def _sweep(self, now: float, keep: str) -> None:
        for key in list(self._requests):
            timestamps = self._requests[key]
            self._prune(timestamps, now)
            if not timestamps and key != keep:
                del self._requests[key]

        if len(self._requests) > self.max_keys:
            # Drop the keys whose newest request is oldest.
            by_age = sorted(
                (key for key in self._requests if key != keep),
                key=lambda key: self._requests[key][-1],
            )
            for key in by_age[: len(self._requests) - self.max_keys]:
                del self._requests[key]

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()
