"""In-memory TTL cache with least-used eviction.

Entries carry a monotonic creation time, a per-entry TTL and a hit
counter. Expired entries are dropped lazily on read and periodically by a
background sweeper; when the store is full the entry with the fewest hits
is evicted before the new one is inserted.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from core.errors import CacheClosedError, FactoryError, ValidationError
from core.eviction import select_least_used
from core.logging import get_logger
from core.models import MISS, CacheConfig, CacheStats, Lookup
from core.singleflight import AsyncSingleFlight, SingleFlight
from core.sweeper import ExpirySweeper

T = TypeVar("T")

logger = get_logger(__name__)


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    # Stores value + monotonic creation time, ttl and hit counter
    value: T
    created_at: float  # time.monotonic()
    ttl: float
    hits: int = 0

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl


class CacheService(Generic[T]):
    """Thread-safe cache facade.

    A single lock guards the store; the sweeper thread goes through the
    same lock via purge_expired(). Call close() (or use the instance as a
    context manager) to stop the sweeper and release every entry.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        *,
        name: str = "cache",
        start_sweeper: bool = True,
    ) -> None:
        self._config = config or CacheConfig()
        self._name = name
        self._lock = threading.RLock()
        self._store: Dict[str, CacheEntry[T]] = {}
        self._closed = False

        self._flights: Optional[SingleFlight] = None
        self._async_flights: Optional[AsyncSingleFlight] = None
        if self._config.single_flight:
            self._flights = SingleFlight()
            self._async_flights = AsyncSingleFlight()

        self._sweeper = ExpirySweeper(
            self.purge_expired,
            interval=self._config.cleanup_interval,
            name=f"{name}-sweeper",
        )
        if start_sweeper:
            self._sweeper.start()

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, key: str) -> Lookup:
        _check_key(key)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return MISS

            # Expire entries using time.monotonic to avoid time-shift issues
            if entry.is_expired(time.monotonic()):
                del self._store[key]
                return MISS

            entry.hits += 1
            return Lookup(entry.value, True)

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        _check_key(key)
        if ttl is not None and ttl < 0:
            raise ValidationError(f"ttl must not be negative, got {ttl}")

        with self._lock:
            if self._closed:
                raise CacheClosedError(f"Cache '{self._name}' is closed")

            # Evict before insert so size never exceeds max_size
            if key not in self._store and len(self._store) >= self._config.max_size:
                self._evict_one()

            self._store[key] = CacheEntry(
                value=value,
                created_at=time.monotonic(),
                ttl=float(ttl or self._config.default_ttl),
            )

    def delete(self, key: str) -> bool:
        _check_key(key)
        with self._lock:
            return self._store.pop(key, None) is not None

    def has(self, key: str) -> bool:
        # Liveness check only; does not count as a hit
        _check_key(key)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return False
            if entry.is_expired(time.monotonic()):
                del self._store[key]
                return False
            return True

    def clear(self) -> None:
        with self._lock:
            count = len(self._store)
            self._store.clear()
        logger.info("cache_cleared", cache=self._name, removed=count)

    def get_stats(self) -> CacheStats:
        with self._lock:
            now = time.monotonic()
            entries = list(self._store.values())

        size = len(entries)
        total_hits = sum(e.hits for e in entries)
        expired_count = sum(1 for e in entries if e.is_expired(now))

        return CacheStats(
            size=size,
            max_size=self._config.max_size,
            total_hits=total_hits,
            expired_count=expired_count,
            hit_rate=total_hits / size if size > 0 else 0.0,
        )

    def purge_expired(self) -> int:
        with self._lock:
            now = time.monotonic()
            expired = [k for k, e in self._store.items() if e.is_expired(now)]
            for k in expired:
                del self._store[k]
        return len(expired)

    def with_cache_sync(self, key: str, factory: Callable[[], T], ttl: Optional[float] = None) -> T:
        """Return the cached value for key, computing and storing it on a miss.

        Without single-flight, concurrent callers racing on a cold key may
        each run factory; the last write wins. A failing factory raises
        FactoryError and leaves the key uncached. On a closed cache the
        computed value is returned but not stored.
        """
        hit = self.get(key)
        if hit.found:
            return hit.value

        if self._flights is None:
            return self._compute_sync(key, factory, ttl)

        def lead() -> T:
            # A flight for this key may have finished since the miss above
            hit = self.get(key)
            if hit.found:
                return hit.value
            return self._compute_sync(key, factory, ttl)

        return self._flights.do(key, lead)

    async def with_cache(
        self, key: str, factory: Callable[[], Awaitable[T]], ttl: Optional[float] = None
    ) -> T:
        """Async variant of with_cache_sync for factories that may suspend.

        The cache imposes no timeout or cancellation on factory; apply those
        at the factory boundary.
        """
        hit = self.get(key)
        if hit.found:
            return hit.value

        if self._async_flights is None:
            return await self._compute(key, factory, ttl)

        async def lead() -> T:
            hit = self.get(key)
            if hit.found:
                return hit.value
            return await self._compute(key, factory, ttl)

        return await self._async_flights.do(key, lead)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._sweeper.stop()

        with self._lock:
            self._store.clear()
        logger.info("cache_closed", cache=self._name)

    def __enter__(self) -> "CacheService[T]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def _compute_sync(self, key: str, factory: Callable[[], T], ttl: Optional[float]) -> T:
        try:
            value = factory()
        except Exception as e:
            logger.warning("cache_factory_failed", cache=self._name, key=key, error=str(e))
            raise FactoryError(key, f"Factory for key '{key}' failed: {e}") from e

        self._store_computed(key, value, ttl)
        return value

    async def _compute(self, key: str, factory: Callable[[], Awaitable[T]], ttl: Optional[float]) -> T:
        try:
            value = await factory()
        except Exception as e:
            logger.warning("cache_factory_failed", cache=self._name, key=key, error=str(e))
            raise FactoryError(key, f"Factory for key '{key}' failed: {e}") from e

        self._store_computed(key, value, ttl)
        return value

    def _store_computed(self, key: str, value: Any, ttl: Optional[float]) -> None:
        try:
            self.set(key, value, ttl)
        except CacheClosedError:
            logger.warning("cache_store_skipped", cache=self._name, key=key, reason="closed")

    def _evict_one(self) -> None:
        # Caller holds self._lock
        victim = select_least_used(self._store)
        if victim is None:
            return
        evicted = self._store.pop(victim)
        logger.debug("cache_evicted", cache=self._name, key=victim, hits=evicted.hits)


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise ValidationError(f"Cache keys must be str, got {type(key).__name__}")
