"""Two-tier cache composition.

Reads check the fast tier (L1) first, then the optional slower tier (L2);
an L2 hit is promoted into L1. Writes go to both tiers. An L2 write
failure is logged and reported, never rolled back into L1.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from core.errors import CacheError
from core.interfaces import CacheBackend
from core.logging import get_logger
from core.models import MISS, Lookup

logger = get_logger(__name__)


class TieredCache:
    def __init__(self, l1: CacheBackend, l2: Optional[CacheBackend] = None) -> None:
        self._l1 = l1
        self._l2 = l2

    @property
    def l1(self) -> CacheBackend:
        return self._l1

    @property
    def l2(self) -> Optional[CacheBackend]:
        return self._l2

    def get(self, key: str) -> Lookup:
        hit = self._l1.get(key)
        if hit.found:
            return hit

        if self._l2 is None:
            return MISS

        hit = self._l2.get(key)
        if not hit.found:
            return MISS

        # Promote with L1's default TTL
        try:
            self._l1.set(key, hit.value)
        except CacheError as e:
            logger.warning("cache_promotion_failed", key=key, error=str(e))
        return hit

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        # L1 failures propagate; returns False only when L2 could not be written
        self._l1.set(key, value, ttl)

        if self._l2 is None:
            return True

        try:
            self._l2.set(key, value, ttl)
        except CacheError as e:
            logger.warning("cache_l2_write_failed", key=key, error=str(e))
            return False
        return True

    def delete(self, key: str) -> bool:
        removed = self._l1.delete(key)
        if self._l2 is not None:
            removed = self._l2.delete(key) or removed
        return removed

    def clear(self) -> None:
        self._l1.clear()
        if self._l2 is not None:
            self._l2.clear()

    def get_stats(self) -> Dict[str, Dict[str, Any]]:
        stats = {"l1": self._l1.get_stats().to_dict()}
        if self._l2 is not None:
            stats["l2"] = self._l2.get_stats().to_dict()
        return stats

    def close(self) -> None:
        try:
            self._l1.close()
        finally:
            if self._l2 is not None:
                self._l2.close()
