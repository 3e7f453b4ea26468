"""Core protocol and interface definitions.

Defines the CacheBackend protocol that TieredCache composes, so either
tier can be a CacheService or any other store with the same surface.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from core.models import CacheStats, Lookup


class CacheBackend(Protocol):
    """Contract for a single cache tier."""
    def get(self, key: str) -> Lookup:
        ...

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...

    def clear(self) -> None:
        ...

    def get_stats(self) -> CacheStats:
        ...

    def close(self) -> None:
        ...
