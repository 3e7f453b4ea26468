"""Immutable value types shared by the cache components.

Includes the construction-time configuration (CacheConfig), the result of
a lookup (Lookup) and the point-in-time statistics snapshot (CacheStats).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, NamedTuple

from core.errors import ValidationError


@dataclass(frozen=True)
class CacheConfig:
    """Construction-time cache settings.

    Field groups:
    - Capacity: max_size (entry count ceiling)
    - Time: default_ttl, cleanup_interval (seconds)
    - Memoization: single_flight (collapse concurrent cold-key factories)
    """

    max_size: int = 1000
    default_ttl: float = 300.0
    cleanup_interval: float = 60.0

    single_flight: bool = False

    def __post_init__(self) -> None:
        if int(self.max_size) <= 0:
            raise ValidationError(f"max_size must be positive, got {self.max_size}")
        if float(self.default_ttl) <= 0:
            raise ValidationError(f"default_ttl must be positive, got {self.default_ttl}")
        if float(self.cleanup_interval) <= 0:
            raise ValidationError(f"cleanup_interval must be positive, got {self.cleanup_interval}")


class Lookup(NamedTuple):
    # (value, found); value is None on a miss
    value: Any
    found: bool


MISS = Lookup(None, False)


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_size: int
    total_hits: int
    expired_count: int
    hit_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
