from __future__ import annotations


class CacheError(Exception):
    """Base error for the caching engine."""


class ValidationError(CacheError):
    """Raised when a key, TTL or configuration value is invalid."""


class CacheClosedError(CacheError):
    """Raised when writing to a cache that has been closed."""


class FactoryError(CacheError):
    """Raised when a memoized factory fails; nothing is cached for the key."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key
