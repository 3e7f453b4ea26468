"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (cache
capacity and TTLs, the optional L2 tier and the log level).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_positive_int(name: str, default: int) -> int:
    value = _env_int(name, default)
    return value if value > 0 else default


def _env_positive_float(name: str, default: float) -> float:
    value = _env_float(name, default)
    return value if value > 0 else default


# L1 (fast tier); sizes, TTLs and intervals must be > 0 or the default is used
CACHE_MAX_SIZE = _env_positive_int("CACHE_MAX_SIZE", 1000)
CACHE_DEFAULT_TTL = _env_positive_float("CACHE_DEFAULT_TTL", 300.0)
CACHE_CLEANUP_INTERVAL = _env_positive_float("CACHE_CLEANUP_INTERVAL", 60.0)
CACHE_SINGLE_FLIGHT = _env_bool("CACHE_SINGLE_FLIGHT", False)

# L2 (slower, larger tier)
CACHE_L2_ENABLED = _env_bool("CACHE_L2_ENABLED", False)
CACHE_L2_MAX_SIZE = _env_positive_int("CACHE_L2_MAX_SIZE", 10_000)
CACHE_L2_DEFAULT_TTL = _env_positive_float("CACHE_L2_DEFAULT_TTL", 3600.0)

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "info").strip()
