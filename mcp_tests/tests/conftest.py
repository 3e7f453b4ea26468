import pytest

import core.cache as cache_mod
from core.cache import CacheService
from core.models import CacheConfig


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def clock(monkeypatch):
    # Sync tests only: asyncio reads the same time.monotonic
    t = {"now": 0.0}

    def fake_monotonic():
        return t["now"]

    monkeypatch.setattr(cache_mod.time, "monotonic", fake_monotonic)
    return t


@pytest.fixture
def make_cache():
    created = []

    def _make(*, name: str = "test", start_sweeper: bool = False, **config):
        c = CacheService(CacheConfig(**config), name=name, start_sweeper=start_sweeper)
        created.append(c)
        return c

    yield _make

    for c in created:
        c.close()
