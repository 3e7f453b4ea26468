import pytest

import server.server as server_mod
from core.cache import CacheService


class FakeServer:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.run_calls = []

    def run(self, *, transport: str):
        self.run_calls.append({"transport": transport})
        if self.fail:
            raise RuntimeError("transport closed")


class FakeCache:
    def __init__(self) -> None:
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1


def test_build_cache_l1_only(monkeypatch):
    monkeypatch.setattr(server_mod, "CACHE_MAX_SIZE", 7)
    monkeypatch.setattr(server_mod, "CACHE_DEFAULT_TTL", 11.0)
    monkeypatch.setattr(server_mod, "CACHE_SINGLE_FLIGHT", True)
    monkeypatch.setattr(server_mod, "CACHE_L2_ENABLED", False)

    cache = server_mod.build_cache()
    try:
        assert isinstance(cache.l1, CacheService)
        assert cache.l1.config.max_size == 7
        assert cache.l1.config.default_ttl == 11.0
        assert cache.l1.config.single_flight is True
        assert cache.l2 is None
    finally:
        cache.close()

    assert cache.l1.closed is True


def test_build_cache_with_l2(monkeypatch):
    monkeypatch.setattr(server_mod, "CACHE_L2_ENABLED", True)
    monkeypatch.setattr(server_mod, "CACHE_L2_MAX_SIZE", 99)
    monkeypatch.setattr(server_mod, "CACHE_L2_DEFAULT_TTL", 600.0)

    cache = server_mod.build_cache()
    try:
        assert cache.l2 is not None
        assert cache.l2.config.max_size == 99
        assert cache.l2.config.default_ttl == 600.0
        assert cache.l1 is not cache.l2
    finally:
        cache.close()

    assert cache.l2.closed is True


@pytest.mark.asyncio
async def test_create_server_registers_cache_tools(monkeypatch):
    monkeypatch.setattr(server_mod, "CACHE_L2_ENABLED", False)
    cache = server_mod.build_cache()
    try:
        mcp = server_mod.create_server(cache)
        assert mcp.name == "scaffold-cache"

        names = {t.name for t in await mcp.list_tools()}
        assert {"cache_stats", "cache_clear"} <= names
    finally:
        cache.close()


def test_main_runs_stdio_and_closes_cache(monkeypatch):
    fake_server = FakeServer()
    fake_cache = FakeCache()

    monkeypatch.setattr(server_mod, "configure_logging", lambda level: None)
    monkeypatch.setattr(server_mod, "build_cache", lambda: fake_cache)
    monkeypatch.setattr(server_mod, "create_server", lambda cache: fake_server)

    server_mod.main()

    assert fake_server.run_calls == [{"transport": "stdio"}]
    assert fake_cache.close_calls == 1


def test_main_closes_cache_when_server_fails(monkeypatch):
    fake_cache = FakeCache()

    monkeypatch.setattr(server_mod, "configure_logging", lambda level: None)
    monkeypatch.setattr(server_mod, "build_cache", lambda: fake_cache)
    monkeypatch.setattr(server_mod, "create_server", lambda cache: FakeServer(fail=True))

    with pytest.raises(RuntimeError):
        server_mod.main()

    assert fake_cache.close_calls == 1
