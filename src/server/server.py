"""Server bootstrap for the scaffold cache service.

Creates the FastMCP instance, builds the cache tiers from config, wires
the admin tools and starts the MCP server (stdio transport). The cache is
owned here and closed when the server stops.
"""

from typing import Optional

from mcp.server.fastmcp import FastMCP

from config import (
    CACHE_CLEANUP_INTERVAL,
    CACHE_DEFAULT_TTL,
    CACHE_L2_DEFAULT_TTL,
    CACHE_L2_ENABLED,
    CACHE_L2_MAX_SIZE,
    CACHE_MAX_SIZE,
    CACHE_SINGLE_FLIGHT,
    LOG_LEVEL,
)
from core.cache import CacheService
from core.logging import configure_logging, get_logger
from core.models import CacheConfig
from core.tiered import TieredCache

from tools.cache_admin import register as register_cache_admin

logger = get_logger(__name__)


def build_cache() -> TieredCache:
    l1 = CacheService(
        CacheConfig(
            max_size=CACHE_MAX_SIZE,
            default_ttl=CACHE_DEFAULT_TTL,
            cleanup_interval=CACHE_CLEANUP_INTERVAL,
            single_flight=CACHE_SINGLE_FLIGHT,
        ),
        name="l1",
    )

    l2: Optional[CacheService] = None
    if CACHE_L2_ENABLED:
        l2 = CacheService(
            CacheConfig(
                max_size=CACHE_L2_MAX_SIZE,
                default_ttl=CACHE_L2_DEFAULT_TTL,
                cleanup_interval=CACHE_CLEANUP_INTERVAL,
            ),
            name="l2",
        )

    logger.info(
        "cache_built",
        l1_max_size=CACHE_MAX_SIZE,
        l1_default_ttl=CACHE_DEFAULT_TTL,
        l2_enabled=l2 is not None,
    )
    return TieredCache(l1, l2)


def create_server(cache: TieredCache) -> FastMCP:
    mcp = FastMCP("scaffold-cache")
    register_cache_admin(mcp, cache=cache)
    return mcp


def main() -> None:
    configure_logging(LOG_LEVEL)
    cache = build_cache()
    try:
        create_server(cache).run(transport="stdio")
    finally:
        cache.close()


if __name__ == "__main__":
    main()
