"""MCP tools to inspect and reset the server's cache.

Registers 'cache_stats' and 'cache_clear' against the TieredCache owned
by the server composition root.
"""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.tiered import TieredCache


def register(mcp: FastMCP, *, cache: TieredCache) -> None:
    @mcp.tool(name="cache_stats")
    async def cache_stats() -> Dict[str, Dict[str, Any]]:
        """Return a point-in-time statistics snapshot per cache tier.

        Returns:
          Mapping of tier name ("l1", and "l2" when enabled) to
          size, max_size, total_hits, expired_count and hit_rate.
        """
        return cache.get_stats()

    @mcp.tool(name="cache_clear")
    async def cache_clear() -> Dict[str, bool]:
        """Remove every entry from all cache tiers."""
        cache.clear()
        return {"cleared": True}
