"""Least-used eviction policy.

Picks the entry with the fewest recorded hits. Hit counts carry no
recency, so an entry read once long ago ranks the same as one read once
just now.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol


class _Counted(Protocol):
    hits: int


def select_least_used(entries: Mapping[str, _Counted]) -> Optional[str]:
    # Full scan; ties go to the first key in iteration (insertion) order
    victim: Optional[str] = None
    fewest = None
    for key, entry in entries.items():
        if fewest is None or entry.hits < fewest:
            victim = key
            fewest = entry.hits
    return victim
