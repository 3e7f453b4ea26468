"""Background expiry sweeper.

Runs a purge callable every `interval` seconds on a daemon thread until
stopped. Sweeping only reclaims memory: reads check liveness on their
own, so a cache whose sweeper is stopped still never returns dead entries.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from core.logging import get_logger

logger = get_logger(__name__)


class ExpirySweeper:
    def __init__(self, purge: Callable[[], int], *, interval: float, name: str = "cache-sweeper") -> None:
        self._purge = purge
        self._interval = float(interval)
        self._name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            # One Event per thread: a thread outliving a timed-out stop() still exits
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop,), name=self._name, daemon=True
            )
            self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._lock:
            thread, stop = self._thread, self._stop
            self._thread = None
        if thread is None:
            return

        stop.set()
        thread.join(timeout)

    def sweep_once(self) -> int:
        try:
            removed = self._purge()
        except Exception as e:
            logger.warning("cache_sweep_failed", sweeper=self._name, error=str(e))
            return 0

        if removed:
            logger.debug("cache_sweep", sweeper=self._name, removed=removed)
        return removed

    def _run(self, stop: threading.Event) -> None:
        # Event.wait returns True as soon as stop() is signalled
        while not stop.wait(self._interval):
            self.sweep_once()
