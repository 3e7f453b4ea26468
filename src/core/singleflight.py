"""Per-key duplicate call suppression.

Concurrent callers that ask for the same key while a call for it is
already running wait for that call and share its outcome (value or
exception) instead of running their own. Once a call finishes its key is
forgotten, so later callers start a fresh call. If an async leader is
cancelled, its waiting followers are not: one of them takes over the key
and runs the call again.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Awaitable, Callable, Dict, Optional


class _Call:
    __slots__ = ("done", "value", "error")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: Any = None
        self.error: Optional[BaseException] = None


class SingleFlight:
    # Thread-based group for synchronous callables
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: Dict[str, _Call] = {}

    def do(self, key: str, fn: Callable[[], Any]) -> Any:
        """Run fn for key, or wait for the call already running for it.

        Followers re-raise the leader's exception object itself, so every
        thread that shares a failed call sees one instance whose traceback
        grows with each re-raise. Treat it as read-only.
        """
        with self._lock:
            call = self._calls.get(key)
            leader = call is None
            if leader:
                call = _Call()
                self._calls[key] = call

        if not leader:
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.value

        try:
            call.value = fn()
            return call.value
        except BaseException as e:
            call.error = e
            raise
        finally:
            with self._lock:
                self._calls.pop(key, None)
            call.done.set()

    def in_flight(self, key: str) -> bool:
        with self._lock:
            return key in self._calls


class AsyncSingleFlight:
    # Future-based group for coroutine functions; callers share one event loop
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: Dict[str, "asyncio.Future[Any]"] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        while True:
            with self._lock:
                fut = self._calls.get(key)
                leader = fut is None
                if leader:
                    fut = asyncio.get_running_loop().create_future()
                    self._calls[key] = fut

            if leader:
                break

            try:
                # shield: a cancelled follower must not cancel the shared call
                return await asyncio.shield(fut)
            except asyncio.CancelledError:
                # Only the leader cancels fut; followers start a new call
                if not fut.cancelled():
                    raise

        try:
            value = await fn()
        except BaseException as e:
            if isinstance(e, asyncio.CancelledError):
                fut.cancel()
            else:
                fut.set_exception(e)
                # Mark retrieved so an unobserved failure does not warn
                fut.exception()
            raise
        else:
            fut.set_result(value)
            return value
        finally:
            with self._lock:
                self._calls.pop(key, None)

    def in_flight(self, key: str) -> bool:
        with self._lock:
            return key in self._calls
