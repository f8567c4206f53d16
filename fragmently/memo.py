"""
Build-once memoization for async construction.

Backs both the component resolution cache and the service locator.

Concurrency:
    The pending build is stored as a task *before* the first caller
    suspends, so a second caller asking for the same key joins that task
    instead of starting another build. All joined callers receive the
    same value or the same exception.

    A failed build is discarded; the next call builds again. Evicting a
    key while its build is in flight detaches the build: callers already
    waiting still get its outcome, but it is not committed to the cache.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SingleFlightCache(Generic[K, V]):
    """
    Per-key memo with an in-flight guard.

    Example:
        cache: SingleFlightCache[str, Widget] = SingleFlightCache("widgets")
        widget = await cache.get_or_build("clock", lambda: build_clock())
    """

    def __init__(self, label: str = "memo") -> None:
        self._label = label
        self._values: dict[K, V] = {}
        self._pending: dict[K, asyncio.Task[V]] = {}

    async def get_or_build(self, key: K, build: Callable[[], Awaitable[V]]) -> V:
        """
        Return the cached value for ``key``, building it at most once.

        Args:
            key: Cache key
            build: Zero-argument coroutine function producing the value

        Returns:
            The cached or freshly built value
        """
        if key in self._values:
            logger.debug(f"[{self._label}] Cache hit: {key}")
            return self._values[key]

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, build))
            self._pending[key] = task
        else:
            logger.debug(f"[{self._label}] Joining in-flight build: {key}")

        # A cancelled waiter must not cancel the build other callers share
        return await asyncio.shield(task)

    async def _run(self, key: K, build: Callable[[], Awaitable[V]]) -> V:
        task = asyncio.current_task()
        try:
            value = await build()
        except BaseException:
            if self._pending.get(key) is task:
                del self._pending[key]
            raise

        if self._pending.get(key) is task:
            del self._pending[key]
            self._values[key] = value
        else:
            logger.debug(f"[{self._label}] Discarding build evicted while in flight: {key}")
        return value

    def evict(self, key: K | None = None) -> bool:
        """
        Drop a cached value (and detach any in-flight build).

        Args:
            key: Key to evict, or None to clear everything

        Returns:
            True if anything was removed
        """
        if key is None:
            removed = bool(self._values or self._pending)
            self._values.clear()
            self._pending.clear()
            return removed

        removed = key in self._values or key in self._pending
        self._values.pop(key, None)
        self._pending.pop(key, None)
        return removed

    def is_cached(self, key: K) -> bool:
        return key in self._values

    def is_pending(self, key: K) -> bool:
        return key in self._pending

    def peek(self, key: K, default: Any = None) -> V | Any:
        """Return the cached value without building."""
        return self._values.get(key, default)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values


__all__ = ["SingleFlightCache"]
