"""Keyed query results with a staleness window and tag invalidation."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

QueryKey = tuple[Hashable, ...]


@dataclass(slots=True)
class CacheEntry:
    value: Any
    fetched_at: float
    invalidated: bool = False


class QueryCache:
    """Stores the last result per query key.

    A key's first element is its resource tag (``"news"``, ``"tickets"``...);
    invalidating a tag marks every key under it stale so the next ``fetch``
    goes back to the network. Concurrent fetches of the same key share one
    request; if the caller that started it is cancelled, a waiting caller
    restarts it instead of hanging. Failed fetches are never cached.

    Entries live for the lifetime of the cache and are only dropped by
    ``clear``. ``KoomyApp.logout`` clears it, so user-scoped keys do not
    outlive the session that fetched them.
    """

    def __init__(
        self,
        stale_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stale_seconds = stale_seconds
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._inflight: dict[QueryKey, asyncio.Future[Any]] = {}

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[Any]],
        *,
        stale_seconds: float | None = None,
        enabled: bool = True,
    ) -> Any:
        """Return the cached value for ``key`` or run ``fetcher``.

        A disabled query never touches the network and yields the cached
        value, if any.
        """
        if not enabled:
            entry = self._entries.get(key)
            return entry.value if entry else None

        window = self._stale_seconds if stale_seconds is None else stale_seconds
        if not self.is_stale(key, window):
            return self._entries[key].value

        pending = self._inflight.get(key)
        while pending is not None:
            try:
                # Shielded: a cancelled follower must not cancel the shared request.
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                if not pending.cancelled():
                    raise
                # The caller that started the request was cancelled; take over.
                pending = self._inflight.get(key)

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            value = await fetcher()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Consume it here so an unawaited future does not warn.
            future.exception()
            raise
        else:
            self.set(key, value)
            future.set_result(value)
            return value
        finally:
            self._inflight.pop(key, None)

    def get(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.value if entry else None

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, fetched_at=self._clock())

    def is_stale(self, key: QueryKey, stale_seconds: float | None = None) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.invalidated:
            return True
        window = self._stale_seconds if stale_seconds is None else stale_seconds
        return self._clock() - entry.fetched_at >= window

    def invalidate(self, *prefix: Hashable) -> int:
        """Mark every key starting with ``prefix`` stale. Returns the count."""
        count = 0
        for key, entry in self._entries.items():
            if key[: len(prefix)] == prefix:
                entry.invalidated = True
                count += 1
        logger.debug("query_cache_invalidated", prefix=prefix, count=count)
        return count

    def clear(self) -> None:
        self._entries.clear()
