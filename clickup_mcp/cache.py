"""
Workspace cache - time-bounded, process-local store for slow-changing entities.

One WorkspaceCache is created at server start and handed to every component
that needs it. Nothing is persisted; the cache dies with the process.

Expiry is checked lazily on read. An expired entry is treated as absent and
overwritten by the next fetch; there is no background sweep.
"""

from __future__ import annotations

import asyncio
import json
import sys
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from clickup_mcp import config
from clickup_mcp.types import CacheStats

# Entity kinds (first segment of every cache key)
KIND_SPACE_TAGS = "space_tags"
KIND_HIERARCHY = "hierarchy"
KIND_MEMBERS = "members"
KIND_TASK_TYPES = "task_types"


@dataclass(frozen=True)
class CacheEntry:
    """One stored value. Entries are replaced whole, never mutated."""

    key: str
    value: Any
    stored_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at < self.ttl


def cache_key(kind: str, *scope: object) -> str:
    """Build the key for *kind* scoped by *scope* ids, e.g. ``space_tags:901``."""
    return ":".join([kind, *(str(s) for s in scope)])


def _log_cache_event(**fields):
    """Emit structured cache logs to stderr when enabled."""
    if not config.CACHE_LOG_ENABLED:
        return
    print("[CACHE] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


class WorkspaceCache:
    """Get-or-fetch cache with per-key invalidation and in-flight coalescing.

    Concurrent ``get_or_fetch`` calls for the same key share one fetch. If the
    key is invalidated while that fetch is running, its result is still
    returned to the callers already waiting but is not stored.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._hits = 0
        self._misses = 0
        self._coalesced = 0

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
        ttl: float,
    ) -> Any:
        """Return the cached value for *key*, fetching and storing it on a miss."""
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            self._hits += 1
            _log_cache_event(event="hit", key=key)
            return entry.value

        task = self._inflight.get(key)
        if task is None:
            self._misses += 1
            _log_cache_event(event="miss", key=key, expired=entry is not None)
            task = asyncio.ensure_future(self._fetch_and_store(key, fetch_fn, ttl))
            self._inflight[key] = task
        else:
            self._coalesced += 1
            _log_cache_event(event="coalesced", key=key)
        # Shielded so an abandoned invocation does not cancel the shared fetch.
        return await asyncio.shield(task)

    async def _fetch_and_store(self, key, fetch_fn, ttl):
        me = asyncio.current_task()
        try:
            value = await fetch_fn()
        except BaseException:
            if self._inflight.get(key) is me:
                del self._inflight[key]
            raise
        if self._inflight.get(key) is me:
            del self._inflight[key]
            self._entries[key] = CacheEntry(key, value, self._clock(), ttl)
        else:
            _log_cache_event(event="discarded", key=key)
        return value

    def invalidate(self, key: str) -> None:
        """Drop *key*. A fetch already running for it will not be stored."""
        self._entries.pop(key, None)
        self._inflight.pop(key, None)
        _log_cache_event(event="invalidate", key=key)

    def invalidate_prefix(self, kind_prefix: str) -> int:
        """Drop every entry whose key starts with *kind_prefix*. Returns the count."""
        doomed = [k for k in self._entries if k.startswith(kind_prefix)]
        for k in doomed:
            del self._entries[k]
        for k in [k for k in self._inflight if k.startswith(kind_prefix)]:
            del self._inflight[k]
        _log_cache_event(event="invalidate_prefix", prefix=kind_prefix, removed=len(doomed))
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()
        self._inflight.clear()

    def get_stats(self) -> CacheStats:
        """Cumulative hit/miss counters and the number of stored entries."""
        return {
            "hits": self._hits,
            "misses": self._misses,
            "coalesced": self._coalesced,
            "entries": len(self._entries),
            "in_flight": len(self._inflight),
        }
