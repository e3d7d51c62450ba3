# src/pokedex_api/infrastructure/caching/memory_store.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""In-memory Cache Store.

Synopsis:
    Process-wide implementation of :class:`CacheStorePort`. One instance is
    constructed at startup and shared by every request; an ``asyncio.Lock``
    serializes access so no task ever observes a half-written entry.

Design:
    * Entries are immutable :class:`CacheEntry` records; ``set`` replaces the
      whole entry.
    * Validity is ``now < absolute_expiration``. The sliding window is stored
      as metadata and never extends validity.
    * Expired entries are dropped lazily on read, and in bulk by
      :meth:`InMemoryCacheStore.purge_expired`. ``set`` runs that sweep
      itself once ``sweep_interval`` seconds have passed since the last one,
      so keys that are never read again do not accumulate.
    * Capacity is unbounded (host memory); ``priority`` is recorded only.
    * The clock is injectable (seconds, monotonic) so TTL behavior can be
      tested without sleeping.

Layer:
    infrastructure/caching
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from pokedex_api.application.interfaces.cache_port import CachePriority, CacheStorePort
from pokedex_api.infrastructure.observability.metrics import (
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
)

__all__ = ["CacheEntry", "InMemoryCacheStore"]

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A stored value with its expiration metadata.

    Attributes:
        value: The cached value.
        created_at: Clock reading at insertion.
        absolute_expiration: ``created_at + absolute_ttl``.
        sliding_window: Renewal allowance in seconds (metadata only).
        priority: Eviction hint.
    """

    value: Any
    created_at: float
    absolute_expiration: float
    sliding_window: float = 0.0
    priority: CachePriority = CachePriority.NORMAL

    def is_live(self, now: float) -> bool:
        return now < self.absolute_expiration


class InMemoryCacheStore(CacheStorePort):
    """A concurrency-safe in-memory key -> value store with absolute TTLs."""

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        namespace: str = "catalog",
        sweep_interval: float = 60.0,
    ) -> None:
        """Initialize an empty store.

        Args:
            clock: Zero-arg callable returning seconds; defaults to ``time.monotonic``.
            namespace: Label used on cache metrics.
            sweep_interval: Minimum seconds between expiry sweeps run by
                ``set``. ``0`` sweeps on every write.
        """
        self._clock: Clock = clock or time.monotonic
        self._ns = namespace
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._sweep_interval = max(0.0, float(sweep_interval))
        self._last_sweep = self._clock()

    async def get(self, key: str) -> tuple[Any, bool]:
        start = time.perf_counter()
        hit = False
        try:
            async with self._lock:
                entry = self._entries.get(key)
                if entry is None:
                    return None, False
                if not entry.is_live(self._clock()):
                    del self._entries[key]
                    return None, False
                hit = True
                return entry.value, True
        finally:
            self._observe("get", "true" if hit else "false", start)

    async def set(
        self,
        key: str,
        value: Any,
        *,
        absolute_ttl: float,
        sliding_ttl: float = 0.0,
        priority: CachePriority = CachePriority.NORMAL,
    ) -> None:
        start = time.perf_counter()
        try:
            async with self._lock:
                now = self._clock()
                self._entries[key] = CacheEntry(
                    value=value,
                    created_at=now,
                    absolute_expiration=now + float(absolute_ttl),
                    sliding_window=float(sliding_ttl),
                    priority=priority,
                )
                if now - self._last_sweep >= self._sweep_interval:
                    self._sweep(now)
        finally:
            self._observe("set", "n/a", start)

    async def remove(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def contains_live(self, key: str) -> bool:
        async with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.is_live(self._clock())

    async def live_keys(self) -> list[str]:
        async with self._lock:
            now = self._clock()
            return [k for k, e in self._entries.items() if e.is_live(now)]

    async def entry(self, key: str) -> CacheEntry | None:
        """Return the raw entry for ``key`` (live or not), for diagnostics."""
        async with self._lock:
            return self._entries.get(key)

    async def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        async with self._lock:
            return self._sweep(self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep(self, now: float) -> int:
        # Caller holds the lock.
        dead = [k for k, e in self._entries.items() if not e.is_live(now)]
        for k in dead:
            del self._entries[k]
        self._last_sweep = now
        return len(dead)

    def _observe(self, operation: str, hit: str, start: float) -> None:
        labels = {"operation": operation, "namespace": self._ns, "hit": hit}
        with suppress(Exception):
            get_cache_operation_duration_seconds().labels(**labels).observe(
                time.perf_counter() - start
            )
            get_cache_operations_total().labels(**labels).inc()
