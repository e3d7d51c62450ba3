# src/pokedex_api/application/interfaces/cache_port.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: Cache Store Port.

Synopsis:
    Generic key-to-value storage with automatic expiration used by the cache
    orchestrator. Values are stored as-is (domain records are immutable), so
    no serialization happens at this boundary.

Layer:
    application/interfaces
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol


class CachePriority(str, Enum):
    """Eviction hint recorded with each entry."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class CacheStorePort(Protocol):
    """Process-wide key -> value store with absolute expiration.

    Implementations own their internal consistency: every method is atomic per
    key and safe to call from concurrent tasks without external locking.
    """

    async def get(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` for a live entry, else ``(None, False)``.

        Args:
            key: Fully-built cache key.

        Returns:
            The stored value and whether a live entry exists. Expired entries
            are never returned.
        """
        ...

    async def set(
        self,
        key: str,
        value: Any,
        *,
        absolute_ttl: float,
        sliding_ttl: float = 0.0,
        priority: CachePriority = CachePriority.NORMAL,
    ) -> None:
        """Store or overwrite ``value`` under ``key`` unconditionally.

        Args:
            key: Fully-built cache key.
            value: Value to store.
            absolute_ttl: Seconds until the entry stops being live.
            sliding_ttl: Sliding window recorded as metadata only.
            priority: Eviction hint.
        """
        ...

    async def remove(self, key: str) -> None:
        """Delete ``key``; no-op if absent."""
        ...

    async def contains_live(self, key: str) -> bool:
        """Return True when a live entry exists for ``key``."""
        ...

    async def live_keys(self) -> list[str]:
        """Return a snapshot of keys that currently hold live entries."""
        ...
