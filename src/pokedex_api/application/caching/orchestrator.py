# src/pokedex_api/application/caching/orchestrator.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Cache Orchestrator (get-or-populate).

Synopsis:
    Sits between the query service and the upstream gateway. For every entity
    kind it checks the cache store, falls back to the supplied fetch callable
    on a miss, writes non-empty results back with the kind's TTL, and exposes
    targeted and bulk invalidation plus a live-entry readout.

Design:
    * TTL bands per kind (defaults): category 6h, item 30m, species 1h,
      search 15m; every entry also records a 5 minute sliding window that
      never extends validity.
    * ``None`` and empty collections are never stored, so an absence is
      re-fetched on the next call.
    * Nothing raised by the store or the fetch callable escapes
      :meth:`CacheOrchestrator.get_or_fetch`: upstream failures are logged at
      error level and collapse to ``None``; store faults are logged and
      treated as a miss.
    * ``invalidate_all`` sweeps a bounded id range (1..N) plus the type list.
      Search results, name-keyed items, type membership lists and ids above N
      are left to expire on their own.

Layer:
    application/caching
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Final, TypeVar

from pokedex_api.application.interfaces.cache_port import CachePriority, CacheStorePort
from pokedex_api.domain.exceptions.catalog import (
    CacheLayerFault,
    MalformedResponse,
    UpstreamNotFound,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from pokedex_api.infrastructure.logging.logger import get_json_logger
from pokedex_api.infrastructure.observability.metrics import get_cache_events_total

__all__ = [
    "CacheKind",
    "CacheKeys",
    "CachePolicy",
    "CacheStats",
    "CacheOrchestrator",
]

T = TypeVar("T")

logger = get_json_logger(__name__)

_NAMESPACE: Final[str] = "catalog"


class CacheKind(str, Enum):
    """Entity kind; selects the TTL band and key prefix."""

    CATEGORY = "category"
    ITEM = "item"
    SPECIES = "species"
    SEARCH = "search"


def _norm(text: str) -> str:
    return text.strip().lower()


class CacheKeys:
    """Deterministic key builders. Text segments are always lowercased."""

    @staticmethod
    def types() -> str:
        return f"{_NAMESPACE}:types"

    @staticmethod
    def type_members(type_name: str) -> str:
        return f"{_NAMESPACE}:type-members:{_norm(type_name)}"

    @staticmethod
    def item(item_id: int) -> str:
        return f"{_NAMESPACE}:item:{int(item_id)}"

    @staticmethod
    def item_by_name(name: str) -> str:
        return f"{_NAMESPACE}:item:name:{_norm(name)}"

    @staticmethod
    def species(species_id: int) -> str:
        return f"{_NAMESPACE}:species:{int(species_id)}"

    @staticmethod
    def search(query: str) -> str:
        return f"{_NAMESPACE}:search:{_norm(query)}"

    @staticmethod
    def kind_of(key: str) -> CacheKind | None:
        """Classify a key by its prefix, or ``None`` for foreign keys."""
        for prefix, kind in _KIND_PREFIXES:
            if key.startswith(prefix):
                return kind
        return None


_KIND_PREFIXES: Final[tuple[tuple[str, CacheKind], ...]] = (
    (f"{_NAMESPACE}:types", CacheKind.CATEGORY),
    (f"{_NAMESPACE}:type-members:", CacheKind.CATEGORY),
    (f"{_NAMESPACE}:item:", CacheKind.ITEM),
    (f"{_NAMESPACE}:species:", CacheKind.SPECIES),
    (f"{_NAMESPACE}:search:", CacheKind.SEARCH),
)


@dataclass(frozen=True)
class CachePolicy:
    """TTL bands (seconds) and the bulk-invalidation bound."""

    category_ttl_s: float = 6 * 60 * 60
    item_ttl_s: float = 30 * 60
    species_ttl_s: float = 60 * 60
    search_ttl_s: float = 15 * 60
    sliding_window_s: float = 5 * 60
    invalidate_max_id: int = 1000
    priority: CachePriority = CachePriority.NORMAL

    def ttl_for(self, kind: CacheKind) -> float:
        return {
            CacheKind.CATEGORY: self.category_ttl_s,
            CacheKind.ITEM: self.item_ttl_s,
            CacheKind.SPECIES: self.species_ttl_s,
            CacheKind.SEARCH: self.search_ttl_s,
        }[kind]

    @classmethod
    def from_settings(cls, settings: Any) -> CachePolicy:
        """Build a policy from the application ``Settings`` object."""
        return cls(
            category_ttl_s=settings.cache_ttl_types_s,
            item_ttl_s=settings.cache_ttl_item_s,
            species_ttl_s=settings.cache_ttl_species_s,
            search_ttl_s=settings.cache_ttl_search_s,
            sliding_window_s=settings.cache_sliding_window_s,
            invalidate_max_id=settings.cache_invalidate_max_id,
        )


@dataclass(frozen=True)
class CacheStats:
    """Counts of live entries by kind at ``captured_at``."""

    counts: dict[str, int]
    total: int
    captured_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, list | tuple | dict | set | frozenset) and not value)


def _count(kind: CacheKind, event: str) -> None:
    with suppress(Exception):
        get_cache_events_total().labels(kind=kind.value, event=event).inc()


class CacheOrchestrator:
    """Get-or-populate over a :class:`CacheStorePort`, per entity kind."""

    def __init__(self, store: CacheStorePort, policy: CachePolicy | None = None) -> None:
        """Initialize the orchestrator.

        Args:
            store: Process-wide cache store.
            policy: TTL bands; defaults to :class:`CachePolicy` defaults.
        """
        self._store = store
        self._policy = policy or CachePolicy()

    @property
    def policy(self) -> CachePolicy:
        return self._policy

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[T | None]],
        *,
        kind: CacheKind,
        ttl: float | None = None,
    ) -> T | None:
        """Return the cached value for ``key`` or populate it from ``fetch_fn``.

        Args:
            key: Fully-built key (see :class:`CacheKeys`).
            fetch_fn: Zero-arg coroutine factory that fetches the value upstream.
            kind: Entity kind; selects the TTL when ``ttl`` is omitted.
            ttl: Optional absolute TTL override in seconds.

        Returns:
            The cached or freshly fetched value; ``None`` when upstream has no
            such entity or the fetch failed. Empty collections are returned
            as-is but not stored.
        """
        try:
            value, found = await self._store.get(key)
        except Exception:
            logger.exception(
                "cache.fault",
                extra={"code": CacheLayerFault.code, "op": "get", "kind": kind.value, "key": key},
            )
            _count(kind, "cache_fault")
            found = False

        if found:
            logger.info("cache.hit", extra={"kind": kind.value, "key": key})
            _count(kind, "hit")
            return value

        logger.info("cache.miss", extra={"kind": kind.value, "key": key})
        _count(kind, "miss")

        try:
            value = await fetch_fn()
        except UpstreamNotFound:
            logger.warning("cache.fetch_not_found", extra={"kind": kind.value, "key": key})
            _count(kind, "skip")
            return None
        except UpstreamTimeout as exc:
            self._log_fetch_error("cache.fetch_timeout", kind, key, exc)
            return None
        except UpstreamUnavailable as exc:
            self._log_fetch_error("cache.fetch_unavailable", kind, key, exc)
            return None
        except MalformedResponse as exc:
            self._log_fetch_error("cache.fetch_malformed", kind, key, exc)
            return None
        except Exception as exc:
            self._log_fetch_error("cache.fetch_failed", kind, key, exc)
            return None

        await self.put(key, value, kind=kind, ttl=ttl)
        return value

    async def put(self, key: str, value: Any, *, kind: CacheKind, ttl: float | None = None) -> bool:
        """Store ``value`` under ``key`` with the kind's TTL and the sliding window.

        ``None`` and empty collections are skipped. Store faults are logged,
        never raised.

        Returns:
            True when the value was stored.
        """
        if _is_empty(value):
            logger.info("cache.skip", extra={"kind": kind.value, "key": key})
            _count(kind, "skip")
            return False

        effective_ttl = self._policy.ttl_for(kind) if ttl is None else ttl
        try:
            await self._store.set(
                key,
                value,
                absolute_ttl=effective_ttl,
                sliding_ttl=self._policy.sliding_window_s,
                priority=self._policy.priority,
            )
        except Exception:
            logger.exception(
                "cache.fault",
                extra={"code": CacheLayerFault.code, "op": "set", "kind": kind.value, "key": key},
            )
            _count(kind, "cache_fault")
            return False

        logger.info(
            "cache.store",
            extra={"kind": kind.value, "key": key, "ttl_s": effective_ttl},
        )
        _count(kind, "store")
        return True

    async def get_or_fetch_list(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[list[T] | None]],
        *,
        kind: CacheKind,
        ttl: float | None = None,
    ) -> list[T]:
        """Like :meth:`get_or_fetch` but always returns a list (empty on absence/failure)."""
        value = await self.get_or_fetch(key, fetch_fn, kind=kind, ttl=ttl)
        return list(value) if value else []

    async def invalidate(self, key: str, kind: CacheKind) -> bool:
        """Remove one entry. Idempotent.

        Returns:
            True when a live entry existed before removal.
        """
        existed = False
        try:
            existed = await self._store.contains_live(key)
            await self._store.remove(key)
        except Exception:
            logger.exception(
                "cache.fault",
                extra={"code": CacheLayerFault.code, "op": "remove", "kind": kind.value, "key": key},
            )
            _count(kind, "cache_fault")
            return False
        logger.info(
            "cache.invalidate",
            extra={"kind": kind.value, "key": key, "existed": existed},
        )
        _count(kind, "invalidate")
        return existed

    async def invalidate_all(self) -> int:
        """Best-effort sweep: the type list plus item/species ids ``1..invalidate_max_id``.

        Returns:
            Number of live entries removed.
        """
        upper = self._policy.invalidate_max_id
        targets: list[tuple[str, CacheKind]] = [(CacheKeys.types(), CacheKind.CATEGORY)]
        for item_id in range(1, upper + 1):
            targets.append((CacheKeys.item(item_id), CacheKind.ITEM))
            targets.append((CacheKeys.species(item_id), CacheKind.SPECIES))

        removed = 0
        try:
            for key, _kind in targets:
                if await self._store.contains_live(key):
                    removed += 1
                await self._store.remove(key)
        except Exception:
            logger.exception(
                "cache.fault",
                extra={"code": CacheLayerFault.code, "op": "invalidate_all"},
            )
        logger.info(
            "cache.invalidate_all",
            extra={"removed": removed, "max_id": upper},
        )
        return removed

    async def stats(self) -> CacheStats:
        """Count live entries per kind."""
        counts = {kind.value: 0 for kind in CacheKind}
        try:
            keys = await self._store.live_keys()
        except Exception:
            logger.exception("cache.fault", extra={"code": CacheLayerFault.code, "op": "stats"})
            keys = []
        for key in keys:
            kind = CacheKeys.kind_of(key)
            if kind is not None:
                counts[kind.value] += 1
        return CacheStats(counts=counts, total=sum(counts.values()))

    @staticmethod
    def _log_fetch_error(event: str, kind: CacheKind, key: str, exc: Exception) -> None:
        logger.error(
            event,
            extra={
                "kind": kind.value,
                "key": key,
                "error_type": type(exc).__name__,
                "error_code": getattr(exc, "code", None),
            },
        )
        _count(kind, "fetch_error")
