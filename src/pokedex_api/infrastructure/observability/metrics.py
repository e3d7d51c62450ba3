# src/pokedex_api/infrastructure/observability/metrics.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Every collector is exposed through a ``get_*`` accessor that returns a
singleton bound to the **current** ``prometheus_client.REGISTRY``:

- Safe under hot reload and tests that swap the default registry.
- No duplicate-registration errors: an existing collector with the same name
  is reused.
- The module cache resets automatically when the active registry changes.

Collectors:
    * ``cache_operation_duration_seconds`` / ``cache_operations_total``:
      raw store operations (get/set) by namespace and hit flag.
    * ``catalog_cache_events_total``: orchestrator outcomes
      (hit/miss/store/skip/failure/invalidate) by entity kind.
    * ``catalog_upstream_latency_seconds`` / ``catalog_upstream_errors_total``:
      calls to the upstream catalog API.
    * ``catalog_upstream_retries_total``: retry attempts by reason.

Example:
    get_cache_events_total().labels(kind="item", event="hit").inc()
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final, TypeVar

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

_BUCKETS: Final[tuple[float, ...]] = (
    0.001,
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
    10.000,
    30.000,
)

_C = TypeVar("_C", Counter, Histogram)

_registry_id: int | None = None
_cache: dict[str, Counter | Histogram] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset the module cache if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id != rid:
            _cache.clear()
            _registry_id = rid


def _lookup_existing(name: str, kind: type[_C]) -> _C | None:
    with suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, kind):
                return col
    return None


def _get_or_create(
    kind: type[_C],
    name: str,
    help_text: str,
    labelnames: tuple[str, ...],
) -> _C:
    """Get or create a registry-bound collector with stable identity.

    1. Return from module cache if present for the active registry.
    2. If the registry already has a collector by this name, reuse it.
    3. Otherwise, register a new collector on the active registry.
    4. If a concurrent registration raced us, retry step 2.
    """
    _ensure_registry()
    with _lock:
        cached = _cache.get(name)
        if isinstance(cached, kind):
            return cached

        existing = _lookup_existing(name, kind)
        if existing is not None:
            _cache[name] = existing
            return existing

        try:
            if kind is Histogram:
                col = Histogram(
                    name, help_text, labelnames, buckets=_BUCKETS, registry=prom.REGISTRY
                )
            else:
                col = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError as exc:
            if "Duplicated timeseries" in str(exc):
                again = _lookup_existing(name, kind)
                if again is not None:
                    _cache[name] = again
                    return again
            _log.exception("Failed to register Prometheus collector %s", name)
            raise
        _cache[name] = col
        return col  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Cache store metrics
# ---------------------------------------------------------------------------


def get_cache_operation_duration_seconds() -> Histogram:
    """Return histogram for cache store operation latency.

    Labels:
        operation: Store operation name (``get`` / ``set``).
        namespace: Store namespace.
        hit: ``true``/``false``/``n/a``.
    """
    return _get_or_create(
        Histogram,
        "cache_operation_duration_seconds",
        "Latency (seconds) of cache operations.",
        ("operation", "namespace", "hit"),
    )


def get_cache_operations_total() -> Counter:
    """Return counter for cache store operations (same labels as the histogram)."""
    return _get_or_create(
        Counter,
        "cache_operations_total",
        "Total cache operations by type/namespace.",
        ("operation", "namespace", "hit"),
    )


def get_cache_events_total() -> Counter:
    """Return counter for get-or-populate outcomes.

    Labels:
        kind: Entity kind (``category``, ``item``, ``species``, ``search``).
        event: ``hit``, ``miss``, ``store``, ``skip``, ``fetch_error``,
            ``cache_fault`` or ``invalidate``.
    """
    return _get_or_create(
        Counter,
        "catalog_cache_events_total",
        "Get-or-populate outcomes by entity kind.",
        ("kind", "event"),
    )


# ---------------------------------------------------------------------------
# Upstream metrics
# ---------------------------------------------------------------------------


def get_upstream_latency_seconds() -> Histogram:
    """Return histogram for upstream catalog API latency.

    Labels:
        endpoint: Logical endpoint (``pokemon``, ``species`` ...).
        outcome: ``success`` or ``error``.
    """
    return _get_or_create(
        Histogram,
        "catalog_upstream_latency_seconds",
        "Latency of upstream catalog API calls (seconds).",
        ("endpoint", "outcome"),
    )


def get_upstream_errors_total() -> Counter:
    """Return counter for upstream failures by endpoint and exception class."""
    return _get_or_create(
        Counter,
        "catalog_upstream_errors_total",
        "Total errors when calling the upstream catalog API.",
        ("endpoint", "reason"),
    )


def get_upstream_retries_total() -> Counter:
    """Return counter for retry attempts by endpoint and reason."""
    return _get_or_create(
        Counter,
        "catalog_upstream_retries_total",
        "Retries attempted against the upstream catalog API.",
        ("endpoint", "reason"),
    )
