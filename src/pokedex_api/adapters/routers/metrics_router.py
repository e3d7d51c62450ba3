# src/pokedex_api/adapters/routers/metrics_router.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

Creates the cache and upstream collectors before rendering so their series
are listed on the very first scrape.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress
from typing import Any

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from pokedex_api.infrastructure.logging.logger import get_json_logger
from pokedex_api.infrastructure.observability.metrics import (
    get_cache_events_total,
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
    get_upstream_errors_total,
    get_upstream_latency_seconds,
    get_upstream_retries_total,
)

logger = get_json_logger(__name__)
router = APIRouter()

_COLLECTORS: tuple[Callable[[], Any], ...] = (
    get_cache_events_total,
    get_cache_operation_duration_seconds,
    get_cache_operations_total,
    get_upstream_errors_total,
    get_upstream_latency_seconds,
    get_upstream_retries_total,
)


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics in text format."""
    for getter in _COLLECTORS:
        with suppress(Exception):
            getter()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
