# src/pokedex_api/dependencies/core/bootstrap.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Core bootstrap for shared infrastructure (settings, cache, upstream client).

The single public surface is :func:`bootstrap`, an async context manager that
builds the process-wide cache store and orchestrator up front and releases
the upstream HTTP client on exit, even on error.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from pokedex_api.application.caching.orchestrator import CacheOrchestrator
from pokedex_api.config.settings import Settings, get_settings
from pokedex_api.dependencies import catalog as catalog_deps
from pokedex_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    orchestrator: CacheOrchestrator


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and tear down shared infrastructure.

    Args:
        app: FastAPI application instance (unused today).

    Yields:
        BootstrapState: Resolved settings and the cache orchestrator.
    """
    settings: Settings = get_settings()
    logger.info("bootstrap.start", extra={"env": settings.environment.value})

    state = BootstrapState(settings=settings, orchestrator=catalog_deps.get_cache_orchestrator())
    try:
        yield state
    finally:
        try:
            await catalog_deps.close_catalog_dependencies()
        except Exception:
            logger.exception("bootstrap.http_client_close_failed")
        logger.info("bootstrap.stop")
