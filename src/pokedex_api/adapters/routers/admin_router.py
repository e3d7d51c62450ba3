# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Admin Router.

Summary:
    Cache administration and service status under ``/v1/admin``:

    * ``POST /cache/clear`` runs the bounded ``invalidate_all`` sweep.
    * ``GET /cache/stats`` counts live entries by kind.
    * ``GET /status`` reports service metadata plus the cache readout.

Layer:
    adapters/routers
"""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends

from pokedex_api.adapters.presenters.base_presenter import BasePresenter
from pokedex_api.adapters.presenters.catalog_presenter import stats_to_http
from pokedex_api.adapters.routers.base_router import BaseRouter
from pokedex_api.adapters.schemas.http.catalog import (
    CacheClearHTTP,
    CacheStatsHTTP,
    ServiceStatusHTTP,
)
from pokedex_api.adapters.schemas.http.envelopes import SuccessEnvelope
from pokedex_api.application.caching.orchestrator import CacheOrchestrator
from pokedex_api.config.settings import Settings
from pokedex_api.dependencies.catalog import get_cache_orchestrator, get_settings
from pokedex_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

router = BaseRouter(version="v1", resource="admin", tags=["Admin"])
presenter = BasePresenter()


@router.post(
    "/cache/clear",
    response_model=SuccessEnvelope[CacheClearHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Clear cached types, items and species (bounded id sweep)",
)
async def clear_cache(
    orchestrator: Annotated[CacheOrchestrator, Depends(get_cache_orchestrator)],
) -> SuccessEnvelope[CacheClearHTTP]:
    removed = await orchestrator.invalidate_all()
    logger.info("admin.cache_cleared", extra={"removed": removed})
    data = CacheClearHTTP(removed=removed, cleared_at=datetime.now(tz=UTC))
    return presenter.present_success(data=data).body


@router.get(
    "/cache/stats",
    response_model=SuccessEnvelope[CacheStatsHTTP],
    summary="Live cache entries by kind",
)
async def cache_stats(
    orchestrator: Annotated[CacheOrchestrator, Depends(get_cache_orchestrator)],
) -> SuccessEnvelope[CacheStatsHTTP]:
    stats = await orchestrator.stats()
    return presenter.present_success(data=stats_to_http(stats)).body


@router.get(
    "/status",
    response_model=SuccessEnvelope[ServiceStatusHTTP],
    summary="Service status",
)
async def service_status(
    orchestrator: Annotated[CacheOrchestrator, Depends(get_cache_orchestrator)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessEnvelope[ServiceStatusHTTP]:
    stats = await orchestrator.stats()
    data = ServiceStatusHTTP(
        status="ok",
        service=settings.service_name,
        version=settings.service_version or "0.0.0",
        environment=settings.environment.value,
        timestamp=datetime.now(tz=UTC),
        cache=stats_to_http(stats),
    )
    return presenter.present_success(data=data).body
