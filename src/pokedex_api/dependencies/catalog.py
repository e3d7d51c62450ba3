# src/pokedex_api/dependencies/catalog.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the catalog (store, orchestrator, gateway, service).

Overview:
    FastAPI dependency providers for everything behind the catalog routers.
    The cache store, orchestrator and PokeAPI transport are process-wide
    singletons built once (``lru_cache``) and released by
    :func:`close_catalog_dependencies` at shutdown.

Layer:
    dependencies

Design:
    * One explicitly constructed :class:`InMemoryCacheStore` per process,
      handed to the orchestrator at construction.
    * Settings are read through this module's ``get_settings`` shim so tests
      can monkeypatch them without touching the global settings cache.
    * Tests swap collaborators with ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from pokedex_api.adapters.controllers.catalog_controller import (
    CatalogController,
    EmailController,
    ExportController,
)
from pokedex_api.adapters.gateways.pokeapi_gateway import PokeApiCatalogGateway
from pokedex_api.application.caching.orchestrator import CacheOrchestrator, CachePolicy
from pokedex_api.application.interfaces.email_sender import EmailSenderPort
from pokedex_api.application.interfaces.spreadsheet_exporter import SpreadsheetExporterPort
from pokedex_api.application.use_cases.catalog.query_service import CatalogQueryService
from pokedex_api.config.settings import Settings
from pokedex_api.domain.interfaces.gateways.catalog_gateway import CatalogGatewayProtocol
from pokedex_api.infrastructure.caching.memory_store import InMemoryCacheStore
from pokedex_api.infrastructure.export.spreadsheet import OpenpyxlSpreadsheetExporter
from pokedex_api.infrastructure.external_apis.pokeapi.client import PokeApiClient
from pokedex_api.infrastructure.external_apis.pokeapi.settings import PokeApiSettings
from pokedex_api.infrastructure.logging.logger import get_json_logger
from pokedex_api.infrastructure.mail.settings import SmtpSettings
from pokedex_api.infrastructure.mail.smtp_sender import SmtpEmailSender

logger = get_json_logger(__name__)


def get_settings() -> Settings:
    """Shim for tests to patch settings resolution in this module."""
    from pokedex_api.config.settings import get_settings as core_get_settings

    return core_get_settings()


# =============================================================================
# Cache
# =============================================================================


@lru_cache(maxsize=1)
def get_cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore(sweep_interval=get_settings().cache_sweep_interval_s)


@lru_cache(maxsize=1)
def get_cache_orchestrator() -> CacheOrchestrator:
    policy = CachePolicy.from_settings(get_settings())
    logger.info(
        "catalog.cache_policy",
        extra={
            "category_ttl_s": policy.category_ttl_s,
            "item_ttl_s": policy.item_ttl_s,
            "species_ttl_s": policy.species_ttl_s,
            "search_ttl_s": policy.search_ttl_s,
            "invalidate_max_id": policy.invalidate_max_id,
        },
    )
    return CacheOrchestrator(get_cache_store(), policy)


# =============================================================================
# Upstream
# =============================================================================


@lru_cache(maxsize=1)
def get_pokeapi_client() -> PokeApiClient:
    return PokeApiClient(PokeApiSettings())


@lru_cache(maxsize=1)
def get_catalog_gateway() -> CatalogGatewayProtocol:
    client = get_pokeapi_client()
    return PokeApiCatalogGateway(
        client,
        type_list_limit=client.settings.type_list_limit,
        name_index_limit=client.settings.name_index_limit,
        search_limit=get_settings().catalog_search_limit,
    )


# =============================================================================
# Use case + collaborators
# =============================================================================


def get_catalog_service(
    gateway: Annotated[CatalogGatewayProtocol, Depends(get_catalog_gateway)],
    orchestrator: Annotated[CacheOrchestrator, Depends(get_cache_orchestrator)],
) -> CatalogQueryService:
    settings = get_settings()
    return CatalogQueryService(
        gateway,
        orchestrator,
        page_size=settings.catalog_page_size,
        member_cap=settings.catalog_category_member_cap,
        concurrency=settings.catalog_fanout_concurrency,
        preferred_language=settings.catalog_preferred_language,
        fallback_language=settings.catalog_fallback_language,
    )


@lru_cache(maxsize=1)
def get_spreadsheet_exporter() -> SpreadsheetExporterPort:
    return OpenpyxlSpreadsheetExporter()


@lru_cache(maxsize=1)
def get_email_sender() -> EmailSenderPort:
    return SmtpEmailSender(SmtpSettings())


def get_catalog_controller(
    service: Annotated[CatalogQueryService, Depends(get_catalog_service)],
) -> CatalogController:
    return CatalogController(service)


def get_export_controller(
    catalog: Annotated[CatalogController, Depends(get_catalog_controller)],
    exporter: Annotated[SpreadsheetExporterPort, Depends(get_spreadsheet_exporter)],
) -> ExportController:
    return ExportController(catalog, exporter)


def get_email_controller(
    catalog: Annotated[CatalogController, Depends(get_catalog_controller)],
    sender: Annotated[EmailSenderPort, Depends(get_email_sender)],
) -> EmailController:
    return EmailController(catalog, sender)


# =============================================================================
# Lifecycle
# =============================================================================


async def close_catalog_dependencies() -> None:
    """Close the PokeAPI transport if it was created."""
    if get_pokeapi_client.cache_info().currsize:
        await get_pokeapi_client().aclose()


def reset_catalog_dependencies() -> None:
    """Drop every cached singleton (fresh store, client and gateway on next use)."""
    for provider in (
        get_cache_store,
        get_cache_orchestrator,
        get_pokeapi_client,
        get_catalog_gateway,
        get_spreadsheet_exporter,
        get_email_sender,
    ):
        provider.cache_clear()
