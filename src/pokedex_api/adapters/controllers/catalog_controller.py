# src/pokedex_api/adapters/controllers/catalog_controller.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Catalog Controller.

Summary:
    Normalizes listing input before it reaches the query service:

    * ``page < 1`` becomes 1.
    * Negative height bounds are dropped.
    * Reversed bounds (min > max) are swapped.
    * Blank name/type filters become ``None``.

    Also backs the export and email endpoints, which need the same item
    lookups.

Layer:
    adapters/controllers
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pokedex_api.adapters.controllers.base_controller import BaseController
from pokedex_api.application.interfaces.email_sender import EmailSenderPort
from pokedex_api.application.interfaces.spreadsheet_exporter import SpreadsheetExporterPort
from pokedex_api.application.use_cases.catalog.query_service import CatalogQueryService
from pokedex_api.domain.entities.catalog_item import CatalogItem
from pokedex_api.domain.entities.details_view import DetailsView
from pokedex_api.domain.entities.listing import ListResult, TypeOption
from pokedex_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


@dataclass(frozen=True)
class ListingFilters:
    """Normalized listing input."""

    page: int = 1
    name: str | None = None
    type_name: str | None = None
    min_height: int | None = None
    max_height: int | None = None


def normalize_filters(
    page: int | None,
    name: str | None = None,
    type_name: str | None = None,
    min_height: int | None = None,
    max_height: int | None = None,
) -> ListingFilters:
    low = min_height if min_height is not None and min_height >= 0 else None
    high = max_height if max_height is not None and max_height >= 0 else None
    if low is not None and high is not None and low > high:
        low, high = high, low
    return ListingFilters(
        page=max(1, page or 1),
        name=(name or "").strip() or None,
        type_name=(type_name or "").strip().lower() or None,
        min_height=low,
        max_height=high,
    )


class CatalogController(BaseController):
    """Coordinator for catalog listing, details, types and suggestions."""

    __slots__ = ("_service",)

    def __init__(self, service: CatalogQueryService) -> None:
        self._service = service

    async def list_items(self, filters: ListingFilters, page_size: int | None = None) -> ListResult:
        return await self._service.list_items(
            page=filters.page,
            page_size=page_size,
            name_filter=filters.name,
            type_filter=filters.type_name,
            min_height=filters.min_height,
            max_height=filters.max_height,
        )

    async def details(self, item_id: int) -> DetailsView | None:
        return await self._service.get_details_with_species(item_id)

    async def types(self) -> list[TypeOption]:
        return await self._service.get_type_options()

    async def suggestions(self, query: str) -> list[str]:
        return await self._service.search_names(query)

    async def items(self, ids: Sequence[int]) -> list[CatalogItem]:
        return await self._service.get_multiple(ids)


class ExportController(BaseController):
    """Build spreadsheet payloads for a selection, one item, or a listing page."""

    __slots__ = ("_catalog", "_exporter")

    def __init__(self, catalog: CatalogController, exporter: SpreadsheetExporterPort) -> None:
        self._catalog = catalog
        self._exporter = exporter

    async def selection(self, ids: Sequence[int]) -> bytes | None:
        items = await self._catalog.items(ids)
        if not items:
            return None
        return self._exporter.export(items, sheet_title="Selection")

    async def single(self, item_id: int) -> tuple[CatalogItem, bytes] | None:
        view = await self._catalog.details(item_id)
        if view is None:
            return None
        return view.item, self._exporter.export_one(view.item)

    async def page(self, filters: ListingFilters) -> bytes | None:
        result = await self._catalog.list_items(filters)
        if not result.items:
            logger.info("export.page_empty", extra={"page": filters.page, "error": result.error_message})
            return None
        return self._exporter.export(result.items, sheet_title=f"Page {filters.page}")


class EmailController(BaseController):
    """Deliver item summaries by email."""

    __slots__ = ("_catalog", "_sender")

    def __init__(self, catalog: CatalogController, sender: EmailSenderPort) -> None:
        self._catalog = catalog
        self._sender = sender

    def is_configured(self) -> bool:
        return self._sender.is_configured()

    async def send_single(self, item_id: int, email: str, name: str = "") -> bool | None:
        """Return ``None`` when the item does not exist, else the delivery outcome."""
        view = await self._catalog.details(item_id)
        if view is None:
            return None
        return await self._sender.send(view.item, email, name)

    async def send_multiple(self, ids: Sequence[int], email: str, name: str = "") -> int | None:
        """Return ``None`` when none of the items exist, else the number of messages delivered."""
        items = await self._catalog.items(ids)
        if not items:
            return None
        return await self._sender.send_bulk(items, email, name)
