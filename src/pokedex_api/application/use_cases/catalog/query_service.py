# src/pokedex_api/application/use_cases/catalog/query_service.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Use Case: Catalog Queries

Purpose:
    Answer the compound catalog questions request handlers ask (paginated and
    filtered listing, listing by type, details with optional species data,
    multi-item lookup, type options, name suggestions) by composing
    :class:`CacheOrchestrator` calls over the catalog gateway.

    Independent sub-fetches run concurrently, bounded by a semaphore, and are
    joined before filtering. Individual fan-out failures are dropped. Upstream
    connectivity and timeout failures become a user-facing message on the
    :class:`ListResult`; nothing raises past this boundary.

Layer: application/use_cases
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Final, TypeVar

from pokedex_api.application.caching.orchestrator import CacheKeys, CacheKind, CacheOrchestrator
from pokedex_api.domain.entities.base import capitalize_slug
from pokedex_api.domain.entities.catalog_item import CatalogItem, type_css_class
from pokedex_api.domain.entities.details_view import DetailsView
from pokedex_api.domain.entities.listing import ListResult, TypeOption
from pokedex_api.domain.exceptions.catalog import UpstreamTimeout, UpstreamUnavailable
from pokedex_api.domain.interfaces.gateways.catalog_gateway import CatalogGatewayProtocol
from pokedex_api.infrastructure.logging.logger import get_json_logger

T = TypeVar("T")

logger = get_json_logger(__name__)

MSG_UNAVAILABLE: Final[str] = "Could not connect to the catalog service. Please try again later."
MSG_TIMEOUT: Final[str] = "The catalog service took too long to respond. Please try again."
MSG_UNEXPECTED: Final[str] = "An unexpected error occurred. Please try again."

MIN_SEARCH_LENGTH: Final[int] = 2


class _FailureProbe:
    """Records the first upstream connectivity failure seen by wrapped fetches.

    The orchestrator turns fetch failures into ``None``; the probe lets the
    service still tell "absent" apart from "unreachable" for its message.
    """

    def __init__(self) -> None:
        self.error: UpstreamUnavailable | None = None

    def wrap(self, fetch_fn: Callable[[], Awaitable[T]]) -> Callable[[], Awaitable[T]]:
        async def _probed() -> T:
            try:
                return await fetch_fn()
            except UpstreamUnavailable as exc:
                if self.error is None:
                    self.error = exc
                raise

        return _probed

    @property
    def message(self) -> str | None:
        if self.error is None:
            return None
        return MSG_TIMEOUT if isinstance(self.error, UpstreamTimeout) else MSG_UNAVAILABLE


def _within_height(item: CatalogItem, min_height: int | None, max_height: int | None) -> bool:
    if min_height is not None and item.height < min_height:
        return False
    return not (max_height is not None and item.height > max_height)


class CatalogQueryService:
    """Compound catalog queries over the cache orchestrator.

    Args:
        gateway: Upstream catalog gateway.
        orchestrator: Get-or-populate cache orchestrator.
        page_size: Default page size.
        member_cap: Maximum number of type members fetched for a type listing.
        concurrency: Maximum in-flight item fetches per fan-out.
        preferred_language: Language used for species text.
        fallback_language: Language used when the preferred one is missing.
    """

    def __init__(
        self,
        gateway: CatalogGatewayProtocol,
        orchestrator: CacheOrchestrator,
        *,
        page_size: int = 20,
        member_cap: int = 200,
        concurrency: int = 20,
        preferred_language: str = "es",
        fallback_language: str = "en",
    ) -> None:
        self._gateway = gateway
        self._orchestrator = orchestrator
        self._page_size = page_size
        self._member_cap = member_cap
        self._concurrency = max(1, concurrency)
        self._preferred_language = preferred_language
        self._fallback_language = fallback_language

    @property
    def page_size(self) -> int:
        return self._page_size

    # ------------------------------------------------------------------ #
    # Cached single-entity lookups
    # ------------------------------------------------------------------ #
    async def _item(self, item_id: int, probe: _FailureProbe | None = None) -> CatalogItem | None:
        def fetch() -> Awaitable[CatalogItem | None]:
            return self._gateway.fetch_item(item_id)

        return await self._orchestrator.get_or_fetch(
            CacheKeys.item(item_id),
            probe.wrap(fetch) if probe else fetch,
            kind=CacheKind.ITEM,
        )

    async def _item_by_name(self, name: str, probe: _FailureProbe) -> CatalogItem | None:
        """Resolve ``name`` to an id, then read the item through its id key.

        The name key holds only the id; the item itself lives under
        ``CacheKeys.item(id)`` so a full clear and details lookups see it.
        """
        fetched: list[CatalogItem] = []

        async def resolve() -> int | None:
            item = await self._gateway.fetch_item_by_name(name)
            if item is None:
                return None
            fetched.append(item)
            return item.id

        item_id = await self._orchestrator.get_or_fetch(
            CacheKeys.item_by_name(name),
            probe.wrap(resolve),
            kind=CacheKind.ITEM,
        )
        if item_id is None:
            return None
        if fetched:
            await self._orchestrator.put(CacheKeys.item(item_id), fetched[0], kind=CacheKind.ITEM)
            return fetched[0]
        return await self._item(item_id, probe)

    async def _fan_out(
        self, ids: Iterable[int], probe: _FailureProbe | None = None
    ) -> list[CatalogItem]:
        """Fetch item details concurrently; failures and misses are dropped."""
        semaphore = asyncio.Semaphore(self._concurrency)

        async def _one(item_id: int) -> CatalogItem | None:
            async with semaphore:
                return await self._item(item_id, probe)

        results = await asyncio.gather(*(_one(i) for i in ids), return_exceptions=True)
        items: list[CatalogItem] = []
        for result in results:
            if isinstance(result, CatalogItem):
                items.append(result)
            elif isinstance(result, BaseException):
                logger.warning(
                    "catalog.fanout_member_failed",
                    extra={"error_type": type(result).__name__},
                )
        return items

    # ------------------------------------------------------------------ #
    # Listings
    # ------------------------------------------------------------------ #
    async def list_items(
        self,
        page: int = 1,
        page_size: int | None = None,
        name_filter: str | None = None,
        type_filter: str | None = None,
        min_height: int | None = None,
        max_height: int | None = None,
    ) -> ListResult:
        """Return one page of items.

        ``page`` is 1-based and expected to be clamped by the caller. A type
        filter switches to :meth:`list_by_category_global`; a name filter is
        an exact-name lookup; otherwise one upstream page is fetched and its
        members resolved concurrently.

        On the default path the height bounds only filter the items of the
        fetched page: ``total_count``, ``has_next`` and ``has_previous`` are
        the upstream page envelope's values for the unfiltered catalog, so a
        page may come back short or empty while ``has_next`` is still true.
        Only the type path (:meth:`list_by_category_global`) counts and pages
        the filtered set.
        """
        size = page_size or self._page_size
        logger.info(
            "catalog.list_items",
            extra={
                "page": page,
                "page_size": size,
                "name_filter": name_filter,
                "type_filter": type_filter,
                "min_height": min_height,
                "max_height": max_height,
            },
        )

        if type_filter and type_filter.strip():
            return await self.list_by_category_global(
                type_filter, page, size, name_filter, min_height, max_height
            )

        if name_filter and name_filter.strip():
            probe = _FailureProbe()
            item = await self._item_by_name(name_filter, probe)
            found = [item] if item is not None and _within_height(item, min_height, max_height) else []
            return ListResult(
                items=tuple(found),
                page=page,
                page_size=size,
                total_count=len(found),
                has_next=False,
                has_previous=False,
                error_message=probe.message if item is None else None,
            )

        try:
            envelope = await self._gateway.fetch_page((page - 1) * size, size)
        except UpstreamTimeout:
            logger.exception("catalog.page_timeout", extra={"page": page})
            return ListResult(page=page, page_size=size, error_message=MSG_TIMEOUT)
        except UpstreamUnavailable:
            logger.exception("catalog.page_unavailable", extra={"page": page})
            return ListResult(page=page, page_size=size, error_message=MSG_UNAVAILABLE)
        except Exception:
            logger.exception("catalog.page_failed", extra={"page": page})
            return ListResult(page=page, page_size=size, error_message=MSG_UNEXPECTED)

        probe = _FailureProbe()
        items = await self._fan_out((ref.id for ref in envelope.items), probe)
        items = [i for i in items if _within_height(i, min_height, max_height)]
        items.sort(key=lambda i: i.id)
        logger.info("catalog.list_items_done", extra={"page": page, "count": len(items)})
        return ListResult(
            items=tuple(items),
            page=page,
            page_size=size,
            total_count=envelope.total_count,
            has_next=envelope.has_next,
            has_previous=envelope.has_previous,
            error_message=probe.message if not items and envelope.items else None,
        )

    async def list_by_category_global(
        self,
        category_name: str,
        page: int = 1,
        page_size: int | None = None,
        name_filter: str | None = None,
        min_height: int | None = None,
        max_height: int | None = None,
    ) -> ListResult:
        """Return one page of the members of ``category_name``.

        The full membership (capped) is resolved concurrently, then filtered
        in memory: case-insensitive name substring, inclusive height range,
        and finally paging over the filtered set ordered by id.
        """
        size = page_size or self._page_size
        slug = category_name.strip().lower()
        probe = _FailureProbe()

        members = await self._orchestrator.get_or_fetch_list(
            CacheKeys.type_members(slug),
            probe.wrap(lambda: self._gateway.fetch_category_members(slug)),
            kind=CacheKind.CATEGORY,
        )
        if not members:
            return ListResult(page=page, page_size=size, error_message=probe.message)

        capped = members[: self._member_cap]
        items = await self._fan_out((m.id for m in capped), probe)

        if name_filter and name_filter.strip():
            needle = name_filter.strip().lower()
            items = [i for i in items if needle in i.name.lower()]
        items = [i for i in items if _within_height(i, min_height, max_height)]
        items.sort(key=lambda i: i.id)

        total = len(items)
        skip = (page - 1) * size
        logger.info(
            "catalog.list_by_category",
            extra={"category": slug, "members": len(capped), "matched": total, "page": page},
        )
        return ListResult(
            items=tuple(items[skip : skip + size]),
            page=page,
            page_size=size,
            total_count=total,
            has_next=skip + size < total,
            has_previous=page > 1,
            error_message=probe.message if total == 0 else None,
        )

    # ------------------------------------------------------------------ #
    # Details
    # ------------------------------------------------------------------ #
    async def get_details_with_species(self, item_id: int) -> DetailsView | None:
        """Return the item with best-effort species data, or ``None`` when the item is absent."""
        item = await self._item(item_id)
        if item is None:
            return None

        species = None
        try:
            species = await self._orchestrator.get_or_fetch(
                CacheKeys.species(item.id),
                lambda: self._gateway.fetch_species(item.id),
                kind=CacheKind.SPECIES,
            )
        except Exception:
            logger.exception("catalog.species_enrichment_failed", extra={"item_id": item.id})

        return DetailsView(
            item=item,
            species=species,
            preferred_language=self._preferred_language,
            fallback_language=self._fallback_language,
        )

    async def get_multiple(self, ids: Sequence[int]) -> list[CatalogItem]:
        """Return every item of ``ids`` that could be fetched (unordered contract, sorted by id)."""
        unique = list(dict.fromkeys(int(i) for i in ids if int(i) > 0))
        items = await self._fan_out(unique)
        items.sort(key=lambda i: i.id)
        return items

    # ------------------------------------------------------------------ #
    # Types and suggestions
    # ------------------------------------------------------------------ #
    async def get_type_options(self) -> list[TypeOption]:
        tags = await self._orchestrator.get_or_fetch_list(
            CacheKeys.types(),
            self._gateway.fetch_category_list,
            kind=CacheKind.CATEGORY,
        )
        options = [
            TypeOption(
                name=tag.name,
                display_name=capitalize_slug(tag.name),
                color_class=type_css_class(tag.name),
            )
            for tag in tags
        ]
        return sorted(options, key=lambda o: o.display_name)

    async def search_names(self, query: str) -> list[str]:
        """Return capitalized names starting with ``query``; queries under 2 characters yield ``[]``."""
        text = (query or "").strip().lower()
        if len(text) < MIN_SEARCH_LENGTH:
            return []
        return await self._orchestrator.get_or_fetch_list(
            CacheKeys.search(text),
            lambda: self._gateway.search_names_by_prefix(text),
            kind=CacheKind.SEARCH,
        )
