# src/pokedex_api/adapters/presenters/catalog_presenter.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Catalog Presenter

Purpose:
    Map catalog domain records (items, listing results, details views, type
    options, cache stats) to their HTTP schemas and wrap them in the
    canonical success envelope.

Layer: adapters/presenters
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pokedex_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from pokedex_api.adapters.schemas.http.catalog import (
    AbilityHTTP,
    CacheStatsHTTP,
    CatalogDetailsHTTP,
    CatalogItemHTTP,
    CatalogListHTTP,
    SearchSuggestionsHTTP,
    SpeciesHTTP,
    StatHTTP,
    TypeOptionHTTP,
)
from pokedex_api.adapters.schemas.http.envelopes import SuccessEnvelope
from pokedex_api.application.caching.orchestrator import CacheStats
from pokedex_api.domain.entities.catalog_item import CatalogItem
from pokedex_api.domain.entities.details_view import DetailsView
from pokedex_api.domain.entities.listing import ListResult, TypeOption
from pokedex_api.domain.entities.species import SpeciesInfo


def item_to_http(item: CatalogItem) -> CatalogItemHTTP:
    return CatalogItemHTTP(
        id=item.id,
        name=item.name,
        display_name=item.display_name,
        height=item.height,
        weight=item.weight,
        base_experience=item.base_experience,
        types=item.type_names,
        abilities=[
            AbilityHTTP(name=a.name, slot=a.slot, is_hidden=a.is_hidden) for a in item.abilities
        ],
        stats=[StatHTTP(name=s.name, base_stat=s.base_stat, effort=s.effort) for s in item.stats],
        total_stats=item.total_stats,
        image_url=item.image_url,
        primary_type_color=item.primary_type_color,
    )


def species_to_http(species: SpeciesInfo) -> SpeciesHTTP:
    return SpeciesHTTP(
        id=species.id,
        name=species.name,
        color=species.color,
        habitat=species.habitat,
        generation=species.generation,
        is_legendary=species.is_legendary,
        is_mythical=species.is_mythical,
        capture_rate=species.capture_rate,
        base_happiness=species.base_happiness,
        growth_rate=species.growth_rate,
    )


def stats_to_http(stats: CacheStats) -> CacheStatsHTTP:
    return CacheStatsHTTP(counts=dict(stats.counts), total=stats.total, captured_at=stats.captured_at)


class CatalogPresenter(BasePresenter):
    """Shape catalog results into success envelopes."""

    def present_list(
        self, result: ListResult, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        data = CatalogListHTTP(
            items=[item_to_http(i) for i in result.items],
            page=result.page,
            page_size=result.page_size,
            total_count=result.total_count,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_previous=result.has_previous,
            error_message=result.error_message,
        )
        return self.present_success(data=data, trace_id=trace_id)

    def present_details(
        self, view: DetailsView, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        data = CatalogDetailsHTTP(
            item=item_to_http(view.item),
            species=species_to_http(view.species) if view.species is not None else None,
            description=view.description,
            category=view.category,
            generation=view.generation,
            habitat=view.habitat,
            formatted_height=view.formatted_height,
            formatted_weight=view.formatted_weight,
            special_label=view.special_label,
        )
        return self.present_success(data=data, trace_id=trace_id)

    def present_types(
        self, options: Sequence[TypeOption], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        data = [
            TypeOptionHTTP(name=o.name, display_name=o.display_name, color_class=o.color_class)
            for o in options
        ]
        return self.present_success(data=data, trace_id=trace_id, cache_ttl_s=300)

    def present_suggestions(
        self, query: str, names: Sequence[str], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        data = SearchSuggestionsHTTP(query=query, names=list(names))
        return self.present_success(data=data, trace_id=trace_id)
