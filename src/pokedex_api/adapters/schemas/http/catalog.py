# src/pokedex_api/adapters/schemas/http/catalog.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Catalog HTTP Schemas

Purpose:
    Request and response contracts for the catalog, export, email and cache
    administration endpoints.

Layer: adapters/schemas/http
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field

from pokedex_api.adapters.schemas.http.base import BaseHTTPSchema

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

ItemId = Annotated[int, Field(ge=1)]


# ---------------------------------------------------------------------------
# Catalog resources
# ---------------------------------------------------------------------------


class AbilityHTTP(BaseHTTPSchema):
    name: str
    slot: int
    is_hidden: bool


class StatHTTP(BaseHTTPSchema):
    name: str
    base_stat: int
    effort: int


class CatalogItemHTTP(BaseHTTPSchema):
    """One catalog item with its derived presentation fields."""

    id: int = Field(..., ge=1, examples=[25])
    name: str = Field(..., examples=["pikachu"])
    display_name: str = Field(..., examples=["Pikachu"])
    height: int = Field(..., description="Height in decimetres.")
    weight: int = Field(..., description="Weight in hectograms.")
    base_experience: int
    types: list[str]
    abilities: list[AbilityHTTP]
    stats: list[StatHTTP]
    total_stats: int
    image_url: str
    primary_type_color: str = Field(..., examples=["#F8D030"])


class CatalogListHTTP(BaseHTTPSchema):
    """Listing page. ``error_message`` is set when the upstream was unreachable."""

    items: list[CatalogItemHTTP]
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_count: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_previous: bool
    error_message: str | None = None


class SpeciesHTTP(BaseHTTPSchema):
    id: int
    name: str
    color: str
    habitat: str | None
    generation: str
    is_legendary: bool
    is_mythical: bool
    capture_rate: int
    base_happiness: int
    growth_rate: str


class CatalogDetailsHTTP(BaseHTTPSchema):
    """Item details; ``species`` is null when the enrichment was unavailable."""

    item: CatalogItemHTTP
    species: SpeciesHTTP | None
    description: str
    category: str
    generation: str
    habitat: str
    formatted_height: str = Field(..., examples=["0.4 m"])
    formatted_weight: str = Field(..., examples=["6.0 kg"])
    special_label: str | None = None


class TypeOptionHTTP(BaseHTTPSchema):
    name: str
    display_name: str
    color_class: str = Field(..., examples=["bg-primary"])


class SearchSuggestionsHTTP(BaseHTTPSchema):
    query: str
    names: list[str]


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------


class ExportSelectionRequest(BaseHTTPSchema):
    """Export the items with the given ids."""

    ids: list[ItemId] = Field(..., min_length=1, max_length=200)


class ExportPageRequest(BaseHTTPSchema):
    """Export the listing page described by these filters."""

    page: int = 1
    name: str | None = None
    type_name: str | None = None
    min_height: int | None = None
    max_height: int | None = None


# ---------------------------------------------------------------------------
# Emails
# ---------------------------------------------------------------------------


class EmailSingleRequest(BaseHTTPSchema):
    item_id: ItemId
    email: str = Field(..., pattern=_EMAIL_PATTERN, max_length=254)
    name: str = Field("", max_length=100)


class EmailMultipleRequest(BaseHTTPSchema):
    item_ids: list[ItemId] = Field(..., min_length=1, max_length=50)
    email: str = Field(..., pattern=_EMAIL_PATTERN, max_length=254)
    name: str = Field("", max_length=100)


class EmailResultHTTP(BaseHTTPSchema):
    success: bool
    delivered: int = Field(..., ge=0)
    message: str


class EmailConfigurationHTTP(BaseHTTPSchema):
    configured: bool
    message: str


# ---------------------------------------------------------------------------
# Cache administration
# ---------------------------------------------------------------------------


class CacheStatsHTTP(BaseHTTPSchema):
    counts: dict[str, int] = Field(..., examples=[{"category": 1, "item": 20, "species": 3, "search": 0}])
    total: int
    captured_at: datetime


class CacheClearHTTP(BaseHTTPSchema):
    removed: int = Field(..., ge=0)
    cleared_at: datetime


class ServiceStatusHTTP(BaseHTTPSchema):
    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime
    cache: CacheStatsHTTP
