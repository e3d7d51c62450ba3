# src/pokedex_api/domain/interfaces/gateways/catalog_gateway.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Catalog Gateway Protocol.

Synopsis:
    Domain-level Protocol (PEP 544) that abstracts the upstream catalog API.
    The concrete PokeAPI implementation lives in the adapters layer and must
    satisfy this contract.

Design:
    * Single-record lookups return ``None`` for "absent upstream" (any
      non-success status); callers never see a not-found exception.
    * List lookups return an empty list for "absent upstream".
    * Transport failures surface as ``UpstreamUnavailable`` / ``UpstreamTimeout``
      and payload drift as ``MalformedResponse``; the cache orchestrator and
      query service turn those into data.

Layer:
    domain/interfaces/gateways
"""

from __future__ import annotations

from typing import Protocol

from pokedex_api.domain.entities.catalog_item import CatalogItem, CategoryTag, ItemReference
from pokedex_api.domain.entities.listing import CatalogPage
from pokedex_api.domain.entities.species import SpeciesInfo


class CatalogGatewayProtocol(Protocol):
    """Abstraction over the read-only upstream catalog."""

    async def fetch_item(self, item_id: int) -> CatalogItem | None:
        """Return the item with ``item_id``, or ``None`` when upstream has none."""
        ...

    async def fetch_item_by_name(self, name: str) -> CatalogItem | None:
        """Return the item whose slug equals ``name`` (lowercased), or ``None``."""
        ...

    async def fetch_species(self, species_id: int) -> SpeciesInfo | None:
        """Return the species record with ``species_id``, or ``None``."""
        ...

    async def fetch_category_list(self) -> list[CategoryTag]:
        """Return the bounded list of type tags."""
        ...

    async def fetch_category_members(self, category_name: str) -> list[ItemReference]:
        """Return every member of one type, ids parsed from the resource URLs."""
        ...

    async def fetch_page(self, offset: int, limit: int) -> CatalogPage:
        """Return one page of item summaries plus the upstream page envelope."""
        ...

    async def search_names_by_prefix(self, query: str) -> list[str]:
        """Return up to N capitalized names starting with ``query`` (case-insensitive)."""
        ...
