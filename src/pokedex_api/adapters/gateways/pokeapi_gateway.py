# src/pokedex_api/adapters/gateways/pokeapi_gateway.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Adapter Gateway: PokeAPI v2 -> catalog domain records.

This gateway sits on top of the transport client and implements
:class:`CatalogGatewayProtocol`:

* ``/pokemon/{id|name}`` -> :class:`CatalogItem`
* ``/pokemon-species/{id}`` -> :class:`SpeciesInfo`
* ``/type?limit=N`` -> list of :class:`CategoryTag`
* ``/type/{name}`` -> list of :class:`ItemReference`
* ``/pokemon?offset&limit`` -> :class:`CatalogPage`

Design principles:
    * "Absent upstream" (any non-success status) becomes ``None`` / ``[]`` and a
      warning log, never an exception.
    * Payloads are validated deterministically; a missing required field
      raises ``MalformedResponse`` with the offending path.
    * Numeric ids of list entries are parsed from the trailing segment of the
      resource URL (``.../pokemon/25/`` -> 25).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from pokedex_api.domain.entities.base import capitalize_slug
from pokedex_api.domain.entities.catalog_item import (
    AbilitySlot,
    CatalogItem,
    CategoryTag,
    ItemReference,
    SpriteBundle,
    StatValue,
    TypeSlot,
)
from pokedex_api.domain.entities.listing import CatalogPage
from pokedex_api.domain.entities.species import LocalizedText, SpeciesInfo
from pokedex_api.domain.exceptions.catalog import MalformedResponse, UpstreamNotFound
from pokedex_api.domain.interfaces.gateways.catalog_gateway import CatalogGatewayProtocol
from pokedex_api.infrastructure.external_apis.pokeapi.client import PokeApiClient
from pokedex_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

DEFAULT_SEARCH_LIMIT: Final[int] = 10

_MISSING = object()


def _require(payload: Mapping[str, Any], *path: str) -> Any:
    """Walk ``path`` through nested mappings or raise ``MalformedResponse``."""
    node: Any = payload
    for part in path:
        value = node.get(part, _MISSING) if isinstance(node, Mapping) else _MISSING
        if value is _MISSING or value is None:
            raise MalformedResponse("missing_field", details={"field": ".".join(path)})
        node = value
    return node


def _optional(payload: Mapping[str, Any], *path: str) -> Any:
    node: Any = payload
    for part in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(part)
    return node


def _as_list(value: Any, field: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedResponse("bad_shape", details={"field": field, "expected": "list"})
    return value


def parse_resource_id(url: str) -> int | None:
    """Return the numeric id at the end of a resource URL, or ``None``."""
    tail = url.rstrip("/").rsplit("/", 1)[-1]
    return int(tail) if tail.isdigit() else None


class PokeApiCatalogGateway(CatalogGatewayProtocol):
    """PokeAPI adapter implementing the catalog gateway protocol."""

    def __init__(
        self,
        client: PokeApiClient,
        *,
        type_list_limit: int = 20,
        name_index_limit: int = 1000,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        """Initialize the gateway.

        Args:
            client: Transport client returning decoded JSON.
            type_list_limit: ``limit`` sent when listing types.
            name_index_limit: ``limit`` sent when loading names for prefix search.
            search_limit: Maximum number of prefix matches returned.
        """
        self._client = client
        self._type_list_limit = type_list_limit
        self._name_index_limit = name_index_limit
        self._search_limit = search_limit

    async def _get(self, path: str, *, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        """Fetch JSON, turning "absent upstream" into ``None``."""
        try:
            payload = await self._client.get_json(path, params=params, endpoint=endpoint)
        except UpstreamNotFound as exc:
            logger.warning(
                "upstream.not_found",
                extra={"endpoint": endpoint, "path": path, "status": exc.details.get("status")},
            )
            return None
        if not isinstance(payload, Mapping):
            raise MalformedResponse("bad_shape", details={"path": path, "expected": "object"})
        return payload

    # ------------------------------------------------------------------ #
    # Items
    # ------------------------------------------------------------------ #
    async def fetch_item(self, item_id: int) -> CatalogItem | None:
        payload = await self._get(f"pokemon/{int(item_id)}", endpoint="pokemon")
        return None if payload is None else self.map_item(payload)

    async def fetch_item_by_name(self, name: str) -> CatalogItem | None:
        slug = name.strip().lower()
        if not slug:
            return None
        payload = await self._get(f"pokemon/{slug}", endpoint="pokemon")
        return None if payload is None else self.map_item(payload)

    async def fetch_species(self, species_id: int) -> SpeciesInfo | None:
        payload = await self._get(f"pokemon-species/{int(species_id)}", endpoint="pokemon-species")
        return None if payload is None else self.map_species(payload)

    # ------------------------------------------------------------------ #
    # Listings
    # ------------------------------------------------------------------ #
    async def fetch_category_list(self) -> list[CategoryTag]:
        payload = await self._get("type", endpoint="type", params={"limit": self._type_list_limit})
        if payload is None:
            return []
        tags: list[CategoryTag] = []
        for row in _as_list(payload.get("results"), "results"):
            tags.append(CategoryTag(name=str(_require(row, "name")), url=str(row.get("url") or "")))
        return tags

    async def fetch_category_members(self, category_name: str) -> list[ItemReference]:
        slug = category_name.strip().lower()
        payload = await self._get(f"type/{slug}", endpoint="type-members")
        if payload is None:
            return []
        members: list[ItemReference] = []
        for row in _as_list(payload.get("pokemon"), "pokemon"):
            ref = self._map_reference(_require(row, "pokemon"))
            if ref is not None:
                members.append(ref)
        return members

    async def fetch_page(self, offset: int, limit: int) -> CatalogPage:
        payload = await self._get(
            "pokemon",
            endpoint="pokemon-page",
            params={"offset": max(0, int(offset)), "limit": max(1, int(limit))},
        )
        if payload is None:
            return CatalogPage(items=(), total_count=0, has_next=False, has_previous=False)
        refs = []
        for row in _as_list(payload.get("results"), "results"):
            ref = self._map_reference(row)
            if ref is not None:
                refs.append(ref)
        count = payload.get("count")
        return CatalogPage(
            items=tuple(refs),
            total_count=int(count) if isinstance(count, int) else len(refs),
            has_next=bool(payload.get("next")),
            has_previous=bool(payload.get("previous")),
        )

    async def search_names_by_prefix(self, query: str) -> list[str]:
        prefix = query.strip().lower()
        if not prefix:
            return []
        payload = await self._get(
            "pokemon", endpoint="pokemon-names", params={"limit": self._name_index_limit}
        )
        if payload is None:
            return []
        matches: list[str] = []
        for row in _as_list(payload.get("results"), "results"):
            name = str(_require(row, "name"))
            if name.lower().startswith(prefix):
                matches.append(capitalize_slug(name))
                if len(matches) >= self._search_limit:
                    break
        return matches

    # ------------------------------------------------------------------ #
    # Mapping
    # ------------------------------------------------------------------ #
    @staticmethod
    def _map_reference(row: Mapping[str, Any]) -> ItemReference | None:
        name = _require(row, "name")
        ref_id = parse_resource_id(str(row.get("url") or ""))
        if ref_id is None or ref_id < 1:
            logger.warning("upstream.unparsable_reference", extra={"ref_name": name, "url": row.get("url")})
            return None
        return ItemReference(id=ref_id, name=str(name))

    @staticmethod
    def map_item(payload: Mapping[str, Any]) -> CatalogItem:
        """Map a ``/pokemon/{id}`` payload to a :class:`CatalogItem`.

        Raises:
            MalformedResponse: If a required field is missing or a numeric
                field cannot be converted.
        """
        try:
            types = sorted(
                (
                    TypeSlot(slot=int(row.get("slot") or 0), name=str(_require(row, "type", "name")))
                    for row in _as_list(payload.get("types"), "types")
                ),
                key=lambda t: t.slot,
            )
            abilities = sorted(
                (
                    AbilitySlot(
                        slot=int(row.get("slot") or 0),
                        name=str(_require(row, "ability", "name")),
                        is_hidden=bool(row.get("is_hidden", False)),
                    )
                    for row in _as_list(payload.get("abilities"), "abilities")
                ),
                key=lambda a: a.slot,
            )
            stats = tuple(
                StatValue(
                    name=str(_require(row, "stat", "name")),
                    base_stat=int(row.get("base_stat") or 0),
                    effort=int(row.get("effort") or 0),
                )
                for row in _as_list(payload.get("stats"), "stats")
            )
            sprites_raw = payload.get("sprites") or {}
            sprites = SpriteBundle(
                front_default=_optional(sprites_raw, "front_default"),
                front_shiny=_optional(sprites_raw, "front_shiny"),
                back_default=_optional(sprites_raw, "back_default"),
                back_shiny=_optional(sprites_raw, "back_shiny"),
                official_artwork=_optional(sprites_raw, "other", "official-artwork", "front_default"),
                home_default=_optional(sprites_raw, "other", "home", "front_default"),
            )
            return CatalogItem(
                id=int(_require(payload, "id")),
                name=str(_require(payload, "name")),
                height=int(payload.get("height") or 0),
                weight=int(payload.get("weight") or 0),
                base_experience=int(payload.get("base_experience") or 0),
                types=tuple(types),
                abilities=tuple(abilities),
                stats=stats,
                sprites=sprites,
                species_name=_optional(payload, "species", "name"),
            )
        except (AttributeError, TypeError, ValueError) as exc:
            raise MalformedResponse("invalid_item", details={"error": str(exc)}) from exc

    @staticmethod
    def map_species(payload: Mapping[str, Any]) -> SpeciesInfo:
        """Map a ``/pokemon-species/{id}`` payload to a :class:`SpeciesInfo`."""
        flavor = tuple(
            LocalizedText(
                language=str(_require(row, "language", "name")),
                text=str(row.get("flavor_text") or ""),
            )
            for row in _as_list(payload.get("flavor_text_entries"), "flavor_text_entries")
        )
        genera = tuple(
            LocalizedText(
                language=str(_require(row, "language", "name")),
                text=str(row.get("genus") or ""),
            )
            for row in _as_list(payload.get("genera"), "genera")
        )
        try:
            return SpeciesInfo(
                id=int(_require(payload, "id")),
                name=str(_require(payload, "name")),
                color=str(_optional(payload, "color", "name") or ""),
                habitat=_optional(payload, "habitat", "name"),
                generation=str(_optional(payload, "generation", "name") or ""),
                is_legendary=bool(payload.get("is_legendary", False)),
                is_mythical=bool(payload.get("is_mythical", False)),
                capture_rate=int(payload.get("capture_rate") or 0),
                base_happiness=int(payload.get("base_happiness") or 0),
                growth_rate=str(_optional(payload, "growth_rate", "name") or ""),
                flavor_texts=flavor,
                genera=genera,
            )
        except (TypeError, ValueError) as exc:
            raise MalformedResponse("invalid_species", details={"error": str(exc)}) from exc
