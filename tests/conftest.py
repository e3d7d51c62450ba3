# tests/conftest.py
from __future__ import annotations

import asyncio
import os
from collections import Counter
from collections.abc import Callable, Generator, Sequence
from typing import Any

import pytest

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")

from pokedex_api.application.caching.orchestrator import CacheOrchestrator, CachePolicy  # noqa: E402
from pokedex_api.domain.entities.catalog_item import (  # noqa: E402
    CatalogItem,
    CategoryTag,
    ItemReference,
    StatValue,
    TypeSlot,
)
from pokedex_api.domain.entities.listing import CatalogPage  # noqa: E402
from pokedex_api.domain.entities.species import LocalizedText, SpeciesInfo  # noqa: E402
from pokedex_api.infrastructure.caching.memory_store import InMemoryCacheStore  # noqa: E402

POKEAPI = "https://pokeapi.co/api/v2"


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_item(
    item_id: int,
    name: str | None = None,
    *,
    height: int = 7,
    weight: int = 69,
    types: Sequence[str] = ("normal",),
) -> CatalogItem:
    return CatalogItem(
        id=item_id,
        name=name or f"mon-{item_id}",
        height=height,
        weight=weight,
        base_experience=64,
        types=tuple(TypeSlot(slot=i + 1, name=t) for i, t in enumerate(types)),
        stats=(StatValue(name="hp", base_stat=45), StatValue(name="attack", base_stat=49)),
    )


def build_species(species_id: int, *, legendary: bool = False) -> SpeciesInfo:
    return SpeciesInfo(
        id=species_id,
        name=f"mon-{species_id}",
        habitat="grassland",
        generation="generation-i",
        is_legendary=legendary,
        flavor_texts=(
            LocalizedText(language="en", text="A strange seed\nwas planted."),
            LocalizedText(language="es", text="Una rara semilla\nfue plantada."),
        ),
        genera=(LocalizedText(language="en", text="Seed Pokemon"),),
    )


class StubGateway:
    """In-memory catalog gateway recording every call."""

    def __init__(self) -> None:
        self.items: dict[int, CatalogItem] = {}
        self.species: dict[int, SpeciesInfo] = {}
        self.members: dict[str, list[ItemReference]] = {}
        self.tags: list[CategoryTag] = []
        self.names: list[str] = []
        self.page_total: int | None = None
        self.errors: dict[str, Exception] = {}
        self.item_errors: dict[int, Exception] = {}
        self.calls: Counter[str] = Counter()
        self.in_flight = 0
        self.max_in_flight = 0

    def add_items(self, *items: CatalogItem) -> None:
        for item in items:
            self.items[item.id] = item

    def _maybe_raise(self, method: str) -> None:
        self.calls[method] += 1
        if method in self.errors:
            raise self.errors[method]

    async def fetch_item(self, item_id: int) -> CatalogItem | None:
        self._maybe_raise("fetch_item")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if item_id in self.item_errors:
                raise self.item_errors[item_id]
            return self.items.get(item_id)
        finally:
            self.in_flight -= 1

    async def fetch_item_by_name(self, name: str) -> CatalogItem | None:
        self._maybe_raise("fetch_item_by_name")
        wanted = name.strip().lower()
        return next((i for i in self.items.values() if i.name == wanted), None)

    async def fetch_species(self, species_id: int) -> SpeciesInfo | None:
        self._maybe_raise("fetch_species")
        return self.species.get(species_id)

    async def fetch_category_list(self) -> list[CategoryTag]:
        self._maybe_raise("fetch_category_list")
        return list(self.tags)

    async def fetch_category_members(self, category_name: str) -> list[ItemReference]:
        self._maybe_raise("fetch_category_members")
        return list(self.members.get(category_name, []))

    async def fetch_page(self, offset: int, limit: int) -> CatalogPage:
        self._maybe_raise("fetch_page")
        ids = sorted(self.items)
        total = self.page_total if self.page_total is not None else len(ids)
        refs = tuple(
            ItemReference(id=i, name=self.items[i].name) for i in ids[offset : offset + limit]
        )
        return CatalogPage(
            items=refs,
            total_count=total,
            has_next=offset + limit < total,
            has_previous=offset > 0,
        )

    async def search_names_by_prefix(self, query: str) -> list[str]:
        self._maybe_raise("search_names_by_prefix")
        prefix = query.lower()
        return [n.capitalize() for n in self.names if n.startswith(prefix)][:10]


def item_payload(
    item_id: int = 25,
    name: str = "pikachu",
    *,
    types: Sequence[str] = ("electric",),
    height: int = 4,
    weight: int = 60,
) -> dict[str, Any]:
    """A trimmed ``/pokemon/{id}`` body."""
    return {
        "id": item_id,
        "name": name,
        "height": height,
        "weight": weight,
        "base_experience": 112,
        "types": [
            {"slot": i + 1, "type": {"name": t, "url": f"{POKEAPI}/type/{i + 1}/"}}
            for i, t in enumerate(types)
        ],
        "abilities": [
            {"slot": 3, "is_hidden": True, "ability": {"name": "lightning-rod"}},
            {"slot": 1, "is_hidden": False, "ability": {"name": "static"}},
        ],
        "stats": [
            {"base_stat": 35, "effort": 0, "stat": {"name": "hp"}},
            {"base_stat": 55, "effort": 0, "stat": {"name": "attack"}},
            {"base_stat": 90, "effort": 2, "stat": {"name": "speed"}},
        ],
        "sprites": {
            "front_default": "https://img/front.png",
            "front_shiny": None,
            "other": {
                "official-artwork": {"front_default": "https://img/art.png"},
                "home": {"front_default": "https://img/home.png"},
            },
        },
        "species": {"name": name, "url": f"{POKEAPI}/pokemon-species/{item_id}/"},
    }


def species_payload(species_id: int = 25, name: str = "pikachu") -> dict[str, Any]:
    """A trimmed ``/pokemon-species/{id}`` body."""
    return {
        "id": species_id,
        "name": name,
        "color": {"name": "yellow"},
        "habitat": {"name": "forest"},
        "generation": {"name": "generation-i"},
        "is_legendary": False,
        "is_mythical": False,
        "capture_rate": 190,
        "base_happiness": 50,
        "growth_rate": {"name": "medium"},
        "flavor_text_entries": [
            {"flavor_text": "When several of\nthese gather.", "language": {"name": "en"}},
            {"flavor_text": "Cuando varios\fse juntan.", "language": {"name": "es"}},
        ],
        "genera": [
            {"genus": "Mouse Pokemon", "language": {"name": "en"}},
            {"genus": "Pokemon Raton", "language": {"name": "es"}},
        ],
    }


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_item() -> Callable[..., CatalogItem]:
    return build_item


@pytest.fixture
def make_species() -> Callable[..., SpeciesInfo]:
    return build_species


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def store(fake_clock: FakeClock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=fake_clock)


@pytest.fixture
def orchestrator(store: InMemoryCacheStore) -> CacheOrchestrator:
    return CacheOrchestrator(store, CachePolicy(invalidate_max_id=50))


@pytest.fixture(autouse=True)
def _fresh_singletons() -> Generator[None, None, None]:
    """Drop process-wide providers between tests."""
    from pokedex_api.dependencies.catalog import reset_catalog_dependencies

    reset_catalog_dependencies()
    yield
    reset_catalog_dependencies()


@pytest.fixture
def pokemon_json() -> Callable[..., dict[str, Any]]:
    return item_payload


@pytest.fixture
def species_json() -> Callable[..., dict[str, Any]]:
    return species_payload
