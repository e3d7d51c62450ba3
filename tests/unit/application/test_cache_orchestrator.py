from __future__ import annotations

import logging
from typing import Any

import pytest

from pokedex_api.application.caching.orchestrator import (
    CacheKeys,
    CacheKind,
    CacheOrchestrator,
    CachePolicy,
)
from pokedex_api.domain.exceptions.catalog import (
    MalformedResponse,
    UpstreamNotFound,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from pokedex_api.infrastructure.caching.memory_store import InMemoryCacheStore


class CountingFetch:
    def __init__(self, value: Any = None, exc: Exception | None = None) -> None:
        self.value = value
        self.exc = exc
        self.calls = 0

    async def __call__(self) -> Any:
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        return self.value


class BrokenStore:
    """Store whose every operation fails."""

    async def get(self, key: str) -> tuple[Any, bool]:
        raise RuntimeError("store down")

    async def set(self, key: str, value: Any, **kwargs: Any) -> None:
        raise RuntimeError("store down")

    async def remove(self, key: str) -> None:
        raise RuntimeError("store down")

    async def contains_live(self, key: str) -> bool:
        raise RuntimeError("store down")

    async def live_keys(self) -> list[str]:
        raise RuntimeError("store down")


def test_keys_are_deterministic_and_lowercased() -> None:
    assert CacheKeys.types() == "catalog:types"
    assert CacheKeys.type_members(" Water ") == "catalog:type-members:water"
    assert CacheKeys.item(25) == "catalog:item:25"
    assert CacheKeys.item_by_name("Pikachu") == "catalog:item:name:pikachu"
    assert CacheKeys.species(25) == "catalog:species:25"
    assert CacheKeys.search("PIK") == "catalog:search:pik"


def test_kind_of_classifies_prefixes() -> None:
    assert CacheKeys.kind_of(CacheKeys.types()) is CacheKind.CATEGORY
    assert CacheKeys.kind_of(CacheKeys.type_members("fire")) is CacheKind.CATEGORY
    assert CacheKeys.kind_of(CacheKeys.item_by_name("x")) is CacheKind.ITEM
    assert CacheKeys.kind_of(CacheKeys.species(1)) is CacheKind.SPECIES
    assert CacheKeys.kind_of(CacheKeys.search("ab")) is CacheKind.SEARCH
    assert CacheKeys.kind_of("other:thing") is None


def test_default_policy_ttl_bands() -> None:
    policy = CachePolicy()
    assert policy.ttl_for(CacheKind.CATEGORY) == 6 * 3600
    assert policy.ttl_for(CacheKind.ITEM) == 30 * 60
    assert policy.ttl_for(CacheKind.SPECIES) == 3600
    assert policy.ttl_for(CacheKind.SEARCH) == 15 * 60
    assert policy.sliding_window_s == 300


@pytest.mark.asyncio
async def test_hit_does_not_call_fetch(orchestrator: CacheOrchestrator) -> None:
    first = CountingFetch(value={"id": 1})
    second = CountingFetch(value={"id": 2})
    assert await orchestrator.get_or_fetch("catalog:item:1", first, kind=CacheKind.ITEM) == {"id": 1}
    assert await orchestrator.get_or_fetch("catalog:item:1", second, kind=CacheKind.ITEM) == {"id": 1}
    assert first.calls == 1
    assert second.calls == 0


@pytest.mark.asyncio
async def test_absent_value_is_not_cached(orchestrator: CacheOrchestrator) -> None:
    fetch = CountingFetch(value=None)
    for _ in range(2):
        assert await orchestrator.get_or_fetch("catalog:item:9999", fetch, kind=CacheKind.ITEM) is None
    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_empty_list_is_returned_but_not_cached(orchestrator: CacheOrchestrator) -> None:
    fetch = CountingFetch(value=[])
    assert await orchestrator.get_or_fetch_list("catalog:search:zz", fetch, kind=CacheKind.SEARCH) == []
    assert await orchestrator.get_or_fetch_list("catalog:search:zz", fetch, kind=CacheKind.SEARCH) == []
    assert fetch.calls == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "event"),
    [
        (UpstreamUnavailable("down"), "cache.fetch_unavailable"),
        (UpstreamTimeout("slow"), "cache.fetch_timeout"),
        (MalformedResponse("bad"), "cache.fetch_malformed"),
        (RuntimeError("boom"), "cache.fetch_failed"),
    ],
)
async def test_fetch_failure_logs_error_and_stores_nothing(
    orchestrator: CacheOrchestrator,
    store: InMemoryCacheStore,
    caplog: pytest.LogCaptureFixture,
    exc: Exception,
    event: str,
) -> None:
    caplog.set_level(logging.INFO)
    result = await orchestrator.get_or_fetch("catalog:item:5", CountingFetch(exc=exc), kind=CacheKind.ITEM)
    assert result is None
    assert not await store.contains_live("catalog:item:5")
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert [r.getMessage() for r in errors] == [event]


@pytest.mark.asyncio
async def test_not_found_is_a_warning_not_an_error(
    orchestrator: CacheOrchestrator, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO)
    fetch = CountingFetch(exc=UpstreamNotFound("gone"))
    assert await orchestrator.get_or_fetch("catalog:item:5", fetch, kind=CacheKind.ITEM) is None
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.mark.asyncio
async def test_category_entry_lives_six_hours(orchestrator: CacheOrchestrator, fake_clock) -> None:
    first = CountingFetch(value=["fire", "water"])
    await orchestrator.get_or_fetch(CacheKeys.types(), first, kind=CacheKind.CATEGORY)

    fake_clock.advance(5 * 3600 + 59 * 60)
    again = CountingFetch(value=["grass"])
    assert await orchestrator.get_or_fetch(CacheKeys.types(), again, kind=CacheKind.CATEGORY) == [
        "fire",
        "water",
    ]
    assert again.calls == 0

    fake_clock.advance(2 * 60)
    assert await orchestrator.get_or_fetch(CacheKeys.types(), again, kind=CacheKind.CATEGORY) == [
        "grass"
    ]
    assert again.calls == 1


@pytest.mark.asyncio
async def test_explicit_ttl_overrides_kind(orchestrator: CacheOrchestrator, fake_clock) -> None:
    await orchestrator.get_or_fetch("catalog:item:1", CountingFetch(value=1), kind=CacheKind.ITEM, ttl=10)
    fake_clock.advance(11)
    fetch = CountingFetch(value=2)
    assert await orchestrator.get_or_fetch("catalog:item:1", fetch, kind=CacheKind.ITEM) == 2


@pytest.mark.asyncio
async def test_entry_records_sliding_window(orchestrator: CacheOrchestrator, store: InMemoryCacheStore) -> None:
    await orchestrator.get_or_fetch("catalog:species:1", CountingFetch(value="s"), kind=CacheKind.SPECIES)
    entry = await store.entry("catalog:species:1")
    assert entry is not None
    assert entry.sliding_window == 300
    assert entry.absolute_expiration - entry.created_at == 3600


@pytest.mark.asyncio
async def test_put_uses_kind_ttl_and_skips_empty(
    orchestrator: CacheOrchestrator, store: InMemoryCacheStore
) -> None:
    assert await orchestrator.put(CacheKeys.item(7), {"id": 7}, kind=CacheKind.ITEM)
    assert not await orchestrator.put(CacheKeys.search("zz"), [], kind=CacheKind.SEARCH)

    entry = await store.entry(CacheKeys.item(7))
    assert entry is not None
    assert entry.absolute_expiration - entry.created_at == 1800
    assert await store.entry(CacheKeys.search("zz")) is None


@pytest.mark.asyncio
async def test_invalidate_reports_whether_entry_existed(orchestrator: CacheOrchestrator) -> None:
    key = CacheKeys.item(3)
    await orchestrator.get_or_fetch(key, CountingFetch(value="x"), kind=CacheKind.ITEM)
    assert await orchestrator.invalidate(key, CacheKind.ITEM) is True
    assert await orchestrator.invalidate(key, CacheKind.ITEM) is False
    fetch = CountingFetch(value="y")
    assert await orchestrator.get_or_fetch(key, fetch, kind=CacheKind.ITEM) == "y"
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_invalidate_all_is_bounded(orchestrator: CacheOrchestrator, store: InMemoryCacheStore) -> None:
    seeds = {
        CacheKeys.types(): CacheKind.CATEGORY,
        CacheKeys.item(1): CacheKind.ITEM,
        CacheKeys.species(50): CacheKind.SPECIES,
        CacheKeys.item(51): CacheKind.ITEM,
        CacheKeys.search("pi"): CacheKind.SEARCH,
        CacheKeys.item_by_name("pikachu"): CacheKind.ITEM,
        CacheKeys.type_members("fire"): CacheKind.CATEGORY,
    }
    for key, kind in seeds.items():
        await orchestrator.get_or_fetch(key, CountingFetch(value=[key]), kind=kind)

    assert await orchestrator.invalidate_all() == 3

    assert sorted(await store.live_keys()) == sorted(
        [
            CacheKeys.item(51),
            CacheKeys.search("pi"),
            CacheKeys.item_by_name("pikachu"),
            CacheKeys.type_members("fire"),
        ]
    )


@pytest.mark.asyncio
async def test_stats_counts_live_entries_by_kind(orchestrator: CacheOrchestrator, fake_clock) -> None:
    await orchestrator.get_or_fetch(CacheKeys.item(1), CountingFetch(value=1), kind=CacheKind.ITEM)
    await orchestrator.get_or_fetch(CacheKeys.item(2), CountingFetch(value=2), kind=CacheKind.ITEM)
    await orchestrator.get_or_fetch(CacheKeys.search("ab"), CountingFetch(value=["Abra"]), kind=CacheKind.SEARCH)
    await orchestrator.get_or_fetch(CacheKeys.types(), CountingFetch(value=["t"]), kind=CacheKind.CATEGORY)

    stats = await orchestrator.stats()
    assert stats.counts == {"category": 1, "item": 2, "species": 0, "search": 1}
    assert stats.total == 4

    fake_clock.advance(16 * 60)
    stats = await orchestrator.stats()
    assert stats.counts["search"] == 0
    assert stats.total == 3


@pytest.mark.asyncio
async def test_store_faults_degrade_to_passthrough(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    orchestrator = CacheOrchestrator(BrokenStore())
    fetch = CountingFetch(value={"id": 1})

    assert await orchestrator.get_or_fetch("catalog:item:1", fetch, kind=CacheKind.ITEM) == {"id": 1}
    assert await orchestrator.get_or_fetch("catalog:item:1", fetch, kind=CacheKind.ITEM) == {"id": 1}
    assert fetch.calls == 2
    assert await orchestrator.invalidate("catalog:item:1", CacheKind.ITEM) is False
    assert (await orchestrator.stats()).total == 0
    assert any(r.getMessage() == "cache.fault" for r in caplog.records)
