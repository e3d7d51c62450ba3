from __future__ import annotations

from collections.abc import Sequence

import pytest

from pokedex_api.adapters.controllers.catalog_controller import (
    CatalogController,
    EmailController,
    ExportController,
    ListingFilters,
    normalize_filters,
)
from pokedex_api.application.use_cases.catalog.query_service import CatalogQueryService
from pokedex_api.domain.entities.catalog_item import CatalogItem


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        ((0,), ListingFilters(page=1)),
        ((None,), ListingFilters(page=1)),
        ((3, "  pika ", " Water "), ListingFilters(page=3, name="pika", type_name="water")),
        ((1, "", "   "), ListingFilters(page=1)),
        ((1, None, None, -5, 10), ListingFilters(page=1, max_height=10)),
        ((1, None, None, 20, 5), ListingFilters(page=1, min_height=5, max_height=20)),
        ((1, None, None, 0, 0), ListingFilters(page=1, min_height=0, max_height=0)),
    ],
)
def test_normalize_filters(args: tuple, expected: ListingFilters) -> None:
    assert normalize_filters(*args) == expected


class RecordingExporter:
    def __init__(self) -> None:
        self.exported: list[tuple[list[int], str | None]] = []

    def export(self, items: Sequence[CatalogItem], *, sheet_title: str | None = None) -> bytes:
        self.exported.append(([i.id for i in items], sheet_title))
        return b"xlsx"

    def export_one(self, item: CatalogItem) -> bytes:
        return f"one:{item.id}".encode()


class RecordingSender:
    def __init__(self, configured: bool = True) -> None:
        self.configured = configured
        self.sent: list[tuple[str, list[int]]] = []

    def is_configured(self) -> bool:
        return self.configured

    async def send(self, item: CatalogItem, recipient: str, recipient_name: str = "") -> bool:
        self.sent.append((recipient, [item.id]))
        return True

    async def send_bulk(
        self, items: Sequence[CatalogItem], recipient: str, recipient_name: str = ""
    ) -> int:
        self.sent.append((recipient, [i.id for i in items]))
        return 1


@pytest.fixture
def catalog(stub_gateway, orchestrator, make_item) -> CatalogController:
    stub_gateway.add_items(*(make_item(i) for i in range(1, 6)))
    return CatalogController(CatalogQueryService(stub_gateway, orchestrator))


@pytest.mark.asyncio
async def test_list_items_passes_normalized_filters(catalog: CatalogController) -> None:
    result = await catalog.list_items(normalize_filters(1, min_height=9, max_height=2), page_size=3)
    assert [i.id for i in result.items] == [1, 2, 3]
    assert result.page_size == 3


@pytest.mark.asyncio
async def test_export_selection_and_single(catalog: CatalogController) -> None:
    exporter = RecordingExporter()
    controller = ExportController(catalog, exporter)

    assert await controller.selection([3, 1, 999]) == b"xlsx"
    assert exporter.exported == [([1, 3], "Selection")]
    assert await controller.selection([999]) is None

    single = await controller.single(2)
    assert single is not None
    assert single[0].id == 2
    assert single[1] == b"one:2"
    assert await controller.single(999) is None


@pytest.mark.asyncio
async def test_export_page_uses_listing(catalog: CatalogController) -> None:
    exporter = RecordingExporter()
    controller = ExportController(catalog, exporter)
    assert await controller.page(ListingFilters(page=1)) == b"xlsx"
    assert exporter.exported[-1] == ([1, 2, 3, 4, 5], "Page 1")
    assert await controller.page(ListingFilters(page=9)) is None


@pytest.mark.asyncio
async def test_email_controller(catalog: CatalogController) -> None:
    sender = RecordingSender()
    controller = EmailController(catalog, sender)

    assert controller.is_configured()
    assert await controller.send_single(1, "ash@example.test") is True
    assert await controller.send_single(999, "ash@example.test") is None
    assert await controller.send_multiple([2, 4], "ash@example.test") == 1
    assert await controller.send_multiple([999], "ash@example.test") is None
    assert sender.sent == [("ash@example.test", [1]), ("ash@example.test", [2, 4])]
