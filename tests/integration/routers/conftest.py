# tests/integration/routers/conftest.py
from __future__ import annotations

from collections.abc import Generator, Sequence

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pokedex_api.dependencies.catalog import (
    get_cache_orchestrator,
    get_catalog_gateway,
    get_email_sender,
)
from pokedex_api.domain.entities.catalog_item import CatalogItem
from pokedex_api.main import create_app


class FakeSender:
    """Email sender double; records deliveries instead of talking SMTP."""

    def __init__(self) -> None:
        self.configured = True
        self.succeed = True
        self.deliveries: list[tuple[str, list[int]]] = []

    def is_configured(self) -> bool:
        return self.configured

    async def send(self, item: CatalogItem, recipient: str, recipient_name: str = "") -> bool:
        self.deliveries.append((recipient, [item.id]))
        return self.succeed

    async def send_bulk(
        self, items: Sequence[CatalogItem], recipient: str, recipient_name: str = ""
    ) -> int:
        self.deliveries.append((recipient, [i.id for i in items]))
        return 1 if self.succeed else 0


@pytest.fixture
def fake_sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def app(stub_gateway, orchestrator, fake_sender) -> FastAPI:
    application = create_app()
    application.dependency_overrides[get_catalog_gateway] = lambda: stub_gateway
    application.dependency_overrides[get_cache_orchestrator] = lambda: orchestrator
    application.dependency_overrides[get_email_sender] = lambda: fake_sender
    return application


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
