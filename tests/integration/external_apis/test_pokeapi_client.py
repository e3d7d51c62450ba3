# tests/integration/external_apis/test_pokeapi_client.py
from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
import respx

from pokedex_api.domain.exceptions.catalog import (
    MalformedResponse,
    UpstreamNotFound,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from pokedex_api.infrastructure.external_apis.pokeapi.client import PokeApiClient
from pokedex_api.infrastructure.external_apis.pokeapi.settings import PokeApiSettings
from pokedex_api.infrastructure.logging.logger import set_request_context
from pokedex_api.infrastructure.resilience.retry import RetryPolicy

BASE = "https://pokeapi.co/api/v2"


@pytest_asyncio.fixture
async def client() -> AsyncIterator[PokeApiClient]:
    c = PokeApiClient(
        PokeApiSettings(),
        retry_policy=RetryPolicy(total=2, base=0.0, cap=0.0, jitter=False),
    )
    try:
        yield c
    finally:
        await c.aclose()


def test_url_for_joins_base_and_path() -> None:
    c = PokeApiClient(PokeApiSettings(base_url="https://example.test/api/v2/"))
    assert c.url_for("pokemon/25") == "https://example.test/api/v2/pokemon/25"
    assert c.url_for("/type") == "https://example.test/api/v2/type"


@pytest.mark.asyncio
async def test_get_json_success(client: PokeApiClient) -> None:
    with respx.mock(base_url=BASE) as mock:
        route = mock.get("/pokemon/25").mock(return_value=httpx.Response(200, json={"id": 25}))
        assert await client.get_json("pokemon/25", endpoint="pokemon") == {"id": 25}
        assert route.call_count == 1
        assert route.calls.last.request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_get_json_forwards_request_id(client: PokeApiClient) -> None:
    set_request_context(request_id="req-abc")
    with respx.mock(base_url=BASE) as mock:
        route = mock.get("/pokemon/1").mock(return_value=httpx.Response(200, json={}))
        await client.get_json("pokemon/1", endpoint="pokemon")
        assert route.calls.last.request.headers["X-Request-ID"] == "req-abc"


@pytest.mark.asyncio
async def test_not_found_is_not_retried(client: PokeApiClient) -> None:
    with respx.mock(base_url=BASE) as mock:
        route = mock.get("/pokemon/99999").mock(return_value=httpx.Response(404, text="Not Found"))
        with pytest.raises(UpstreamNotFound) as info:
            await client.get_json("pokemon/99999", endpoint="pokemon")
        assert info.value.details["status"] == 404
        assert route.call_count == 1


@pytest.mark.asyncio
async def test_server_error_is_retried_then_unavailable(client: PokeApiClient) -> None:
    with respx.mock(base_url=BASE) as mock:
        route = mock.get("/pokemon/1").mock(return_value=httpx.Response(503))
        with pytest.raises(UpstreamUnavailable) as info:
            await client.get_json("pokemon/1", endpoint="pokemon")
        assert not isinstance(info.value, UpstreamTimeout)
        assert route.call_count == 3


@pytest.mark.asyncio
async def test_transient_error_recovers_on_retry(client: PokeApiClient) -> None:
    with respx.mock(base_url=BASE) as mock:
        route = mock.get("/pokemon/1").mock(
            side_effect=[httpx.Response(502), httpx.Response(200, json={"id": 1})]
        )
        assert await client.get_json("pokemon/1", endpoint="pokemon") == {"id": 1}
        assert route.call_count == 2


@pytest.mark.asyncio
async def test_timeout_maps_to_upstream_timeout(client: PokeApiClient) -> None:
    with respx.mock(base_url=BASE) as mock:
        route = mock.get("/pokemon/1").mock(side_effect=httpx.ConnectTimeout("too slow"))
        with pytest.raises(UpstreamTimeout):
            await client.get_json("pokemon/1", endpoint="pokemon")
        assert route.call_count == 3


@pytest.mark.asyncio
async def test_connection_error_maps_to_unavailable(client: PokeApiClient) -> None:
    with respx.mock(base_url=BASE) as mock:
        mock.get("/pokemon/1").mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(UpstreamUnavailable) as info:
            await client.get_json("pokemon/1", endpoint="pokemon")
        assert str(info.value) == "upstream_unreachable"


@pytest.mark.asyncio
async def test_non_json_body_is_malformed(client: PokeApiClient) -> None:
    with respx.mock(base_url=BASE) as mock:
        route = mock.get("/type").mock(return_value=httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(MalformedResponse):
            await client.get_json("type", endpoint="type")
        assert route.call_count == 1


@pytest.mark.asyncio
async def test_circuit_opens_after_repeated_failures() -> None:
    c = PokeApiClient(
        PokeApiSettings(breaker_failure_threshold=2),
        retry_policy=RetryPolicy(total=0, base=0.0, cap=0.0, jitter=False),
    )
    try:
        with respx.mock(base_url=BASE) as mock:
            route = mock.get("/pokemon/1").mock(return_value=httpx.Response(500))
            for _ in range(2):
                with pytest.raises(UpstreamUnavailable):
                    await c.get_json("pokemon/1", endpoint="pokemon")
            with pytest.raises(UpstreamUnavailable) as info:
                await c.get_json("pokemon/1", endpoint="pokemon")
            assert info.value.details["reason"] == "circuit_open"
            assert route.call_count == 2
    finally:
        await c.aclose()
