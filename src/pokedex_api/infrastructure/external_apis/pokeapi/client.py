# src/pokedex_api/infrastructure/external_apis/pokeapi/client.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""PokeAPI Transport Client (v2): resilient, instrumented, async.

This transport is framework-agnostic and provides:

* Async HTTP (httpx) with a per-request timeout (30s by default).
* Jittered exponential retries (bounded) for unavailable/timeout failures.
* Circuit breaker (CLOSED <-> OPEN <-> HALF-OPEN) tripped only by
  unavailable/timeout failures.
* Deterministic mapping to domain errors:
    - ``httpx.TimeoutException`` -> ``UpstreamTimeout``
    - other ``httpx.RequestError`` / 429 / 5xx -> ``UpstreamUnavailable``
    - any other non-success status -> ``UpstreamNotFound``
    - non-JSON body -> ``MalformedResponse``
* Prometheus latency/error/retry metrics.

It returns parsed JSON only; mapping payloads to domain records is the job
of the catalog gateway.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from contextlib import suppress
from typing import Any, Final

import httpx

from pokedex_api.domain.exceptions.catalog import (
    MalformedResponse,
    UpstreamNotFound,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from pokedex_api.infrastructure.external_apis.pokeapi.settings import PokeApiSettings
from pokedex_api.infrastructure.logging.logger import get_json_logger, get_request_id
from pokedex_api.infrastructure.observability.metrics import (
    get_upstream_errors_total,
    get_upstream_latency_seconds,
    get_upstream_retries_total,
)
from pokedex_api.infrastructure.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitOpenError,
)
from pokedex_api.infrastructure.resilience.retry import RetryPolicy, retry_async

logger = get_json_logger(__name__)

_DEFAULT_BASE_BACKOFF: Final[float] = 0.25
_DEFAULT_MAX_BACKOFF: Final[float] = 2.0

_DEFAULT_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json",
    "User-Agent": "pokedex-api/0.1",
}


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, UpstreamUnavailable) and exc.details.get("reason") != "circuit_open"


class PokeApiClient:
    """Resilient transport client for the PokeAPI v2 REST API."""

    def __init__(
        self,
        settings: PokeApiSettings,
        *,
        http: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        """Initialize the transport client.

        Args:
            settings: Provider settings loaded from environment or DI.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            retry_policy: Optional retry configuration. When omitted, a
                jittered exponential policy is built from ``settings.max_retries``.
            breaker: Circuit breaker instance to use; created if omitted.
        """
        self._settings = settings
        self._base_url = str(settings.base_url).rstrip("/")
        self._timeout = float(settings.timeout_s)
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=self._timeout,
            headers=_DEFAULT_HEADERS.copy(),
        )
        if http is not None:
            for key, value in _DEFAULT_HEADERS.items():
                self._client.headers.setdefault(key, value)

        self._retry = retry_policy or RetryPolicy(
            total=int(settings.max_retries),
            base=_DEFAULT_BASE_BACKOFF,
            cap=_DEFAULT_MAX_BACKOFF,
            jitter=True,
        )
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=settings.breaker_failure_threshold,
            recovery_timeout_s=settings.breaker_recovery_s,
            half_open_max_calls=1,
            trip_on=lambda exc: isinstance(exc, UpstreamUnavailable),
        )

    @property
    def settings(self) -> PokeApiSettings:
        return self._settings

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        endpoint: str,
    ) -> Any:
        """GET ``path`` and return the decoded JSON body.

        Args:
            path: Path relative to the base URL (``pokemon/25``).
            params: Optional query parameters.
            endpoint: Logical endpoint label for metrics and logs.

        Returns:
            Decoded JSON payload.

        Raises:
            UpstreamNotFound: Non-success, non-retryable status.
            UpstreamTimeout: Deadline exceeded (after retries).
            UpstreamUnavailable: Network failure, 429/5xx or open circuit (after retries).
            MalformedResponse: Body is not JSON.
        """
        url = self.url_for(path)
        headers: dict[str, str] = {}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id

        async def _call() -> Any:
            try:
                async with self._breaker.guard(endpoint):
                    try:
                        response = await self._client.get(
                            url, params=params, headers=headers, timeout=self._timeout
                        )
                    except httpx.TimeoutException as exc:
                        raise UpstreamTimeout(
                            "upstream_timeout", details={"url": url, "timeout_s": self._timeout}
                        ) from exc
                    except httpx.RequestError as exc:
                        raise UpstreamUnavailable(
                            "upstream_unreachable", details={"url": url, "error": str(exc)}
                        ) from exc
                    self._raise_for_status(response, url)
            except CircuitOpenError as exc:
                raise UpstreamUnavailable(
                    "circuit_open", details={"url": url, "reason": "circuit_open"}
                ) from exc

            try:
                return response.json()
            except ValueError as exc:
                raise MalformedResponse(
                    "non_json", details={"url": url, "error": str(exc)}
                ) from exc

        def _retry_on(exc: Exception) -> bool:
            retryable = _is_transient(exc)
            if retryable:
                with suppress(Exception):
                    get_upstream_retries_total().labels(
                        endpoint=endpoint, reason=type(exc).__name__
                    ).inc()
                logger.warning(
                    "upstream.retry",
                    extra={"endpoint": endpoint, "url": url, "error_type": type(exc).__name__},
                )
            return retryable

        start = time.perf_counter()
        outcome = "success"
        try:
            return await retry_async(_call, policy=self._retry, retry_on=_retry_on)
        except UpstreamNotFound:
            outcome = "not_found"
            raise
        except Exception as exc:
            outcome = "error"
            with suppress(Exception):
                get_upstream_errors_total().labels(
                    endpoint=endpoint, reason=type(exc).__name__
                ).inc()
            raise
        finally:
            with suppress(Exception):
                get_upstream_latency_seconds().labels(endpoint=endpoint, outcome=outcome).observe(
                    time.perf_counter() - start
                )

    @staticmethod
    def _raise_for_status(response: httpx.Response, url: str) -> None:
        status = response.status_code
        if status < 400:
            return
        details = {"url": url, "status": status}
        if status == 429 or status >= 500:
            raise UpstreamUnavailable("upstream_status", details=details)
        raise UpstreamNotFound("upstream_status", details=details)
