# src/pokedex_api/infrastructure/resilience/circuit_breaker.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Minimal async circuit breaker (in-memory).

State machine:
    - CLOSED -> count failures; when threshold reached, go OPEN.
    - OPEN   -> fail-fast until recovery timeout expires; then HALF-OPEN.
    - HALF-OPEN -> allow limited calls; on success -> CLOSED; on failure -> OPEN.

Only exceptions matching ``trip_on`` count as failures, so "not found" style
answers never open the circuit. This is process-local.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


class CircuitOpenError(RuntimeError):
    """Raised by :meth:`CircuitBreaker.guard` while the circuit rejects calls."""


@dataclass
class CircuitBreaker:
    """Simple circuit breaker suitable for HTTP client protection."""

    failure_threshold: int
    recovery_timeout_s: float
    half_open_max_calls: int
    trip_on: Callable[[BaseException], bool] = lambda _exc: True
    clock: Callable[[], float] = time.monotonic

    _state: str = "CLOSED"  # CLOSED|OPEN|HALF_OPEN
    _failures: int = 0
    _opened_at: float = 0.0
    _half_open_calls: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def state(self) -> str:
        return self._state

    @asynccontextmanager
    async def guard(self, key: str) -> AsyncIterator[None]:
        """Guard an async call with the breaker.

        Raises:
            CircuitOpenError: When OPEN (before recovery) or the HALF-OPEN budget is spent.
        """
        async with self._lock:
            now = self.clock()
            if self._state == "OPEN":
                if now - self._opened_at >= self.recovery_timeout_s:
                    self._state = "HALF_OPEN"
                    self._half_open_calls = 0
                else:
                    raise CircuitOpenError(f"circuit_open:{key}")
            if self._state == "HALF_OPEN":
                if self._half_open_calls >= self.half_open_max_calls:
                    raise CircuitOpenError(f"circuit_half_open_limit:{key}")
                self._half_open_calls += 1

        try:
            yield
        except Exception as exc:
            async with self._lock:
                if not self.trip_on(exc):
                    if self._state == "HALF_OPEN":
                        self._state = "CLOSED"
                        self._failures = 0
                elif self._state == "HALF_OPEN":
                    self._state = "OPEN"
                    self._opened_at = self.clock()
                else:
                    self._failures += 1
                    if self._failures >= self.failure_threshold:
                        self._state = "OPEN"
                        self._opened_at = self.clock()
            raise
        else:
            async with self._lock:
                self._state = "CLOSED"
                self._failures = 0
