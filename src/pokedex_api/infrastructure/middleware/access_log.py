# src/pokedex_api/infrastructure/middleware/access_log.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Access Log Middleware.

Emits one structured ``access_log`` record per request with method, path,
query, status (500 when the handler raised), latency in milliseconds, client
address and correlation id.
"""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from pokedex_api.infrastructure.logging.logger import get_json_logger

_logger = get_json_logger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured access logging middleware."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            record: dict[str, Any] = {
                "evt": "access",
                "method": request.method,
                "path": request.url.path,
                "query": str(request.url.query),
                "status": response.status_code if response is not None else 500,
                "elapsed_ms": round((time.perf_counter() - started) * 1000.0, 2),
                "client_ip": request.client.host if request.client else None,
                "request_id": getattr(request.state, "request_id", None),
                "ok": response is not None,
            }
            _logger.info("access_log", extra=record)
