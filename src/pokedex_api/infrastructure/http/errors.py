# src/pokedex_api/infrastructure/http/errors.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""HTTP error envelope and exception handlers.

Every error leaves the service as::

    {"error": {"code", "http_status", "message", "details"?, "trace_id"?}}
"""

from __future__ import annotations

from typing import Any, Final

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from pokedex_api.domain.exceptions.base import DomainError
from pokedex_api.domain.exceptions.catalog import (
    MalformedResponse,
    UpstreamNotFound,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from pokedex_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

_HTTP_CODES: Final[dict[int, str]] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    503: "SERVICE_UNAVAILABLE",
}

# Most specific first.
_DOMAIN_STATUS: Final[tuple[tuple[type[DomainError], int], ...]] = (
    (UpstreamTimeout, 504),
    (UpstreamUnavailable, 503),
    (UpstreamNotFound, 404),
    (MalformedResponse, 502),
)


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "trace_id", None)


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def domain_status(exc: DomainError) -> int:
    for exc_type, status in _DOMAIN_STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    payload = error_envelope(
        code=_HTTP_CODES.get(exc.status_code, "HTTP_ERROR"),
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_domain_error(request: Request, exc: DomainError) -> Response:
    status = domain_status(exc)
    logger.warning(
        "http.domain_error",
        extra={"code": exc.code, "status": status, "path": request.url.path},
    )
    # Upstream payload details stay in the logs.
    payload = error_envelope(
        code=exc.code,
        http_status=status,
        message=str(exc),
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=status, content=payload)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.error(
        "http.unhandled_exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"path": request.url.path},
    )
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)
