# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Canonical APIRouter wrapper for Pokedex HTTP endpoints:
      - Versioned routing with stable prefixes (e.g., "/v1/catalog").
      - Standard error response mapping using ErrorEnvelope.
      - Page-size bounds shared by listing endpoints.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from fastapi import APIRouter

from pokedex_api.adapters.schemas.http.envelopes import ErrorEnvelope
from pokedex_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


class BaseRouter(APIRouter):
    """Canonical router wrapper.

    Args:
        version: API version segment (e.g., "v1").
        resource: Resource segment (e.g., "catalog").
        prefix: Optional explicit prefix (overrides version/resource).
        tags: Default tags applied to all routes mounted on this router.
        **kwargs: Additional APIRouter kwargs.
    """

    MIN_PAGE_SIZE: int = 1
    MAX_PAGE_SIZE: int = 100

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        **kwargs: Any,
    ) -> None:
        computed_prefix = prefix or f"/{version}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            **kwargs,
        )
        _LOGGER.info(
            "router_initialized",
            extra={"service": "pokedex-api", "prefix": computed_prefix, "tags": list(tags or [])},
        )

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error response mapping for endpoints."""
        return {
            400: {"model": ErrorEnvelope, "description": "Bad request (validation or parameter)."},
            404: {"model": ErrorEnvelope, "description": "Not found."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
            503: {"model": ErrorEnvelope, "description": "Service unavailable."},
        }
