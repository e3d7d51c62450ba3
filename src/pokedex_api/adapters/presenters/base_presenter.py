# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Presenter utilities and canonical envelope helpers.

Purpose:
    Thin helpers used by routers to shape HTTP responses consistently:
    build the SuccessEnvelope, echo ``X-Request-ID`` and attach a strong
    ``ETag`` computed from the canonical JSON body.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import Response

from pokedex_api.adapters.schemas.http.envelopes import SuccessEnvelope
from pokedex_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

T = TypeVar("T")


def _compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return f'"{hashlib.sha256(material.encode("utf-8")).hexdigest()}"'


@dataclass(slots=True)
class PresentResult(Generic[T]):
    """Presentation result.

    Attributes:
        body: Envelope instance.
        headers: Extra HTTP headers to apply.
    """

    body: T
    headers: Mapping[str, str]


class BasePresenter:
    """Base presenter for HTTP response shaping in adapter layers."""

    def present_success(
        self,
        *,
        data: Any,
        trace_id: str | None = None,
        cache_ttl_s: int | None = None,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Build a SuccessEnvelope with ``X-Request-ID``, ``ETag`` and optional ``Cache-Control``."""
        body = SuccessEnvelope[Any](data=data)
        headers: dict[str, str] = {"ETag": _compute_quoted_etag(body.model_dump(mode="json"))}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        if cache_ttl_s:
            headers["Cache-Control"] = f"public, max-age={int(cache_ttl_s)}"
        return PresentResult(body=body, headers=headers)

    @staticmethod
    def apply_headers(result: PresentResult[Any], response: Response) -> None:
        """Copy presenter headers onto the outgoing response."""
        try:
            response.headers.update(dict(result.headers))
        except Exception:  # pragma: no cover
            _LOGGER.exception("presenter_apply_headers_failed", extra={"headers": result.headers})
