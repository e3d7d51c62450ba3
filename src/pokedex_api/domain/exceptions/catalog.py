# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Catalog Domain Exceptions

Purpose:
    Failure kinds raised while talking to the upstream catalog API or while
    running the get-or-populate cache sequence. The cache orchestrator and the
    query service convert every one of them into data (``None``, an empty
    list, or a result carrying a user-facing message); only adapters that call
    the gateway directly ever see them raised.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class UpstreamUnavailable(DomainError):
    """Network-level failure (or 5xx/429) reaching the catalog API."""

    code = "UPSTREAM_UNAVAILABLE"


class UpstreamTimeout(UpstreamUnavailable):
    """The catalog API did not answer within the configured deadline."""

    code = "UPSTREAM_TIMEOUT"


class UpstreamNotFound(DomainError):
    """Non-success status for a specific id/name lookup."""

    code = "UPSTREAM_NOT_FOUND"


class MalformedResponse(DomainError):
    """Payload could not be parsed into the expected shape."""

    code = "UPSTREAM_SCHEMA_ERROR"


class CacheLayerFault(DomainError):
    """Unexpected failure inside the cache store itself (not the fetch)."""

    code = "CACHE_LAYER_FAULT"
