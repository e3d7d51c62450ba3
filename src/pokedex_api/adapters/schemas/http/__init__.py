# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Re-exports the canonical envelopes and catalog schemas used by routers and
presenters. ``BaseHTTPSchema`` stays internal to this package.
"""

from __future__ import annotations

from pokedex_api.adapters.schemas.http.catalog import (
    CacheClearHTTP,
    CacheStatsHTTP,
    CatalogDetailsHTTP,
    CatalogItemHTTP,
    CatalogListHTTP,
    EmailConfigurationHTTP,
    EmailMultipleRequest,
    EmailResultHTTP,
    EmailSingleRequest,
    ExportPageRequest,
    ExportSelectionRequest,
    SearchSuggestionsHTTP,
    ServiceStatusHTTP,
    SpeciesHTTP,
    TypeOptionHTTP,
)
from pokedex_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
)

__all__ = [
    "CacheClearHTTP",
    "CacheStatsHTTP",
    "CatalogDetailsHTTP",
    "CatalogItemHTTP",
    "CatalogListHTTP",
    "EmailConfigurationHTTP",
    "EmailMultipleRequest",
    "EmailResultHTTP",
    "EmailSingleRequest",
    "ErrorEnvelope",
    "ErrorObject",
    "ExportPageRequest",
    "ExportSelectionRequest",
    "SearchSuggestionsHTTP",
    "ServiceStatusHTTP",
    "SpeciesHTTP",
    "SuccessEnvelope",
    "TypeOptionHTTP",
]
