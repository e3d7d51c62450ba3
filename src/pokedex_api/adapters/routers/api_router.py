# src/pokedex_api/adapters/routers/api_router.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose the top-level `router` that includes all feature routers.

Responsibilities:
    * Catalog listing/details/types/search under `/v1/catalog/...`.
    * Spreadsheet exports under `/v1/catalog/exports/...`.
    * Email delivery under `/v1/catalog/emails/...`.
    * Cache administration and status under `/v1/admin/...`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from pokedex_api.adapters.routers.admin_router import router as admin_router
from pokedex_api.adapters.routers.catalog_router import router as catalog_router
from pokedex_api.adapters.routers.email_router import router as email_router
from pokedex_api.adapters.routers.export_router import router as export_router

router = APIRouter()

router.include_router(export_router)
router.include_router(email_router)
router.include_router(catalog_router)
router.include_router(admin_router)
