# src/pokedex_api/application/interfaces/spreadsheet_exporter.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Application Interface: spreadsheet export of catalog items."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pokedex_api.domain.entities.catalog_item import CatalogItem


class SpreadsheetExporterPort(Protocol):
    """Render catalog items into an xlsx workbook."""

    def export(self, items: Sequence[CatalogItem], *, sheet_title: str | None = None) -> bytes:
        """Return a workbook with one row per item."""
        ...

    def export_one(self, item: CatalogItem) -> bytes:
        """Return a workbook describing a single item."""
        ...
