# src/pokedex_api/infrastructure/export/spreadsheet.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Spreadsheet exporter (openpyxl).

Renders catalog items into ``.xlsx`` workbooks:

* ``export``: one sheet, one row per item (ID, Name, Height (dm), Weight (hg),
  Types, Base Experience, Exported At), striped rows and a summary footer.
* ``export_one``: a merged title row followed by a Field/Value table.

Workbooks are built in memory and returned as bytes; no file is written.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from io import BytesIO
from typing import Final

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from pokedex_api.application.interfaces.spreadsheet_exporter import SpreadsheetExporterPort
from pokedex_api.domain.entities.catalog_item import CatalogItem
from pokedex_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

LIST_SHEET_TITLE: Final[str] = "Catalog"
LIST_HEADERS: Final[tuple[str, ...]] = (
    "ID",
    "Name",
    "Height (dm)",
    "Weight (hg)",
    "Types",
    "Base Experience",
    "Exported At",
)
_LIST_WIDTHS: Final[tuple[int, ...]] = (8, 20, 12, 12, 25, 18, 22)

_MAX_SHEET_TITLE: Final[int] = 31
_TIMESTAMP_FMT: Final[str] = "%Y-%m-%d %H:%M:%S"

_HEADER_FILL = PatternFill(fill_type="solid", start_color="FF1F4E79", end_color="FF1F4E79")
_TITLE_FILL = PatternFill(fill_type="solid", start_color="FF2E7D32", end_color="FF2E7D32")
_FIELD_FILL = PatternFill(fill_type="solid", start_color="FFDDEBF7", end_color="FFDDEBF7")
_STRIPE_FILL = PatternFill(fill_type="solid", start_color="FFF2F2F2", end_color="FFF2F2F2")
_WHITE_BOLD = Font(bold=True, color="FFFFFFFF")
_THIN = Side(style="thin")
_BOX = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def _sheet_title(text: str) -> str:
    cleaned = "".join(ch for ch in text if ch not in '[]:*?/\\')
    return cleaned[:_MAX_SHEET_TITLE] or LIST_SHEET_TITLE


def _to_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class OpenpyxlSpreadsheetExporter(SpreadsheetExporterPort):
    """openpyxl implementation of :class:`SpreadsheetExporterPort`."""

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    def export(self, items: Sequence[CatalogItem], *, sheet_title: str | None = None) -> bytes:
        """Return a workbook with a header row and one row per item."""
        workbook = Workbook()
        sheet: Worksheet = workbook.active
        sheet.title = _sheet_title(sheet_title or LIST_SHEET_TITLE)
        exported_at = self._clock().strftime(_TIMESTAMP_FMT)

        sheet.append(list(LIST_HEADERS))
        for cell in sheet[1]:
            cell.font = _WHITE_BOLD
            cell.fill = _HEADER_FILL
            cell.alignment = Alignment(horizontal="center")

        for index, item in enumerate(items):
            sheet.append(
                [
                    item.id,
                    item.display_name,
                    item.height,
                    item.weight,
                    ", ".join(item.type_names),
                    item.base_experience,
                    exported_at,
                ]
            )
            row = index + 2
            for col in range(1, len(LIST_HEADERS) + 1):
                cell = sheet.cell(row=row, column=col)
                cell.border = _BOX
                if index % 2 == 1:
                    cell.fill = _STRIPE_FILL

        for col, width in enumerate(_LIST_WIDTHS, start=1):
            sheet.column_dimensions[get_column_letter(col)].width = width

        footer = len(items) + 3
        total = sheet.cell(row=footer, column=1, value=f"Total: {len(items)} items")
        total.font = Font(bold=True, italic=True)
        generated = sheet.cell(row=footer + 1, column=1, value=f"Generated on {exported_at} UTC")
        generated.font = Font(size=10, color="FF808080")

        logger.info("export.list", extra={"count": len(items), "sheet": sheet.title})
        return _to_bytes(workbook)

    def export_one(self, item: CatalogItem) -> bytes:
        """Return a workbook describing ``item`` as a Field/Value table."""
        workbook = Workbook()
        sheet: Worksheet = workbook.active
        sheet.title = _sheet_title(f"Item - {item.display_name}")

        sheet.merge_cells(start_row=1, start_column=1, end_row=1, end_column=4)
        title = sheet.cell(row=1, column=1, value=f"INFORMATION OF {item.name.upper()}")
        title.font = Font(size=16, bold=True, color="FFFFFFFF")
        title.fill = _TITLE_FILL
        title.alignment = Alignment(horizontal="center")

        for col, text in ((1, "Field"), (2, "Value")):
            cell = sheet.cell(row=3, column=col, value=text)
            cell.font = _WHITE_BOLD
            cell.fill = _HEADER_FILL

        rows: list[tuple[str, object]] = [
            ("ID", item.id),
            ("Name", item.display_name),
            ("Height", f"{item.height} decimetres"),
            ("Weight", f"{item.weight} hectograms"),
            ("Base Experience", item.base_experience),
            ("Types", ", ".join(item.type_names)),
        ]
        rows.extend((f"Stat: {s.name}", s.base_stat) for s in item.stats)
        rows.append(("Exported At", self._clock().strftime(_TIMESTAMP_FMT)))

        for offset, (field, value) in enumerate(rows):
            row = 4 + offset
            label = sheet.cell(row=row, column=1, value=field)
            label.font = Font(bold=True)
            label.fill = _FIELD_FILL
            label.border = _BOX
            sheet.cell(row=row, column=2, value=value).border = _BOX

        sheet.column_dimensions["A"].width = 20
        sheet.column_dimensions["B"].width = 30

        logger.info("export.item", extra={"item_id": item.id})
        return _to_bytes(workbook)
