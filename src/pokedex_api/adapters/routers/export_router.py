# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Export Router.

Summary:
    Spreadsheet downloads under ``/v1/catalog/exports``: a selection of ids,
    a single item, or the listing page described by a set of filters.

Layer:
    adapters/routers
"""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Final

from fastapi import Depends, HTTPException, Path, Response, status

from pokedex_api.adapters.controllers.catalog_controller import ExportController, normalize_filters
from pokedex_api.adapters.routers.base_router import BaseRouter
from pokedex_api.adapters.schemas.http.catalog import ExportPageRequest, ExportSelectionRequest
from pokedex_api.dependencies.catalog import get_export_controller

XLSX_MEDIA_TYPE: Final[str] = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = BaseRouter(version="v1", resource="catalog/exports", tags=["Exports"])


def _stamp() -> str:
    return datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")


def _attachment(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/selection",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}, **BaseRouter.std_error_responses()},
    summary="Export the selected items",
)
async def export_selection(
    body: ExportSelectionRequest,
    controller: Annotated[ExportController, Depends(get_export_controller)],
) -> Response:
    content = await controller.selection(body.ids)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="None of the selected items were found")
    return _attachment(content, f"catalog_selection_{_stamp()}.xlsx")


@router.get(
    "/items/{item_id}",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}, **BaseRouter.std_error_responses()},
    summary="Export one item",
)
async def export_item(
    item_id: Annotated[int, Path(ge=1)],
    controller: Annotated[ExportController, Depends(get_export_controller)],
) -> Response:
    exported = await controller.single(item_id)
    if exported is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {item_id} not found")
    item, content = exported
    return _attachment(content, f"{item.name}_{_stamp()}.xlsx")


@router.post(
    "/page",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}, **BaseRouter.std_error_responses()},
    summary="Export a filtered listing page",
)
async def export_page(
    body: ExportPageRequest,
    controller: Annotated[ExportController, Depends(get_export_controller)],
) -> Response:
    filters = normalize_filters(body.page, body.name, body.type_name, body.min_height, body.max_height)
    content = await controller.page(filters)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No items to export")
    return _attachment(content, f"catalog_page_{filters.page}_{_stamp()}.xlsx")
