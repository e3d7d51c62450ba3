# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Catalog Router.

Summary:
    Listing, details, type options and name suggestions under ``/v1/catalog``.
    Upstream outages on listings come back as ``200`` with
    ``data.error_message`` set; an absent item is ``404``.

Layer:
    adapters/routers
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Path, Query, Request, Response, status

from pokedex_api.adapters.controllers.catalog_controller import CatalogController, normalize_filters
from pokedex_api.adapters.presenters.catalog_presenter import CatalogPresenter
from pokedex_api.adapters.routers.base_router import BaseRouter
from pokedex_api.adapters.schemas.http.catalog import (
    CatalogDetailsHTTP,
    CatalogListHTTP,
    SearchSuggestionsHTTP,
    TypeOptionHTTP,
)
from pokedex_api.adapters.schemas.http.envelopes import SuccessEnvelope
from pokedex_api.dependencies.catalog import get_catalog_controller

router = BaseRouter(version="v1", resource="catalog", tags=["Catalog"])
presenter = CatalogPresenter()


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.get(
    "/items",
    response_model=SuccessEnvelope[CatalogListHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="List catalog items (paginated, filterable)",
)
async def list_items(
    request: Request,
    response: Response,
    controller: Annotated[CatalogController, Depends(get_catalog_controller)],
    page: Annotated[int, Query(description="1-based page; values below 1 are clamped.")] = 1,
    page_size: Annotated[
        int | None, Query(ge=BaseRouter.MIN_PAGE_SIZE, le=BaseRouter.MAX_PAGE_SIZE)
    ] = None,
    name: Annotated[str | None, Query(max_length=100)] = None,
    type_name: Annotated[
        str | None, Query(alias="type", max_length=50, description="Type filter, e.g. water.")
    ] = None,
    min_height: Annotated[int | None, Query(description="Minimum height (dm).")] = None,
    max_height: Annotated[int | None, Query(description="Maximum height (dm).")] = None,
) -> SuccessEnvelope[CatalogListHTTP]:
    filters = normalize_filters(page, name, type_name, min_height, max_height)
    result = await controller.list_items(filters, page_size)
    presented = presenter.present_list(result, trace_id=_trace_id(request))
    presenter.apply_headers(presented, response)
    return presented.body


@router.get(
    "/items/{item_id}",
    response_model=SuccessEnvelope[CatalogDetailsHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Item details with optional species data",
)
async def get_item(
    request: Request,
    response: Response,
    item_id: Annotated[int, Path()],
    controller: Annotated[CatalogController, Depends(get_catalog_controller)],
) -> SuccessEnvelope[CatalogDetailsHTTP]:
    if item_id < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid item id")
    view = await controller.details(item_id)
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {item_id} not found")
    presented = presenter.present_details(view, trace_id=_trace_id(request))
    presenter.apply_headers(presented, response)
    return presented.body


@router.get(
    "/types",
    response_model=SuccessEnvelope[list[TypeOptionHTTP]],
    responses=BaseRouter.std_error_responses(),
    summary="Type filter options",
)
async def list_types(
    request: Request,
    response: Response,
    controller: Annotated[CatalogController, Depends(get_catalog_controller)],
) -> SuccessEnvelope[list[TypeOptionHTTP]]:
    presented = presenter.present_types(await controller.types(), trace_id=_trace_id(request))
    presenter.apply_headers(presented, response)
    return presented.body


@router.get(
    "/search",
    response_model=SuccessEnvelope[SearchSuggestionsHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Name suggestions by prefix (queries of 2+ characters)",
)
async def search_names(
    request: Request,
    response: Response,
    controller: Annotated[CatalogController, Depends(get_catalog_controller)],
    q: Annotated[str, Query(max_length=50)] = "",
) -> SuccessEnvelope[SearchSuggestionsHTTP]:
    names = await controller.suggestions(q)
    presented = presenter.present_suggestions(q, names, trace_id=_trace_id(request))
    presenter.apply_headers(presented, response)
    return presented.body
