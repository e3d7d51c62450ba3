# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
Email Router.

Summary:
    Email item summaries under ``/v1/catalog/emails``. Delivery outcome is
    reported in the body; an unconfigured sender yields ``503``.

Layer:
    adapters/routers
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, status

from pokedex_api.adapters.controllers.catalog_controller import EmailController
from pokedex_api.adapters.presenters.base_presenter import BasePresenter
from pokedex_api.adapters.routers.base_router import BaseRouter
from pokedex_api.adapters.schemas.http.catalog import (
    EmailConfigurationHTTP,
    EmailMultipleRequest,
    EmailResultHTTP,
    EmailSingleRequest,
)
from pokedex_api.adapters.schemas.http.envelopes import SuccessEnvelope
from pokedex_api.dependencies.catalog import get_email_controller

router = BaseRouter(version="v1", resource="catalog/emails", tags=["Emails"])
presenter = BasePresenter()


def _require_configured(controller: EmailController) -> None:
    if not controller.is_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Email delivery is not configured",
        )


@router.post(
    "/single",
    response_model=SuccessEnvelope[EmailResultHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Email one item summary",
)
async def send_single(
    body: EmailSingleRequest,
    controller: Annotated[EmailController, Depends(get_email_controller)],
) -> SuccessEnvelope[EmailResultHTTP]:
    _require_configured(controller)
    sent = await controller.send_single(body.item_id, body.email, body.name)
    if sent is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {body.item_id} not found")
    data = EmailResultHTTP(
        success=sent,
        delivered=1 if sent else 0,
        message=f"Email sent to {body.email}" if sent else "Email could not be sent",
    )
    return presenter.present_success(data=data).body


@router.post(
    "/multiple",
    response_model=SuccessEnvelope[EmailResultHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Email a summary of several items",
)
async def send_multiple(
    body: EmailMultipleRequest,
    controller: Annotated[EmailController, Depends(get_email_controller)],
) -> SuccessEnvelope[EmailResultHTTP]:
    _require_configured(controller)
    delivered = await controller.send_multiple(body.item_ids, body.email, body.name)
    if delivered is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="None of the selected items were found")
    data = EmailResultHTTP(
        success=delivered > 0,
        delivered=delivered,
        message=f"Email sent to {body.email}" if delivered else "Email could not be sent",
    )
    return presenter.present_success(data=data).body


@router.get(
    "/configuration",
    response_model=SuccessEnvelope[EmailConfigurationHTTP],
    summary="Whether email delivery is configured",
)
async def configuration(
    controller: Annotated[EmailController, Depends(get_email_controller)],
) -> SuccessEnvelope[EmailConfigurationHTTP]:
    configured = controller.is_configured()
    data = EmailConfigurationHTTP(
        configured=configured,
        message="Email delivery is configured" if configured else "Email delivery is not configured",
    )
    return presenter.present_success(data=data).body
