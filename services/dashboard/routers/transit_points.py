"""
Transit points screen: paginated search, type filter, create / edit / delete.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import CreateTransitPoint, TransitPointType, UpdateTransitPoint
from services.dashboard.client.pagination import PageRequest
from services.dashboard.client.transit_points import TransitPointService
from services.dashboard.notices import success_notice
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import get_backend, page_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transit-points", tags=["transit-points"])


@router.get("")
async def list_transit_points(
    request: Request,
    page: PageRequest = Depends(page_request),
    type: Optional[TransitPointType] = Query(None, description="PLACE | STATION | OFFICE | TRANSPORT"),
    client: BackendClient = Depends(get_backend),
):
    result = await TransitPointService(client).get_page(page)
    if type is not None:
        result.items = [p for p in result.items if p.type == type.value]
    return envelope(request, result.model_dump(mode="json"))


@router.get("/{point_id}")
async def get_transit_point(
    point_id: str,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    point = await TransitPointService(client).get_by_id(point_id)
    return envelope(request, point.model_dump(mode="json"))


@router.post("", status_code=201)
async def create_transit_point(
    body: CreateTransitPoint,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    point = await TransitPointService(client).create(body)
    logger.info("transit_point_created id=%s", point.id)
    return envelope(
        request,
        point.model_dump(mode="json"),
        [success_notice("Transit Point Added", f"{point.name} has been added successfully.")],
    )


@router.put("/{point_id}")
async def update_transit_point(
    point_id: str,
    body: UpdateTransitPoint,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    point = await TransitPointService(client).update(point_id, body)
    return envelope(
        request,
        point.model_dump(mode="json"),
        [success_notice("Transit Point Updated", f"{point.name} has been updated successfully.")],
    )


@router.delete("/{point_id}")
async def delete_transit_point(
    point_id: str,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    await TransitPointService(client).delete(point_id)
    logger.info("transit_point_deleted id=%s", point_id)
    return envelope(
        request,
        {"id": point_id, "deleted": True},
        [success_notice("Transit Point Deleted", "The transit point has been deleted successfully.")],
    )
