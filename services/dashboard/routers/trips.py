"""
Trips screen: paginated search, status filter, create / edit / delete.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import CreateTrip, RecordStatus, UpdateTrip
from services.dashboard.client.pagination import PageRequest
from services.dashboard.client.trips import TripService
from services.dashboard.notices import success_notice
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import get_backend, get_registry, page_request
from services.dashboard.sequencer.registry import SequencerRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


@router.get("")
async def list_trips(
    request: Request,
    page: PageRequest = Depends(page_request),
    status: Optional[RecordStatus] = Query(None, description="ACTIVE | INACTIVE; omit for all"),
    client: BackendClient = Depends(get_backend),
):
    result = await TripService(client).get_page(page)
    if status is not None:
        # Status narrows the current page only; the backend has no status filter.
        result.items = [t for t in result.items if t.status == status.value]
    return envelope(request, result.model_dump(mode="json"))


@router.get("/{trip_id}")
async def get_trip(
    trip_id: str,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    trip = await TripService(client).get_by_id(trip_id)
    return envelope(request, trip.model_dump(mode="json"))


@router.post("", status_code=201)
async def create_trip(
    body: CreateTrip,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    trip = await TripService(client).create(body)
    logger.info("trip_created id=%s code=%s", trip.id, trip.code)
    return envelope(
        request,
        trip.model_dump(mode="json"),
        [success_notice("Trip Added", f"{trip.name} has been added successfully.")],
    )


@router.put("/{trip_id}")
async def update_trip(
    trip_id: str,
    body: UpdateTrip,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    trip = await TripService(client).update(trip_id, body)
    return envelope(
        request,
        trip.model_dump(mode="json"),
        [success_notice("Trip Updated", f"{trip.name} has been updated successfully.")],
    )


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: str,
    request: Request,
    client: BackendClient = Depends(get_backend),
    registry: SequencerRegistry = Depends(get_registry),
):
    await TripService(client).delete(trip_id)
    registry.discard(trip_id)
    logger.info("trip_deleted id=%s", trip_id)
    return envelope(
        request,
        {"id": trip_id, "deleted": True},
        [success_notice("Trip Deleted", "The trip has been deleted successfully.")],
    )
