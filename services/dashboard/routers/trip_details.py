"""Trip details screen (fare / seat class per date range), nested under a trip."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import CreateTripDetail, UpdateTripDetail
from services.dashboard.client.pagination import PageRequest
from services.dashboard.client.trip_details import TripDetailService
from services.dashboard.errors import ValidationFailed
from services.dashboard.notices import success_notice
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import get_backend, page_request

router = APIRouter(prefix="/trips/{trip_id}/details", tags=["trip-details"])


def _check_dates(from_date: str | None, to_date: str | None) -> None:
    # ISO dates compare correctly as strings.
    if from_date and to_date and from_date > to_date:
        raise ValidationFailed("The start date must not be after the end date.")


@router.get("")
async def list_trip_details(
    trip_id: str,
    request: Request,
    page: PageRequest = Depends(page_request),
    client: BackendClient = Depends(get_backend),
):
    result = await TripDetailService(client).get_page_by_trip_id(trip_id, page)
    return envelope(request, result.model_dump(mode="json"))


@router.get("/{detail_id}")
async def get_trip_detail(
    trip_id: str,
    detail_id: str,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    detail = await TripDetailService(client).get_by_id(trip_id, detail_id)
    return envelope(request, detail.model_dump(mode="json"))


@router.post("", status_code=201)
async def create_trip_detail(
    trip_id: str,
    body: CreateTripDetail,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    if body.tripId != trip_id:
        raise ValidationFailed("tripId in the body does not match the trip in the path.")
    _check_dates(body.fromDate, body.toDate)
    detail = await TripDetailService(client).create(trip_id, body)
    return envelope(
        request,
        detail.model_dump(mode="json"),
        [success_notice("Trip Detail Added", "The trip detail has been added successfully.")],
    )


@router.put("/{detail_id}")
async def update_trip_detail(
    trip_id: str,
    detail_id: str,
    body: UpdateTripDetail,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    _check_dates(body.fromDate, body.toDate)
    detail = await TripDetailService(client).update(trip_id, detail_id, body)
    return envelope(
        request,
        detail.model_dump(mode="json"),
        [success_notice("Trip Detail Updated", "The trip detail has been updated successfully.")],
    )


@router.delete("/{detail_id}")
async def delete_trip_detail(
    trip_id: str,
    detail_id: str,
    request: Request,
    client: BackendClient = Depends(get_backend),
):
    await TripDetailService(client).delete(trip_id, detail_id)
    return envelope(
        request,
        {"id": detail_id, "deleted": True},
        [success_notice("Trip Detail Deleted", "The trip detail has been deleted successfully.")],
    )
