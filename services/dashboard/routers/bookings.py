"""
Bookings screen (seeded data, read only).

  GET /bookings             -- paginated search, optional status filter
  GET /bookings/{booking_id}
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from services.dashboard.client.pagination import PageRequest
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import DashboardSession, get_sample_data, page_request, require_session
from services.dashboard.sample_data import BookingStatus, SampleDataStore

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("")
async def list_bookings(
    request: Request,
    page: PageRequest = Depends(page_request),
    status: Optional[BookingStatus] = Query(None),
    _session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    result = store.search_bookings(page, status.value if status else None)
    return envelope(request, result.model_dump(mode="json"))


@router.get("/{booking_id}")
async def get_booking(
    booking_id: str,
    request: Request,
    _session: DashboardSession = Depends(require_session),
    store: SampleDataStore = Depends(get_sample_data),
):
    return envelope(request, store.get_booking(booking_id).model_dump())
