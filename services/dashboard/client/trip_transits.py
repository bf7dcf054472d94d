"""
Trip transit endpoints -- the persistence side of the transit sequencer.

  GET    /trips/{tripId}/transits
  GET    /trips/{tripId}/available-transit-points
  POST   /trips/{tripId}/transits
  PUT    /trips/{tripId}/transits/{id}
  DELETE /trips/{tripId}/transits/{id}
  PUT    /trips/{tripId}/transits/reorder

The two GETs are answered either with a bare JSON list or with a page
envelope depending on backend version; both shapes are accepted.
"""

from __future__ import annotations

from typing import Any, Optional

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import (
    CreateTripTransit,
    ReorderTripTransits,
    TransitPoint,
    TripTransit,
    UpdateTripTransit,
)
from services.dashboard.client.pagination import PageRequest, PageResponse, build_query_params
from services.dashboard.errors import BackendError


def _items(data: Any) -> list[Any]:
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    raise BackendError("Unexpected transit list payload from the booking service.")


class TripTransitService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def list_by_trip_id(self, trip_id: str) -> list[TripTransit]:
        """Full sequence for a trip, sorted by transitOrder."""
        data = await self._client.get(f"/trips/{trip_id}/transits")
        transits = [TripTransit.model_validate(item) for item in _items(data)]
        return sorted(transits, key=lambda t: t.transitOrder)

    async def get_available_transit_points(
        self,
        trip_id: str,
        page: Optional[PageRequest] = None,
    ) -> PageResponse[TransitPoint]:
        params = build_query_params(page) if page is not None else None
        data = await self._client.get(f"/trips/{trip_id}/available-transit-points", params=params)
        if isinstance(data, list):
            points = [TransitPoint.model_validate(item) for item in data]
            return PageResponse[TransitPoint](
                items=points,
                totalItems=len(points),
                totalPages=1 if points else 0,
                currentPage=0,
            )
        return PageResponse[TransitPoint].model_validate(data)

    async def create(self, trip_id: str, transit: CreateTripTransit) -> TripTransit:
        data = await self._client.post(f"/trips/{trip_id}/transits", transit.model_dump(mode="json"))
        return TripTransit.model_validate(data)

    async def update(self, trip_id: str, transit_id: str, transit: UpdateTripTransit) -> Optional[TripTransit]:
        data = await self._client.put(
            f"/trips/{trip_id}/transits/{transit_id}",
            transit.model_dump(mode="json", exclude_none=True),
        )
        return TripTransit.model_validate(data) if data else None

    async def delete(self, trip_id: str, transit_id: str) -> None:
        await self._client.delete(f"/trips/{trip_id}/transits/{transit_id}")

    async def reorder(self, trip_id: str, payload: ReorderTripTransits) -> None:
        await self._client.put(f"/trips/{trip_id}/transits/reorder", payload.model_dump(mode="json"))
