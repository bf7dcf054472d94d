"""Trip CRUD against /trips."""

from __future__ import annotations

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import CreateTrip, Trip, UpdateTrip
from services.dashboard.client.pagination import PageRequest, PageResponse, build_query_params


class TripService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def get_page(self, page: PageRequest) -> PageResponse[Trip]:
        data = await self._client.get("/trips", params=build_query_params(page))
        return PageResponse[Trip].model_validate(data)

    async def get_by_id(self, trip_id: str) -> Trip:
        return Trip.model_validate(await self._client.get(f"/trips/{trip_id}"))

    async def create(self, trip: CreateTrip) -> Trip:
        data = await self._client.post("/trips", trip.model_dump(mode="json"))
        return Trip.model_validate(data)

    async def update(self, trip_id: str, trip: UpdateTrip) -> Trip:
        data = await self._client.put(f"/trips/{trip_id}", trip.model_dump(mode="json", exclude_none=True))
        return Trip.model_validate(data)

    async def delete(self, trip_id: str) -> None:
        await self._client.delete(f"/trips/{trip_id}")
