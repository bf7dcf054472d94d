"""Trip detail (fare class per date range) CRUD nested under /trips/{id}/details."""

from __future__ import annotations

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import CreateTripDetail, TripDetail, UpdateTripDetail
from services.dashboard.client.pagination import PageRequest, PageResponse, build_query_params


class TripDetailService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def get_page_by_trip_id(self, trip_id: str, page: PageRequest) -> PageResponse[TripDetail]:
        data = await self._client.get(f"/trips/{trip_id}/details", params=build_query_params(page))
        return PageResponse[TripDetail].model_validate(data)

    async def get_by_id(self, trip_id: str, detail_id: str) -> TripDetail:
        return TripDetail.model_validate(await self._client.get(f"/trips/{trip_id}/details/{detail_id}"))

    async def create(self, trip_id: str, detail: CreateTripDetail) -> TripDetail:
        data = await self._client.post(f"/trips/{trip_id}/details", detail.model_dump(mode="json"))
        return TripDetail.model_validate(data)

    async def update(self, trip_id: str, detail_id: str, detail: UpdateTripDetail) -> TripDetail:
        data = await self._client.put(
            f"/trips/{trip_id}/details/{detail_id}",
            detail.model_dump(mode="json", exclude_none=True),
        )
        return TripDetail.model_validate(data)

    async def delete(self, trip_id: str, detail_id: str) -> None:
        await self._client.delete(f"/trips/{trip_id}/details/{detail_id}")
