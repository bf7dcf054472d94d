"""Transit point CRUD against /transit-points."""

from __future__ import annotations

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import CreateTransitPoint, TransitPoint, UpdateTransitPoint
from services.dashboard.client.pagination import PageRequest, PageResponse, build_query_params


class TransitPointService:
    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def get_page(self, page: PageRequest) -> PageResponse[TransitPoint]:
        data = await self._client.get("/transit-points", params=build_query_params(page))
        return PageResponse[TransitPoint].model_validate(data)

    async def get_by_id(self, point_id: str) -> TransitPoint:
        return TransitPoint.model_validate(await self._client.get(f"/transit-points/{point_id}"))

    async def create(self, point: CreateTransitPoint) -> TransitPoint:
        data = await self._client.post("/transit-points", point.model_dump(mode="json"))
        return TransitPoint.model_validate(data)

    async def update(self, point_id: str, point: UpdateTransitPoint) -> TransitPoint:
        data = await self._client.put(
            f"/transit-points/{point_id}",
            point.model_dump(mode="json", exclude_none=True),
        )
        return TransitPoint.model_validate(data)

    async def delete(self, point_id: str) -> None:
        await self._client.delete(f"/transit-points/{point_id}")
