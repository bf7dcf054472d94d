"""
Trip schedule screen: ordered transit points of one trip.

  GET    /trips/{trip_id}/transits                    -- local copy (loads on first use)
  GET    /trips/{trip_id}/transits/available          -- points not yet on the trip
  POST   /trips/{trip_id}/transits                    -- append a stop
  POST   /trips/{trip_id}/transits/move               -- drag gesture (source -> destination index)
  POST   /trips/{trip_id}/transits/resync             -- drop the local copy, refetch
  PUT    /trips/{trip_id}/transits/{item_id}/position -- move one stop to an index
  PATCH  /trips/{trip_id}/transits/{item_id}          -- arrival time and/or type
  DELETE /trips/{trip_id}/transits/{item_id}          -- remove a stop

All mutations go through the trip's TransitSequencer, which serialises them and
resynchronises with the backend after any failure.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from services.dashboard.client.http import BackendClient
from services.dashboard.client.models import TransitPoint, TransitStopType
from services.dashboard.client.pagination import PageRequest
from services.dashboard.client.trip_transits import TripTransitService
from services.dashboard.responses import envelope
from services.dashboard.routers._deps import get_backend, get_registry, page_request
from services.dashboard.sequencer.registry import SequencerRegistry
from services.dashboard.sequencer.transit_sequencer import SequenceResult, TransitSequencer

router = APIRouter(prefix="/trips/{trip_id}/transits", tags=["trip-transits"])


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class AppendStop(BaseModel):
    transitPointId: str = ""
    arrivalTime: str = ""
    type: TransitStopType = TransitStopType.PICKUP
    # Denormalised point, when the UI already has it from the available list.
    transitPoint: Optional[TransitPoint] = None


class MoveStop(BaseModel):
    sourceIndex: int = Field(..., ge=0)
    destinationIndex: Optional[int] = None


class SetPosition(BaseModel):
    index: int


class PatchStop(BaseModel):
    arrivalTime: Optional[str] = None
    type: Optional[TransitStopType] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _sequencer(
    trip_id: str,
    client: BackendClient = Depends(get_backend),
    registry: SequencerRegistry = Depends(get_registry),
) -> TransitSequencer:
    return registry.sequencer(trip_id, TripTransitService(client))


def _respond(request: Request, result: SequenceResult) -> dict:
    return envelope(request, result.to_dict(), result.notices)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("")
async def get_sequence(request: Request, sequencer: TransitSequencer = Depends(_sequencer)):
    return _respond(request, await sequencer.snapshot())


@router.get("/available")
async def available_transit_points(
    request: Request,
    page: PageRequest = Depends(page_request),
    sequencer: TransitSequencer = Depends(_sequencer),
):
    result = await sequencer.available_points(page)
    return envelope(request, result.model_dump(mode="json"))


@router.post("", status_code=201)
async def append_stop(
    body: AppendStop,
    request: Request,
    sequencer: TransitSequencer = Depends(_sequencer),
):
    result = await sequencer.append(
        body.transitPointId,
        body.arrivalTime,
        body.type,
        point=body.transitPoint,
    )
    return _respond(request, result)


@router.post("/move")
async def move_stop(
    body: MoveStop,
    request: Request,
    sequencer: TransitSequencer = Depends(_sequencer),
):
    return _respond(request, await sequencer.move(body.sourceIndex, body.destinationIndex))


@router.post("/resync")
async def resync_sequence(request: Request, sequencer: TransitSequencer = Depends(_sequencer)):
    return _respond(request, await sequencer.resync())


@router.put("/{item_id}/position")
async def set_position(
    item_id: str,
    body: SetPosition,
    request: Request,
    sequencer: TransitSequencer = Depends(_sequencer),
):
    return _respond(request, await sequencer.reorder(item_id, body.index))


@router.patch("/{item_id}")
async def patch_stop(
    item_id: str,
    body: PatchStop,
    request: Request,
    sequencer: TransitSequencer = Depends(_sequencer),
):
    result = await sequencer.update(item_id, arrival_time=body.arrivalTime, stop_type=body.type)
    return _respond(request, result)


@router.delete("/{item_id}")
async def remove_stop(
    item_id: str,
    request: Request,
    sequencer: TransitSequencer = Depends(_sequencer),
):
    return _respond(request, await sequencer.remove(item_id))
