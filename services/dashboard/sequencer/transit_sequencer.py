"""
TransitSequencer -- ordered stops of one trip, optimistic updates with resync.

Every mutation:
  1. validates locally (duplicate point, missing field, bad index) -- no call
  2. applies to the local copy (PENDING_MUTATION, snapshot kept)
  3. persists through TripTransitService
  4. success -> SYNCED; failure -> full refetch (RESYNCING -> SYNCED | STALE)

Mutations on one trip are serialised by the sequence lock, so the refetch after
a failure completes before the next mutation starts. Reads never take the lock
and therefore see the optimistic copy while a call is in flight.

Concurrent edits by other dashboard instances are not reconciled: last writer
wins on the backend.
"""

from __future__ import annotations

import asyncio
import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from services.dashboard.client.models import (
    CreateTripTransit,
    ReorderTripTransits,
    TransitOrderEntry,
    TransitPoint,
    TransitStopType,
    TripTransit,
    UpdateTripTransit,
)
from services.dashboard.client.trip_transits import TripTransitService
from services.dashboard.errors import AuthenticationExpired, BackendError, DashboardError, NotFound, ValidationFailed
from services.dashboard.notices import Notice, error_notice, success_notice
from services.dashboard.sequencer.state import SequenceState, TransitSequence, rerank

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")

PENDING_ID_PREFIX = "pending-"


@dataclass
class SequenceResult:
    items: list[TripTransit]
    state: SequenceState
    changed: bool = True
    notices: list[Notice] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "items": [item.model_dump(mode="json") for item in self.items],
            "state": self.state.value,
            "changed": self.changed,
        }


def reorder_payload(items: list[TripTransit]) -> ReorderTripTransits:
    return ReorderTripTransits(
        transitOrders=[TransitOrderEntry(id=item.id, order=item.transitOrder) for item in items]
    )


def _validate_time(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailed("Arrival time is required.")
    if not _TIME_RE.match(value):
        raise ValidationFailed(f"Arrival time must be HH:MM, got {value!r}.")
    return value


def _parse_stop_type(value) -> TransitStopType:
    try:
        return TransitStopType(value)
    except ValueError:
        raise ValidationFailed(f"Unknown stop type {value!r}.")


class TransitSequencer:
    """
    Usage:
        sequencer = registry.sequencer(trip_id, TripTransitService(client))
        result = await sequencer.move(source_index=2, destination_index=0)
    """

    def __init__(
        self,
        sequence: TransitSequence,
        service: TripTransitService,
        on_missing: Optional[Callable[[], None]] = None,
    ) -> None:
        self._seq = sequence
        self._service = service
        # Called when the backend says the trip does not exist
        self._on_missing = on_missing

    @property
    def trip_id(self) -> str:
        return self._seq.trip_id

    @property
    def state(self) -> SequenceState:
        return self._seq.state

    @property
    def items(self) -> list[TripTransit]:
        return list(self._seq.items)

    def _result(self, changed: bool = True, notices: Optional[list[Notice]] = None) -> SequenceResult:
        return SequenceResult(
            items=list(self._seq.items),
            state=self._seq.state,
            changed=changed,
            notices=notices or [],
        )

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._seq.items):
            if item.id == item_id:
                return index
        raise NotFound(f"Stop {item_id} is not part of trip {self.trip_id}.")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def _fetch_into_sequence(self) -> None:
        """RESYNCING -> SYNCED, or STALE (and re-raise) when the fetch fails."""
        self._seq.begin_resync()
        try:
            server_items = await self._service.list_by_trip_id(self.trip_id)
        except BaseException as exc:
            self._seq.mark_stale()
            missing = isinstance(exc, BackendError) and exc.backend_status == 404
            if missing and self._on_missing is not None:
                self._on_missing()
            raise
        self._seq.finish_resync(server_items)

    async def load(self, force: bool = False) -> SequenceResult:
        """Fetch the sequence if it was never loaded (or always, with force)."""
        async with self._seq.lock:
            if force or self._seq.needs_load:
                await self._fetch_into_sequence()
            return self._result(changed=False)

    async def resync(self) -> SequenceResult:
        return await self.load(force=True)

    async def snapshot(self) -> SequenceResult:
        """Current local copy; loads first if nothing usable is held."""
        if self._seq.needs_load:
            return await self.load()
        return self._result(changed=False)

    async def available_points(self, page=None):
        return await self._service.get_available_transit_points(self.trip_id, page)

    # ------------------------------------------------------------------
    # Mutation core
    # ------------------------------------------------------------------

    async def _mutate(
        self,
        action: str,
        optimistic: list[TripTransit],
        persist: Callable[[list[TripTransit]], Awaitable[Optional[list[TripTransit]]]],
        notice: Optional[Notice],
        failure_text: str,
    ) -> SequenceResult:
        """Apply optimistically, persist, and on any failure roll back by refetching.

        Caller holds the lock and has already validated.
        """
        self._seq.begin_mutation(optimistic)
        try:
            confirmed = await persist(list(optimistic))
        except asyncio.CancelledError:
            self._seq.mark_stale()
            raise
        except Exception as exc:
            if not isinstance(exc, DashboardError):
                logger.exception("transit_%s_crashed trip=%s", action, self.trip_id)
            else:
                logger.warning(
                    "transit_%s_failed trip=%s code=%s: %s",
                    action,
                    self.trip_id,
                    exc.code,
                    exc.message,
                )
            if isinstance(exc, AuthenticationExpired):
                # Session is gone; a refetch would 401 too.
                self._seq.mark_stale()
                raise
            await self._rollback(action)
            failure = exc if isinstance(exc, DashboardError) else DashboardError(failure_text)
            failure.notices = [error_notice("Error", failure_text)]
            if failure is exc:
                raise
            raise failure from exc

        self._seq.commit(confirmed)
        logger.info(
            "transit_%s trip=%s count=%d",
            action,
            self.trip_id,
            len(self._seq.items),
        )
        return self._result(notices=[notice] if notice else [])

    async def _rollback(self, action: str) -> None:
        self._seq.begin_resync()
        try:
            server_items = await self._service.list_by_trip_id(self.trip_id)
        except asyncio.CancelledError:
            self._seq.mark_stale()
            raise
        except Exception:
            logger.warning("transit_resync_failed trip=%s after=%s", self.trip_id, action)
            self._seq.mark_stale()
            return
        self._seq.finish_resync(server_items)

    async def _ensure_loaded(self) -> None:
        if self._seq.needs_load:
            await self._fetch_into_sequence()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def append(
        self,
        transit_point_id: str,
        arrival_time: str,
        stop_type: TransitStopType | str = TransitStopType.PICKUP,
        point: Optional[TransitPoint] = None,
    ) -> SequenceResult:
        """Add a stop at the end (transitOrder = current length)."""
        if not transit_point_id:
            raise ValidationFailed("A transit point must be selected.")
        arrival_time = _validate_time(arrival_time)
        stop_type = _parse_stop_type(stop_type)

        async with self._seq.lock:
            await self._ensure_loaded()
            if any(item.transitPointId == transit_point_id for item in self._seq.items):
                raise ValidationFailed("This transit point is already part of the trip.")

            order = len(self._seq.items)
            placeholder = TripTransit(
                id=f"{PENDING_ID_PREFIX}{uuid.uuid4().hex[:12]}",
                tripId=self.trip_id,
                transitPointId=transit_point_id,
                transitPoint=point,
                arrivalTime=arrival_time,
                transitOrder=order,
                type=stop_type,
            )

            async def persist(items: list[TripTransit]) -> list[TripTransit]:
                created = await self._service.create(
                    self.trip_id,
                    CreateTripTransit(
                        transitPointId=transit_point_id,
                        arrivalTime=arrival_time,
                        type=stop_type,
                        transitOrder=order,
                    ),
                )
                if created.transitOrder != order:
                    logger.warning(
                        "transit_append_order_mismatch trip=%s expected=%d got=%d",
                        self.trip_id,
                        order,
                        created.transitOrder,
                    )
                    return await self._service.list_by_trip_id(self.trip_id)
                if created.transitPoint is None and point is not None:
                    created = created.model_copy(update={"transitPoint": point})
                return items[:-1] + [created]

            return await self._mutate(
                "append",
                self._seq.items + [placeholder],
                persist,
                success_notice("Success", "Transit point added to the trip."),
                "Could not add the transit point. Please try again later.",
            )

    async def remove(self, item_id: str) -> SequenceResult:
        """Delete a stop and close the gap in transitOrder."""
        async with self._seq.lock:
            await self._ensure_loaded()
            index = self._index_of(item_id)
            survivors = self._seq.items[:index] + self._seq.items[index + 1:]
            optimistic = rerank(survivors)
            shifted = any(a.transitOrder != b.transitOrder for a, b in zip(survivors, optimistic))

            async def persist(items: list[TripTransit]) -> None:
                await self._service.delete(self.trip_id, item_id)
                if shifted:
                    await self._service.reorder(self.trip_id, reorder_payload(items))

            return await self._mutate(
                "remove",
                optimistic,
                persist,
                success_notice("Success", "Transit point removed from the trip."),
                "Could not remove the transit point. Please try again later.",
            )

    async def reorder(self, item_id: str, new_index: int) -> SequenceResult:
        """Move one stop to new_index and renumber the whole sequence."""
        async with self._seq.lock:
            await self._ensure_loaded()
            current = self._index_of(item_id)
            return await self._reorder_locked(current, new_index)

    async def move(self, source_index: int, destination_index: Optional[int]) -> SequenceResult:
        """Drag gesture entry point. A drop outside the list (no destination) is a no-op."""
        async with self._seq.lock:
            await self._ensure_loaded()
            if destination_index is None:
                return self._result(changed=False)
            if not 0 <= source_index < len(self._seq.items):
                raise ValidationFailed(f"Source index {source_index} is out of range.")
            return await self._reorder_locked(source_index, destination_index)

    async def _reorder_locked(self, current: int, new_index: int) -> SequenceResult:
        count = len(self._seq.items)
        if not 0 <= new_index < count:
            raise ValidationFailed(f"Position {new_index} is out of range (0..{count - 1}).")
        if new_index == current:
            return self._result(changed=False)

        items = list(self._seq.items)
        moved = items.pop(current)
        items.insert(new_index, moved)
        optimistic = rerank(items)

        async def persist(items: list[TripTransit]) -> None:
            await self._service.reorder(self.trip_id, reorder_payload(items))

        return await self._mutate(
            "reorder",
            optimistic,
            persist,
            success_notice("Success", "Transit point order updated."),
            "Could not update the transit point order. Please try again later.",
        )

    async def set_arrival_time(self, item_id: str, arrival_time: str) -> SequenceResult:
        """Change one stop's arrival time; order is untouched."""
        return await self.update(item_id, arrival_time=arrival_time)

    async def set_type(self, item_id: str, stop_type: TransitStopType | str) -> SequenceResult:
        """Change one stop's type (pickup / dropoff / stop); order is untouched."""
        return await self.update(item_id, stop_type=stop_type)

    async def update(
        self,
        item_id: str,
        arrival_time: Optional[str] = None,
        stop_type: Optional[TransitStopType | str] = None,
    ) -> SequenceResult:
        """Change arrival time and/or type of one stop with a single backend update."""
        if arrival_time is None and stop_type is None:
            raise ValidationFailed("Nothing to update: send arrivalTime and/or type.")
        requested: dict[str, str] = {}
        if arrival_time is not None:
            requested["arrivalTime"] = _validate_time(arrival_time)
        if stop_type is not None:
            requested["type"] = _parse_stop_type(stop_type).value

        async with self._seq.lock:
            await self._ensure_loaded()
            index = self._index_of(item_id)
            current = self._seq.items[index]
            changes = {name: value for name, value in requested.items() if getattr(current, name) != value}
            if not changes:
                return self._result(changed=False)

            optimistic = list(self._seq.items)
            optimistic[index] = current.model_copy(update=changes)
            patch = UpdateTripTransit(**changes)

            async def persist(items: list[TripTransit]) -> None:
                await self._service.update(self.trip_id, item_id, patch)

            if "type" in changes:
                notice = success_notice("Success", "Stop type updated.")
            else:
                notice = None
            if list(changes) == ["arrivalTime"]:
                failure_text = "Could not update the arrival time. Please try again later."
            elif list(changes) == ["type"]:
                failure_text = "Could not update the stop type. Please try again later."
            else:
                failure_text = "Could not update the stop. Please try again later."
            return await self._mutate("update", optimistic, persist, notice, failure_text)
