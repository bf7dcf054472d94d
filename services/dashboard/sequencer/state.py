"""
Per-trip sequence state machine.

    UNLOADED --load--> RESYNCING --ok--> SYNCED
    SYNCED --begin_mutation(snapshot)--> PENDING_MUTATION
    PENDING_MUTATION --commit--> SYNCED
    PENDING_MUTATION --rollback--> RESYNCING
    RESYNCING --ok--> SYNCED
    RESYNCING --fetch failed--> STALE
    STALE --load--> RESYNCING

Rollback is one transition whatever operation failed: the optimistic copy is
dropped and the sequence is refetched. While RESYNCING the local copy is the
pre-mutation snapshot; if the refetch fails the sequence stays on that
snapshot and is marked STALE, which forces a fresh load before the next
mutation is accepted.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from services.dashboard.client.models import TripTransit


class SequenceState(str, Enum):
    UNLOADED = "unloaded"
    SYNCED = "synced"
    PENDING_MUTATION = "pending_mutation"
    RESYNCING = "resyncing"
    STALE = "stale"


_ALLOWED: dict[SequenceState, set[SequenceState]] = {
    SequenceState.UNLOADED: {SequenceState.RESYNCING},
    SequenceState.SYNCED: {SequenceState.PENDING_MUTATION, SequenceState.RESYNCING},
    SequenceState.PENDING_MUTATION: {SequenceState.SYNCED, SequenceState.RESYNCING, SequenceState.STALE},
    SequenceState.RESYNCING: {SequenceState.SYNCED, SequenceState.STALE},
    SequenceState.STALE: {SequenceState.RESYNCING},
}


class IllegalTransition(RuntimeError):
    pass


def rerank(items: list[TripTransit]) -> list[TripTransit]:
    """Copy items with transitOrder set to their position (dense 0..n-1)."""
    return [
        item if item.transitOrder == index else item.model_copy(update={"transitOrder": index})
        for index, item in enumerate(items)
    ]


def is_dense(items: list[TripTransit]) -> bool:
    return sorted(item.transitOrder for item in items) == list(range(len(items)))


@dataclass
class TransitSequence:
    """Locally held copy of one trip's stops plus its sync state. Guarded by `lock`."""

    trip_id: str
    items: list[TripTransit] = field(default_factory=list)
    state: SequenceState = SequenceState.UNLOADED
    snapshot: Optional[list[TripTransit]] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_synced_at: Optional[datetime] = None

    def _move(self, target: SequenceState) -> None:
        if target not in _ALLOWED[self.state]:
            raise IllegalTransition(
                f"trip {self.trip_id}: {self.state.value} -> {target.value} is not allowed"
            )
        self.state = target

    @property
    def needs_load(self) -> bool:
        return self.state in (SequenceState.UNLOADED, SequenceState.STALE)

    def begin_mutation(self, optimistic: list[TripTransit]) -> None:
        self._move(SequenceState.PENDING_MUTATION)
        self.snapshot = list(self.items)
        self.items = list(optimistic)

    def commit(self, confirmed: Optional[list[TripTransit]] = None) -> None:
        self._move(SequenceState.SYNCED)
        if confirmed is not None:
            self.items = list(confirmed)
        self.snapshot = None
        self.last_synced_at = datetime.now(timezone.utc)

    def begin_resync(self) -> None:
        self._move(SequenceState.RESYNCING)
        if self.snapshot is not None:
            # Optimistic copy is never kept past a failure.
            self.items = self.snapshot
            self.snapshot = None

    def finish_resync(self, server_items: list[TripTransit]) -> None:
        self._move(SequenceState.SYNCED)
        self.items = sorted(server_items, key=lambda t: t.transitOrder)
        self.last_synced_at = datetime.now(timezone.utc)

    def mark_stale(self) -> None:
        if self.snapshot is not None:
            self.items = self.snapshot
            self.snapshot = None
        self._move(SequenceState.STALE)
