"""
One TransitSequence per trip, created lazily, shared by every request for that trip.

The registry is bounded: sequences idle longer than `idle_ttl_s` are dropped,
and past `max_entries` the least recently used ones go first. A sequence
whose lock is held (mutation or load in flight) is never dropped.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable

from services.dashboard.client.trip_transits import TripTransitService
from services.dashboard.config import settings
from services.dashboard.sequencer.state import TransitSequence
from services.dashboard.sequencer.transit_sequencer import TransitSequencer

logger = logging.getLogger(__name__)


class SequencerRegistry:
    def __init__(
        self,
        max_entries: int = settings.sequencer_max_trips,
        idle_ttl_s: float = settings.sequencer_idle_ttl_s,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_entries = max_entries
        self._idle_ttl_s = idle_ttl_s
        self._clock = clock
        # trip_id -> (sequence, last access); oldest access first
        self._sequences: OrderedDict[str, tuple[TransitSequence, float]] = OrderedDict()

    def __contains__(self, trip_id: str) -> bool:
        return trip_id in self._sequences

    def __len__(self) -> int:
        return len(self._sequences)

    def sequence(self, trip_id: str) -> TransitSequence:
        now = self._clock()
        entry = self._sequences.pop(trip_id, None)
        seq = entry[0] if entry else TransitSequence(trip_id=trip_id)
        self._sequences[trip_id] = (seq, now)
        self._evict(now, keep=trip_id)
        return seq

    def sequencer(self, trip_id: str, service: TripTransitService) -> TransitSequencer:
        """Bind the trip's shared sequence to the caller's (token-bound) service."""
        return TransitSequencer(
            self.sequence(trip_id),
            service,
            on_missing=lambda: self.discard(trip_id),
        )

    def discard(self, trip_id: str) -> None:
        """Forget a trip's local copy (trip deleted, or transit points changed elsewhere)."""
        self._sequences.pop(trip_id, None)

    def clear(self) -> None:
        self._sequences.clear()

    def _evict(self, now: float, keep: str) -> None:
        overflow = len(self._sequences) - self._max_entries
        for trip_id, (seq, touched) in list(self._sequences.items()):
            if trip_id == keep or seq.lock.locked():
                continue
            if now - touched > self._idle_ttl_s:
                reason = "idle"
            elif overflow > 0:
                reason = "capacity"
            else:
                continue
            del self._sequences[trip_id]
            overflow -= 1
            logger.info("sequence_evicted trip=%s reason=%s", trip_id, reason)
