"""Ordered transit-point sequencer: optimistic reorder / append / remove with resync."""

from services.dashboard.sequencer.registry import SequencerRegistry
from services.dashboard.sequencer.state import SequenceState, TransitSequence, is_dense, rerank
from services.dashboard.sequencer.transit_sequencer import SequenceResult, TransitSequencer, reorder_payload

__all__ = [
    "SequencerRegistry",
    "SequenceResult",
    "SequenceState",
    "TransitSequence",
    "TransitSequencer",
    "is_dense",
    "reorder_payload",
    "rerank",
]
