"""Event bus and event types."""

from .bus import EventBus
from .types import (
    DefaultValueResolved,
    Event,
    InputChanged,
    SearchFailed,
    SnapshotChanged,
    ValueCommitted,
)

__all__ = [
    "DefaultValueResolved",
    "Event",
    "EventBus",
    "InputChanged",
    "SearchFailed",
    "SnapshotChanged",
    "ValueCommitted",
]
