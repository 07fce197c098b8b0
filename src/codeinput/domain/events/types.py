"""Event types published by the autocomplete controller.

Host forms and renderers subscribe to these instead of reaching into the
engine's components.
"""

import time
from dataclasses import dataclass, field

from codeinput.domain.errors import TransientSearchFailure
from codeinput.domain.types import CommittedValue, InputSnapshot


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class InputChanged(Event):
    """Published on every keystroke, for controlled-input hosts."""

    text: str
    """Raw text now in the input."""


@dataclass
class ValueCommitted(Event):
    """Published when the user confirms a value.

    Attributes:
        value: The confirmed Candidate, or raw text
    """

    value: CommittedValue
    """Value proposed to the host form."""


@dataclass
class SearchFailed(Event):
    """Published when the current lookup fails.

    Stale failures (for superseded queries) are never published.
    """

    failure: TransientSearchFailure
    """The converted lookup failure."""


@dataclass
class DefaultValueResolved(Event):
    """Published once a stored default value has been hydrated.

    Attributes:
        value: The initial committed value
        fallback: True when resolution failed and the raw code is shown
    """

    value: CommittedValue
    """Initial committed value."""
    fallback: bool = False
    """Whether the raw code is shown because resolution failed."""


@dataclass
class SnapshotChanged(Event):
    """Published after every state change with the new snapshot."""

    snapshot: InputSnapshot
    """Declarative state for renderers."""
