"""Value types shared by the autocomplete engine and its renderers."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Candidate:
    """One selectable result returned by the lookup service.

    Two candidates are equal when they share ``code`` and ``system``;
    ``display`` is presentation only.
    """

    code: str
    display: str = field(default="", compare=False)
    system: str = ""

    @property
    def label(self) -> str:
        """Text shown for this candidate (display, or the bare code)."""
        return self.display or self.code


# The engine proposes either a confirmed Candidate or raw text to the host.
CommittedValue = Union[Candidate, str]


@dataclass(frozen=True)
class Query:
    """A dispatched lookup, identified by its sequence number."""

    text: str
    sequence_number: int
    issued_at: float = field(default_factory=time.monotonic)


class InputState(Enum):
    """States of the selection state machine."""

    IDLE = "idle"
    TYPING = "typing"
    SEARCHING = "searching"
    SHOWING_RESULTS = "showing_results"
    NO_RESULTS = "no_results"
    COMMITTED = "committed"

    @property
    def shows_results(self) -> bool:
        """NO_RESULTS is the empty-list flavour of SHOWING_RESULTS."""
        return self in (InputState.SHOWING_RESULTS, InputState.NO_RESULTS)


class Key(Enum):
    """Keyboard events understood by the engine."""

    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ENTER = "enter"
    ESCAPE = "escape"


@dataclass(frozen=True)
class CandidateView:
    """The candidate list and its cursor, always replaced together."""

    candidates: tuple[Candidate, ...] = ()
    cursor: Optional[int] = None

    def __post_init__(self) -> None:
        if self.cursor is not None and not 0 <= self.cursor < len(self.candidates):
            raise ValueError(f"cursor {self.cursor} outside [0, {len(self.candidates)})")

    @property
    def highlighted(self) -> Optional[Candidate]:
        if self.cursor is None:
            return None
        return self.candidates[self.cursor]


@dataclass(frozen=True)
class InputSnapshot:
    """Declarative state consumed by any rendering layer.

    Attributes:
        state: Current state machine state
        text: Text currently shown in the input
        candidates: Active candidate list
        cursor: Highlighted index, or None
        dropdown_open: Whether the dropdown should be visible
        search_failed: Whether the last lookup failed (subtle indicator only)
        committed: Value currently bound to the input, if any
    """

    state: InputState
    text: str = ""
    candidates: tuple[Candidate, ...] = ()
    cursor: Optional[int] = None
    dropdown_open: bool = False
    search_failed: bool = False
    committed: Optional[CommittedValue] = None

    @property
    def highlighted(self) -> Optional[Candidate]:
        """Candidate under the cursor, if any."""
        if self.cursor is None:
            return None
        return self.candidates[self.cursor]
