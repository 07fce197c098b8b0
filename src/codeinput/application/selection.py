"""
SelectionStateMachine - governs idle/typing/searching/results/committed.

The machine is pure: it performs no I/O and schedules nothing. The
controller feeds it events and publishes the snapshots it produces.
"""

from typing import Optional

from codeinput.domain.errors import InvalidSelection
from codeinput.domain.types import Candidate, CommittedValue, InputSnapshot, InputState
from codeinput.logger import get_logger

from .store import CandidateStore

logger = get_logger("selection")


class SelectionStateMachine:
    """
    State machine for a single code input.

    Transitions:
        any            --input_changed-->  TYPING
        TYPING         --search_started--> SEARCHING
        *              --results_arrived-> SHOWING_RESULTS | NO_RESULTS
        SHOWING_RESULTS --enter (cursor)--> COMMITTED
        *              --commit_index-->   COMMITTED
        SEARCHING/SHOWING_RESULTS/NO_RESULTS --dismiss--> TYPING
        any            --cleared-->        IDLE
    """

    def __init__(self, store: CandidateStore):
        self._store = store
        self._state = InputState.IDLE
        self._text = ""
        self._committed: Optional[CommittedValue] = None
        self._search_failed = False
        self._touched = False

    @property
    def state(self) -> InputState:
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @property
    def committed(self) -> Optional[CommittedValue]:
        return self._committed

    @property
    def search_failed(self) -> bool:
        return self._search_failed

    @property
    def dropdown_open(self) -> bool:
        """Visible while showing results, and while searching over last good results."""
        if self._state.shows_results:
            return True
        return self._state == InputState.SEARCHING and len(self._store) > 0

    def _transition(self, state: InputState) -> None:
        if state != self._state:
            logger.debug(f"State {self._state.value} -> {state.value}")
            self._state = state

    def input_changed(self, text: str) -> None:
        self._touched = True
        self._text = text
        self._transition(InputState.TYPING)

    def search_started(self) -> None:
        self._search_failed = False
        self._transition(InputState.SEARCHING)

    def results_arrived(self) -> None:
        """The store now holds the list from an accepted response."""
        self._search_failed = False
        if len(self._store) > 0:
            self._transition(InputState.SHOWING_RESULTS)
        else:
            self._transition(InputState.NO_RESULTS)

    def lookup_failed(self) -> None:
        """The current lookup failed; fall back to the last stable state."""
        self._search_failed = True
        if self._state != InputState.SEARCHING:
            return
        if len(self._store) > 0:
            self._transition(InputState.SHOWING_RESULTS)
        else:
            self._transition(InputState.TYPING)

    def move(self, delta: int) -> bool:
        """Move the highlight; only meaningful while results are shown."""
        if self._state != InputState.SHOWING_RESULTS:
            return False
        self._store.move_cursor(delta)
        return True

    def enter(self) -> Candidate:
        """
        Confirm the highlighted candidate.

        Raises:
            InvalidSelection: If results are not shown or nothing is highlighted
        """
        if self._state != InputState.SHOWING_RESULTS:
            raise InvalidSelection(f"Enter ignored in state {self._state.value}")
        candidate = self._store.current().highlighted
        if candidate is None:
            raise InvalidSelection("Enter pressed with no highlighted candidate")
        self._commit(candidate)
        return candidate

    def commit_index(self, index: int) -> Candidate:
        """
        Confirm the candidate at ``index`` regardless of the cursor.

        The row only has to exist in the current list; the dropdown may
        already have been closed by a blur that raced the pointer event.

        Raises:
            InvalidSelection: If there is no such row
        """
        candidates = self._store.candidates
        if self._state == InputState.IDLE or not 0 <= index < len(candidates):
            raise InvalidSelection(f"No candidate at row {index}")
        candidate = candidates[index]
        self._commit(candidate)
        return candidate

    def _commit(self, candidate: Candidate) -> None:
        self._committed = candidate
        self._text = candidate.label
        self._search_failed = False
        self._transition(InputState.COMMITTED)

    def dismiss(self) -> bool:
        """Close the dropdown without committing; text is retained."""
        if self._state in (InputState.SEARCHING, InputState.SHOWING_RESULTS, InputState.NO_RESULTS):
            self._transition(InputState.TYPING)
            return True
        return False

    def cleared(self) -> None:
        self._store.clear()
        self._committed = None
        self._search_failed = False
        self._transition(InputState.IDLE)

    def show_pending_default(self, text: str) -> None:
        """Show a stored code while its display text is being resolved."""
        if not self._touched:
            self._text = text

    def hydrate(self, value: CommittedValue) -> bool:
        """
        Present a resolved default value as committed.

        Returns:
            False if the user started interacting before resolution finished
        """
        if self._touched:
            logger.debug("Default value resolved after user input, ignoring")
            return False
        self._committed = value
        self._text = value.label if isinstance(value, Candidate) else value
        self._transition(InputState.COMMITTED)
        return True

    def snapshot(self) -> InputSnapshot:
        view = self._store.current()
        return InputSnapshot(
            state=self._state,
            text=self._text,
            candidates=view.candidates,
            cursor=view.cursor,
            dropdown_open=self.dropdown_open,
            search_failed=self._search_failed,
            committed=self._committed,
        )
