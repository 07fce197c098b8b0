"""
CandidateStore - holds the active candidate list and its selection cursor.
"""

from collections.abc import Iterable
from typing import Optional

from codeinput.domain.types import Candidate, CandidateView
from codeinput.logger import get_logger

logger = get_logger("candidate_store")


class CandidateStore:
    """
    Owner of the CandidateList/SelectionCursor pair.

    The pair lives in a single immutable :class:`CandidateView` that is
    swapped wholesale on every change, so a reader calling :meth:`current`
    can never observe a cursor that points past the end of a freshly
    replaced, shorter list.
    """

    def __init__(self) -> None:
        self._view = CandidateView()

    def current(self) -> CandidateView:
        """Return the active list and cursor together."""
        return self._view

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._view.candidates

    @property
    def cursor(self) -> Optional[int]:
        return self._view.cursor

    def __len__(self) -> int:
        return len(self._view.candidates)

    def replace(self, candidates: Iterable[Candidate]) -> CandidateView:
        """
        Install a new candidate list and reset the cursor.

        Args:
            candidates: Ranked candidates from an accepted response

        Returns:
            The new view
        """
        self._view = CandidateView(candidates=tuple(candidates), cursor=None)
        logger.debug(f"Candidate list replaced ({len(self._view.candidates)} candidates)")
        return self._view

    def clear(self) -> None:
        """Discard the list; an empty list is still a valid list."""
        self._view = CandidateView()

    def move_cursor(self, delta: int) -> Optional[int]:
        """
        Move the cursor by ``delta`` rows, clamped to the list bounds.

        From "none" any movement lands on the first row. There is no
        wraparound. On an empty list the cursor stays "none".

        Returns:
            The new cursor
        """
        view = self._view
        if not view.candidates:
            return None
        if view.cursor is None:
            cursor = 0
        else:
            cursor = min(max(view.cursor + delta, 0), len(view.candidates) - 1)
        if cursor != view.cursor:
            self._view = CandidateView(candidates=view.candidates, cursor=cursor)
        return cursor

