"""Tests for the candidate store."""

from codeinput.application.store import CandidateStore
from codeinput.domain.types import Candidate

A, B, C = Candidate("a"), Candidate("b"), Candidate("c")


def test_replace_resets_cursor():
    store = CandidateStore()
    store.replace([A, B, C])
    store.move_cursor(1)
    store.move_cursor(1)
    assert store.cursor == 1

    store.replace([A])

    view = store.current()
    assert view.candidates == (A,)
    assert view.cursor is None


def test_cursor_starts_at_first_row_and_clamps_without_wraparound():
    store = CandidateStore()
    store.replace([A, B])

    assert store.move_cursor(-1) == 0
    assert store.move_cursor(-1) == 0
    assert store.move_cursor(1) == 1
    assert store.move_cursor(1) == 1


def test_cursor_stays_none_on_empty_list():
    store = CandidateStore()
    store.replace([])
    assert store.move_cursor(1) is None
    assert store.current().cursor is None
    assert len(store) == 0


def test_current_is_a_consistent_pair():
    store = CandidateStore()
    store.replace([A, B, C])
    store.move_cursor(1)
    store.move_cursor(1)
    store.move_cursor(1)
    before = store.current()

    store.replace([A])

    # The old view is untouched and the new one is valid on its own
    assert before.cursor == 2 and len(before.candidates) == 3
    assert store.current().cursor is None


def test_clear():
    store = CandidateStore()
    store.replace([A])
    store.clear()
    assert store.candidates == ()
