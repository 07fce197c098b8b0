"""Tests for the selection state machine."""

import pytest

from codeinput.application.selection import SelectionStateMachine
from codeinput.application.store import CandidateStore
from codeinput.domain.errors import InvalidSelection
from codeinput.domain.types import Candidate, InputState

A = Candidate("a", "Alpha", "s")
B = Candidate("b", "Beta", "s")


def showing(*candidates: Candidate) -> SelectionStateMachine:
    store = CandidateStore()
    machine = SelectionStateMachine(store)
    machine.input_changed("al")
    machine.search_started()
    store.replace(candidates)
    machine.results_arrived()
    return machine


class TestTransitions:
    """State transitions driven by input and responses."""

    def test_starts_idle(self):
        machine = SelectionStateMachine(CandidateStore())
        snapshot = machine.snapshot()
        assert snapshot.state == InputState.IDLE
        assert snapshot.dropdown_open is False

    def test_typing_then_searching(self):
        machine = SelectionStateMachine(CandidateStore())
        machine.input_changed("x")
        assert machine.state == InputState.TYPING
        machine.search_started()
        assert machine.state == InputState.SEARCHING

    def test_results_and_no_results(self):
        assert showing(A).state == InputState.SHOWING_RESULTS
        machine = showing()
        assert machine.state == InputState.NO_RESULTS
        assert machine.snapshot().dropdown_open is True

    def test_input_change_from_any_state_goes_to_typing(self):
        machine = showing(A)
        machine.input_changed("alp")
        assert machine.state == InputState.TYPING
        assert machine.text == "alp"

    def test_cleared_discards_list(self):
        machine = showing(A, B)
        machine.cleared()
        snapshot = machine.snapshot()
        assert snapshot.state == InputState.IDLE
        assert snapshot.candidates == ()

    def test_cleared_forgets_committed_value(self):
        machine = showing(A, B)
        machine.commit_index(0)
        machine.input_changed("")
        machine.cleared()
        snapshot = machine.snapshot()
        assert snapshot.state == InputState.IDLE
        assert snapshot.committed is None

    def test_failure_keeps_last_good_results(self):
        machine = showing(A)
        machine.input_changed("alp")
        machine.search_started()
        assert machine.snapshot().dropdown_open is True

        machine.lookup_failed()

        snapshot = machine.snapshot()
        assert snapshot.state == InputState.SHOWING_RESULTS
        assert snapshot.candidates == (A,)
        assert snapshot.search_failed is True

    def test_failure_without_results_returns_to_typing(self):
        machine = SelectionStateMachine(CandidateStore())
        machine.input_changed("x")
        machine.search_started()
        machine.lookup_failed()
        assert machine.state == InputState.TYPING
        assert machine.search_failed is True


class TestKeyboardAndPointer:
    """Cursor movement and commits."""

    def test_arrows_move_and_clamp(self):
        machine = showing(A, B)
        machine.move(1)
        machine.move(1)
        machine.move(1)
        assert machine.snapshot().cursor == 1
        machine.move(-1)
        machine.move(-1)
        assert machine.snapshot().cursor == 0

    def test_arrows_ignored_outside_results(self):
        machine = showing()
        assert machine.move(1) is False

    def test_enter_commits_highlighted(self):
        machine = showing(A, B)
        machine.move(1)
        machine.move(1)

        assert machine.enter() == B

        snapshot = machine.snapshot()
        assert snapshot.state == InputState.COMMITTED
        assert snapshot.committed == B
        assert snapshot.text == "Beta"
        assert snapshot.dropdown_open is False

    def test_enter_without_cursor_is_invalid_and_changes_nothing(self):
        machine = showing(A)
        with pytest.raises(InvalidSelection):
            machine.enter()
        assert machine.state == InputState.SHOWING_RESULTS
        assert machine.committed is None

    def test_pointer_commit_ignores_cursor(self):
        machine = showing(A, B)
        machine.move(1)
        assert machine.commit_index(1) == B

    def test_pointer_commit_after_dismiss(self):
        machine = showing(A, B)
        machine.dismiss()
        assert machine.state == InputState.TYPING
        assert machine.commit_index(0) == A

    def test_pointer_commit_out_of_range(self):
        machine = showing(A)
        with pytest.raises(InvalidSelection):
            machine.commit_index(3)

    def test_dismiss_only_from_open_states(self):
        machine = SelectionStateMachine(CandidateStore())
        assert machine.dismiss() is False
        machine.input_changed("x")
        machine.search_started()
        assert machine.dismiss() is True
        assert machine.state == InputState.TYPING
        assert machine.text == "x"


class TestDefaultValue:
    """Hydration of stored values."""

    def test_hydrate_commits_without_dropdown(self):
        machine = SelectionStateMachine(CandidateStore())
        machine.show_pending_default("a")
        assert machine.text == "a"
        assert machine.hydrate(A) is True
        snapshot = machine.snapshot()
        assert snapshot.state == InputState.COMMITTED
        assert snapshot.text == "Alpha"
        assert snapshot.dropdown_open is False

    def test_hydrate_raw_code(self):
        machine = SelectionStateMachine(CandidateStore())
        assert machine.hydrate("xyz") is True
        assert machine.text == "xyz"
        assert machine.committed == "xyz"

    def test_hydrate_skipped_after_user_input(self):
        machine = SelectionStateMachine(CandidateStore())
        machine.input_changed("b")
        assert machine.hydrate(A) is False
        assert machine.text == "b"
        assert machine.committed is None
