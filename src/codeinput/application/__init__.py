"""Application layer: the autocomplete engine components."""

from .controller import CodeInputController
from .correlator import QueryCorrelator
from .debounce import DebounceScheduler
from .resolver import DefaultValueResolver
from .selection import SelectionStateMachine
from .store import CandidateStore

__all__ = [
    "CandidateStore",
    "CodeInputController",
    "DebounceScheduler",
    "DefaultValueResolver",
    "QueryCorrelator",
    "SelectionStateMachine",
]
