"""Debounced asynchronous code/term autocomplete engine."""

from codeinput.application.controller import CodeInputController
from codeinput.config import CodeInputConfig, load_config
from codeinput.domain.types import Candidate, InputSnapshot, InputState, Key

__all__ = [
    "Candidate",
    "CodeInputConfig",
    "CodeInputController",
    "InputSnapshot",
    "InputState",
    "Key",
    "load_config",
]
