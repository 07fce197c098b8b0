"""Domain layer: value types, errors, protocols and events."""

from .errors import (
    CodeInputError,
    InvalidSelection,
    LookupTransportError,
    ResolutionFailure,
    TransientSearchFailure,
)
from .protocols import LookupClient, LookupFunction, as_lookup_function
from .types import (
    Candidate,
    CandidateView,
    CommittedValue,
    InputSnapshot,
    InputState,
    Key,
    Query,
)

__all__ = [
    "Candidate",
    "CandidateView",
    "CodeInputError",
    "CommittedValue",
    "InputSnapshot",
    "InputState",
    "InvalidSelection",
    "Key",
    "LookupClient",
    "LookupFunction",
    "LookupTransportError",
    "Query",
    "ResolutionFailure",
    "TransientSearchFailure",
    "as_lookup_function",
]
