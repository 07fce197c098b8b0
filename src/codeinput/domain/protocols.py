"""Lookup collaborator protocol."""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, runtime_checkable

from .types import Candidate

__all__ = ["LookupClient", "LookupFunction", "as_lookup_function"]

# A bare coroutine function with the same shape as LookupClient.expand
LookupFunction = Callable[[str, str], Awaitable[Sequence[Candidate]]]


@runtime_checkable
class LookupClient(Protocol):
    """Remote code/term lookup service.

    Implementations return candidates already ranked by the service and
    report failures by raising; the engine never lets those escape.
    """

    async def expand(self, query: str, binding: str) -> Sequence[Candidate]:
        """Expand ``query`` within the terminology scope ``binding``.

        Args:
            query: Filter text typed by the user (or a stored code)
            binding: Binding context, passed through unchanged

        Returns:
            Ranked candidates
        """
        ...


def as_lookup_function(lookup: "LookupClient | LookupFunction") -> LookupFunction:
    """Accept either a LookupClient or a bare coroutine function."""
    if isinstance(lookup, LookupClient):
        return lookup.expand
    if callable(lookup):
        return lookup
    raise TypeError(f"Expected a LookupClient or an async callable, got {type(lookup).__name__}")
