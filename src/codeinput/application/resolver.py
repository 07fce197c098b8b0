"""
DefaultValueResolver - turns a stored value into a displayable committed value.

This path runs once at mount time and never touches the debounce scheduler.
"""

import asyncio
from typing import Optional, Union

from codeinput.domain.errors import ResolutionFailure
from codeinput.domain.protocols import LookupClient, LookupFunction, as_lookup_function
from codeinput.domain.types import Candidate, CommittedValue
from codeinput.logger import get_logger

from .correlator import decode_candidates

logger = get_logger("resolver")


class DefaultValueResolver:
    """Hydrates a pre-existing stored value without user interaction."""

    def __init__(
        self,
        lookup: Union[LookupClient, LookupFunction],
        binding: str = "",
        timeout: Optional[float] = None,
    ):
        self._lookup = as_lookup_function(lookup)
        self.binding = binding
        self.timeout = timeout

    async def resolve(self, value: CommittedValue) -> tuple[CommittedValue, bool]:
        """
        Resolve a stored value.

        A full Candidate is returned as-is without a lookup. A bare code is
        looked up once; the candidate with the same code is used. When the
        lookup fails or returns no such code, the raw code is returned.

        Args:
            value: Stored Candidate or code string

        Returns:
            (committed value, True if the raw code fallback was used)
        """
        if isinstance(value, Candidate):
            return value, False

        try:
            return await self._lookup_code(value), False
        except ResolutionFailure as failure:
            logger.warning(f"{failure}; showing raw code")
            return value, True

    async def _lookup_code(self, code: str) -> Candidate:
        try:
            call = self._lookup(code, self.binding)
            if self.timeout is not None:
                result = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                result = await call
            candidates = decode_candidates(result)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise ResolutionFailure(code, e) from e

        for candidate in candidates:
            if candidate.code == code:
                logger.debug(f"Resolved code '{code}' to '{candidate.label}'")
                return candidate
        raise ResolutionFailure(code)
