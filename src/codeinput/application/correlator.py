"""
QueryCorrelator - dispatches lookups and decides which responses still count.

Each dispatch gets the next sequence number and becomes the single
"current" query. A response is accepted only if its sequence number is
the current one; everything else is dropped at the response boundary.
In-flight calls for superseded queries are left to finish on their own,
so transports that cannot be cancelled mid-flight are fine.
"""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional, Union

from codeinput.domain.errors import TransientSearchFailure
from codeinput.domain.protocols import LookupClient, LookupFunction, as_lookup_function
from codeinput.domain.types import Candidate, Query
from codeinput.infrastructure.cache import LookupCache
from codeinput.logger import get_logger
from codeinput.utils import preview

logger = get_logger("correlator")

AcceptedHandler = Callable[[Query, tuple[Candidate, ...]], None]
FailedHandler = Callable[[TransientSearchFailure], None]


def decode_candidates(result: Iterable[Any], limit: Optional[int] = None) -> tuple[Candidate, ...]:
    """
    Normalise a lookup result into a candidate tuple.

    Candidates pass through; mappings with ``code``/``display``/``system``
    keys are converted; entries without a code are skipped.
    """
    candidates: list[Candidate] = []
    for item in result:
        if isinstance(item, Candidate):
            candidates.append(item)
        elif isinstance(item, Mapping) and item.get("code"):
            candidates.append(
                Candidate(
                    code=str(item["code"]),
                    display=str(item.get("display") or ""),
                    system=str(item.get("system") or ""),
                )
            )
        else:
            logger.debug(f"Skipping undecodable lookup entry: {item!r}")
        if limit is not None and len(candidates) >= limit:
            break
    return tuple(candidates)


class QueryCorrelator:
    """
    Issues lookups tagged with monotonic sequence numbers.

    Example:
        ```python
        correlator = QueryCorrelator(client, binding="http://example.com/vs")
        correlator.bind(on_accepted=show, on_failed=flag_failure)
        seq = correlator.dispatch("xyz")
        ```
    """

    def __init__(
        self,
        lookup: Union[LookupClient, LookupFunction],
        binding: str = "",
        on_accepted: Optional[AcceptedHandler] = None,
        on_failed: Optional[FailedHandler] = None,
        timeout: Optional[float] = None,
        max_results: Optional[int] = None,
        cache: Optional[LookupCache] = None,
    ):
        """
        Args:
            lookup: Lookup collaborator (client or coroutine function)
            binding: Binding context passed unchanged to every lookup
            on_accepted: Receives the query and its decoded candidates
            on_failed: Receives failures of the current query only
            timeout: Seconds before an in-flight lookup counts as failed (None: never)
            max_results: Truncate accepted lists to this many candidates
            cache: Optional result cache shared across dispatches
        """
        self._lookup = as_lookup_function(lookup)
        self.binding = binding
        self._on_accepted = on_accepted
        self._on_failed = on_failed
        self.timeout = timeout
        self.max_results = max_results
        self._cache = cache
        self._last_sequence = 0
        self._current: Optional[Query] = None
        self._tasks: set[asyncio.Task] = set()

    def bind(self, on_accepted: AcceptedHandler, on_failed: FailedHandler) -> None:
        """Attach the completion handlers (used when the correlator is caller-owned)."""
        self._on_accepted = on_accepted
        self._on_failed = on_failed

    @property
    def last_sequence_number(self) -> int:
        """Sequence number of the most recent dispatch (0 before the first)."""
        return self._last_sequence

    @property
    def current(self) -> Optional[Query]:
        """The query whose response is still awaited, if any."""
        return self._current

    @property
    def in_flight(self) -> int:
        """Number of lookup calls that have not completed, stale ones included."""
        return sum(1 for task in self._tasks if not task.done())

    def dispatch(self, text: str) -> int:
        """
        Start a lookup for ``text`` and make it the current query.

        Returns:
            The sequence number assigned to this query
        """
        self._last_sequence += 1
        query = Query(text=text, sequence_number=self._last_sequence)
        self._current = query

        task = asyncio.create_task(self._run(query), name=f"lookup-{query.sequence_number}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.debug(f"Dispatched query #{query.sequence_number}: '{preview(text)}'")
        return query.sequence_number

    def invalidate(self) -> None:
        """Stop waiting for the current query; its response will be discarded."""
        if self._current is not None:
            logger.debug(f"Abandoned query #{self._current.sequence_number}")
        self._current = None

    def accept(self, sequence_number: int, result: Union[Iterable[Any], BaseException]) -> bool:
        """
        Handle the completion of a lookup.

        Args:
            sequence_number: Sequence number of the completed query
            result: Candidates from the lookup, or the exception it raised

        Returns:
            True if the result was published, False if it was discarded
        """
        query = self._current
        if query is None or sequence_number != query.sequence_number:
            logger.debug(
                f"Discarding stale response #{sequence_number} "
                f"(current: {query.sequence_number if query else 'none'})"
            )
            return False

        # The current query's response is consumed either way
        self._current = None

        if isinstance(result, BaseException):
            failure = TransientSearchFailure(query.text, result)
            logger.warning(f"Lookup #{sequence_number} failed: {failure}")
            if self._on_failed is not None:
                self._on_failed(failure)
            return False

        try:
            candidates = decode_candidates(result, self.max_results)
        except Exception as e:
            failure = TransientSearchFailure(query.text, e)
            logger.warning(f"Lookup #{sequence_number} returned an undecodable result: {e}")
            if self._on_failed is not None:
                self._on_failed(failure)
            return False

        logger.debug(f"Accepted response #{sequence_number} with {len(candidates)} candidates")
        if self._on_accepted is not None:
            self._on_accepted(query, candidates)
        return True

    async def _run(self, query: Query) -> None:
        key = (self.binding, query.text)
        cached = self._cache.get(key) if self._cache is not None else None
        if cached is not None:
            logger.debug(f"Serving query #{query.sequence_number} from cache")
            self.accept(query.sequence_number, cached)
            return

        try:
            call = self._lookup(query.text, self.binding)
            if self.timeout is not None:
                result = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                result = await call
            if self._cache is not None:
                result = decode_candidates(result)
                self._cache.set(key, result)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.accept(query.sequence_number, e)
            return

        self.accept(query.sequence_number, result)

    async def close(self) -> None:
        """Cancel every in-flight lookup and wait for them to finish."""
        self._current = None
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
