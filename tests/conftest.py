"""Shared fixtures and fakes for codeinput tests."""

import asyncio
from typing import Optional

import pytest

from codeinput.domain.types import Candidate

TEST_BINDING = "https://example.com/test"
TEST_CANDIDATE = Candidate(code="test-code", display="Test Display", system="x")


class FakeLookup:
    """Controllable lookup collaborator.

    In automatic mode each call returns ``results[query]`` (or raises
    ``error``). In manual mode each call parks on a future that the test
    resolves with :meth:`resolve` or :meth:`fail`, in any order.
    """

    def __init__(
        self,
        results: Optional[dict[str, list[Candidate]]] = None,
        error: Optional[Exception] = None,
        manual: bool = False,
    ):
        self.results = results or {}
        self.error = error
        self.manual = manual
        self.calls: list[tuple[str, str]] = []
        self._pending: list[tuple[str, asyncio.Future]] = []

    async def expand(self, query: str, binding: str) -> list[Candidate]:
        self.calls.append((query, binding))
        if self.manual:
            future = asyncio.get_running_loop().create_future()
            self._pending.append((query, future))
            return await future
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))

    @property
    def queries(self) -> list[str]:
        return [query for query, _ in self.calls]

    def _take(self, query: str) -> asyncio.Future:
        for i, (pending_query, future) in enumerate(self._pending):
            if pending_query == query:
                del self._pending[i]
                return future
        raise AssertionError(f"No pending lookup for {query!r}")

    def resolve(self, query: str, candidates: list[Candidate]) -> None:
        self._take(query).set_result(candidates)

    def fail(self, query: str, error: Exception) -> None:
        self._take(query).set_exception(error)


async def drain(rounds: int = 5) -> None:
    """Let completed lookups run their completion handlers."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def candidate() -> Candidate:
    return TEST_CANDIDATE


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup(results={"xyz": [TEST_CANDIDATE]})


@pytest.fixture
def manual_lookup() -> FakeLookup:
    return FakeLookup(manual=True)
