"""TTL cache for lookup results.

Entries expire ``ttl`` seconds after they were stored. Expired entries are
dropped lazily on access.
"""

import time
from typing import Callable, Optional

from codeinput.domain.types import Candidate

CacheKey = tuple[str, str]


class LookupCache:
    """Caches candidate lists by ``(binding, query text)``.

    Example:
        >>> cache = LookupCache(ttl=60.0)
        >>> cache.set(("vs", "xyz"), (Candidate("test-code"),))
        >>> cache.get(("vs", "xyz"))
        (Candidate(code='test-code', display='', system=''),)
    """

    def __init__(self, ttl: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Args:
            ttl: Time-to-live in seconds
            clock: Time source, injectable for tests
        """
        if ttl <= 0:
            raise ValueError("ttl must be > 0")
        self.ttl = ttl
        self._clock = clock
        self._data: dict[CacheKey, tuple[tuple[Candidate, ...], float]] = {}  # (value, expiration_time)

    def get(self, key: CacheKey) -> Optional[tuple[Candidate, ...]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expiration_time = entry
        if self._clock() > expiration_time:
            del self._data[key]
            return None
        return value

    def set(self, key: CacheKey, value: tuple[Candidate, ...]) -> None:
        self._data[key] = (value, self._clock() + self.ttl)

    def clear(self, key: Optional[CacheKey] = None) -> None:
        """Clear one entry, or everything when ``key`` is None."""
        if key is None:
            self._data.clear()
        else:
            self._data.pop(key, None)

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, expiration_time in self._data.values() if now <= expiration_time)
