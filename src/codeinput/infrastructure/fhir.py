"""FHIR ValueSet $expand lookup client.

Looks up codes in a value set through a FHIR server's ``ValueSet/$expand``
operation, using the field's binding (the value set canonical URL) and the
typed text as the filter.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, Optional

import requests

from codeinput.domain.errors import LookupTransportError
from codeinput.domain.types import Candidate
from codeinput.logger import get_logger
from codeinput.utils import preview

logger = get_logger("fhir")

EXPAND_PATH = "fhir/R4/ValueSet/$expand"


def decode_expansion(payload: Any) -> list[Candidate]:
    """
    Convert a ValueSet expansion into candidates, preserving server order.

    Args:
        payload: Parsed JSON body of a ``$expand`` response

    Returns:
        Candidates from ``expansion.contains``; empty if there is no expansion

    Raises:
        LookupTransportError: If the payload is not a ValueSet
    """
    if not isinstance(payload, Mapping):
        raise LookupTransportError(f"Unexpected $expand payload type: {type(payload).__name__}")

    resource_type = payload.get("resourceType")
    if resource_type not in (None, "ValueSet"):
        diagnostics = _outcome_diagnostics(payload)
        raise LookupTransportError(f"Expected ValueSet, got {resource_type}{diagnostics}")

    contains = (payload.get("expansion") or {}).get("contains") or []
    candidates = []
    for entry in contains:
        if not isinstance(entry, Mapping):
            continue
        code = entry.get("code")
        if not code:
            continue
        candidates.append(
            Candidate(
                code=code,
                display=entry.get("display") or code,
                system=entry.get("system") or "",
            )
        )
    return candidates


def _outcome_diagnostics(payload: Mapping) -> str:
    issues = payload.get("issue") or []
    details = [issue.get("diagnostics") or issue.get("code") for issue in issues if isinstance(issue, Mapping)]
    details = [d for d in details if d]
    return f" ({'; '.join(details)})" if details else ""


class ValueSetExpandClient:
    """LookupClient backed by a FHIR server.

    ``requests`` is blocking, so each call runs on a worker thread.
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        count: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Server base URL, e.g. "https://example.com/"
            access_token: Optional bearer token
            timeout: Per-request timeout in seconds
            count: Optional page size sent as ``count``
            session: Optional requests session to reuse connections
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.access_token = access_token
        self.timeout = timeout
        self.count = count
        self._session = session or requests.Session()

    @property
    def expand_url(self) -> str:
        return self.base_url + EXPAND_PATH

    async def expand(self, query: str, binding: str) -> list[Candidate]:
        """Expand ``binding`` filtered by ``query``."""
        return await asyncio.to_thread(self._expand_sync, query, binding)

    def _expand_sync(self, query: str, binding: str) -> list[Candidate]:
        params: dict[str, Any] = {"url": binding, "filter": query}
        if self.count is not None:
            params["count"] = self.count
        headers = {"Accept": "application/fhir+json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        logger.debug(f"GET {self.expand_url} filter='{preview(query)}'")
        try:
            response = self._session.get(
                self.expand_url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LookupTransportError(f"ValueSet expansion request failed: {e}") from e

        if response.status_code >= 400:
            raise LookupTransportError(
                f"ValueSet expansion failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise LookupTransportError(f"ValueSet expansion returned invalid JSON: {e}") from e

        return decode_expansion(payload)

    def close(self) -> None:
        self._session.close()
