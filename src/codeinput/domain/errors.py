"""Error taxonomy for the autocomplete engine.

None of these reach the host as uncaught exceptions: the components that
produce them catch and convert them at their own boundary.
"""

from typing import Optional


class CodeInputError(Exception):
    """Base class for codeinput errors."""


class TransientSearchFailure(CodeInputError):
    """A lookup failed; the last good results stay visible."""

    def __init__(self, query: str, cause: Optional[BaseException] = None):
        self.query = query
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Search for '{query}' failed{detail}")


class ResolutionFailure(CodeInputError):
    """A stored code could not be resolved to a display value."""

    def __init__(self, code: str, cause: Optional[BaseException] = None):
        self.code = code
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not resolve code '{code}'{detail}")


class InvalidSelection(CodeInputError):
    """Commit requested with no highlighted candidate."""


class LookupTransportError(CodeInputError):
    """The lookup service could not be reached or returned an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
