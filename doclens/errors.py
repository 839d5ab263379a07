"""Error taxonomy shared by every pipeline stage.

Stages never raise across their boundary.  Each one returns either its value
or a :class:`Failure` carrying an :class:`ErrorKind`, and the orchestrator
checks for it explicitly::

    out = validate_url(raw)
    if isinstance(out, Failure):
        return out

The only exception type is :class:`ConfigurationError`, raised while wiring
collaborators together (never while serving a request).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    UNAUTHORIZED = "Unauthorized"
    FETCH = "FetchError"
    UNSUPPORTED_CONTENT_TYPE = "UnsupportedContentType"
    INSUFFICIENT_CONTENT = "InsufficientContent"
    SUMMARIZATION_TIMEOUT = "SummarizationTimeout"
    SUMMARIZATION_FAILURE = "SummarizationFailure"
    INTERNAL = "InternalError"


# Default HTTP status per kind.  FETCH has no fixed code: the fetcher picks
# one depending on whether a response was received at all.
_DEFAULT_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FETCH: 502,
    ErrorKind.UNSUPPORTED_CONTENT_TYPE: 415,
    ErrorKind.INSUFFICIENT_CONTENT: 422,
    ErrorKind.SUMMARIZATION_TIMEOUT: 504,
    ErrorKind.SUMMARIZATION_FAILURE: 502,
    ErrorKind.INTERNAL: 500,
}


def status_for(kind: ErrorKind) -> int:
    """Return the HTTP status code a failure of *kind* maps to by default."""
    return _DEFAULT_STATUS[kind]


@dataclass(frozen=True)
class Failure:
    """A typed pipeline failure.

    Attributes:
        kind: Taxonomy entry, drives logging and the response status.
        message: Short human-readable headline (the envelope's ``error``).
        details: Optional longer explanation (the envelope's ``details``).
        status: HTTP status for the response; defaults from *kind*.
    """

    kind: ErrorKind
    message: str
    details: Any = None
    status: int = 0

    def __post_init__(self) -> None:
        if not self.status:
            object.__setattr__(self, "status", status_for(self.kind))

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "status": self.status}
        if self.details is not None:
            body["details"] = self.details
        return body


class ConfigurationError(RuntimeError):
    """A collaborator could not be constructed from the current settings."""
