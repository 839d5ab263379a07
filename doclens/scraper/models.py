"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from doclens.errors import ErrorKind, Failure


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    final_url: str
    status_code: int
    content_type: Optional[str]
    html: str


@dataclass
class ExtractedContent:
    """Text of the region chosen by the extractor."""

    text: str
    selector_used: str


@dataclass
class NormalizedContent:
    """Cleaned, bounded text ready for the summarizer."""

    text: str

    @property
    def length(self) -> int:
        return len(self.text)


# ---------------------------------------------------------------------------
# Fetch failures
# ---------------------------------------------------------------------------

@dataclass
class FetchFailure:
    """Base class for a fetch that produced no usable page."""

    url: str
    reason: str

    def to_failure(self) -> Failure:
        return Failure(ErrorKind.FETCH, "Failed to fetch content", self.reason, 500)


@dataclass
class NetworkFailure(FetchFailure):
    """The connection failed and no response was received."""

    def to_failure(self) -> Failure:
        return Failure(ErrorKind.FETCH, "Failed to fetch content", self.reason, 504)


@dataclass
class TimeoutFailure(FetchFailure):
    """The transfer did not complete within the fetch deadline."""

    def to_failure(self) -> Failure:
        return Failure(ErrorKind.FETCH, "Upstream timed out", self.reason, 504)


@dataclass
class HttpStatusFailure(FetchFailure):
    """The target answered with a status outside the accepted range."""

    code: int = 0

    def to_failure(self) -> Failure:
        status = self.code if 400 <= self.code <= 599 else 502
        return Failure(
            ErrorKind.FETCH,
            "Failed to fetch content",
            f"Upstream responded with HTTP {self.code}: {self.reason}",
            status,
        )


@dataclass
class RedirectLimitFailure(FetchFailure):
    """The redirect budget was exhausted."""

    def to_failure(self) -> Failure:
        return Failure(ErrorKind.FETCH, "Too many redirects", self.reason, 502)


@dataclass
class RequestSetupFailure(FetchFailure):
    """The request could not be built or sent locally."""


@dataclass
class UnsupportedContentFailure(FetchFailure):
    """The target responded, but not with HTML."""

    content_type: Optional[str] = None

    def to_failure(self) -> Failure:
        return Failure(
            ErrorKind.UNSUPPORTED_CONTENT_TYPE,
            "Invalid content type",
            f"Expected HTML, received: {self.content_type or 'none'}",
        )


FetchOutcome = Union[RawPage, FetchFailure]
