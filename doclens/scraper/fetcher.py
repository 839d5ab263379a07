"""Single-shot HTTP fetcher with a browser identity and a hard deadline."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from doclens.config import Settings
from doclens.deadline import DeadlineExceeded, race_deadline
from doclens.scraper.models import (
    FetchFailure,
    FetchOutcome,
    HttpStatusFailure,
    NetworkFailure,
    RawPage,
    RedirectLimitFailure,
    RequestSetupFailure,
    TimeoutFailure,
    UnsupportedContentFailure,
)

logger = logging.getLogger(__name__)

_HTML_TYPES = ("text/html", "application/xhtml+xml")


def is_html(content_type: Optional[str]) -> bool:
    """Return ``True`` if *content_type* names an HTML document."""
    if not content_type:
        return False
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime in _HTML_TYPES


def is_accepted_status(status_code: int, tolerated: tuple[int, ...] = ()) -> bool:
    """Return ``True`` if a response with *status_code* should be parsed.

    Anything below 400 is accepted; 4xx/5xx only when listed in *tolerated*.
    """
    return status_code < 400 or status_code in tolerated


def _new_client(config: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(headers=config.fetch_headers, timeout=config.fetch_timeout)


async def _get(client: httpx.AsyncClient, url: str, config: Settings) -> httpx.Response:
    """GET *url*, following at most ``config.fetch_max_redirects`` hops.

    Redirects are followed here rather than by the client, and the request
    carries ``config.fetch_timeout``, so an injected client's own
    ``max_redirects`` and timeout do not apply.
    """
    request = client.build_request(
        "GET", url, headers=config.fetch_headers, timeout=config.fetch_timeout
    )
    response = await client.send(request, follow_redirects=False)
    hops = 0
    while response.next_request is not None:
        if hops >= config.fetch_max_redirects:
            await response.aclose()
            raise httpx.TooManyRedirects(
                "Exceeded maximum allowed redirects", request=response.next_request
            )
        hops += 1
        next_request = response.next_request
        await response.aclose()
        response = await client.send(next_request, follow_redirects=False)
    return response


async def _fetch_once(
    url: str, config: Settings, client: Optional[httpx.AsyncClient]
) -> httpx.Response:
    if client is not None:
        return await _get(client, url, config)
    async with _new_client(config) as owned:
        return await _get(owned, url, config)


def _classify(url: str, exc: Exception) -> FetchFailure:
    """Map an httpx exception to a typed fetch failure."""
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutFailure(url, f"Request timed out: {exc}")
    if isinstance(exc, httpx.TooManyRedirects):
        return RedirectLimitFailure(url, str(exc) or "Exceeded maximum allowed redirects")
    if isinstance(exc, (httpx.UnsupportedProtocol, httpx.LocalProtocolError, httpx.InvalidURL)):
        return RequestSetupFailure(url, f"Could not send request: {exc}")
    return NetworkFailure(url, str(exc) or exc.__class__.__name__)


async def fetch_page(
    url: str,
    config: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> FetchOutcome:
    """Fetch *url* once and return a :class:`RawPage` or a typed failure.

    The whole transfer races ``config.fetch_timeout``; when the deadline wins
    the in-flight request is cancelled.  There is no retry.

    Args:
        url: An already validated ``http``/``https`` URL.
        config: Timeout, redirect budget, headers and tolerated statuses.
        client: Optional shared client.  When omitted a client is created and
            closed for this single request.  Its connection pool, proxies and
            transport are used, but the redirect budget, per-request timeout
            and overall deadline always come from *config*.
    """
    try:
        response = await race_deadline(
            _fetch_once(url, config, client), config.fetch_timeout
        )
    except DeadlineExceeded as exc:
        failure: FetchFailure = TimeoutFailure(url, str(exc))
        logger.warning("[Content Fetch] %s: %s", url, failure.reason)
        return failure
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        failure = _classify(url, exc)
        logger.warning("[Content Fetch] %s: %s", url, failure.reason)
        return failure

    status_code = response.status_code
    if not is_accepted_status(status_code, config.fetch_tolerated_statuses):
        logger.warning("[Content Fetch] %s answered HTTP %d", url, status_code)
        return HttpStatusFailure(url, response.reason_phrase or "error", code=status_code)

    content_type = response.headers.get("content-type")
    if not is_html(content_type):
        logger.info("[Content Fetch] %s is not HTML (%s)", url, content_type)
        return UnsupportedContentFailure(
            url, "Non-HTML response", content_type=content_type
        )

    return RawPage(
        url=url,
        final_url=str(response.url),
        status_code=status_code,
        content_type=content_type,
        html=response.text,
    )
