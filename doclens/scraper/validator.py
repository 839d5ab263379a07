"""URL validation: the first pipeline stage.  Pure, no network access."""

from __future__ import annotations

import ipaddress
import re
from typing import Optional, Union
from urllib.parse import unquote, urlsplit

from doclens.errors import ErrorKind, Failure

ALLOWED_SCHEMES = frozenset({"http", "https"})

# One DNS label after IDNA encoding.  Underscores occur in real host names.
_LABEL = re.compile(r"^[a-z0-9_](?:[a-z0-9_-]{0,61}[a-z0-9_])?$")
_MAX_HOST_LENGTH = 253


def _invalid(reason: str) -> Failure:
    return Failure(ErrorKind.VALIDATION, "URL Validation Failed", reason)


def _host_error(hostname: str) -> Optional[str]:
    """Return why *hostname* is not a valid host, or ``None`` if it is."""
    host = unquote(hostname)
    try:
        ipaddress.ip_address(host)
        return None
    except ValueError:
        pass

    if host.endswith("."):
        host = host[:-1]
    try:
        ascii_host = host.encode("idna").decode("ascii").lower()
    except UnicodeError as exc:
        return f"invalid host {hostname!r}: {exc}"

    if not ascii_host or len(ascii_host) > _MAX_HOST_LENGTH:
        return f"invalid host {hostname!r}"
    for label in ascii_host.split("."):
        if not _LABEL.match(label):
            return f"invalid host {hostname!r}"
    return None


def validate_url(raw: object) -> Union[str, Failure]:
    """Return the accepted absolute URL, or a ``ValidationError`` failure.

    Only ``http`` and ``https`` URLs whose host is a valid DNS name or IP
    address are accepted.  Surrounding whitespace is stripped from the
    returned value.
    """
    if not isinstance(raw, str):
        return _invalid("URL must be a string")

    url = raw.strip()
    if not url:
        return _invalid("URL must not be empty")
    if any(ch.isspace() for ch in url):
        return _invalid("Invalid URL format")

    try:
        parts = urlsplit(url)
        # Accessing .port validates the port component.
        parts.port
    except ValueError as exc:
        return _invalid(f"Invalid URL format: {exc}")

    if not parts.scheme:
        return _invalid("Invalid URL format: URL must be absolute")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return _invalid(
            f"Only HTTP and HTTPS protocols are allowed (got {parts.scheme!r})"
        )
    if not parts.netloc or not parts.hostname:
        return _invalid("Invalid URL format: missing host")

    reason = _host_error(parts.hostname)
    if reason is not None:
        return _invalid(f"Invalid URL format: {reason}")

    return url
