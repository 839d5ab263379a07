"""Text normalization applied between extraction and summarization.

The output is ASCII-safe, single-spaced and capped at a maximum length.
Truncation is always the last transformation, so the cap applies to the final
text, and :func:`normalize_text` is idempotent.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Union

from doclens.errors import ErrorKind, Failure
from doclens.scraper.models import NormalizedContent

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 8000
DEFAULT_MIN_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")
_NOT_PRINTABLE_ASCII = re.compile(r"[^\x20-\x7e]")
# Reference markers such as "[1]", "[edit]" or "[citation needed]".
_BRACKETED = re.compile(r"\[[^\]]*?\]")


def _fold_to_ascii(text: str) -> str:
    """Decompose accented letters and drop the combining marks (é -> e)."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(
    text: str,
    max_length: int = DEFAULT_MAX_LENGTH,
    strip_bracketed: bool = True,
) -> NormalizedContent:
    """Clean *text* and cap it at *max_length* characters.

    Steps: fold to ASCII, replace any other non-printable character with a
    space, collapse whitespace (blank-line runs included), optionally remove
    bracketed reference markers, trim, then truncate.
    """
    if max_length < 0:
        raise ValueError("max_length must be >= 0")

    cleaned = _NOT_PRINTABLE_ASCII.sub(" ", _fold_to_ascii(text))
    cleaned = _WHITESPACE.sub(" ", cleaned)
    if strip_bracketed:
        cleaned = _WHITESPACE.sub(" ", _BRACKETED.sub("", cleaned))
    cleaned = cleaned.strip()

    if len(cleaned) > max_length:
        # A cut can land right after a space.
        cleaned = cleaned[:max_length].rstrip()

    return NormalizedContent(text=cleaned)


def check_sufficient(
    content: NormalizedContent, min_length: int = DEFAULT_MIN_LENGTH
) -> Union[NormalizedContent, Failure]:
    """Return *content* unchanged, or ``InsufficientContent`` when too short."""
    if content.length < min_length:
        logger.info(
            "[Content Cleaning] %d characters left, need at least %d",
            content.length,
            min_length,
        )
        return Failure(
            ErrorKind.INSUFFICIENT_CONTENT,
            "Insufficient content",
            "Unable to extract meaningful text",
        )
    return content
