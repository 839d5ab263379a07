"""Content extraction: turns raw HTML into :class:`ExtractedContent`.

Noise elements are stripped first, then an ordered list of extraction
strategies is walked from most to least specific.  The first strategy whose
text is long enough wins; there is no scoring across candidates.  When none
qualifies the whole body text is returned, however short, and the length
check happens later in the normalizer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup

from doclens.scraper.models import ExtractedContent

DEFAULT_MIN_REGION_LENGTH = 100

# Elements that never carry the main content of a page.
NOISE_SELECTORS: List[str] = [
    "script", "style", "noscript", "iframe", "svg", "canvas", "template",
    "object", "embed", "video", "audio",
    "nav", "footer", "header", "aside",
    ".sidebar", ".ads", ".advertisement", ".cookie-banner", "#cookie-banner",
    "#comments", ".comments", ".related-content",
]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractionStrategy:
    """One candidate region: a CSS selector plus its acceptance rule.

    ``min_length`` overrides the extractor-wide threshold when set.
    """

    name: str
    selector: str
    min_length: Optional[int] = None

    def extract(self, soup: BeautifulSoup) -> str:
        """Return the trimmed text of every element matching the selector."""
        parts = [el.get_text(separator=" ", strip=True) for el in soup.select(self.selector)]
        return " ".join(p for p in parts if p).strip()

    def accepts(self, text: str, default_min_length: int) -> bool:
        threshold = self.min_length if self.min_length is not None else default_min_length
        return len(text) > threshold


EXTRACTION_STRATEGIES: List[ExtractionStrategy] = [
    ExtractionStrategy("main", "main"),
    ExtractionStrategy("article", "article"),
    ExtractionStrategy("content", ".content"),
    ExtractionStrategy("documentation", ".documentation"),
    ExtractionStrategy("docs-content", ".docs-content"),
    ExtractionStrategy("main-content", "#main-content"),
    ExtractionStrategy("page-content", ".page-content"),
    ExtractionStrategy("markdown-body", ".markdown-body"),
    ExtractionStrategy("readme", "#readme"),
]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _strip_noise(soup: BeautifulSoup) -> None:
    for el in soup.select(", ".join(NOISE_SELECTORS)):
        # A parent removed earlier in the loop takes its children with it.
        if not el.decomposed:
            el.decompose()


def _body_text(soup: BeautifulSoup) -> str:
    container = soup.body or soup
    return container.get_text(separator=" ", strip=True)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_title(html: str) -> str:
    """Return the text of the document ``<title>``, or an empty string."""
    soup = BeautifulSoup(html, "html.parser")
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""


def extract_content(
    html: str,
    min_region_length: int = DEFAULT_MIN_REGION_LENGTH,
    strategies: Optional[List[ExtractionStrategy]] = None,
) -> ExtractedContent:
    """Select the main-content region of *html*.

    Args:
        html: Raw page markup.
        min_region_length: A region is accepted when its trimmed text is
            strictly longer than this.
        strategies: Ordered candidates; defaults to
            :data:`EXTRACTION_STRATEGIES`.

    Returns:
        The first qualifying region, or the body text with
        ``selector_used == "body"``.
    """
    soup = BeautifulSoup(html, "html.parser")
    _strip_noise(soup)

    for strategy in strategies if strategies is not None else EXTRACTION_STRATEGIES:
        text = strategy.extract(soup)
        if strategy.accepts(text, min_region_length):
            return ExtractedContent(text=text, selector_used=strategy.selector)

    return ExtractedContent(text=_body_text(soup), selector_used="body")
