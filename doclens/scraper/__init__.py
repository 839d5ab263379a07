"""Scraper package — URL validation, fetch, extraction and normalization."""

from doclens.scraper.extractor import EXTRACTION_STRATEGIES, ExtractionStrategy, extract_content
from doclens.scraper.fetcher import fetch_page
from doclens.scraper.models import ExtractedContent, FetchFailure, NormalizedContent, RawPage
from doclens.scraper.normalizer import check_sufficient, normalize_text
from doclens.scraper.validator import validate_url

__all__ = [
    "validate_url",
    "fetch_page",
    "extract_content",
    "normalize_text",
    "check_sufficient",
    "ExtractionStrategy",
    "EXTRACTION_STRATEGIES",
    "RawPage",
    "FetchFailure",
    "ExtractedContent",
    "NormalizedContent",
]
