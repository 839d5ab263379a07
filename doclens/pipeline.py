"""Request orchestrator: validate → fetch → extract → normalize → summarize.

:class:`AnalysisPipeline` walks a small state machine::

    VALIDATING → FETCHING → EXTRACTING → NORMALIZING → [SUMMARIZING] → RESPONDING
                                   ↘ FAILED (from any non-terminal state)

Each stage returns its value or a :class:`~doclens.errors.Failure`; the first
failure moves the run to ``FAILED``.  Nothing is retried.  ``SUMMARIZING`` is
skipped when no summarizer is injected, and a summarizer failure degrades to
a placeholder analysis instead of failing the request.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import httpx

from doclens.config import Settings
from doclens.errors import ErrorKind, Failure
from doclens.llm.summarizer import Summarizer
from doclens.scraper.extractor import extract_content, extract_title
from doclens.scraper.fetcher import fetch_page
from doclens.scraper.models import FetchFailure, NormalizedContent
from doclens.scraper.normalizer import check_sufficient, normalize_text
from doclens.scraper.validator import validate_url

logger = logging.getLogger(__name__)

NOT_CONFIGURED_PLACEHOLDER = (
    "Analysis unavailable: no summarization backend is configured. "
    "The extracted content is returned as-is."
)
SKIPPED_PLACEHOLDER = "Analysis skipped. The extracted content is returned as-is."


def degraded_placeholder(failure: Failure) -> str:
    """Analysis text used when the summarizer failed or timed out."""
    reason = f"{failure.message}: {failure.details}" if failure.details else failure.message
    return f"Analysis unavailable ({reason}). The extracted content is returned as-is."


class PipelineState(str, Enum):
    VALIDATING = "validating"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    NORMALIZING = "normalizing"
    SUMMARIZING = "summarizing"
    RESPONDING = "responding"
    FAILED = "failed"


@dataclass
class PipelineTrace:
    """Timestamped state transitions of a single run."""

    transitions: list[tuple[PipelineState, float]] = field(default_factory=list)

    def enter(self, state: PipelineState) -> None:
        self.transitions.append((state, time.monotonic()))
        logger.debug("[Pipeline] -> %s", state.value)

    @property
    def state(self) -> Optional[PipelineState]:
        return self.transitions[-1][0] if self.transitions else None

    @property
    def elapsed_ms(self) -> int:
        if len(self.transitions) < 2:
            return 0
        return int((self.transitions[-1][1] - self.transitions[0][1]) * 1000)


@dataclass
class AnalysisResult:
    """Outcome of one run, convertible to the response envelope.

    ``title`` is the page <title> for display and logs; it is not part of
    the envelope.
    """

    url: str
    trace: PipelineTrace
    failure: Optional[Failure] = None
    analysis: Optional[str] = None
    content: Optional[NormalizedContent] = None
    summarized: bool = False
    title: str = ""
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )

    @property
    def success(self) -> bool:
        return self.failure is None

    @property
    def status_code(self) -> int:
        return 200 if self.failure is None else self.failure.status

    def to_dict(self) -> dict[str, Any]:
        if self.failure is not None:
            return self.failure.to_dict()
        content = self.content.text if self.content else ""
        return {
            "success": True,
            "analysis": self.analysis,
            "content": content,
            "metadata": {
                "url": self.url,
                "timestamp": self.timestamp,
                "processingTimeMs": self.trace.elapsed_ms,
                "contentLength": len(content),
            },
        }


class AnalysisPipeline:
    """Runs one URL through the whole pipeline.

    Args:
        config: Thresholds, timeouts and fetch settings.
        summarizer: Optional summarization invoker; ``None`` skips that state.
        http_client: Optional shared ``httpx.AsyncClient`` for page fetches.
            Only its pool and transport are used; the redirect budget and
            timeouts always come from *config*.
    """

    def __init__(
        self,
        config: Settings,
        summarizer: Optional[Summarizer] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self.summarizer = summarizer
        self.http_client = http_client

    async def run(self, raw_url: object, summarize: bool = True) -> AnalysisResult:
        """Process *raw_url* and return an :class:`AnalysisResult`.

        Never raises for request-level problems; an unexpected exception in a
        stage is reported as ``InternalError``.
        """
        trace = PipelineTrace()
        url_for_response = raw_url if isinstance(raw_url, str) else ""
        try:
            return await self._run(raw_url, trace, summarize)
        except Exception as exc:  # noqa: BLE001
            logger.exception("[Unexpected Pipeline Error] %s", url_for_response)
            return self._fail(
                url_for_response,
                trace,
                Failure(ErrorKind.INTERNAL, "Internal server error", str(exc) or exc.__class__.__name__),
            )

    async def _run(self, raw_url: object, trace: PipelineTrace, summarize: bool) -> AnalysisResult:
        # ------------------------------------------------------------------
        # 1 — Validate
        # ------------------------------------------------------------------
        trace.enter(PipelineState.VALIDATING)
        url = validate_url(raw_url)
        if isinstance(url, Failure):
            return self._fail(raw_url if isinstance(raw_url, str) else "", trace, url)

        # ------------------------------------------------------------------
        # 2 — Fetch
        # ------------------------------------------------------------------
        trace.enter(PipelineState.FETCHING)
        page = await fetch_page(url, self.config, self.http_client)
        if isinstance(page, FetchFailure):
            return self._fail(url, trace, page.to_failure())

        # ------------------------------------------------------------------
        # 3 — Extract
        # ------------------------------------------------------------------
        trace.enter(PipelineState.EXTRACTING)
        title = extract_title(page.html)
        extracted = extract_content(page.html, self.config.min_region_length)
        logger.debug(
            "[Content Extraction] %s (%r): %d chars via %r",
            url,
            title,
            len(extracted.text),
            extracted.selector_used,
        )

        # ------------------------------------------------------------------
        # 4 — Normalize and gate on minimum length
        # ------------------------------------------------------------------
        trace.enter(PipelineState.NORMALIZING)
        normalized = check_sufficient(
            normalize_text(extracted.text, self.config.max_content_length),
            self.config.min_content_length,
        )
        if isinstance(normalized, Failure):
            return self._fail(url, trace, normalized)

        # ------------------------------------------------------------------
        # 5 — Summarize (optional, degrades on failure)
        # ------------------------------------------------------------------
        summarized = False
        if not summarize:
            analysis = SKIPPED_PLACEHOLDER
        elif self.summarizer is None:
            analysis = NOT_CONFIGURED_PLACEHOLDER
        else:
            trace.enter(PipelineState.SUMMARIZING)
            outcome = await self.summarizer.summarize(normalized.text)
            if isinstance(outcome, Failure):
                logger.warning(
                    "[Summarization] %s degraded: %s", url, outcome.kind.value
                )
                analysis = degraded_placeholder(outcome)
            else:
                analysis = outcome
                summarized = True

        # ------------------------------------------------------------------
        # 6 — Respond
        # ------------------------------------------------------------------
        trace.enter(PipelineState.RESPONDING)
        logger.info(
            "[Pipeline] %s analysed in %d ms (%d chars)", url, trace.elapsed_ms, normalized.length
        )
        return AnalysisResult(
            url=url,
            trace=trace,
            analysis=analysis,
            content=normalized,
            summarized=summarized,
            title=title,
        )

    @staticmethod
    def _fail(url: str, trace: PipelineTrace, failure: Failure) -> AnalysisResult:
        trace.enter(PipelineState.FAILED)
        logger.info("[Pipeline] %s failed: %s (%d)", url, failure.kind.value, failure.status)
        return AnalysisResult(url=url, trace=trace, failure=failure)
