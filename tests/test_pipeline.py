"""End-to-end tests for the request orchestrator.

The target site is mocked with ``respx``; the model with ``FakeGenerator``.
"""

from __future__ import annotations

import asyncio
import time

import httpx
import pytest
import respx

from doclens.errors import ErrorKind
from doclens.llm.summarizer import Summarizer
from doclens.pipeline import (
    NOT_CONFIGURED_PLACEHOLDER,
    SKIPPED_PLACEHOLDER,
    AnalysisPipeline,
    PipelineState,
)
from tests.helpers import FakeGenerator, make_settings

_LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. "
)
_ARTICLE_3000 = (_LOREM * 30)[:3000]

_DOC_HTML = f"""\
<!DOCTYPE html>
<html>
<head><title>Docs</title></head>
<body>
  <nav>Home | API | Blog</nav>
  <article><p>{_ARTICLE_3000}</p></article>
  <footer>Copyright 2024</footer>
</body>
</html>
"""


class _SlowClient(httpx.AsyncClient):
    async def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        await asyncio.sleep(30)
        raise AssertionError("unreachable")


def _states(result) -> list[PipelineState]:
    return [state for state, _ in result.trace.transitions]


# ---------------------------------------------------------------------------
# Success paths
# ---------------------------------------------------------------------------

class TestSuccess:
    async def test_article_is_capped_and_url_echoed(self) -> None:
        config = make_settings(max_content_length=1000)
        with respx.mock:
            respx.get("https://example.com/docs").mock(
                return_value=httpx.Response(200, html=_DOC_HTML)
            )
            result = await AnalysisPipeline(config).run("https://example.com/docs")

        body = result.to_dict()
        assert result.status_code == 200
        assert body["success"] is True
        assert len(body["content"]) <= 1000
        assert body["content"].startswith("Lorem ipsum")
        assert "Home | API" not in body["content"]
        assert body["metadata"]["url"] == "https://example.com/docs"
        assert body["metadata"]["contentLength"] == len(body["content"])
        assert body["metadata"]["processingTimeMs"] >= 0
        assert body["metadata"]["timestamp"].endswith("Z")
        assert result.title == "Docs"
        assert "title" not in body

    async def test_summary_is_included(self) -> None:
        generator = FakeGenerator("## Technology Overview\nA lorem library.")
        pipeline = AnalysisPipeline(make_settings(), summarizer=Summarizer(generator, timeout=1.0))
        with respx.mock:
            respx.get("https://example.com/docs").mock(
                return_value=httpx.Response(200, html=_DOC_HTML)
            )
            result = await pipeline.run("https://example.com/docs")

        assert result.success
        assert result.summarized is True
        assert result.analysis == "## Technology Overview\nA lorem library."
        assert "Lorem ipsum" in generator.prompts[0]
        assert PipelineState.SUMMARIZING in _states(result)
        assert _states(result)[-1] is PipelineState.RESPONDING

    async def test_unconfigured_summarizer_returns_placeholder(self) -> None:
        with respx.mock:
            respx.get("https://example.com/docs").mock(
                return_value=httpx.Response(200, html=_DOC_HTML)
            )
            result = await AnalysisPipeline(make_settings()).run("https://example.com/docs")

        assert result.success
        assert result.analysis == NOT_CONFIGURED_PLACEHOLDER
        assert result.to_dict()["content"]
        assert PipelineState.SUMMARIZING not in _states(result)

    async def test_summary_can_be_skipped(self) -> None:
        generator = FakeGenerator()
        pipeline = AnalysisPipeline(make_settings(), summarizer=Summarizer(generator))
        with respx.mock:
            respx.get("https://example.com/docs").mock(
                return_value=httpx.Response(200, html=_DOC_HTML)
            )
            result = await pipeline.run("https://example.com/docs", summarize=False)

        assert result.analysis == SKIPPED_PLACEHOLDER
        assert generator.prompts == []

    async def test_failing_summarizer_degrades(self) -> None:
        generator = FakeGenerator(error=RuntimeError("model overloaded"))
        pipeline = AnalysisPipeline(make_settings(), summarizer=Summarizer(generator, timeout=1.0))
        with respx.mock:
            respx.get("https://example.com/docs").mock(
                return_value=httpx.Response(200, html=_DOC_HTML)
            )
            result = await pipeline.run("https://example.com/docs")

        body = result.to_dict()
        assert result.status_code == 200
        assert body["success"] is True
        assert body["analysis"].startswith("Analysis unavailable")
        assert "model overloaded" in body["analysis"]
        assert body["content"].startswith("Lorem ipsum")

    async def test_summarizer_timeout_degrades(self) -> None:
        generator = FakeGenerator(delay=5.0)
        pipeline = AnalysisPipeline(make_settings(), summarizer=Summarizer(generator, timeout=0.05))
        with respx.mock:
            respx.get("https://example.com/docs").mock(
                return_value=httpx.Response(200, html=_DOC_HTML)
            )
            start = time.monotonic()
            result = await pipeline.run("https://example.com/docs")

        assert time.monotonic() - start < 2.0
        assert result.status_code == 200
        assert "timed out" in result.analysis


# ---------------------------------------------------------------------------
# Failure paths
# ---------------------------------------------------------------------------

class TestFailures:
    async def test_invalid_scheme_makes_no_network_call(self) -> None:
        with respx.mock(assert_all_called=False) as mock:
            result = await AnalysisPipeline(make_settings()).run("ftp://example.com/file")

        assert len(mock.calls) == 0
        assert result.status_code == 400
        assert result.failure.kind is ErrorKind.VALIDATION
        assert _states(result) == [PipelineState.VALIDATING, PipelineState.FAILED]
        assert result.to_dict()["error"] == "URL Validation Failed"

    @pytest.mark.parametrize(
        "url",
        ["http://exa<mple>.com/", "https://exa|mple.com/", "http://exa%20mple.com"],
    )
    async def test_malformed_host_makes_no_network_call(self, url: str) -> None:
        with respx.mock(assert_all_called=False) as mock:
            mock.route().mock(return_value=httpx.Response(200, html=_DOC_HTML))
            result = await AnalysisPipeline(make_settings()).run(url)

        assert len(mock.calls) == 0
        assert result.status_code == 400
        assert result.failure.kind is ErrorKind.VALIDATION
        assert _states(result) == [PipelineState.VALIDATING, PipelineState.FAILED]

    async def test_upstream_503(self) -> None:
        with respx.mock:
            respx.get("https://example.com/down").mock(return_value=httpx.Response(503))
            result = await AnalysisPipeline(make_settings()).run("https://example.com/down")

        body = result.to_dict()
        assert result.status_code == 503
        assert body["status"] == 503
        assert "503" in body["details"]

    async def test_unsupported_content_type(self) -> None:
        with respx.mock:
            respx.get("https://example.com/data.json").mock(
                return_value=httpx.Response(200, json={"a": 1})
            )
            result = await AnalysisPipeline(make_settings()).run("https://example.com/data.json")

        assert result.status_code == 415
        assert result.failure.kind is ErrorKind.UNSUPPORTED_CONTENT_TYPE

    async def test_insufficient_content_skips_summarizer(self) -> None:
        generator = FakeGenerator()
        pipeline = AnalysisPipeline(make_settings(), summarizer=Summarizer(generator))
        with respx.mock:
            respx.get("https://example.com/empty").mock(
                return_value=httpx.Response(200, html="<html><body><p>Tiny.</p></body></html>")
            )
            result = await pipeline.run("https://example.com/empty")

        assert result.status_code == 422
        assert result.failure.kind is ErrorKind.INSUFFICIENT_CONTENT
        assert generator.prompts == []

    async def test_fetch_timeout_returns_promptly(self) -> None:
        pipeline = AnalysisPipeline(make_settings(fetch_timeout=0.1), http_client=_SlowClient())
        start = time.monotonic()
        result = await pipeline.run("https://slow.example/")
        elapsed = time.monotonic() - start

        assert elapsed < 1.0
        assert result.status_code == 504
        assert result.failure.kind is ErrorKind.FETCH

    async def test_connection_failure_is_504(self) -> None:
        with respx.mock:
            respx.get("https://gone.example/").mock(side_effect=httpx.ConnectError("refused"))
            result = await AnalysisPipeline(make_settings()).run("https://gone.example/")

        assert result.status_code == 504

    async def test_unexpected_error_is_internal(self, monkeypatch) -> None:
        def explode(*args, **kwargs):
            raise RuntimeError("parser crashed")

        monkeypatch.setattr("doclens.pipeline.extract_content", explode)
        with respx.mock:
            respx.get("https://example.com/docs").mock(
                return_value=httpx.Response(200, html=_DOC_HTML)
            )
            result = await AnalysisPipeline(make_settings()).run("https://example.com/docs")

        assert result.status_code == 500
        assert result.failure.kind is ErrorKind.INTERNAL
        assert result.to_dict()["details"] == "parser crashed"
        assert _states(result)[-1] is PipelineState.FAILED
