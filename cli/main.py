"""doclens CLI — entry-point for running the pipeline and the API.

Usage:
    python cli/main.py --help

Commands:
    analyze   → run one URL through the pipeline and print the result
    serve     → start the HTTP API under uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from doclens.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
import logging

import typer

from doclens.config import settings
from doclens.errors import ConfigurationError
from doclens.llm.summarizer import build_summarizer
from doclens.pipeline import AnalysisPipeline

app = typer.Typer(
    name="doclens",
    help="Fetch a documentation page, clean it, and summarise it.",
    no_args_is_help=True,
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("analyze")
def analyze(
    url: str = typer.Argument(..., help="http(s) URL of the page to analyse."),
    no_summary: bool = typer.Option(
        False, "--no-summary", help="Skip the language model; print cleaned content only."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response envelope."),
) -> None:
    """Fetch *url*, extract its main content and summarise it."""
    _configure_logging()

    summarizer = None
    if not no_summary:
        try:
            summarizer = build_summarizer(settings)
        except ConfigurationError as exc:
            typer.echo(f"❌ {exc}", err=True)
            raise typer.Exit(code=1)

    pipeline = AnalysisPipeline(settings, summarizer=summarizer)
    result = asyncio.run(pipeline.run(url, summarize=not no_summary))
    envelope = result.to_dict()

    if as_json:
        typer.echo(json.dumps(envelope, indent=2))
    elif result.failure is not None:
        details = f" — {result.failure.details}" if result.failure.details else ""
        typer.echo(f"❌ [{result.failure.status}] {result.failure.message}{details}", err=True)
    else:
        meta = envelope["metadata"]
        if result.title:
            typer.echo(f"📄 {result.title}")
        typer.echo(f"🌐 {meta['url']}  ({meta['contentLength']} chars, {meta['processingTimeMs']} ms)")
        typer.echo("")
        typer.echo(envelope["analysis"])
        if no_summary or not result.summarized:
            typer.echo("")
            typer.echo(envelope["content"])

    if result.failure is not None:
        raise typer.Exit(code=1)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Start the HTTP API."""
    import uvicorn

    _configure_logging()
    uvicorn.run(
        "doclens.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()
