"""Analysis endpoint.

Routes
------
POST /api/analyze    Body: {"url": "https://..."}    → AnalysisPipeline.run
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from doclens.api.body import parse_body
from doclens.pipeline import AnalysisPipeline

router = APIRouter()


class AnalyzeRequest(BaseModel):
    url: str


@router.post("/analyze")
async def analyze_endpoint(request: Request) -> JSONResponse:
    """Fetch *url*, extract its main content and summarise it.

    Always answers with the analysis envelope; the status code follows the
    failure kind when the pipeline fails.
    """
    body = await parse_body(request, AnalyzeRequest)
    pipeline = AnalysisPipeline(
        request.app.state.settings,
        summarizer=request.app.state.summarizer,
    )
    result = await pipeline.run(body.url)
    return JSONResponse(content=result.to_dict(), status_code=result.status_code)
