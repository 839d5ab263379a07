"""Documentation chat endpoint.

Routes
------
POST /api/chat    Body: {"question": "...", "docContent": "..."}
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from doclens.api.body import parse_body
from doclens.errors import Failure
from doclens.llm.chat import answer_question

router = APIRouter()


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    doc_content: str = Field(default="", alias="docContent")


@router.post("/chat")
async def chat_endpoint(request: Request) -> JSONResponse:
    """Answer a question about previously extracted documentation text."""
    body = await parse_body(request, ChatRequest)
    summarizer = request.app.state.summarizer
    if summarizer is None:
        return JSONResponse(
            content={
                "error": "Chat unavailable",
                "details": "No summarization backend is configured",
                "status": 503,
            },
            status_code=503,
        )

    answer = await answer_question(
        summarizer.generator, body.question, body.doc_content, summarizer.timeout
    )
    if isinstance(answer, Failure):
        return JSONResponse(content=answer.to_dict(), status_code=answer.status)
    return JSONResponse(content={"success": True, "response": answer})
