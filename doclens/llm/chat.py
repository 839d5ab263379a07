"""Question answering over previously extracted documentation text."""

from __future__ import annotations

import logging
from typing import Union

from doclens.deadline import DeadlineExceeded, race_deadline
from doclens.errors import ErrorKind, Failure
from doclens.llm.backends import TextGenerator

logger = logging.getLogger(__name__)


def build_chat_prompt(question: str, doc_content: str) -> str:
    return (
        "You are a helpful assistant that helps developers understand "
        "documentation and implement code. You have access to the following "
        f"documentation content:\n\n{doc_content}\n\n"
        f"User Question: {question}\n\n"
        "Provide a clear and helpful response. If the question is about "
        "implementation, include relevant code examples. If the question is "
        "about concepts, explain them clearly. If suggesting code improvements, "
        "explain why they're better.\n\n"
        "Response format:\n"
        "1. Direct answer to the question\n"
        "2. Code examples (if relevant)\n"
        "3. Additional tips or best practices (if applicable)"
    )


async def answer_question(
    generator: TextGenerator,
    question: str,
    doc_content: str,
    timeout: float,
) -> Union[str, Failure]:
    """Ask *generator* about *doc_content*; return the answer or a failure."""
    if not question.strip():
        return Failure(ErrorKind.VALIDATION, "Invalid request body", "question must not be empty")

    prompt = build_chat_prompt(question.strip(), doc_content)
    try:
        answer = await race_deadline(generator.generate(prompt), timeout)
    except DeadlineExceeded as exc:
        logger.warning("[Chat] %s", exc)
        return Failure(ErrorKind.SUMMARIZATION_TIMEOUT, "Chat timed out", str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("[Chat] backend error")
        return Failure(
            ErrorKind.SUMMARIZATION_FAILURE,
            "Failed to process your question",
            str(exc) or exc.__class__.__name__,
        )

    if not answer or not answer.strip():
        return Failure(
            ErrorKind.SUMMARIZATION_FAILURE,
            "Failed to process your question",
            "Model returned empty output",
        )
    return answer.strip()
