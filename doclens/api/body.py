"""Request-body parsing for routes guarded by the bearer-token dependency.

FastAPI decodes a declared body before it resolves router dependencies, so
a malformed payload would be rejected before the caller is authenticated.
Routes here take the raw :class:`~fastapi.Request` and parse inside the
handler instead; the errors raised match FastAPI's own.
"""

from __future__ import annotations

from typing import Type, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


async def parse_body(request: Request, model: Type[ModelT]) -> ModelT:
    """Decode the JSON body of *request* into *model*.

    Raises:
        RequestValidationError: The body is not JSON or does not match
            *model*.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": f"JSON decode error: {exc}"}]
        ) from exc

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in exc.errors()]
        ) from exc
