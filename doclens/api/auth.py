"""Bearer-token gate for the API routers.

Identity verification belongs to an upstream provider.  This dependency only
makes sure a well-formed ``Authorization: Bearer <token>`` header is present
(and, when ``DOCLENS_API_TOKEN`` is set, that it matches) before any page is
fetched.
"""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request

from doclens.config import Settings


def require_bearer(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> Optional[str]:
    """Return the bearer token, or raise 401."""
    config: Settings = request.app.state.settings
    if not config.require_auth:
        return None

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if config.api_token and not secrets.compare_digest(token, config.api_token):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return token
