"""API-key guard for the scheduling endpoints.

The calling agent sends the shared secret in the ``x-api-key`` header.

Behavior matrix:
  API_SECRET_KEY set + matching header   → allow
  API_SECRET_KEY set + wrong/missing     → 401 Unauthorized
  API_SECRET_KEY empty + DEBUG=true      → allow (local dev convenience)
  API_SECRET_KEY empty + DEBUG=false     → 403 Forbidden (locked in production)
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from meetbook.config import Settings

log = logging.getLogger("meetbook.auth")

_api_key_scheme = APIKeyHeader(name="x-api-key", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def require_api_key(
    api_key: Optional[str] = Depends(_api_key_scheme),
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency: reject requests without the configured API key."""
    expected = settings.api_secret_key

    if not expected:
        if settings.debug:
            return
        log.warning("Request rejected: API_SECRET_KEY not configured")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key not configured. Set API_SECRET_KEY in .env.",
        )

    if api_key is None or not secrets.compare_digest(
        api_key.encode(), expected.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
