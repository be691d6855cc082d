"""API key authentication dependency for admin endpoints."""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from ..config import settings
from ..logging import logger

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def verify_api_key(
    request: Request,
    api_key: str | None = Depends(API_KEY_HEADER),
) -> str:
    """Validate the shared admin secret from the X-API-Key header.

    Raises:
        HTTPException: 401 if the key is missing or wrong.
    """
    if not settings.api_key:
        # validate_env() refuses to start production without API_KEY
        logger.warning("api_key_not_configured", path=request.url.path)
        return ""

    client_ip = request.client.host if request.client else "unknown"
    if not api_key:
        logger.warning("api_key_missing", client_ip=client_ip, path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if not secrets.compare_digest(api_key, settings.api_key):
        logger.warning("api_key_invalid", client_ip=client_ip, path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key
