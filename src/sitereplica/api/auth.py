"""Caller identity precondition for the HTTP API."""

from __future__ import annotations

import hmac
import logging

from fastapi import Depends, Header, HTTPException, Request

from sitereplica.config import ServiceConfig

__all__ = ["get_config", "require_caller"]

logger = logging.getLogger(__name__)


def get_config(request: Request) -> ServiceConfig:
    return request.app.state.config


def require_caller(
    authorization: str | None = Header(default=None),
    config: ServiceConfig = Depends(get_config),
) -> str:
    """Return the caller's bearer token, or answer 401.

    With no configured tokens any non-empty header is accepted; identity is then
    the responsibility of whatever sits in front of the API.
    """

    if not authorization or not authorization.strip():
        logger.warning("Missing authorization header")
        raise HTTPException(status_code=401, detail="Missing authorization")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip() if scheme.lower() == "bearer" else authorization.strip()

    if config.api_tokens and not any(
        hmac.compare_digest(token.encode(), allowed.encode()) for allowed in config.api_tokens
    ):
        logger.warning("Authentication failed")
        raise HTTPException(status_code=401, detail="Unauthorized")
    return token
