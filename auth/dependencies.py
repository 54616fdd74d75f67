"""
FastAPI dependencies for authentication.

Provides ``get_gateway``, ``get_bearer_token`` and ``get_current_user_id``,
used across all protected routes.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Depends, Header, Request

from auth.gateway import AuthGateway
from auth.tokens import extract_bearer_token


def get_gateway(request: Request) -> AuthGateway:
    """The gateway the application was built with (see ``main.create_app``)."""
    return request.app.state.gateway


def get_bearer_token(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[str]:
    return extract_bearer_token(authorization)


async def get_current_user_id(
    token: Optional[str] = Depends(get_bearer_token),
    gateway: AuthGateway = Depends(get_gateway),
) -> uuid.UUID:
    """
    Verify the Bearer token, returning the authenticated user id.

    Raises ``AuthError`` (401) when no token was presented or it is not live.
    """
    return await gateway.authenticate(token)
