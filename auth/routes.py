"""
Auth API routes — signup, login, logout, password change.

Route prefix: /login
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from auth.dependencies import get_bearer_token, get_current_user_id, get_gateway
from auth.gateway import AuthGateway
from auth.models import PublicIdentity

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────
# Bodies and fields are optional so that missing values reach the gateway
# and come back as 400.  Malformed bodies are turned into 400 by the
# validation handler in api/middleware.py.


class CredentialsRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    password: Optional[str] = None


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    detail: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/signup", response_model=PublicIdentity, status_code=status.HTTP_201_CREATED)
async def signup(
    req: Optional[CredentialsRequest] = None,
    gateway: AuthGateway = Depends(get_gateway),
) -> PublicIdentity:
    """Register a new account."""
    req = req or CredentialsRequest()
    identity = await gateway.signup(req.email, req.password)
    return identity.public()


@router.post("", response_model=TokenResponse)
async def login(
    req: Optional[CredentialsRequest] = None,
    gateway: AuthGateway = Depends(get_gateway),
) -> Dict[str, Any]:
    """Login with email + password."""
    req = req or CredentialsRequest()
    token = await gateway.login(req.email, req.password)
    return {"token": token}


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    gateway: AuthGateway = Depends(get_gateway),
) -> Dict[str, Any]:
    """Invalidate the presented token.  The gateway authenticates it first."""
    await gateway.logout(token)
    return {"detail": "Token deleted"}


@router.post("/password", response_model=MessageResponse)
async def change_password(
    req: Optional[PasswordChangeRequest] = None,
    user_id: uuid.UUID = Depends(get_current_user_id),
    token: Optional[str] = Depends(get_bearer_token),
    gateway: AuthGateway = Depends(get_gateway),
) -> Dict[str, Any]:
    """Store a new password for the logged-in user."""
    req = req or PasswordChangeRequest()
    await gateway.change_password(token, req.password, user_id)
    return {"detail": "Password updated"}
