"""
Opaque bearer tokens.

Tokens are random URL-safe strings with ``config.token_bytes`` bytes of
entropy.  They carry no payload; validity is whatever the session store
says.  Only ``token_digest(token)`` is ever persisted.
"""

from __future__ import annotations

import hashlib
import secrets
from typing import Optional

from config.settings import config

BEARER_SCHEME = "bearer"


def generate_token() -> str:
    """Mint a fresh, unguessable session token."""
    return secrets.token_urlsafe(config.token_bytes)


def token_digest(token: str) -> str:
    """SHA-256 hex digest used as the storage key for ``token``."""
    return hashlib.sha256(token.encode()).hexdigest()


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` value.

    Returns ``None`` when the header is absent, uses another scheme, or
    has no token segment.
    """
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        return None
    return parts[1]
