"""
Session store — the authority on which bearer tokens are live.

Maps SHA-256(token) to the owning identity.  Sessions are immutable:
they are created on login and deleted on logout, nothing else.
There is no expiry; a token is valid until revoked.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auth.errors import SessionStoreError
from auth.tokens import generate_token, token_digest
from database.models import AuthToken

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    async def create(self, identity_id: uuid.UUID) -> str:
        """Mint a token bound to ``identity_id`` and return it."""

    async def resolve(self, token: str) -> Optional[uuid.UUID]:
        """Return the identity bound to ``token``, or ``None``."""

    async def revoke(self, token: str) -> bool:
        """Delete the binding; ``True`` if one existed."""


class SqlSessionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, identity_id: uuid.UUID) -> str:
        token = generate_token()
        async with self._session_factory() as session:
            session.add(
                AuthToken(
                    token_digest=token_digest(token),
                    user_id=identity_id,
                    created_at=datetime.now(timezone.utc),
                )
            )
            try:
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise SessionStoreError(f"could not record session: {exc}") from exc

        logger.debug("Session created for %s", identity_id)
        return token

    async def resolve(self, token: str) -> Optional[uuid.UUID]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(AuthToken.user_id).where(
                        AuthToken.token_digest == token_digest(token)
                    )
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise SessionStoreError(f"session lookup failed: {exc}") from exc

    async def revoke(self, token: str) -> bool:
        async with self._session_factory() as session:
            try:
                result = await session.execute(
                    delete(AuthToken).where(
                        AuthToken.token_digest == token_digest(token)
                    )
                )
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise SessionStoreError(f"session revoke failed: {exc}") from exc
        return result.rowcount > 0
