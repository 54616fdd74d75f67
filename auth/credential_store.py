"""
Credential store — owns account records (email + bcrypt hash).

``CredentialStore`` is the contract the gateway depends on;
``SqlCredentialStore`` is the PostgreSQL implementation.  Every call runs
in its own DB session and commits before returning.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auth.errors import CredentialStoreError, EmailAlreadyRegistered, IdentityNotFound
from auth.models import Identity
from auth.password import hash_password
from database.models import User

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[Identity]:
        """Return the identity registered under ``email`` (exact match), or ``None``."""

    async def create(self, email: str, password: str) -> Identity:
        """Hash ``password`` and persist a new identity.

        Raises ``EmailAlreadyRegistered`` if the email is taken.
        """

    async def update_password(self, identity_id: uuid.UUID, new_password: str) -> None:
        """Replace the stored hash.  Raises ``IdentityNotFound`` on a miss."""


def _to_identity(user: User) -> Identity:
    return Identity(
        id=user.user_id,
        email=user.email,
        password_hash=user.password_hash,
        created_at=user.created_at,
    )


class SqlCredentialStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> Optional[Identity]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(User).where(User.email == email)
                )
                user = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise CredentialStoreError(f"lookup by email failed: {exc}") from exc
        return _to_identity(user) if user is not None else None

    async def create(self, email: str, password: str) -> Identity:
        user = User(
            user_id=uuid.uuid4(),
            email=email,
            password_hash=hash_password(password),
            created_at=datetime.now(timezone.utc),
        )
        async with self._session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                # The unique index on users.email is the real arbiter.
                await session.rollback()
                raise EmailAlreadyRegistered(email) from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                raise CredentialStoreError(f"insert failed: {exc}") from exc

        logger.debug("Stored identity %s", user.user_id)
        return _to_identity(user)

    async def update_password(self, identity_id: uuid.UUID, new_password: str) -> None:
        new_hash = hash_password(new_password)
        async with self._session_factory() as session:
            try:
                result = await session.execute(
                    update(User)
                    .where(User.user_id == identity_id)
                    .values(password_hash=new_hash)
                )
                if result.rowcount == 0:
                    await session.rollback()
                    raise IdentityNotFound(identity_id)
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise CredentialStoreError(f"password update failed: {exc}") from exc
