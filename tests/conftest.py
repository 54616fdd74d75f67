"""
Shared pytest fixtures.

In-memory stores honour the same contracts as the SQL stores, including
the atomic email uniqueness check, so gateway and route tests need no
database.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from auth.errors import EmailAlreadyRegistered, IdentityNotFound
from auth.gateway import AuthGateway
from auth.models import Identity
from auth.password import hash_password
from auth.tokens import generate_token
from config.settings import config


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Minimum bcrypt work factor keeps the suite quick."""
    monkeypatch.setattr(config, "bcrypt_rounds", 4)


class InMemoryCredentialStore:
    def __init__(self):
        self.by_email: Dict[str, Identity] = {}
        self.create_conflicts = 0

    async def find_by_email(self, email: str) -> Optional[Identity]:
        # Yield so concurrent signups can both pass the lookup.
        await asyncio.sleep(0)
        return self.by_email.get(email)

    async def create(self, email: str, password: str) -> Identity:
        if email in self.by_email:
            self.create_conflicts += 1
            raise EmailAlreadyRegistered(email)
        identity = Identity(
            id=uuid.uuid4(),
            email=email,
            password_hash=hash_password(password),
            created_at=datetime.now(timezone.utc),
        )
        self.by_email[email] = identity
        return identity

    async def update_password(self, identity_id: uuid.UUID, new_password: str) -> None:
        for email, identity in self.by_email.items():
            if identity.id == identity_id:
                self.by_email[email] = identity.model_copy(
                    update={"password_hash": hash_password(new_password)}
                )
                return
        raise IdentityNotFound(identity_id)


class InMemorySessionStore:
    def __init__(self):
        self.tokens: Dict[str, uuid.UUID] = {}
        self.resolve_calls = 0

    async def create(self, identity_id: uuid.UUID) -> str:
        token = generate_token()
        self.tokens[token] = identity_id
        return token

    async def resolve(self, token: str) -> Optional[uuid.UUID]:
        self.resolve_calls += 1
        return self.tokens.get(token)

    async def revoke(self, token: str) -> bool:
        return self.tokens.pop(token, None) is not None


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def gateway(credential_store, session_store):
    return AuthGateway(credential_store, session_store, uniform_login_errors=False)


@pytest.fixture
def mock_db_session():
    """Mock AsyncSession: ``add`` is sync, the rest are awaitable."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def session_factory(mock_db_session):
    """An ``async_sessionmaker`` stand-in yielding ``mock_db_session``."""
    factory = MagicMock()
    ctx = factory.return_value
    ctx.__aenter__ = AsyncMock(return_value=mock_db_session)
    ctx.__aexit__ = AsyncMock(return_value=False)
    return factory
