"""
Authentication gateway — signup, login, logout, password change and
per-request token authentication.

The gateway owns no records.  It validates inputs, orchestrates the
credential and session stores it was constructed with, and turns every
failure into an ``AuthError``.  Store exceptions never escape unclassified.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from auth.credential_store import CredentialStore
from auth.errors import AuthError, EmailAlreadyRegistered, IdentityNotFound, StoreError
from auth.models import Identity
from auth.password import verify_password
from auth.session_store import SessionStore
from config.settings import config

logger = logging.getLogger(__name__)

_UNIFORM_LOGIN_FAILURE = "Invalid email or password"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


class AuthGateway:
    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionStore,
        *,
        uniform_login_errors: Optional[bool] = None,
    ) -> None:
        self._credentials = credentials
        self._sessions = sessions
        if uniform_login_errors is None:
            uniform_login_errors = config.uniform_login_errors
        self._uniform_login_errors = uniform_login_errors

    # ── Accounts ───────────────────────────────────────────────────────

    async def signup(self, email: Optional[str], password: Optional[str]) -> Identity:
        """Register a new account.  The returned identity still holds the
        hash; callers expose ``identity.public()`` only."""
        if _is_blank(email) or not password:
            raise AuthError.bad_request("Email and password are required")

        try:
            if await self._credentials.find_by_email(email) is not None:
                raise AuthError.conflict("Account already exists")
            identity = await self._credentials.create(email, password)
        except EmailAlreadyRegistered:
            # Lost the race against a concurrent signup for the same email.
            logger.info("Concurrent signup rejected for existing email")
            raise AuthError.conflict("Account already exists")
        except StoreError as exc:
            raise self._internal("signup", exc)

        logger.info("Registered identity %s", identity.id)
        return identity

    async def login(self, email: Optional[str], password: Optional[str]) -> str:
        """Check credentials and open a new session, returning its token."""
        if _is_blank(email):
            raise AuthError.bad_request("Email and password are required")

        try:
            identity = await self._credentials.find_by_email(email)
        except StoreError as exc:
            raise self._internal("login", exc)

        if identity is None:
            logger.info("Login rejected: unknown email")
            raise self._login_failure("User does not exist")
        if not password:
            raise AuthError.bad_request("Password required")
        if not verify_password(password, identity.password_hash):
            logger.info("Login rejected: bad password for %s", identity.id)
            raise self._login_failure("Incorrect password")

        try:
            token = await self._sessions.create(identity.id)
        except StoreError as exc:
            raise self._internal("login", exc)

        logger.info("Login: %s", identity.id)
        return token

    # ── Sessions ───────────────────────────────────────────────────────

    async def authenticate(self, presented_token: Optional[str]) -> uuid.UUID:
        """
        Resolve a presented bearer token to its identity id.

        Read-only and idempotent, safe on every request and retry.  An
        absent or blank credential is rejected without touching the store.
        """
        if _is_blank(presented_token):
            raise AuthError.unauthorized("Missing bearer token")

        try:
            identity_id = await self._sessions.resolve(presented_token)
        except StoreError as exc:
            raise self._internal("authenticate", exc)

        if identity_id is None:
            logger.debug("Rejected unknown or revoked token")
            raise AuthError.unauthorized("Invalid token")
        return identity_id

    async def logout(self, presented_token: Optional[str]) -> None:
        """Revoke the session.  A second logout with the same token fails."""
        identity_id = await self.authenticate(presented_token)

        try:
            revoked = await self._sessions.revoke(presented_token)
        except StoreError as exc:
            raise self._internal("logout", exc)

        if not revoked:
            # Revoked by a concurrent request between authenticate and revoke.
            raise AuthError.unauthorized("User not found for token")
        logger.info("Logout: %s", identity_id)

    async def change_password(
        self,
        presented_token: Optional[str],
        new_password: Optional[str],
        identity_id: uuid.UUID,
    ) -> None:
        """
        Replace the password of the account behind ``presented_token``.

        ``identity_id`` is the id established when the request was
        authenticated; the token is resolved again and must still map to it.
        """
        current_id = await self.authenticate(presented_token)
        if current_id != identity_id:
            logger.warning("Token identity changed mid-request (%s != %s)", current_id, identity_id)
            raise AuthError.unauthorized("Invalid token")
        if not new_password:
            raise AuthError.bad_request("Password required")

        try:
            await self._credentials.update_password(current_id, new_password)
        except IdentityNotFound:
            logger.warning("Session bound to missing identity %s", current_id)
            raise AuthError.unauthorized("Invalid token")
        except StoreError as exc:
            raise self._internal("password change", exc)

        logger.info("Password changed for %s", current_id)

    # ── Helpers ────────────────────────────────────────────────────────

    def _login_failure(self, message: str) -> AuthError:
        if self._uniform_login_errors:
            message = _UNIFORM_LOGIN_FAILURE
        return AuthError.unauthorized(message)

    @staticmethod
    def _internal(operation: str, exc: StoreError) -> AuthError:
        logger.error("Store failure during %s: %s", operation, exc, exc_info=exc)
        return AuthError.internal(f"{operation} failed: {exc}")
