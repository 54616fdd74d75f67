"""
Failure taxonomy for the authentication core.

Every failure leaving the gateway is an ``AuthError`` carrying an
``AuthErrorKind``.  Each kind maps to exactly one HTTP status, so the
transport layer never has to inspect message text.

Store implementations raise the ``StoreError`` hierarchy; the gateway
translates those into ``AuthError`` at its boundary.
"""

from __future__ import annotations

from enum import Enum

from fastapi import status


class AuthErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    CONFLICT = "conflict"
    INTERNAL_ERROR = "internal_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    AuthErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    AuthErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AuthError(Exception):
    """A classified failure returned to callers of the gateway."""

    def __init__(self, kind: AuthErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def public_message(self) -> str:
        """Text safe to show the caller; internal errors never leak detail."""
        if self.kind is AuthErrorKind.INTERNAL_ERROR:
            return INTERNAL_ERROR_MESSAGE
        return self.message

    @classmethod
    def bad_request(cls, message: str) -> "AuthError":
        return cls(AuthErrorKind.BAD_REQUEST, message)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "AuthError":
        return cls(AuthErrorKind.UNAUTHORIZED, message)

    @classmethod
    def conflict(cls, message: str) -> "AuthError":
        return cls(AuthErrorKind.CONFLICT, message)

    @classmethod
    def internal(cls, message: str = INTERNAL_ERROR_MESSAGE) -> "AuthError":
        return cls(AuthErrorKind.INTERNAL_ERROR, message)

    def __repr__(self) -> str:
        return f"AuthError({self.kind.name}, {self.message!r})"


# ── Store-layer errors ─────────────────────────────────────────────────


class StoreError(Exception):
    """Unexpected storage failure (connection lost, driver error, ...)."""


class CredentialStoreError(StoreError):
    pass


class SessionStoreError(StoreError):
    pass


class EmailAlreadyRegistered(CredentialStoreError):
    def __init__(self, email: str) -> None:
        super().__init__(f"email already registered: {email}")
        self.email = email


class IdentityNotFound(CredentialStoreError):
    def __init__(self, identity_id) -> None:
        super().__init__(f"no identity with id {identity_id}")
        self.identity_id = identity_id
