"""
Account password hashing.

bcrypt only looks at the first 72 bytes of its input (recent releases
refuse longer input outright), so passwords are first reduced to a
fixed 44-byte base64 SHA-256 digest.  Any length is accepted and every
byte counts.  The work factor comes from ``config.bcrypt_rounds``.
"""

from __future__ import annotations

import base64
import hashlib

import bcrypt

from config.settings import config


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


def hash_password(password: str) -> str:
    """Salted bcrypt hash of ``password``, suitable for storage."""
    salt = bcrypt.gensalt(rounds=config.bcrypt_rounds)
    return bcrypt.hashpw(_prehash(password), salt).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode())
    except (ValueError, TypeError):
        return False
