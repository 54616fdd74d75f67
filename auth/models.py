"""Typed records exchanged between the stores and the gateway."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Identity(BaseModel):
    """A registered account.  ``password_hash`` never leaves the service."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    email: str
    password_hash: str
    created_at: Optional[datetime] = None

    def public(self) -> "PublicIdentity":
        return PublicIdentity(id=self.id, email=self.email)


class PublicIdentity(BaseModel):
    id: uuid.UUID
    email: str


__all__ = ["Identity", "PublicIdentity"]
