"""Profile rows and auth session models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProfileRole(str, Enum):
    """Admin roles stored on a profile."""

    MASTER = "master"
    EDITOR = "editor"
    USER = "user"


class Profile(BaseModel):
    """A row of the ``profiles`` table."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    email: str = Field(..., min_length=3)
    name: str = Field(..., min_length=1)
    role: ProfileRole = ProfileRole.USER
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SessionUser(BaseModel):
    id: str
    email: str | None = None


class Session(BaseModel):
    """Authenticated session as issued by the identity provider."""

    user: SessionUser
    expires_at: datetime | None = None
