"""Profile data access contracts and the client-side profile fetcher.

The database and the identity provider are external collaborators; the
service only depends on the small protocols below.
"""

from __future__ import annotations

from typing import Protocol

from fastapi import Request

from blog_api.integration.http_client import HttpClient
from blog_api.models.profiles import Profile, Session


class ProfileRepository(Protocol):
    """Query access to the ``profiles`` table. Errors propagate as raised."""

    async def list_profiles(self) -> list[Profile]:
        """All profiles, newest first."""
        ...

    async def get_profile_by_email(self, email: str) -> Profile | None:
        ...


class SessionProvider(Protocol):
    """Cookie-bound session operations delegated to the managed auth SDK."""

    async def exchange_code_for_session(self, request: Request, code: str) -> Session:
        ...

    async def get_session(self, request: Request) -> Session | None:
        ...

    async def sign_out(self, request: Request) -> None:
        ...


async def fetch_profiles(client: HttpClient) -> list[Profile]:
    """Load the profile list through the public API.

    Raises
    ------
    ApiError
        On any failure reported by the API or the transport.
    """
    response = await client.get("api/profiles")
    return [Profile.model_validate(row) for row in response.data or []]
