"""Shared test fixtures and collaborator fakes for the blog API test suite."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Request

from blog_api.config.settings import API_ORIGIN_ENV_VARS, BlogSettings, get_settings
from blog_api.devlog import get_dev_log_bus
from blog_api.devlog.bus import DevLogBus
from blog_api.integration.http_client import get_http_client
from blog_api.models.profiles import Profile, ProfileRole, Session, SessionUser


# ---------------------------------------------------------------------------
# Isolate tests from the host environment and cached singletons
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Clear origin/env settings and reset the process-wide accessors."""
    for name in (*API_ORIGIN_ENV_VARS, "VERCEL_URL", "BLOG_ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    get_http_client.cache_clear()
    get_dev_log_bus.cache_clear()
    yield
    get_settings.cache_clear()
    get_http_client.cache_clear()
    get_dev_log_bus.cache_clear()


@pytest.fixture
def settings() -> BlogSettings:
    """Development settings with a short keep-alive."""
    return BlogSettings(environment="development", dev_log_keepalive_seconds=0.05)


@pytest.fixture
def production_settings() -> BlogSettings:
    return BlogSettings(environment="production")


@pytest.fixture
def dev_log_bus() -> DevLogBus:
    return DevLogBus(enabled=True, queue_size=10)


# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------

def make_profile(email: str, *, name: str = "Writer", age_minutes: int = 0) -> Profile:
    created = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=age_minutes)
    return Profile(
        id=uuid.uuid4(),
        email=email,
        name=name,
        role=ProfileRole.EDITOR,
        created_at=created,
        updated_at=created,
    )


class InMemoryProfileRepository:
    """Profile repository backed by a list; optionally fails every query."""

    def __init__(self, profiles: list[Profile] | None = None, error: Exception | None = None) -> None:
        self._profiles = list(profiles or [])
        self._error = error

    async def list_profiles(self) -> list[Profile]:
        if self._error is not None:
            raise self._error
        return sorted(
            self._profiles,
            key=lambda p: p.created_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )

    async def get_profile_by_email(self, email: str) -> Profile | None:
        if self._error is not None:
            raise self._error
        return next((p for p in self._profiles if p.email == email), None)


class FakeSessionProvider:
    """Session provider that records calls instead of talking to an auth SDK.

    ``exchanged_email`` is the email the session gets after a code exchange;
    ``session_email`` seeds an already-signed-in session.
    """

    def __init__(self, session_email: str | None = None, exchanged_email: str | None = None) -> None:
        self.session: Session | None = self._session(session_email) if session_email else None
        self.exchanged_email = exchanged_email
        self.exchanged_codes: list[str] = []
        self.sign_out_count = 0

    @staticmethod
    def _session(email: str | None) -> Session:
        return Session(user=SessionUser(id=str(uuid.uuid4()), email=email))

    async def exchange_code_for_session(self, request: Request, code: str) -> Session:
        self.exchanged_codes.append(code)
        self.session = self._session(self.exchanged_email)
        return self.session

    async def get_session(self, request: Request) -> Session | None:
        return self.session

    async def sign_out(self, request: Request) -> None:
        self.sign_out_count += 1
        self.session = None


@pytest.fixture
def profile_factory():
    """Factory for profile rows: ``profile_factory(email, name=..., age_minutes=...)``."""
    return make_profile


@pytest.fixture
def repository_factory():
    """``repository_factory(profiles, error=None)`` builds an in-memory repository."""
    return InMemoryProfileRepository


@pytest.fixture
def admin_profile() -> Profile:
    return make_profile("admin@example.com", name="Admin")


@pytest.fixture
def profile_repository(admin_profile: Profile) -> InMemoryProfileRepository:
    return InMemoryProfileRepository([admin_profile])


@pytest.fixture
def failing_profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository(error=RuntimeError("relation \"profiles\" does not exist"))


@pytest.fixture
def session_provider() -> FakeSessionProvider:
    """Provider with no session; a code exchange signs in the admin email."""
    return FakeSessionProvider(exchanged_email="admin@example.com")


@pytest.fixture
def signed_in_session_provider() -> FakeSessionProvider:
    return FakeSessionProvider(session_email="admin@example.com")
