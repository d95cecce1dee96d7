"""Fixtures for settings and the auth session."""

import pytest

from bibocom.config import Settings
from bibocom.core.session import AuthContext, AuthSession, SessionStore
from bibocom.schemas.user import User, UserRole

API_URL = "http://api.test/api"


@pytest.fixture(scope="function")
def settings(tmp_path):
    return Settings(
        api_url=API_URL,
        environment="test",
        session_file=str(tmp_path / "session.json"),
        request_timeout_seconds=5,
        poll_interval_seconds=1,
    )


@pytest.fixture(scope="function")
def session_store(tmp_path):
    return SessionStore(tmp_path / "session.json")


@pytest.fixture(scope="function")
def current_user(faker):
    return User(
        id=faker.random_int(min=1, max=500),
        email=faker.email(),
        first_name=faker.first_name(),
        last_name=faker.last_name(),
        role=UserRole.CLIENT,
    )


@pytest.fixture(scope="function")
def auth(faker, session_store, current_user):
    """Authenticated context backed by a temporary session file."""
    context = AuthContext(store=session_store)
    context.login(AuthSession(token=faker.sha256(), user=current_user))
    return context


@pytest.fixture(scope="function")
def anonymous_auth(session_store):
    return AuthContext(store=session_store)
