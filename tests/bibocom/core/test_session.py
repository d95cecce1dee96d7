"""Tests for SessionStore and AuthContext."""

import pytest

from bibocom.core.errors import AuthRequiredError
from bibocom.core.session import AuthContext, AuthSession, SessionStore


def test_store_round_trip(session_store, current_user, faker):
    token = faker.sha256()
    session_store.write(AuthSession(token=token, user=current_user))

    restored = session_store.read()
    assert restored.token == token
    assert restored.user.id == current_user.id
    assert restored.user.email == current_user.email


def test_store_missing_file(session_store):
    assert session_store.read() is None


def test_store_unreadable_file(session_store):
    session_store.path.write_text("{not json", encoding="utf-8")
    assert session_store.read() is None


def test_store_without_token(session_store):
    session_store.path.write_text('{"user": null}', encoding="utf-8")
    assert session_store.read() is None


def test_from_store_restores_session(session_store, current_user):
    session_store.write(AuthSession(token="abc", user=current_user))
    auth = AuthContext.from_store(session_store)
    assert auth.is_authenticated
    assert auth.user_id == current_user.id
    assert auth.auth_headers() == {"Authorization": "Bearer abc"}


def test_logout_deletes_store_and_notifies(auth, session_store):
    calls = []
    auth.add_logout_listener(lambda: calls.append("out"))
    assert session_store.path.exists()

    auth.logout()

    assert not auth.is_authenticated
    assert auth.current_user is None
    assert not session_store.path.exists()
    assert calls == ["out"]


def test_removed_listener_not_called(auth):
    calls = []
    remove = auth.add_logout_listener(lambda: calls.append("out"))
    remove()
    auth.logout()
    assert calls == []


def test_auth_headers_without_token(anonymous_auth):
    assert not anonymous_auth.is_authenticated
    with pytest.raises(AuthRequiredError):
        anonymous_auth.auth_headers()


def test_session_store_default_path(monkeypatch, tmp_path):
    monkeypatch.setenv("SESSION_FILE", str(tmp_path / "s.json"))
    assert SessionStore().path == tmp_path / "s.json"
