from __future__ import annotations

import pytest

from noticeboard.core import config as core_config
from noticeboard.core.security import hash_password
from noticeboard.repositories.json_storage import JsonStorage
from noticeboard.services.auth_service import (
    AdminMissingError,
    AuthService,
    InvalidCredentialsError,
    InvalidPasswordHashError,
    UnauthorizedError,
)
from noticeboard.services.session_service import SessionStore

from conftest import ADMIN_PASSWORD


@pytest.fixture()
def auth(settings, clock):
    storage = JsonStorage(settings.data_file, clock=clock)
    sessions = SessionStore(settings.session_ttl_seconds, clock=clock)
    return AuthService(storage, sessions, settings)


def test_bootstrap_is_idempotent(auth):
    first = auth.bootstrap_admin()
    second = auth.bootstrap_admin()

    assert first.id == second.id == "admin"
    assert first.created_at == second.created_at
    assert len(auth.storage.find_users("email", "admin@example.com")) == 1


def test_login_success_binds_admin(auth):
    auth.bootstrap_admin()

    result = auth.login("admin", ADMIN_PASSWORD)

    assert result.session_token
    user = auth.current_user(result.session_token)
    assert user is not None
    assert user.id == "admin"
    assert auth.require_authenticated(result.session_token).id == "admin"


@pytest.mark.parametrize(
    "username,password",
    [("admin", "wrong-password"), ("root", ADMIN_PASSWORD), ("", ""), ("admin", "")],
)
def test_login_failure_does_not_reveal_which_field(auth, username, password):
    auth.bootstrap_admin()

    with pytest.raises(InvalidCredentialsError) as exc_info:
        auth.login(username, password)

    assert str(exc_info.value) == "Invalid credentials"
    assert len(auth.sessions) == 0
    assert auth.current_user(None) is None


def test_login_without_seed_admin_is_admin_missing(auth):
    with pytest.raises(AdminMissingError):
        auth.login("admin", ADMIN_PASSWORD)


def test_logout_returns_to_anonymous(auth):
    auth.bootstrap_admin()
    token = auth.login("admin", ADMIN_PASSWORD).session_token

    auth.logout(token)

    assert auth.current_user(token) is None
    with pytest.raises(UnauthorizedError):
        auth.require_authenticated(token)
    auth.logout(None)


def test_anonymous_requests_are_unauthorized(auth):
    assert auth.current_user(None) is None
    with pytest.raises(UnauthorizedError):
        auth.require_authenticated(None)
    with pytest.raises(UnauthorizedError):
        auth.require_authenticated("forged-token")


def test_session_expires_after_ttl(auth, clock):
    auth.bootstrap_admin()
    token = auth.login("admin", ADMIN_PASSWORD).session_token

    clock.advance(days=7, seconds=1)

    with pytest.raises(UnauthorizedError):
        auth.require_authenticated(token)


def test_configured_password_hash_wins(monkeypatch, settings, clock):
    monkeypatch.setenv("ADMIN_PASSWORD_HASH", hash_password("from-the-hash"))
    core_config.get_settings.cache_clear()
    configured = core_config.get_settings()
    storage = JsonStorage(configured.data_file, clock=clock)
    auth = AuthService(storage, SessionStore(configured.session_ttl_seconds, clock=clock), configured)
    auth.bootstrap_admin()

    assert auth.login("admin", "from-the-hash").user.id == "admin"
    with pytest.raises(InvalidCredentialsError):
        auth.login("admin", ADMIN_PASSWORD)


def test_admin_is_found_by_email_after_id_change(monkeypatch, auth, clock):
    auth.bootstrap_admin()
    monkeypatch.setenv("ADMIN_USER_ID", "root")
    core_config.get_settings.cache_clear()
    moved = core_config.get_settings()
    restarted = AuthService(
        JsonStorage(moved.data_file, clock=clock), SessionStore(moved.session_ttl_seconds, clock=clock), moved
    )

    assert restarted.bootstrap_admin().id == "admin"
    assert restarted.login("admin", ADMIN_PASSWORD).user.id == "admin"
    assert len(restarted.storage.find_users("email", "admin@example.com")) == 1


def test_malformed_password_hash_fails_at_startup(monkeypatch, settings, clock):
    monkeypatch.setenv("ADMIN_PASSWORD_HASH", "not-an-argon2-hash")
    core_config.get_settings.cache_clear()
    configured = core_config.get_settings()
    storage = JsonStorage(configured.data_file, clock=clock)

    with pytest.raises(InvalidPasswordHashError):
        AuthService(storage, SessionStore(configured.session_ttl_seconds, clock=clock), configured)
