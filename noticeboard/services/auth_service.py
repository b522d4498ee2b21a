"""
Authentication for the single board administrator.

A client session moves ANONYMOUS -> AUTHENTICATED on login and back to
ANONYMOUS when the session is destroyed (logout) or expires.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from noticeboard.core.config import Settings
from noticeboard.core.security import hash_password, is_valid_hash, verify_password
from noticeboard.domain.users import User, UserUpsert
from noticeboard.repositories.json_storage import JsonStorage
from noticeboard.services.session_service import SessionStore

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class InvalidCredentialsError(AuthError):
    pass


class UnauthorizedError(AuthError):
    pass


class AdminMissingError(AuthError):
    """The seed admin is not in the store even though bootstrap ran."""


class InvalidPasswordHashError(AuthError, ValueError):
    """ADMIN_PASSWORD_HASH is set but is not an Argon2 hash."""


@dataclass
class LoginSuccess:
    session_token: str
    user: User


class AuthService:
    """Seeds the admin identity and guards mutations behind a session."""

    def __init__(self, storage: JsonStorage, sessions: SessionStore, settings: Settings):
        self.storage = storage
        self.sessions = sessions
        self.settings = settings
        if settings.admin_password_hash and not is_valid_hash(settings.admin_password_hash):
            logger.error("ADMIN_PASSWORD_HASH is not a valid Argon2 hash; generate one with scripts/hash_password.py")
            raise InvalidPasswordHashError("ADMIN_PASSWORD_HASH is not a valid Argon2 hash")
        self._password_hash = settings.admin_password_hash or hash_password(settings.admin_password)
        if settings.uses_placeholder_credentials and settings.app_env != "dev":
            logger.warning("Admin password or session secret still uses the placeholder default; override it")

    # -------------------------------------- bootstrap --------------------------------------
    def _resolve_admin(self) -> Optional[User]:
        """The admin record: by configured id first, then by the admin e-mail."""
        user = self.storage.get_user(self.settings.admin_user_id)
        if user is not None:
            return user
        by_email = self.storage.find_users("email", self.settings.admin_email)
        return by_email[0] if by_email else None

    def bootstrap_admin(self) -> User:
        """Create the seed admin unless it already exists under its id or e-mail."""
        existing = self._resolve_admin()
        if existing is not None:
            return existing
        user = self.storage.upsert_user(
            UserUpsert(
                id=self.settings.admin_user_id,
                email=self.settings.admin_email,
                first_name="Admin",
                last_name="",
                profile_image_url="",
            )
        )
        logger.info("Seeded admin user %s", user.id)
        return user

    # -------------------------------------- login --------------------------------------
    def login(self, username: str, password: str) -> LoginSuccess:
        # Evaluate both checks so timing does not reveal which one failed.
        username_ok = secrets.compare_digest(
            (username or "").encode("utf-8"), self.settings.admin_username.encode("utf-8")
        )
        password_ok = verify_password(password or "", self._password_hash)
        if not (username_ok and password_ok):
            logger.info("Rejected admin login attempt")
            raise InvalidCredentialsError("Invalid credentials")

        user = self._resolve_admin()
        if user is None:
            logger.error(
                "Admin user %r / %r not found in %s",
                self.settings.admin_user_id,
                self.settings.admin_email,
                self.storage.path,
            )
            raise AdminMissingError("Admin user not found")

        token = self.sessions.issue(user)
        logger.info("Admin %s logged in", user.id)
        return LoginSuccess(session_token=token, user=user)

    def logout(self, session_token: Optional[str]) -> None:
        if not session_token:
            return
        self.sessions.destroy(session_token)

    # -------------------------------------- gate --------------------------------------
    def current_user(self, session_token: Optional[str]) -> Optional[User]:
        record = self.sessions.get(session_token)
        return record.user if record else None

    def require_authenticated(self, session_token: Optional[str]) -> User:
        user = self.current_user(session_token)
        if user is None:
            raise UnauthorizedError("Unauthorized")
        return user
