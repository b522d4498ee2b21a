"""Request-scoped accessors for the services wired in `create_app`."""
from __future__ import annotations

from fastapi import HTTPException, Request

from noticeboard.core.config import Settings
from noticeboard.domain.users import User
from noticeboard.services.announcement_service import AnnouncementService
from noticeboard.services.auth_service import AuthService, UnauthorizedError
from noticeboard.services.image_store import LocalImageStore
from noticeboard.services.session_service import session_token_from_request


def _state(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured")
    return value


def get_settings_dep(request: Request) -> Settings:
    return _state(request, "settings")


def get_auth_service(request: Request) -> AuthService:
    return _state(request, "auth_service")


def get_announcement_service(request: Request) -> AnnouncementService:
    return _state(request, "announcement_service")


def get_image_store(request: Request) -> LocalImageStore:
    return _state(request, "image_store")


def session_token(request: Request) -> str | None:
    return session_token_from_request(request, get_settings_dep(request))


def require_admin(request: Request) -> User:
    """Gate in front of every mutating announcement endpoint."""
    try:
        return get_auth_service(request).require_authenticated(session_token(request))
    except UnauthorizedError:
        raise HTTPException(401, "Unauthorized")
