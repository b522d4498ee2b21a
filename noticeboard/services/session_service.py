"""Session helpers (issue tokens, cookies, validation)."""
from __future__ import annotations

import hashlib
import hmac
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from fastapi import Request, Response

from noticeboard.core.config import Settings
from noticeboard.domain.users import User

SESSION_COOKIE_NAME = "noticeboard_session"
MIN_TTL_SECONDS = 60


@dataclass(frozen=True)
class SessionRecord:
    user: User
    issued_at: datetime
    expires_at: datetime


class SessionStore:
    """Server-side sessions keyed by an opaque token.

    Expiry is fixed at issuance; consulting a session never extends it.
    Expired entries are pruned whenever a new session is issued.
    """

    def __init__(self, ttl_seconds: int, clock: Optional[Callable[[], datetime]] = None):
        self.ttl = timedelta(seconds=max(MIN_TTL_SECONDS, ttl_seconds))
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def issue(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._drop_expired(now)
            self._sessions[token] = SessionRecord(user=user, issued_at=now, expires_at=now + self.ttl)
        return token

    def get(self, token: Optional[str]) -> Optional[SessionRecord]:
        if not token:
            return None
        now = self._clock()
        with self._lock:
            record = self._sessions.get(token)
            if record is None:
                return None
            if record.expires_at <= now:
                del self._sessions[token]
                return None
            return record

    def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def _drop_expired(self, now: datetime) -> int:
        # caller holds the lock
        expired = [tok for tok, rec in self._sessions.items() if rec.expires_at <= now]
        for tok in expired:
            del self._sessions[tok]
        return len(expired)

    def purge_expired(self) -> int:
        with self._lock:
            return self._drop_expired(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# -------------------------- cookies --------------------------
def _signature(token: str, secret: str) -> str:
    return hmac.new(secret.encode(), token.encode(), hashlib.sha256).hexdigest()


def sign_token(token: str, secret: str) -> str:
    return f"{token}.{_signature(token, secret)}"


def unsign_token(value: Optional[str], secret: str) -> Optional[str]:
    """Return the raw token when the signature matches, else None."""
    if not value or "." not in value:
        return None
    token, _, signature = value.rpartition(".")
    if not token or not secrets.compare_digest(signature, _signature(token, secret)):
        return None
    return token


def session_token_from_request(request: Request, settings: Settings) -> Optional[str]:
    return unsign_token(request.cookies.get(SESSION_COOKIE_NAME), settings.session_secret)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        sign_token(token, settings.session_secret),
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="lax",
        max_age=max(MIN_TTL_SECONDS, settings.session_ttl_seconds),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
