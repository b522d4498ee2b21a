"""
Configuration helpers for the noticeboard backend.

Reads environment variables once (cached) so routers/services never fetch
os.environ directly. Tests call `get_settings.cache_clear()` after
monkeypatching the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

PLACEHOLDER_ADMIN_PASSWORD = "password123"
PLACEHOLDER_SESSION_SECRET = "default-session-secret-change-me"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_file: str
    upload_dir: str
    frontend_url: str
    admin_username: str
    admin_password: str
    admin_password_hash: str
    admin_user_id: str
    admin_email: str
    session_secret: str
    session_ttl_seconds: int
    max_upload_bytes: int
    gemini_api_key: str
    vertex_project_id: str
    vertex_location: str
    gemini_model: str
    summary_timeout_seconds: int
    log_level: str

    @property
    def uses_placeholder_credentials(self) -> bool:
        if self.admin_password_hash:
            return self.session_secret == PLACEHOLDER_SESSION_SECRET
        return self.admin_password == PLACEHOLDER_ADMIN_PASSWORD or self.session_secret == PLACEHOLDER_SESSION_SECRET


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_file=os.getenv("DATA_FILE") or os.path.join(os.getcwd(), "db.json"),
        upload_dir=os.getenv("UPLOAD_DIR") or os.path.join(os.getcwd(), "uploads"),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/"),
        admin_username=os.getenv("ADMIN_USERNAME") or "admin",
        admin_password=os.getenv("ADMIN_PASSWORD") or PLACEHOLDER_ADMIN_PASSWORD,
        admin_password_hash=(os.getenv("ADMIN_PASSWORD_HASH") or "").strip(),
        admin_user_id=os.getenv("ADMIN_USER_ID") or "admin",
        admin_email=os.getenv("ADMIN_EMAIL") or "admin@example.com",
        session_secret=os.getenv("SESSION_SECRET") or PLACEHOLDER_SESSION_SECRET,
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "604800"), 604800),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", "5242880"), 5 * 1024 * 1024),
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        vertex_project_id=os.getenv("VERTEX_PROJECT_ID", ""),
        vertex_location=os.getenv("VERTEX_LOCATION", "us-central1"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        summary_timeout_seconds=_int(os.getenv("SUMMARY_TIMEOUT_SECONDS", "15"), 15),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
