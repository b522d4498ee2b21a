from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from noticeboard.core.config import Settings, get_settings
from noticeboard.core.log import configure_logging
from noticeboard.repositories.json_storage import JsonStorage, StorageError
from noticeboard.routers import announcements as announcements_router
from noticeboard.routers import auth as auth_router
from noticeboard.services.announcement_service import AnnouncementService
from noticeboard.services.auth_service import AuthService
from noticeboard.services.image_store import LocalImageStore
from noticeboard.services.session_service import SessionStore
from noticeboard.services.summarizer import Summarizer, build_summarizer

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    Path(app.state.settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.state.auth_service.bootstrap_admin()
    yield


async def _storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": "Failed to persist changes"}, status_code=500)


def create_app(settings: Optional[Settings] = None, summarizer: Optional[Summarizer] = None) -> FastAPI:
    """Factory compatible with uvicorn (`uvicorn noticeboard.app:create_app --factory`)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    storage = JsonStorage(settings.data_file)
    sessions = SessionStore(settings.session_ttl_seconds)

    app = FastAPI(title="Campus Noticeboard API", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage
    app.state.sessions = sessions
    app.state.auth_service = AuthService(storage, sessions, settings)
    app.state.announcement_service = AnnouncementService(storage, summarizer or build_summarizer(settings))
    app.state.image_store = LocalImageStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)

    allowed_cors = {settings.frontend_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:5000"})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(o for o in allowed_cors if o),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(auth_router.router)
    app.include_router(announcements_router.router)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app
