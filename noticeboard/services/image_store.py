"""Local disk storage for announcement images served under /uploads."""
from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from noticeboard.repositories.json_storage import StorageError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}


class ImageRejectedError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LocalImageStore:
    def __init__(self, directory: str | Path, url_prefix: str = "/uploads", max_bytes: int = 5 * 1024 * 1024):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def _safe_filename(self, original: str) -> str:
        ext = Path(original).suffix.lower()
        return f"{uuid.uuid4().hex}{ext}"

    def save(self, filename: str, content_type: Optional[str], data: bytes) -> str:
        """Store an uploaded image and return the URL it is served from."""
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS or (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
            raise ImageRejectedError("Only image files are allowed (jpeg, png, gif, webp)")
        if not data:
            raise ImageRejectedError("Uploaded image is empty")
        if len(data) > self.max_bytes:
            raise ImageRejectedError(f"Image exceeds the {self.max_bytes // (1024 * 1024)}MB limit")
        name = self._safe_filename(filename)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / name).write_bytes(data)
        except OSError as exc:
            logger.error("Failed to store upload %s: %s", name, exc)
            raise StorageError(f"Could not store image {name}") from exc
        return f"{self.url_prefix}/{name}"

    def discard(self, url: Optional[str]) -> None:
        """Remove an image previously returned by :meth:`save`; unknown URLs are ignored."""
        if not url or not url.startswith(f"{self.url_prefix}/"):
            return
        name = Path(url[len(self.url_prefix) + 1 :]).name
        try:
            (self.directory / name).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove orphaned upload %s: %s", name, exc)
