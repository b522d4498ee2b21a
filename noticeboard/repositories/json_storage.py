"""
JSON-file record store.

One document on disk holds both collections:

    {"announcements": [...], "users": [...]}

Every call reads the whole document, and every mutation rewrites it whole.
There is no locking: two writers interleaving can lose an update. That is
accepted for a board with a single administrator and a low write rate.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from noticeboard.domain.announcements import Announcement, AnnouncementCreate, AnnouncementUpdate
from noticeboard.domain.base import isoformat, parse_timestamp, utc_now
from noticeboard.domain.users import User, UserUpsert

logger = logging.getLogger(__name__)

COLLECTIONS = ("announcements", "users")


class StorageError(Exception):
    """The JSON document could not be written."""


def db_defaults(db: Any) -> dict:
    if not isinstance(db, dict):
        db = {}
    for name in COLLECTIONS:
        if not isinstance(db.get(name), list):
            db[name] = []
    return db


def load(path: Path) -> dict:
    """Read the document; a missing or corrupt file reads as an empty database."""
    if not path.exists():
        return db_defaults({})
    try:
        with path.open("r", encoding="utf-8") as f:
            return db_defaults(json.load(f))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s, treating it as empty: %s", path, exc)
        return db_defaults({})


def save(path: Path, db: dict) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(db, ensure_ascii=False, indent=2)
        path.write_text(payload, encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.error("Failed to write %s: %s", path, exc)
        raise StorageError(f"Could not write {path}") from exc


def _index_of(records: list, record_id: str) -> Optional[int]:
    for index, raw in enumerate(records):
        if isinstance(raw, dict) and raw.get("id") == record_id:
            return index
    return None


class JsonStorage:
    """CRUD over announcements and users backed by a single JSON file."""

    def __init__(self, path: str | Path, clock: Optional[Callable[[], datetime]] = None):
        self.path = Path(path)
        self._clock = clock or utc_now

    # -------------------------- helpers --------------------------
    def _now(self) -> str:
        return isoformat(self._clock())

    def _read(self) -> dict:
        return load(self.path)

    def _write(self, db: dict) -> None:
        save(self.path, db)

    def _records(self, db: dict, name: str, model):
        records = []
        for raw in db[name]:
            try:
                records.append(model.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Skipping malformed %s record in %s: %s", name, self.path, exc.errors()[0])
        return records

    def _parse_at(self, db: dict, name: str, index: Optional[int], model):
        if index is None:
            return None
        try:
            return model.model_validate(db[name][index])
        except ValidationError as exc:
            logger.warning("Ignoring malformed %s record in %s: %s", name, self.path, exc.errors()[0])
            return None

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        for user in self._records(self._read(), "users", User):
            if user.id == user_id:
                return user
        return None

    def find_users(self, field: str, value: Any) -> list[User]:
        name = User.resolve_field(field)
        if name is None:
            return []
        return [u for u in self._records(self._read(), "users", User) if getattr(u, name) == value]

    def upsert_user(self, data: UserUpsert) -> User:
        db = self._read()
        now = self._now()
        changes = data.model_dump(exclude_unset=True)
        index = _index_of(db["users"], data.id)
        existing = self._parse_at(db, "users", index, User)
        if existing is None:
            user = User.model_validate({**changes, "created_at": now, "updated_at": now})
            if index is None:
                db["users"].append(user.to_document())
            else:
                db["users"][index] = user.to_document()
        else:
            merged = {**existing.model_dump(), **changes}
            merged["created_at"] = existing.created_at
            merged["updated_at"] = now
            user = User.model_validate(merged)
            db["users"][index] = user.to_document()
        self._write(db)
        return user

    # -------------------------- announcements --------------------------
    def list_announcements(self) -> list[Announcement]:
        """All announcements, newest `createdAt` first."""
        items = self._records(self._read(), "announcements", Announcement)
        items.sort(key=lambda a: parse_timestamp(a.created_at), reverse=True)
        return items

    def get_announcement(self, announcement_id: str) -> Optional[Announcement]:
        for item in self._records(self._read(), "announcements", Announcement):
            if item.id == announcement_id:
                return item
        return None

    def create_announcement(self, data: AnnouncementCreate) -> Announcement:
        db = self._read()
        now = self._now()
        announcement = Announcement.model_validate(
            {**data.model_dump(), "id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
        )
        db["announcements"].append(announcement.to_document())
        self._write(db)
        return announcement

    def update_announcement(self, announcement_id: str, partial: AnnouncementUpdate) -> Optional[Announcement]:
        db = self._read()
        index = _index_of(db["announcements"], announcement_id)
        existing = self._parse_at(db, "announcements", index, Announcement)
        if existing is None:
            return None
        merged = {**existing.model_dump(), **partial.changes()}
        merged["id"] = existing.id
        merged["created_at"] = existing.created_at
        merged["updated_at"] = self._now()
        updated = Announcement.model_validate(merged)
        db["announcements"][index] = updated.to_document()
        self._write(db)
        return updated

    def delete_announcement(self, announcement_id: str) -> bool:
        db = self._read()
        before = len(db["announcements"])
        db["announcements"] = [
            raw for raw in db["announcements"] if not (isinstance(raw, dict) and raw.get("id") == announcement_id)
        ]
        if len(db["announcements"]) == before:
            return False
        self._write(db)
        return True
