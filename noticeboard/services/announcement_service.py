"""
Announcement use cases: validation, author attribution and AI summaries on
top of the record store.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from noticeboard.domain.announcements import (
    Announcement,
    AnnouncementCreate,
    AnnouncementUpdate,
    AnnouncementValidationError,
    check_event_range,
    parse_create,
    parse_update,
)
from noticeboard.domain.users import User
from noticeboard.repositories.json_storage import JsonStorage
from noticeboard.services.summarizer import Summarizer

logger = logging.getLogger(__name__)

SUMMARY_MIN_CONTENT_LENGTH = 200
SUMMARIZE_MIN_TEXT_LENGTH = 50

EDITABLE_FIELDS = ("title", "content", "category", "event_start_date", "event_end_date")


def _provided(fields: Mapping[str, Any]) -> dict:
    """Keep editable fields that carry a value; blank form inputs mean 'unchanged'."""
    out = {}
    for key in EDITABLE_FIELDS:
        value = fields.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        out[key] = value
    return out


class AnnouncementService:
    def __init__(self, storage: JsonStorage, summarizer: Summarizer):
        self.storage = storage
        self.summarizer = summarizer

    def _summarize(self, text: str) -> Optional[str]:
        try:
            return self.summarizer.summarize(text)
        except Exception as exc:
            logger.warning("Summarizer failed, continuing without summary: %s", exc)
            return None

    def _summary_for(self, content: str) -> Optional[str]:
        if len(content) <= SUMMARY_MIN_CONTENT_LENGTH:
            return None
        return self._summarize(content)

    # -------------------------------------- reads --------------------------------------
    def list_announcements(self, category: Optional[str] = None, query: Optional[str] = None) -> list[Announcement]:
        items = self.storage.list_announcements()
        if category:
            items = [a for a in items if a.category == category]
        needle = (query or "").strip().lower()
        if needle:
            items = [
                a
                for a in items
                if needle in a.title.lower() or needle in a.content.lower() or needle in (a.summary or "").lower()
            ]
        return items

    def get_announcement(self, announcement_id: str) -> Optional[Announcement]:
        return self.storage.get_announcement(announcement_id)

    # -------------------------------------- writes --------------------------------------
    def validate_new(self, author: User, fields: Mapping[str, Any], image_url: Optional[str] = None) -> AnnouncementCreate:
        data = {"title": "", "content": "", **{k: fields.get(k) for k in EDITABLE_FIELDS if fields.get(k) is not None}}
        data.update(author_id=author.id, author_name=author.display_name, image_url=image_url)
        return parse_create(data)

    def validate_changes(self, fields: Mapping[str, Any], image_url: Optional[str] = None) -> AnnouncementUpdate:
        data = _provided(fields)
        if image_url:
            data["image_url"] = image_url
        return parse_update(data)

    def create_announcement(
        self, author: User, fields: Mapping[str, Any], image_url: Optional[str] = None
    ) -> Announcement:
        draft = self.validate_new(author, fields, image_url)
        summary = self._summary_for(draft.content)
        if summary:
            draft = draft.model_copy(update={"summary": summary})
        announcement = self.storage.create_announcement(draft)
        logger.info("Announcement %s created by %s", announcement.id, author.id)
        return announcement

    def update_announcement(
        self, announcement_id: str, fields: Mapping[str, Any], image_url: Optional[str] = None
    ) -> Optional[Announcement]:
        partial = self.validate_changes(fields, image_url)
        existing = self.storage.get_announcement(announcement_id)
        if existing is None:
            return None
        check_event_range(
            partial.event_start_date or existing.event_start_date,
            partial.event_end_date or existing.event_end_date,
        )
        if partial.content:
            summary = self._summary_for(partial.content)
            if summary:
                partial = partial.model_copy(update={"summary": summary})
        updated = self.storage.update_announcement(announcement_id, partial)
        if updated is not None:
            logger.info("Announcement %s updated", announcement_id)
        return updated

    def delete_announcement(self, announcement_id: str) -> bool:
        deleted = self.storage.delete_announcement(announcement_id)
        if deleted:
            logger.info("Announcement %s deleted", announcement_id)
        return deleted

    def summarize_text(self, text: str) -> Optional[str]:
        if len((text or "").strip()) < SUMMARIZE_MIN_TEXT_LENGTH:
            raise AnnouncementValidationError(
                f"Text must be at least {SUMMARIZE_MIN_TEXT_LENGTH} characters long"
            )
        return self._summarize(text)
