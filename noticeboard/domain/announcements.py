"""Announcement records and the validation applied before they reach the store."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import ValidationError, field_validator, model_validator

from .base import CamelModel, parse_timestamp

TITLE_MAX_LENGTH = 200


class Category(str, Enum):
    ACADEMIC = "Academic"
    EVENTS = "Events"
    GENERAL = "General"


CATEGORIES = tuple(c.value for c in Category)


class AnnouncementValidationError(ValueError):
    """Raised when author-supplied fields are missing or invalid."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _check_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title is too long (max {TITLE_MAX_LENGTH} characters)")
    return value


def _check_content(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Content is required")
    return value


def _check_event_date(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError("Event dates must be ISO 8601 (YYYY-MM-DD or full timestamp)") from None
    return value


def _check_event_range(start: Optional[str], end: Optional[str]) -> None:
    if start and end and parse_timestamp(end) < parse_timestamp(start):
        raise ValueError("Event end date must not be before its start date")


class _AnnouncementFields(CamelModel):
    @field_validator("title", mode="before", check_fields=False)
    @classmethod
    def clean_title(cls, value: Any) -> Any:
        return _check_title(value) if isinstance(value, str) else value

    @field_validator("content", mode="before", check_fields=False)
    @classmethod
    def clean_content(cls, value: Any) -> Any:
        return _check_content(value) if isinstance(value, str) else value

    @field_validator("event_start_date", "event_end_date", mode="before", check_fields=False)
    @classmethod
    def clean_event_date(cls, value: Any) -> Any:
        return _check_event_date(value) if isinstance(value, str) else value


class AnnouncementCreate(_AnnouncementFields):
    title: str
    content: str
    category: Category
    summary: Optional[str] = None
    image_url: Optional[str] = None
    event_start_date: Optional[str] = None
    event_end_date: Optional[str] = None
    author_id: str
    author_name: str

    @model_validator(mode="after")
    def validate_event_range(self) -> "AnnouncementCreate":
        _check_event_range(self.event_start_date, self.event_end_date)
        return self


class AnnouncementUpdate(_AnnouncementFields):
    """Partial update: only explicitly set fields are merged over the record."""

    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[Category] = None
    summary: Optional[str] = None
    image_url: Optional[str] = None
    event_start_date: Optional[str] = None
    event_end_date: Optional[str] = None

    @model_validator(mode="after")
    def validate_event_range(self) -> "AnnouncementUpdate":
        _check_event_range(self.event_start_date, self.event_end_date)
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class Announcement(AnnouncementCreate):
    id: str
    created_at: str
    updated_at: str


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    msg = str(err.get("msg") or "Invalid value")
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    loc = err.get("loc") or ()
    if loc and loc[0] == "category":
        return f"Category must be one of: {', '.join(CATEGORIES)}"
    if err.get("type") == "missing" and loc:
        return f"{loc[0]} is required"
    return msg


def parse_create(fields: Mapping[str, Any]) -> AnnouncementCreate:
    try:
        return AnnouncementCreate.model_validate(dict(fields))
    except ValidationError as exc:
        raise AnnouncementValidationError(_first_error(exc)) from exc


def parse_update(fields: Mapping[str, Any]) -> AnnouncementUpdate:
    try:
        return AnnouncementUpdate.model_validate(dict(fields))
    except ValidationError as exc:
        raise AnnouncementValidationError(_first_error(exc)) from exc


def check_event_range(start: Optional[str], end: Optional[str]) -> None:
    """Validate a merged start/end pair (update paths that touch only one side)."""
    try:
        _check_event_range(start, end)
    except ValueError as exc:
        raise AnnouncementValidationError(str(exc)) from exc
