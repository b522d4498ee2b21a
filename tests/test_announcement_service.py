from __future__ import annotations

import pytest

from noticeboard.domain.announcements import AnnouncementValidationError
from noticeboard.domain.users import User
from noticeboard.services.announcement_service import AnnouncementService
from noticeboard.services.summarizer import NullSummarizer

LONG_CONTENT = "The library will extend its opening hours during the exam period. " * 5
ADMIN = User(
    id="admin",
    email="admin@example.com",
    first_name="Ada",
    last_name="Lovelace",
    created_at="2025-01-01T00:00:00Z",
    updated_at="2025-01-01T00:00:00Z",
)


class RecordingSummarizer:
    def __init__(self, result="Library open late during exams."):
        self.result = result
        self.calls = []

    def summarize(self, text):
        self.calls.append(text)
        return self.result


class BrokenSummarizer:
    def summarize(self, text):
        raise TimeoutError("model did not answer")


@pytest.fixture()
def summarizer():
    return RecordingSummarizer()


@pytest.fixture()
def service(storage, summarizer):
    return AnnouncementService(storage, summarizer)


def _fields(**overrides):
    fields = {"title": "Library hours", "content": "Open until 22h.", "category": "General"}
    fields.update(overrides)
    return fields


def test_create_attributes_author_and_skips_summary_for_short_content(service, summarizer):
    item = service.create_announcement(ADMIN, _fields())

    assert item.author_id == "admin"
    assert item.author_name == "Ada Lovelace"
    assert item.summary is None
    assert summarizer.calls == []


def test_create_requests_summary_for_long_content(service, summarizer):
    item = service.create_announcement(ADMIN, _fields(content=LONG_CONTENT))

    assert item.summary == "Library open late during exams."
    assert len(summarizer.calls) == 1


@pytest.mark.parametrize("failing", [BrokenSummarizer(), NullSummarizer(), RecordingSummarizer(result=None)])
def test_summary_failure_never_blocks_create(storage, failing):
    service = AnnouncementService(storage, failing)

    item = service.create_announcement(ADMIN, _fields(content=LONG_CONTENT))

    assert item.summary is None
    assert storage.get_announcement(item.id) == item


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"title": "   "}, "Title is required"),
        ({"content": ""}, "Content is required"),
        ({"title": "x" * 201}, "Title is too long"),
        ({"category": "Sports"}, "Category must be one of"),
        ({"category": ""}, "Category must be one of"),
        ({"event_start_date": "next friday"}, "ISO 8601"),
        ({"event_start_date": "2025-03-10", "event_end_date": "2025-03-01"}, "must not be before"),
    ],
)
def test_invalid_fields_are_rejected_before_storage(service, data_file, overrides, message):
    with pytest.raises(AnnouncementValidationError) as exc_info:
        service.create_announcement(ADMIN, _fields(**overrides))

    assert message in exc_info.value.message
    assert not data_file.exists()


def test_create_keeps_event_range_and_image(service):
    item = service.create_announcement(
        ADMIN,
        _fields(category="Events", event_start_date="2025-04-01", event_end_date="2025-04-03"),
        image_url="/uploads/poster.png",
    )

    assert item.category == "Events"
    assert item.event_start_date == "2025-04-01"
    assert item.event_end_date == "2025-04-03"
    assert item.image_url == "/uploads/poster.png"


def test_update_ignores_blank_fields(service, clock):
    item = service.create_announcement(ADMIN, _fields())
    clock.advance(minutes=1)

    updated = service.update_announcement(item.id, {"title": "", "content": None, "category": "Academic"})

    assert updated.title == item.title
    assert updated.content == item.content
    assert updated.category == "Academic"
    assert updated.created_at == item.created_at
    assert updated.updated_at != item.updated_at


def test_update_regenerates_summary_for_long_content(service, summarizer):
    item = service.create_announcement(ADMIN, _fields())

    updated = service.update_announcement(item.id, {"content": LONG_CONTENT})

    assert updated.summary == "Library open late during exams."
    assert summarizer.calls == [LONG_CONTENT.strip()]


def test_update_unknown_returns_none(service):
    assert service.update_announcement("missing", {"title": "X"}) is None


def test_update_validates_against_existing_event_range(service):
    item = service.create_announcement(
        ADMIN, _fields(event_start_date="2025-03-10", event_end_date="2025-03-12")
    )

    with pytest.raises(AnnouncementValidationError):
        service.update_announcement(item.id, {"event_end_date": "2025-03-01"})
    assert service.get_announcement(item.id).event_end_date == "2025-03-12"


def test_list_filters_by_category_and_query(service, clock):
    service.create_announcement(ADMIN, _fields(title="Exam Schedule", category="Academic"))
    clock.advance(minutes=1)
    service.create_announcement(ADMIN, _fields(title="Spring Fair", content="Food trucks!", category="Events"))

    assert [a.title for a in service.list_announcements()] == ["Spring Fair", "Exam Schedule"]
    assert [a.title for a in service.list_announcements(category="Academic")] == ["Exam Schedule"]
    assert [a.title for a in service.list_announcements(query="TRUCKS")] == ["Spring Fair"]
    assert service.list_announcements(category="General") == []


def test_delete(service):
    item = service.create_announcement(ADMIN, _fields())

    assert service.delete_announcement(item.id) is True
    assert service.delete_announcement(item.id) is False


def test_summarize_text(service, storage):
    with pytest.raises(AnnouncementValidationError):
        service.summarize_text("too short")
    assert service.summarize_text(LONG_CONTENT) == "Library open late during exams."
    assert AnnouncementService(storage, NullSummarizer()).summarize_text(LONG_CONTENT) is None
