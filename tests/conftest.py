from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Make the noticeboard package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from noticeboard.core import config as core_config  # noqa: E402
from noticeboard.repositories.json_storage import JsonStorage  # noqa: E402

ADMIN_PASSWORD = "correct-horse-battery"


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture()
def clock():
    return FakeClock(datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "db.json"


@pytest.fixture()
def storage(data_file, clock):
    return JsonStorage(data_file, clock=clock)


@pytest.fixture()
def settings(tmp_path, monkeypatch):
    """Isolated Settings pointing at tmp_path; resets the settings cache around the test."""
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("DATA_FILE", str(tmp_path / "db.json"))
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("SESSION_SECRET", "test-session-secret")
    for name in (
        "ADMIN_USERNAME",
        "ADMIN_PASSWORD_HASH",
        "ADMIN_USER_ID",
        "ADMIN_EMAIL",
        "SESSION_TTL_SECONDS",
        "MAX_UPLOAD_BYTES",
        "GEMINI_API_KEY",
        "VERTEX_PROJECT_ID",
    ):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield core_config.get_settings()
    core_config.get_settings.cache_clear()
