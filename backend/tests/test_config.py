"""Settings validation tests."""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from medtrack.config import Settings


class TestSettings:

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_timezone_must_be_known(self):
        with pytest.raises(ValidationError):
            Settings(timezone="Mars/Olympus_Mons")

    def test_tzinfo_follows_timezone(self):
        assert Settings(timezone="Asia/Kolkata").tzinfo == ZoneInfo("Asia/Kolkata")

    def test_cors_origins_split_and_trimmed(self):
        s = Settings(cors_origins="http://a.test, http://b.test ,")
        assert s.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_sqlite_detection(self):
        assert Settings(database_url="sqlite+aiosqlite:///./x.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@h/db").is_sqlite
