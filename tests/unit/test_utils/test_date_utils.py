"""
Unit tests for date utilities
"""

import pytest
from datetime import datetime, date, timedelta, timezone

from utils.date_utils import now, ensure_datetime, format_date


@pytest.mark.unit
class TestDateUtils:
    """Test cases for date utility functions"""

    def test_now_is_naive(self):
        assert now().tzinfo is None

    def test_ensure_datetime(self):
        assert ensure_datetime(None) is None
        assert ensure_datetime(date(2024, 1, 15)) == datetime(2024, 1, 15, 0, 0)
        moment = datetime(2024, 1, 15, 10, 30)
        assert ensure_datetime(moment) is moment

    def test_ensure_datetime_converts_aware_to_local(self):
        aware = datetime(2024, 1, 15, 10, 0, tzinfo=timezone(timedelta(hours=3)))
        result = ensure_datetime(aware)
        assert result.tzinfo is None
        assert result == aware.astimezone().replace(tzinfo=None)

    def test_format_date(self):
        assert format_date(datetime(2024, 1, 5, 18, 45)) == "05/01/2024"
        assert format_date(date(2024, 12, 31)) == "31/12/2024"
        assert format_date(datetime(2024, 1, 5), "%Y-%m-%d") == "2024-01-05"
        assert format_date(None) == ""
