"""Unit tests for uploadedAt normalisation and formatting"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock
from zoneinfo import ZoneInfoNotFoundError

import pytest
from siteprogress.services.timestamps import (
    format_activity,
    normalize_timestamp,
    resolve_timezone,
)

_INSTANT = datetime(2025, 3, 6, 14, 30, tzinfo=timezone.utc)


class _ProtoTimestamp:
    """Stand-in for a protobuf Timestamp (ToDatetime returns naive UTC)"""

    def __init__(self, dt: datetime) -> None:
        self._dt = dt

    def ToDatetime(self) -> datetime:
        return self._dt.replace(tzinfo=None)


class TestNormalizeTimestamp:
    @pytest.mark.parametrize(
        "value",
        [
            _INSTANT,
            "2025-03-06T14:30:00Z",
            "2025-03-06T14:30:00+00:00",
            "2025-03-06T21:30:00+07:00",
            int(_INSTANT.timestamp() * 1000),
            {"seconds": int(_INSTANT.timestamp()), "nanoseconds": 0},
            {"_seconds": int(_INSTANT.timestamp()), "_nanoseconds": 0},
            _ProtoTimestamp(_INSTANT),
        ],
    )
    def test_representations_agree(self, value):
        assert normalize_timestamp(value) == _INSTANT

    def test_firestore_timestamp(self):
        """DatetimeWithNanoseconds-like objects exposing to_datetime()"""
        value = MagicMock(spec=["to_datetime"])
        value.to_datetime.return_value = _INSTANT.replace(tzinfo=None)
        assert normalize_timestamp(value) == _INSTANT

    def test_naive_uses_given_zone(self):
        jakarta = timezone(timedelta(hours=7))
        result = normalize_timestamp("2025-03-06T21:30:00", jakarta)
        assert result == _INSTANT

    def test_date_becomes_midnight(self):
        result = normalize_timestamp(date(2025, 3, 6))
        assert result == datetime(2025, 3, 6, tzinfo=timezone.utc)

    def test_nanoseconds(self):
        value = {"seconds": int(_INSTANT.timestamp()), "nanoseconds": 500_000_000}
        assert normalize_timestamp(value) == _INSTANT + timedelta(milliseconds=500)

    @pytest.mark.parametrize(
        "value", [None, True, "", "yesterday", {"foo": 1}, object()]
    )
    def test_unreadable_is_none(self, value):
        assert normalize_timestamp(value) is None


class TestFormatActivity:
    def test_format(self):
        assert format_activity(_INSTANT) == "06/03/25, 14.30"

    def test_format_in_display_zone(self):
        tz = resolve_timezone("Asia/Jakarta")
        assert format_activity(_INSTANT, tz) == "06/03/25, 21.30"


class TestResolveTimezone:
    def test_utc_aliases(self):
        assert resolve_timezone("UTC") is timezone.utc
        assert resolve_timezone("utc") is timezone.utc
        assert resolve_timezone(None) is timezone.utc

    def test_tzinfo_passes_through(self):
        tz = timezone(timedelta(hours=7))
        assert resolve_timezone(tz) is tz

    def test_unknown_zone_raises(self):
        with pytest.raises(ZoneInfoNotFoundError):
            resolve_timezone("Mars/Olympus_Mons")
