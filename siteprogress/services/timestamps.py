"""uploadedAt normalisation and display formatting

Upload events written by different clients carry `uploadedAt` as a
Firestore timestamp, a plain datetime/date, epoch milliseconds, a
`{seconds, nanoseconds}` mapping (JSON exports) or an ISO-8601 string.
Everything is normalised to a timezone-aware datetime before comparison.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

ACTIVITY_FORMAT = "%d/%m/%y, %H.%M"


def resolve_timezone(name: str | tzinfo | None) -> tzinfo:
    """IANA name (or tzinfo) -> tzinfo. "UTC" needs no tz database."""
    if name is None:
        return timezone.utc
    if isinstance(name, tzinfo):
        return name
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    return ZoneInfo(name)


def normalize_timestamp(value: Any, tz: tzinfo = timezone.utc) -> datetime | None:
    """
    Convert any supported uploadedAt representation to an aware datetime.

    Args:
        value: raw uploadedAt value
        tz: zone used for naive values (naive strings/datetimes/dates)

    Returns:
        aware datetime, or None when the value is missing or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        dt = _parse_iso(value)
        if dt is None:
            return None
    elif isinstance(value, Mapping):
        return _from_seconds_mapping(value)
    elif hasattr(value, "to_datetime"):
        dt = value.to_datetime()
        if dt.tzinfo is None:
            # protobuf / proto-plus timestamps are UTC
            return dt.replace(tzinfo=timezone.utc)
    elif hasattr(value, "ToDatetime"):
        dt = value.ToDatetime()
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt


def _parse_iso(text: str) -> datetime | None:
    text = text.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _from_seconds_mapping(value: Mapping) -> datetime | None:
    seconds = value.get("seconds", value.get("_seconds"))
    if seconds is None:
        return None
    nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
    try:
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc) + timedelta(
            microseconds=int(nanos) // 1000
        )
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def format_activity(dt: datetime, tz: tzinfo = timezone.utc) -> str:
    """Render as "DD/MM/YY, HH.MM" (24h) in the display zone"""
    return dt.astimezone(tz).strftime(ACTIVITY_FORMAT)
