"""LastActivityResolver - most recent upload time of a site"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, tzinfo

from siteprogress.domain.models import UploadEvent
from siteprogress.domain.ports import TaskStore
from siteprogress.services.timestamps import (
    format_activity,
    normalize_timestamp,
    resolve_timezone,
)

logger = logging.getLogger(__name__)

NO_ACTIVITY = "-"


def latest_event(
    events: Iterable[UploadEvent], tz: tzinfo
) -> tuple[UploadEvent, datetime] | None:
    """
    Event with the greatest uploadedAt. On ties the first one seen wins.
    Events without a readable timestamp are ignored.
    """
    best: tuple[UploadEvent, datetime] | None = None
    for event in events:
        uploaded_at = normalize_timestamp(event.uploaded_at, tz)
        if uploaded_at is None:
            continue
        if best is None or uploaded_at > best[1]:
            best = (event, uploaded_at)
    return best


class LastActivityResolver:
    """
    Scans every task record whose siteName matches case-insensitively and
    reports the latest upload as "DD/MM/YY, HH.MM".
    """

    def __init__(self, task_store: TaskStore, display_timezone: str | tzinfo = "UTC"):
        self._tasks = task_store
        self._tz = resolve_timezone(display_timezone)

    def resolve_last_activity(self, site_name: str | None) -> str:
        if not site_name or site_name == NO_ACTIVITY:
            return NO_ACTIVITY

        try:
            records = self._tasks.list_all()
        except Exception:
            logger.exception("Failed to read task records: site_name=%s", site_name)
            return NO_ACTIVITY

        wanted = site_name.casefold()
        events = (
            event
            for record in records
            if record.site_name and record.site_name.casefold() == wanted
            for event in record.sections
        )
        latest = latest_event(events, self._tz)
        if latest is None:
            return NO_ACTIVITY

        event, uploaded_at = latest
        logger.debug(
            "Latest upload: site_name=%s, section=%s, division=%s, at=%s",
            site_name,
            event.section,
            event.division,
            uploaded_at.isoformat(),
        )
        return format_activity(uploaded_at, self._tz)
