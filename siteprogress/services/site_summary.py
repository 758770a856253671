"""SiteSummaryService - one site list row per site

Combines progress, derived status, last activity, and the most recent
section uploaded in each division.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import tzinfo

from siteprogress.domain.models import Division, SiteSummary, TaskRecord
from siteprogress.domain.ports import TaskStore
from siteprogress.services.last_activity import (
    NO_ACTIVITY,
    LastActivityResolver,
    latest_event,
)
from siteprogress.services.progress_aggregator import (
    ProgressAggregator,
    flatten_sections,
)
from siteprogress.services.status import derive_site_status
from siteprogress.services.timestamps import resolve_timezone

logger = logging.getLogger(__name__)


def latest_sections(
    records: Iterable[TaskRecord], tz: tzinfo
) -> dict[Division, str]:
    """
    Section name of the most recent upload per division, "-" when none.

    Uploads without a readable timestamp only count when no upload of the
    division has one.
    """
    events = flatten_sections(records)
    out: dict[Division, str] = {}
    for division in Division:
        mine = [e for e in events if Division.parse(e.division) is division]
        if not mine:
            out[division] = NO_ACTIVITY
            continue
        latest = latest_event(mine, tz)
        event = latest[0] if latest else mine[0]
        out[division] = event.section or NO_ACTIVITY
    return out


class SiteSummaryService:
    def __init__(
        self,
        aggregator: ProgressAggregator,
        last_activity: LastActivityResolver,
        task_store: TaskStore,
        display_timezone: str | tzinfo = "UTC",
    ) -> None:
        """
        Args:
            aggregator: progress computation
            last_activity: last upload time lookup
            task_store: source for the latest-section lookup
            display_timezone: zone for naive timestamps
        """
        self._aggregator = aggregator
        self._last_activity = last_activity
        self._tasks = task_store
        self._tz = resolve_timezone(display_timezone)

    def summarize_site(self, site_id: str | None, site_name: str | None) -> SiteSummary:
        site_id = site_id or ""
        site_name = site_name or ""

        progress = self._aggregator.compute_site_progress(site_id, site_name)
        return SiteSummary(
            site_id=site_id,
            site_name=site_name,
            progress=progress,
            status=derive_site_status(progress),
            last_activity=self._last_activity.resolve_last_activity(site_name),
            latest_sections=self._latest_sections(site_id, site_name),
        )

    def summarize_sites(
        self, sites: Iterable[tuple[str | None, str | None]]
    ) -> list[SiteSummary]:
        """Summaries in input order"""
        summaries = [self.summarize_site(site_id, name) for site_id, name in sites]
        logger.info("Summarized %d sites", len(summaries))
        return summaries

    def _latest_sections(self, site_id: str, site_name: str) -> dict[Division, str]:
        empty = {d: NO_ACTIVITY for d in Division}
        if not site_id and not site_name:
            return empty
        try:
            if site_id:
                records = self._tasks.find_by_site_id(site_id)
            else:
                records = self._tasks.find_by_site_name(site_name)
        except Exception:
            logger.exception(
                "Failed to read latest sections: site_id=%s, site_name=%s",
                site_id,
                site_name,
            )
            return empty
        return latest_sections(records, self._tz)
