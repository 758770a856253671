"""SectionChecklist - per-entry breakdown of a site's checklist

Same matching and target rules as ProgressAggregator, reported per
checklist entry instead of summed per division (site preview screen).
"""

from __future__ import annotations

import logging

from siteprogress.domain.checklist import CHECKLIST
from siteprogress.domain.models import Division, SectionProgress, UploadEvent
from siteprogress.domain.ports import BoqStore, TaskStore
from siteprogress.services.boq import resolve_target
from siteprogress.services.progress_aggregator import flatten_sections
from siteprogress.services.site_reader import DEFAULT_READ_TIMEOUT, SiteDataReader

logger = logging.getLogger(__name__)


class SectionChecklist:
    def __init__(
        self,
        task_store: TaskStore,
        boq_store: BoqStore,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ) -> None:
        self._reader = SiteDataReader(task_store, boq_store, read_timeout)

    def list_sections(
        self,
        site_id: str | None,
        site_name: str | None = None,
        division: Division | str | None = None,
    ) -> list[SectionProgress]:
        """
        Args:
            site_id: siteId (preferred for the task lookup)
            site_name: siteName
            division: restrict to one division (enum or case-insensitive text)

        Returns:
            one SectionProgress per checklist entry, in checklist order

        Raises:
            ValueError: division text is not a known division
            TaskFetchError / ReadTimeoutError: task records could not be read
        """
        wanted = _to_division(division)
        site_id = site_id or ""
        site_name = site_name or ""
        if not site_id and not site_name:
            return []

        snapshot = self._reader.read(site_id, site_name)
        if not snapshot.records:
            return []

        events = flatten_sections(snapshot.records)
        rows = []
        for entry in CHECKLIST:
            if wanted is not None and entry.division is not wanted:
                continue
            uploads = [e for e in events if e.section == entry.section]
            target, source = resolve_target(entry.title, snapshot.boq)
            rows.append(
                _section_row(
                    entry.title, entry.section, entry.division, uploads, target, source
                )
            )

        logger.debug(
            "Listed %d sections: site_id=%s, site_name=%s, division=%s",
            len(rows),
            site_id,
            site_name,
            wanted.value if wanted else "*",
        )
        return rows


def _to_division(division: Division | str | None) -> Division | None:
    if division is None or isinstance(division, Division):
        return division
    parsed = Division.parse(division)
    if parsed is None:
        raise ValueError(f"unknown division: {division!r}")
    return parsed


def _section_row(
    title: str,
    section: str,
    division: Division,
    uploads: list[UploadEvent],
    target: int | float,
    source: str,
) -> SectionProgress:
    return SectionProgress(
        title=title,
        section=section,
        division=division,
        uploaded=len(uploads),
        target=target,
        target_source=source,
        done=any(u.is_done for u in uploads),
        rejected=any(u.is_rejected for u in uploads),
        reject_reasons=tuple(
            str(u.reject_reason) for u in uploads if u.is_rejected and u.reject_reason
        ),
    )
