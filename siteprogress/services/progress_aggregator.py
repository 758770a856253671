"""ProgressAggregator - per-division "uploaded/target" progress of a site

Processing flow:
1. No site_id and no site_name -> zero result, nothing is read
2. Read task records and BOQ concurrently (SiteDataReader)
3. No task records -> zero result
4. Concatenate the sections of every task record
5. For each checklist entry, count the uploads whose section matches the
   entry exactly, collect rejections, and add the entry's target (BOQ
   After DRM quantity or default) to its division
6. Render "uploaded/target" per division

compute_outcome() returns a tagged ProgressOutcome; compute_site_progress()
collapses an error outcome into the zero result for table rendering.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from siteprogress.domain.checklist import CHECKLIST
from siteprogress.domain.errors import SiteProgressError
from siteprogress.domain.models import (
    Division,
    DivisionProgress,
    MergedBoq,
    ProgressOutcome,
    ProgressResult,
    TaskRecord,
    UploadEvent,
)
from siteprogress.domain.ports import BoqStore, TaskStore
from siteprogress.services.boq import resolve_target
from siteprogress.services.site_reader import DEFAULT_READ_TIMEOUT, SiteDataReader

logger = logging.getLogger(__name__)


def flatten_sections(records: Iterable[TaskRecord]) -> list[UploadEvent]:
    """All upload events of all records, record order then upload order"""
    events: list[UploadEvent] = []
    for record in records:
        events.extend(record.sections)
    return events


def aggregate_progress(
    events: list[UploadEvent], boq: MergedBoq | None
) -> ProgressResult:
    """
    Reduce upload events against the checklist.

    Args:
        events: every upload event of the site
        boq: merged BOQ row, or None to use default targets only

    Returns:
        ProgressResult with one DivisionProgress per division
    """
    uploaded = {d: 0 for d in Division}
    target: dict[Division, int | float] = {d: 0 for d in Division}
    rejected = {d: False for d in Division}
    reasons: dict[Division, list[str]] = {d: [] for d in Division}

    for entry in CHECKLIST:
        division = entry.division
        uploads = [e for e in events if e.section == entry.section]

        rejected_uploads = [e for e in uploads if e.is_rejected]
        if rejected_uploads:
            rejected[division] = True
            reasons[division].extend(
                str(e.reject_reason) for e in rejected_uploads if e.reject_reason
            )

        entry_target, _ = resolve_target(entry.title, boq)
        uploaded[division] += len(uploads)
        target[division] += entry_target

    return ProgressResult(
        divisions={
            d: DivisionProgress(
                uploaded=uploaded[d],
                target=target[d],
                rejected=rejected[d],
                reject_reasons=tuple(reasons[d]),
            )
            for d in Division
        }
    )


class ProgressAggregator:
    """
    Computes site progress from the task and BOQ stores.

    Every call reads a fresh snapshot; nothing is written back.
    """

    def __init__(
        self,
        task_store: TaskStore,
        boq_store: BoqStore,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ) -> None:
        """
        Args:
            task_store: task record source (FirestoreTaskStore etc.)
            boq_store: BOQ document source (FirestoreBoqStore etc.)
            read_timeout: seconds allowed for each store read
        """
        self._reader = SiteDataReader(task_store, boq_store, read_timeout)

    def compute_site_progress(
        self, site_id: str | None, site_name: str | None = None
    ) -> ProgressResult:
        """
        Progress of a site. Never raises: failures become the zero result.
        """
        return self.compute_outcome(site_id, site_name).to_result()

    def compute_outcome(
        self, site_id: str | None, site_name: str | None = None
    ) -> ProgressOutcome:
        """
        Progress of a site as a tagged result.

        Returns:
            ProgressOutcome(result=...) on success (including "no data"),
            ProgressOutcome(error=...) when reading or aggregating failed
        """
        site_id = site_id or ""
        site_name = site_name or ""
        if not site_id and not site_name:
            logger.debug("No site identifier given, returning zero progress")
            return ProgressOutcome(result=ProgressResult.zero())

        try:
            snapshot = self._reader.read(site_id, site_name)
            if not snapshot.records:
                logger.info(
                    "No task records: site_id=%s, site_name=%s", site_id, site_name
                )
                return ProgressOutcome(result=ProgressResult.zero())

            events = flatten_sections(snapshot.records)
            result = aggregate_progress(events, snapshot.boq)
            logger.debug(
                "Computed progress: site_id=%s, site_name=%s, records=%d, "
                "events=%d, boq=%s",
                site_id,
                site_name,
                len(snapshot.records),
                len(events),
                snapshot.boq is not None,
            )
            return ProgressOutcome(result=result)

        except SiteProgressError as e:
            logger.exception(
                "Failed to compute progress: site_id=%s, site_name=%s",
                site_id,
                site_name,
            )
            return ProgressOutcome(error=str(e))

        except Exception as e:
            logger.exception(
                "Unexpected error computing progress: site_id=%s, site_name=%s",
                site_id,
                site_name,
            )
            return ProgressOutcome(error=f"{type(e).__name__}: {e}")
