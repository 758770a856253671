"""Site progress API routes

GET /api/sites/progress?site_id=&site_name=            → 200 ProgressResponse
GET /api/sites/status?site_id=&site_name=              → 200 { status }
GET /api/sites/last-activity?site_name=                → 200 { last_activity }
GET /api/sites/sections?site_id=&site_name=&division=  → 200 [SectionResponse...]
GET /api/sites/summary?site_id=&site_name=             → 200 SiteSummaryResponse
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from siteprogress.domain.errors import SiteProgressError
from siteprogress.domain.models import Division, ProgressResult, SectionProgress
from siteprogress.entrypoints.api.deps import (
    get_aggregator,
    get_last_activity_resolver,
    get_section_checklist,
    get_site_summary_service,
)
from siteprogress.services.last_activity import LastActivityResolver
from siteprogress.services.progress_aggregator import ProgressAggregator
from siteprogress.services.section_checklist import SectionChecklist
from siteprogress.services.site_summary import SiteSummaryService
from siteprogress.services.status import derive_site_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sites", tags=["sites"])


class ProgressResponse(BaseModel):
    Permit: str
    SND: str
    CW: str
    EL: str
    Document: str
    PermitRejected: bool
    SNDRejected: bool
    CWRejected: bool
    ELRejected: bool
    DocumentRejected: bool
    PermitRejectReason: str
    SNDRejectReason: str
    CWRejectReason: str
    ELRejectReason: str
    DocumentRejectReason: str

    @classmethod
    def from_result(cls, result: ProgressResult) -> ProgressResponse:
        return cls(**result.to_dict())


class StatusResponse(BaseModel):
    status: str  # "Completed" | "In Progress" | "-"


class LastActivityResponse(BaseModel):
    last_activity: str  # "DD/MM/YY, HH.MM" | "-"


class SectionResponse(BaseModel):
    title: str
    section: str
    division: str
    uploaded: int
    target: int | float
    photo_count: str
    target_source: str  # "boq" | "default"
    status: str  # "Done" | "Not Yet"
    rejected: bool
    reject_reason: str

    @classmethod
    def from_row(cls, row: SectionProgress) -> SectionResponse:
        return cls(
            title=row.title,
            section=row.section,
            division=row.division.value,
            uploaded=row.uploaded,
            target=row.target,
            photo_count=row.photo_count,
            target_source=row.target_source,
            status=row.status,
            rejected=row.rejected,
            reject_reason="; ".join(row.reject_reasons),
        )


class SiteSummaryResponse(BaseModel):
    site_id: str
    site_name: str
    status: str
    last_activity: str
    progress: ProgressResponse
    latest_sections: dict[str, str]  # division label -> section name | "-"


@router.get("/progress", response_model=ProgressResponse)
def get_progress(
    site_id: str = "",
    site_name: str = "",
    aggregator: ProgressAggregator = Depends(get_aggregator),
) -> ProgressResponse:
    """
    Per-division progress of a site.

    Read failures degrade to the zero result ("0/0" everywhere).
    """
    return ProgressResponse.from_result(
        aggregator.compute_site_progress(site_id, site_name)
    )


@router.get("/status", response_model=StatusResponse)
def get_status(
    site_id: str = "",
    site_name: str = "",
    aggregator: ProgressAggregator = Depends(get_aggregator),
) -> StatusResponse:
    """Completed / In Progress / - of a site"""
    progress = aggregator.compute_site_progress(site_id, site_name)
    return StatusResponse(status=derive_site_status(progress).value)


@router.get("/last-activity", response_model=LastActivityResponse)
def get_last_activity(
    site_name: str = "",
    resolver: LastActivityResolver = Depends(get_last_activity_resolver),
) -> LastActivityResponse:
    """Time of the most recent upload of a site"""
    return LastActivityResponse(
        last_activity=resolver.resolve_last_activity(site_name)
    )


@router.get("/sections", response_model=list[SectionResponse])
def list_sections(
    site_id: str = "",
    site_name: str = "",
    division: str | None = None,
    checklist: SectionChecklist = Depends(get_section_checklist),
) -> list[SectionResponse]:
    """
    Checklist entries of a site with their photo counts.

    Query parameters:
        division: permit / snd / cw / el / document (case-insensitive)
    """
    if division is not None and Division.parse(division) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown division: {division}",
        )
    try:
        rows = checklist.list_sections(site_id, site_name, division)
    except SiteProgressError as e:
        logger.warning(
            "Section list unavailable: site_id=%s, site_name=%s - %s",
            site_id,
            site_name,
            e,
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Site data is temporarily unavailable",
        ) from e
    return [SectionResponse.from_row(r) for r in rows]


@router.get("/summary", response_model=SiteSummaryResponse)
def get_summary(
    site_id: str = "",
    site_name: str = "",
    service: SiteSummaryService = Depends(get_site_summary_service),
) -> SiteSummaryResponse:
    """One site list row: progress, status, last activity, latest sections"""
    summary = service.summarize_site(site_id, site_name)
    return SiteSummaryResponse(
        site_id=summary.site_id,
        site_name=summary.site_name,
        status=summary.status.value,
        last_activity=summary.last_activity,
        progress=ProgressResponse.from_result(summary.progress),
        latest_sections={
            d.label: summary.latest_sections.get(d, "-") for d in Division
        },
    )
