"""Domain layer - models, static checklist tables and port definitions"""

from siteprogress.domain.checklist import (
    BOQ_MILESTONES,
    CHECKLIST,
    SECTION_MATERIAL_CODE_MAP,
    SECTION_PHOTO_MAX,
    ChecklistEntry,
)
from siteprogress.domain.errors import (
    BoqFetchError,
    ReadTimeoutError,
    SiteProgressError,
    TaskFetchError,
)
from siteprogress.domain.models import (
    BoqDocument,
    BoqLineItem,
    Division,
    DivisionProgress,
    MergedBoq,
    ProgressOutcome,
    ProgressResult,
    SectionProgress,
    SiteStatus,
    SiteSummary,
    TaskRecord,
    UploadEvent,
)
from siteprogress.domain.ports import BoqStore, TaskStore

__all__ = [
    # Models
    "Division",
    "SiteStatus",
    "UploadEvent",
    "TaskRecord",
    "BoqLineItem",
    "BoqDocument",
    "MergedBoq",
    "DivisionProgress",
    "ProgressResult",
    "ProgressOutcome",
    "SectionProgress",
    "SiteSummary",
    # Checklist
    "ChecklistEntry",
    "CHECKLIST",
    "SECTION_PHOTO_MAX",
    "SECTION_MATERIAL_CODE_MAP",
    "BOQ_MILESTONES",
    # Errors
    "SiteProgressError",
    "TaskFetchError",
    "BoqFetchError",
    "ReadTimeoutError",
    # Ports
    "TaskStore",
    "BoqStore",
]
