"""Domain models - plain data structures with no external dependencies"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class Division(Enum):
    """Workflow phase a checklist section belongs to"""

    PERMIT = "PERMIT"
    SND = "SND"
    CW = "CW"
    EL = "EL"
    DOCUMENT = "Document"

    @classmethod
    def parse(cls, text: str | None) -> Division | None:
        """Case-insensitive lookup ("permit", "document", "DOCUMENT" ...)"""
        if not text:
            return None
        key = str(text).strip().upper()
        for division in cls:
            if division.value.upper() == key:
                return division
        return None

    @property
    def label(self) -> str:
        """Key prefix used by the progress output contract"""
        return _LABELS[self]


_LABELS = {
    Division.PERMIT: "Permit",
    Division.SND: "SND",
    Division.CW: "CW",
    Division.EL: "EL",
    Division.DOCUMENT: "Document",
}


class SiteStatus(Enum):
    """Overall site status shown in the site list"""

    COMPLETED = "Completed"
    IN_PROGRESS = "In Progress"
    NO_DATA = "-"


REJECTED = "Rejected"
DONE = "Done"


@dataclass(frozen=True)
class UploadEvent:
    """One upload embedded in a task record's `sections` array"""

    section: str  # e.g. "Visit", "Digging Hole"
    division: str = ""  # as stored, usually lowercase
    status_task: str | None = None  # "Rejected" | "Done" | None
    reject_reason: str | None = None
    uploaded_at: Any = None  # Firestore timestamp, datetime, ISO string ...
    file_name: str = ""
    upload_by: str = ""

    @property
    def is_rejected(self) -> bool:
        return self.status_task == REJECTED

    @property
    def is_done(self) -> bool:
        return self.status_task == DONE


@dataclass(frozen=True)
class TaskRecord:
    """One division's task for a site (tasks collection)"""

    id: str
    site_id: str
    site_name: str
    division: str
    sections: list[UploadEvent] = field(default_factory=list)


@dataclass(frozen=True)
class BoqLineItem:
    """One material line of a BOQ milestone document"""

    material_code: Any  # stored as str or number
    material_name: str = ""
    quantity: Any = None  # value of the milestone quantity field, raw


@dataclass(frozen=True)
class BoqDocument:
    """One uploaded BOQ spreadsheet for a single milestone (boq_files collection)"""

    id: str
    site_id: str
    site_name: str
    city: str
    boq_type: str  # "Before DRM BOQ" | "After DRM BOQ" | "Construction Done BOQ" | "ABD BOQ"
    items: list[BoqLineItem] = field(default_factory=list)


@dataclass(frozen=True)
class MergedBoq:
    """All milestone documents of one (city, site_name) merged into one row"""

    city: str
    site_name: str
    site_id: str = ""
    before_drm_boq: list[BoqLineItem] | None = None
    after_drm_boq: list[BoqLineItem] | None = None
    const_done_boq: list[BoqLineItem] | None = None
    abd_boq: list[BoqLineItem] | None = None


def format_count(value: int | float) -> str:
    """Render a count the way the portal shows it (25.0 -> "25")"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class DivisionProgress:
    """Aggregated progress of one division"""

    uploaded: int = 0
    target: int | float = 0
    rejected: bool = False
    reject_reasons: tuple[str, ...] = ()

    @property
    def ratio(self) -> str:
        return f"{self.uploaded}/{format_count(self.target)}"

    @property
    def reject_reason(self) -> str:
        return "; ".join(self.reject_reasons)

    @property
    def is_complete(self) -> bool:
        return self.uploaded > 0 and self.uploaded >= self.target


@dataclass(frozen=True)
class ProgressResult:
    """Per-division "uploaded/target" ratios with rejection state"""

    divisions: Mapping[Division, DivisionProgress]

    def __post_init__(self) -> None:
        object.__setattr__(self, "divisions", MappingProxyType(dict(self.divisions)))

    def __hash__(self) -> int:
        return hash(tuple(self.divisions.items()))

    @classmethod
    def zero(cls) -> ProgressResult:
        """The empty result used for no-input, not-found and failure paths"""
        return cls(divisions={d: DivisionProgress() for d in Division})

    def _get(self, division: Division) -> DivisionProgress:
        return self.divisions.get(division, DivisionProgress())

    def ratio(self, division: Division) -> str:
        return self._get(division).ratio

    def rejected(self, division: Division) -> bool:
        return self._get(division).rejected

    def reject_reason(self, division: Division) -> str:
        return self._get(division).reject_reason

    @property
    def is_zero(self) -> bool:
        return all(self.ratio(d) == "0/0" for d in Division)

    # ── contract accessors ───────────────────────────────────────────────

    @property
    def permit(self) -> str:
        return self.ratio(Division.PERMIT)

    @property
    def snd(self) -> str:
        return self.ratio(Division.SND)

    @property
    def cw(self) -> str:
        return self.ratio(Division.CW)

    @property
    def el(self) -> str:
        return self.ratio(Division.EL)

    @property
    def document(self) -> str:
        return self.ratio(Division.DOCUMENT)

    @property
    def permit_rejected(self) -> bool:
        return self.rejected(Division.PERMIT)

    @property
    def snd_rejected(self) -> bool:
        return self.rejected(Division.SND)

    @property
    def cw_rejected(self) -> bool:
        return self.rejected(Division.CW)

    @property
    def el_rejected(self) -> bool:
        return self.rejected(Division.EL)

    @property
    def document_rejected(self) -> bool:
        return self.rejected(Division.DOCUMENT)

    @property
    def permit_reject_reason(self) -> str:
        return self.reject_reason(Division.PERMIT)

    @property
    def snd_reject_reason(self) -> str:
        return self.reject_reason(Division.SND)

    @property
    def cw_reject_reason(self) -> str:
        return self.reject_reason(Division.CW)

    @property
    def el_reject_reason(self) -> str:
        return self.reject_reason(Division.EL)

    @property
    def document_reject_reason(self) -> str:
        return self.reject_reason(Division.DOCUMENT)

    def to_dict(self) -> dict[str, str | bool]:
        """
        Output contract consumed by the portal tables.

        Keys: Permit/SND/CW/EL/Document, <label>Rejected, <label>RejectReason
        """
        out: dict[str, str | bool] = {}
        for d in Division:
            out[d.label] = self.ratio(d)
        for d in Division:
            out[f"{d.label}Rejected"] = self.rejected(d)
        for d in Division:
            out[f"{d.label}RejectReason"] = self.reject_reason(d)
        return out


@dataclass(frozen=True)
class ProgressOutcome:
    """Tagged aggregation result: either a ProgressResult or an error description"""

    result: ProgressResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_result(self) -> ProgressResult:
        """Collapse an error into the zero result"""
        if self.result is None or self.error is not None:
            return ProgressResult.zero()
        return self.result


@dataclass(frozen=True)
class SectionProgress:
    """Progress of a single checklist entry"""

    title: str  # e.g. "B. Digging Hole"
    section: str  # e.g. "Digging Hole"
    division: Division
    uploaded: int
    target: int | float
    target_source: str  # "boq" | "default"
    done: bool = False
    rejected: bool = False
    reject_reasons: tuple[str, ...] = ()

    @property
    def photo_count(self) -> str:
        return f"{self.uploaded}/{format_count(self.target)}"

    @property
    def status(self) -> str:
        return "Done" if self.done else "Not Yet"


@dataclass(frozen=True)
class SiteSummary:
    """One row of the site list"""

    site_id: str
    site_name: str
    progress: ProgressResult
    status: SiteStatus
    last_activity: str  # "DD/MM/YY, HH.MM" | "-"
    latest_sections: Mapping[Division, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "latest_sections", MappingProxyType(dict(self.latest_sections))
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.site_id,
                self.site_name,
                self.progress,
                self.status,
                self.last_activity,
                tuple(self.latest_sections.items()),
            )
        )
