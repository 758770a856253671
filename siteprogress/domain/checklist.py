"""Static checklist tables

The ordered list of checklist entries per division, the default target
(photo count) of each entry, and the BOQ material code used to override
the target for the construction entries that are counted per material.

All tables are immutable and shared by every aggregation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from siteprogress.domain.models import Division


@dataclass(frozen=True)
class ChecklistEntry:
    title: str  # "A. Visit"
    division: Division

    @property
    def section(self) -> str:
        """Section name as stored on upload events ("Visit")"""
        return strip_title_prefix(self.title)


_PREFIX = re.compile(r"^[A-Z]+\.\s*")


def strip_title_prefix(title: str) -> str:
    """Remove the "A. " style prefix of a checklist title"""
    return _PREFIX.sub("", title, count=1)


def _entries(division: Division, *titles: str) -> tuple[ChecklistEntry, ...]:
    return tuple(ChecklistEntry(title, division) for title in titles)


CHECKLIST: tuple[ChecklistEntry, ...] = (
    *_entries(
        Division.PERMIT,
        "A. Visit",
        "B. BA Open",
        "C. BA Reject",
        "D. BAK",
        "E. PKS",
        "F. BAP",
        "G. BOUNDARIES",
        "H. SND Kasar Permit",
        "I. Validasi Sales",
        "J. Donation Submit",
        "K. SKOM Permit",
    ),
    *_entries(
        Division.SND,
        "A. Survey",
        "B. SND Kasar",
        "C. KMZ",
        "D. BOQ",
        "E. DWG",
        "F. HPDB",
        "G. TSSR",
        "H. APD APPROVED",
        "I. ABD",
    ),
    *_entries(
        Division.CW,
        "A. SKOM DONE",
        "B. Digging Hole",
        "C. Install Pole",
        "D. Pulling Cable",
        "E. Install FAT",
        "F. Install FDT",
        "G. Install ACC",
        "H. Pole Foundation",
        "I. SUBFEEDER",
        "J. OSP",
        "K. EHS",
    ),
    *_entries(
        Division.EL,
        "A. OPM Test",
        "B. RFS EL",
        "C. ATP EL",
    ),
    *_entries(
        Division.DOCUMENT,
        "A. RFS",
        "B. ATP Document",
        "C. CW Document",
        "D. EL/OPM",
        "E. Opname",
        "F. ABD Document",
        "G. RFS Certificate",
        "H. CW Certificate",
        "I. EL Certificate",
        "J. FAC Certificate",
    ),
)

# Titles not listed here default to 1
SECTION_PHOTO_MAX: MappingProxyType[str, int] = MappingProxyType(
    {
        # PERMIT
        "A. Visit": 3,
        "B. BA Open": 1,
        "C. BA Reject": 1,
        "D. BAK": 1,
        "E. PKS": 1,
        "F. BAP": 1,
        "G. BOUNDARIES": 1,
        "H. SND Kasar Permit": 1,
        "I. Validasi Sales": 1,
        "J. Donation Submit": 1,
        "K. SKOM Permit": 3,
        # SND
        "A. Survey": 1,
        "B. SND Kasar": 1,
        "C. KMZ": 1,
        "D. BOQ": 1,
        "E. DWG": 1,
        "F. HPDB": 1,
        "G. TSSR": 1,
        "H. APD APPROVED": 1,
        "I. ABD": 1,
        # CW
        "A. SKOM DONE": 3,
        "B. Digging Hole": 50,
        "C. Install Pole": 3,
        "D. Pulling Cable": 3,
        "E. Install FAT": 20,
        "F. Install FDT": 20,
        "G. Install ACC": 12,
        "H. Pole Foundation": 50,
        "I. SUBFEEDER": 3,
        "J. OSP": 2,
        "K. EHS": 2,
        # EL
        "A. OPM Test": 1,
        "B. RFS EL": 1,
        "C. ATP EL": 3,
        # Document
        "A. RFS": 1,
        "B. ATP Document": 1,
        "C. CW Document": 1,
        "D. EL/OPM": 1,
        "E. Opname": 1,
        "F. ABD Document": 1,
        "G. RFS Certificate": 1,
        "H. CW Certificate": 1,
        "I. EL Certificate": 1,
        "J. FAC Certificate": 1,
    }
)

# Entries whose target comes from the After DRM BOQ quantity of a material
SECTION_MATERIAL_CODE_MAP: MappingProxyType[str, str] = MappingProxyType(
    {
        "B. Digging Hole": "200000690",
        "C. Install Pole": "200000690",
        "E. Install FAT": "200000288",
        "F. Install FDT": "200000273",
        "H. Pole Foundation": "200000690",
    }
)

# boqType label -> name of the quantity field on that milestone's line items
BOQ_MILESTONES: MappingProxyType[str, str] = MappingProxyType(
    {
        "Before DRM BOQ": "beforeDrmBoq",
        "After DRM BOQ": "afterDrmBoq",
        "Construction Done BOQ": "constDoneBoq",
        "ABD BOQ": "abdBoq",
    }
)


def default_target(title: str) -> int:
    return SECTION_PHOTO_MAX.get(title) or 1


def entries_for(division: Division) -> tuple[ChecklistEntry, ...]:
    return tuple(e for e in CHECKLIST if e.division is division)
