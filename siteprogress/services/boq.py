"""BOQ merge and target lookup

A site's BOQ is uploaded as one document per milestone. The documents are
merged per (city, site_name) into a MergedBoq, and the After DRM quantity
of a material overrides the default target of the checklist entries
mapped to that material.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from typing import Any

from siteprogress.domain.checklist import (
    BOQ_MILESTONES,
    SECTION_MATERIAL_CODE_MAP,
    default_target,
)
from siteprogress.domain.models import BoqDocument, BoqLineItem, MergedBoq

TARGET_FROM_BOQ = "boq"
TARGET_DEFAULT = "default"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_CAMEL_HUMP = re.compile(r"(?<!^)(?=[A-Z])")

# boqType label -> MergedBoq attribute ("afterDrmBoq" -> "after_drm_boq")
_MILESTONE_ATTRS = {
    label: _CAMEL_HUMP.sub("_", field_name).lower()
    for label, field_name in BOQ_MILESTONES.items()
}


def merge_boq_documents(docs: Iterable[BoqDocument]) -> list[MergedBoq]:
    """
    Merge milestone documents by (city, site_name), keeping first-seen order.

    A later document of the same milestone replaces the earlier one's items.
    Documents with an unknown boq_type still create the row.
    """
    rows: dict[tuple[str, str], dict[str, Any]] = {}
    for doc in docs:
        row = rows.setdefault(
            (doc.city, doc.site_name),
            {"city": doc.city, "site_name": doc.site_name, "site_id": doc.site_id},
        )
        attr = _MILESTONE_ATTRS.get(doc.boq_type)
        if attr:
            row[attr] = list(doc.items)
    return [MergedBoq(**row) for row in rows.values()]


def pick_boq(docs: Iterable[BoqDocument]) -> MergedBoq | None:
    """First merged row, or None when there is no document at all"""
    merged = merge_boq_documents(docs)
    return merged[0] if merged else None


def material_code_key(code: Any) -> str | None:
    """String form used to compare material codes (200000690.0 -> "200000690")"""
    if code is None:
        return None
    if isinstance(code, float) and code.is_integer():
        return str(int(code))
    return str(code)


def parse_quantity(raw: Any) -> int | float | None:
    """
    BOQ quantity -> number.

    Strings take their leading integer ("25" -> 25, " 25 pcs" -> 25,
    "12.7" -> 12); numbers are used as they are. None when nothing numeric
    can be read.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        return int(match.group(1)) if match else None
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if math.isnan(raw) or math.isinf(raw):
            return None
        return int(raw) if raw.is_integer() else raw
    try:
        return parse_quantity(float(raw))
    except (TypeError, ValueError):
        return None


def find_line_item(
    items: Iterable[BoqLineItem] | None, material_code: str
) -> BoqLineItem | None:
    wanted = material_code_key(material_code)
    for item in items or ():
        if material_code_key(item.material_code) == wanted:
            return item
    return None


def resolve_target(title: str, boq: MergedBoq | None) -> tuple[int | float, str]:
    """
    Target count of a checklist entry.

    Returns:
        (target, source) where source is "boq" or "default"
    """
    material_code = SECTION_MATERIAL_CODE_MAP.get(title)
    if material_code and boq is not None:
        item = find_line_item(boq.after_drm_boq, material_code)
        if item is not None and item.quantity is not None:
            quantity = parse_quantity(item.quantity)
            if quantity is not None:
                return quantity, TARGET_FROM_BOQ
    return default_target(title), TARGET_DEFAULT
