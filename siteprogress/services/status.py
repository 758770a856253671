"""Site status derived from the five division ratios"""

from __future__ import annotations

from collections.abc import Mapping

from siteprogress.domain.models import Division, ProgressResult, SiteStatus

EMPTY_RATIO = "0/0"


def parse_ratio(ratio: str) -> tuple[float, float]:
    """ "12/14" -> (12.0, 14.0). Raises ValueError when malformed."""
    uploaded, sep, target = str(ratio).partition("/")
    if not sep:
        raise ValueError(f"not an uploaded/target ratio: {ratio!r}")
    return float(uploaded), float(target)


def is_ratio_complete(ratio: str) -> bool:
    uploaded, target = parse_ratio(ratio)
    return uploaded > 0 and uploaded >= target


def _ratios(progress: ProgressResult | Mapping[str, str]) -> list[str]:
    if isinstance(progress, ProgressResult):
        return [progress.ratio(d) for d in Division]
    return [progress[d.label] for d in Division]


def derive_site_status(progress: ProgressResult | Mapping[str, str]) -> SiteStatus:
    """
    Args:
        progress: ProgressResult, or a mapping with the ratio strings under
            "Permit", "SND", "CW", "EL", "Document"

    Returns:
        NO_DATA ("-") when every ratio is "0/0", COMPLETED when every
        division is complete, IN_PROGRESS otherwise
    """
    ratios = _ratios(progress)
    if all(r == EMPTY_RATIO for r in ratios):
        return SiteStatus.NO_DATA
    if all(is_ratio_complete(r) for r in ratios):
        return SiteStatus.COMPLETED
    return SiteStatus.IN_PROGRESS
