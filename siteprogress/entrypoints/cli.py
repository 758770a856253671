#!/usr/bin/env python3
"""CLI Entrypoint - site progress from the command line

Usage:
    python -m siteprogress.entrypoints.cli --site-id SITE-001
    python -m siteprogress.entrypoints.cli --site-name "Tower Cibubur" --json
    python -m siteprogress.entrypoints.cli --site-id SITE-001 --sections --division cw

Environment variables:
    PROJECT_ID: GCP project of the Firestore database (required)
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from siteprogress.domain.models import Division, SectionProgress, SiteSummary
from siteprogress.entrypoints.factory import SiteServices, create_services
from siteprogress.logging_config import setup_logging, site_log_context


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show upload progress of a site per division"
    )
    parser.add_argument("--site-id", type=str, default="", help="siteId")
    parser.add_argument("--site-name", type=str, default="", help="siteName")
    parser.add_argument(
        "--sections",
        action="store_true",
        help="Show every checklist entry instead of the division summary",
    )
    parser.add_argument(
        "--division",
        type=str,
        default=None,
        help="With --sections: only this division (permit, snd, cw, el, document)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON")
    return parser


def summary_to_dict(summary: SiteSummary) -> dict:
    return {
        "siteId": summary.site_id,
        "siteName": summary.site_name,
        "status": summary.status.value,
        "lastActivity": summary.last_activity,
        "progress": summary.progress.to_dict(),
        "latestSections": {
            d.label: summary.latest_sections.get(d, "-") for d in Division
        },
    }


def section_to_dict(row: SectionProgress) -> dict:
    return {
        "title": row.title,
        "section": row.section,
        "division": row.division.value,
        "photoCount": row.photo_count,
        "targetSource": row.target_source,
        "status": row.status,
        "rejected": row.rejected,
        "rejectReason": "; ".join(row.reject_reasons),
    }


def format_summary(summary: SiteSummary) -> str:
    lines = [
        f"Site: {summary.site_name or '-'} ({summary.site_id or '-'})",
        f"Status: {summary.status.value}",
        f"Last activity: {summary.last_activity}",
    ]
    for d in Division:
        line = (
            f"  {d.label:<9} {summary.progress.ratio(d):>9}"
            f"  latest: {summary.latest_sections.get(d, '-')}"
        )
        if summary.progress.rejected(d):
            line += f"  REJECTED: {summary.progress.reject_reason(d) or '-'}"
        lines.append(line)
    return "\n".join(lines)


def format_sections(rows: list[SectionProgress]) -> str:
    if not rows:
        return "No task records found"
    lines = []
    for row in rows:
        line = (
            f"  [{row.division.value:<8}] {row.title:<24} {row.photo_count:>7}"
            f"  {row.status:<7} ({row.target_source})"
        )
        if row.rejected:
            line += f"  REJECTED: {'; '.join(row.reject_reasons) or '-'}"
        lines.append(line)
    return "\n".join(lines)


def run(args: argparse.Namespace, services: SiteServices) -> str:
    if args.sections:
        rows = services.sections.list_sections(
            args.site_id, args.site_name, args.division
        )
        if args.json:
            return json.dumps([section_to_dict(r) for r in rows], ensure_ascii=False)
        return format_sections(rows)

    summary = services.summary.summarize_site(args.site_id, args.site_name)
    if args.json:
        return json.dumps(summary_to_dict(summary), ensure_ascii=False)
    return format_summary(summary)


def main(argv: list[str] | None = None) -> None:
    """Main entrypoint"""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.site_id and not args.site_name:
        parser.error("one of --site-id / --site-name is required")
    if args.division and Division.parse(args.division) is None:
        parser.error(f"unknown division: {args.division}")

    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        with site_log_context(args.site_id, args.site_name):
            services = create_services()
            print(run(args, services))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
