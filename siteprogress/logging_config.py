"""Logging setup

JSON lines on Cloud Run / Cloud Logging, plain text locally. Every record
carries the site being processed, bound with `site_log_context`, so one
site's reads and failures can be filtered out of a shared log stream.

Usage:
    from siteprogress.logging_config import setup_logging, site_log_context
    setup_logging()
    with site_log_context(site_id, site_name):
        ...

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    LOG_FORMAT: "json" or "text" to override the environment detection
    K_SERVICE / CLOUD_RUN_JOB: set by Cloud Run, switch to JSON output
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# chatty client libraries, kept at WARNING unless LOG_LEVEL is DEBUG
_NOISY_LOGGERS = ("google.auth", "google.api_core", "urllib3", "grpc")

_SEVERITIES = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# (site_id, site_name) of the request or command being handled
_site: ContextVar[tuple[str, str]] = ContextVar("site", default=("", ""))

_LABELS_KEY = "logging.googleapis.com/labels"
_SOURCE_KEY = "logging.googleapis.com/sourceLocation"


@contextmanager
def site_log_context(
    site_id: str | None, site_name: str | None = None
) -> Iterator[None]:
    """Tag every record logged inside the block with the given site"""
    token = _site.set((site_id or "", site_name or ""))
    try:
        yield
    finally:
        _site.reset(token)


class SiteContextFilter(logging.Filter):
    """Copies the bound site onto the record (site_id, site_name, site)"""

    def filter(self, record: logging.LogRecord) -> bool:
        site_id, site_name = _site.get()
        record.site_id = site_id
        record.site_name = site_name
        record.site = site_id or site_name or "-"
        return True


class CloudLoggingFormatter(logging.Formatter):
    """JSON formatter understood by Cloud Logging

    Cloud Run forwards stdout to Cloud Logging; `severity` sets the level,
    the site goes into entry labels and the call site into sourceLocation.
    """

    def format(self, record: logging.LogRecord) -> str:
        severity = record.levelname if record.levelname in _SEVERITIES else "DEFAULT"
        log_entry: dict = {
            "severity": severity,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            _SOURCE_KEY: {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }
        labels = {
            key: value
            for key in ("site_id", "site_name")
            if (value := getattr(record, key, ""))
        }
        if labels:
            log_entry[_LABELS_KEY] = labels
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _use_json() -> bool:
    forced = os.getenv("LOG_FORMAT", "").strip().lower()
    if forced in ("json", "text"):
        return forced == "json"
    return bool(os.getenv("K_SERVICE") or os.getenv("CLOUD_RUN_JOB"))


def setup_logging() -> None:
    """Initialise the root logger. Safe to call more than once."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.addFilter(SiteContextFilter())
    if _use_json():
        handler.setFormatter(CloudLoggingFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s [site=%(site)s]: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if level <= logging.DEBUG else logging.WARNING
        )
