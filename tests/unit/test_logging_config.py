"""Tests for logging_config"""

import json
import logging
import os
import sys
from datetime import datetime
from unittest.mock import patch

import pytest
from siteprogress.logging_config import (
    CloudLoggingFormatter,
    SiteContextFilter,
    setup_logging,
    site_log_context,
)

_CLOUD_VARS = ("K_SERVICE", "CLOUD_RUN_JOB", "LOG_FORMAT")


def _local_env(**extra: str) -> dict[str, str]:
    """Current environment minus the variables that select the formatter"""
    env = {k: v for k, v in os.environ.items() if k not in _CLOUD_VARS}
    env.update(extra)
    return env


def _make_record(
    message: str = "test message",
    level: int = logging.INFO,
    exc_info=None,
) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="",
        lineno=0,
        msg=message,
        args=(),
        exc_info=exc_info,
    )


class TestCloudLoggingFormatter:
    def test_format_returns_valid_json(self):
        output = CloudLoggingFormatter().format(_make_record("hello world"))
        assert json.loads(output)["message"] == "hello world"

    @pytest.mark.parametrize(
        "level, severity",
        [
            (logging.DEBUG, "DEBUG"),
            (logging.INFO, "INFO"),
            (logging.WARNING, "WARNING"),
            (logging.ERROR, "ERROR"),
            (logging.CRITICAL, "CRITICAL"),
        ],
    )
    def test_severity_mapping(self, level, severity):
        parsed = json.loads(CloudLoggingFormatter().format(_make_record(level=level)))
        assert parsed["severity"] == severity

    def test_required_fields_present(self):
        parsed = json.loads(CloudLoggingFormatter().format(_make_record()))
        assert {"severity", "message", "logger", "timestamp"} <= set(parsed)

    def test_logger_name(self):
        record = _make_record()
        record.name = "siteprogress.services.progress_aggregator"
        parsed = json.loads(CloudLoggingFormatter().format(record))
        assert parsed["logger"] == "siteprogress.services.progress_aggregator"

    def test_exception_info_included(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        parsed = json.loads(CloudLoggingFormatter().format(_make_record(exc_info=exc_info)))

        assert "ValueError" in parsed["exception"]
        assert "test error" in parsed["exception"]

    def test_no_exception_field_when_no_exception(self):
        parsed = json.loads(CloudLoggingFormatter().format(_make_record()))
        assert "exception" not in parsed

    def test_extra_fields_merged(self):
        """extra_fields values that json cannot encode are stringified"""
        record = _make_record()
        record.extra_fields = {"site_id": "SITE-001", "at": datetime(2025, 3, 6, 14, 30)}

        parsed = json.loads(CloudLoggingFormatter().format(record))

        assert parsed["site_id"] == "SITE-001"
        assert parsed["at"] == "2025-03-06 14:30:00"

    def test_non_ascii_message_kept(self):
        output = CloudLoggingFormatter().format(_make_record("Pemasangan tiang selesai ✓"))
        assert "Pemasangan tiang selesai ✓" in output


class TestSetupLogging:
    def test_uses_json_formatter_in_k_service_env(self):
        with patch.dict("os.environ", _local_env(K_SERVICE="site-progress"), clear=True):
            setup_logging()

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CloudLoggingFormatter)

    def test_uses_json_formatter_in_cloud_run_job_env(self):
        with patch.dict("os.environ", _local_env(CLOUD_RUN_JOB="site-report"), clear=True):
            setup_logging()

        assert isinstance(logging.getLogger().handlers[0].formatter, CloudLoggingFormatter)

    def test_uses_text_formatter_in_local_env(self):
        with patch.dict("os.environ", _local_env(), clear=True):
            setup_logging()

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert not isinstance(root_logger.handlers[0].formatter, CloudLoggingFormatter)

    def test_log_format_overrides_detection(self):
        with patch.dict(
            "os.environ", _local_env(K_SERVICE="site-progress", LOG_FORMAT="text"), clear=True
        ):
            setup_logging()
        assert not isinstance(logging.getLogger().handlers[0].formatter, CloudLoggingFormatter)

        with patch.dict("os.environ", _local_env(LOG_FORMAT="json"), clear=True):
            setup_logging()
        assert isinstance(logging.getLogger().handlers[0].formatter, CloudLoggingFormatter)

    def test_log_level_respected(self):
        with patch.dict("os.environ", _local_env(LOG_LEVEL="DEBUG"), clear=True):
            setup_logging()

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("google.api_core").level == logging.DEBUG

    def test_noisy_loggers_quieted(self):
        with patch.dict("os.environ", _local_env(LOG_LEVEL="INFO"), clear=True):
            setup_logging()

        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("google.auth").level == logging.WARNING

    def test_handlers_cleared_on_reinitialize(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1


class TestSiteLogContext:
    def test_filter_copies_bound_site(self):
        record = _make_record()
        with site_log_context("SITE-001", "Tower Cibubur"):
            SiteContextFilter().filter(record)

        assert record.site_id == "SITE-001"
        assert record.site_name == "Tower Cibubur"
        assert record.site == "SITE-001"

    def test_unbound_site_is_dash(self):
        record = _make_record()
        SiteContextFilter().filter(record)

        assert record.site_id == ""
        assert record.site == "-"

    def test_site_name_used_without_site_id(self):
        record = _make_record()
        with site_log_context(None, "Tower Cibubur"):
            SiteContextFilter().filter(record)
        assert record.site == "Tower Cibubur"

    def test_context_restored_after_block(self):
        with site_log_context("SITE-001"):
            with site_log_context("SITE-002"):
                pass
            inner = _make_record()
            SiteContextFilter().filter(inner)
        outer = _make_record()
        SiteContextFilter().filter(outer)

        assert inner.site_id == "SITE-001"
        assert outer.site_id == ""

    def test_json_labels_carry_site(self):
        record = _make_record()
        with site_log_context("SITE-001"):
            SiteContextFilter().filter(record)

        parsed = json.loads(CloudLoggingFormatter().format(record))

        assert parsed["logging.googleapis.com/labels"] == {"site_id": "SITE-001"}

    def test_json_without_site_has_no_labels(self):
        parsed = json.loads(CloudLoggingFormatter().format(_make_record()))
        assert "logging.googleapis.com/labels" not in parsed

    def test_json_source_location(self):
        record = _make_record()
        record.pathname = "siteprogress/services/site_reader.py"
        record.lineno = 115
        record.funcName = "_wait_boq"

        parsed = json.loads(CloudLoggingFormatter().format(record))

        assert parsed["logging.googleapis.com/sourceLocation"] == {
            "file": "siteprogress/services/site_reader.py",
            "line": 115,
            "function": "_wait_boq",
        }

    def test_text_output_names_site(self):
        with patch.dict("os.environ", _local_env(), clear=True):
            setup_logging()
        handler = logging.getLogger().handlers[0]
        record = _make_record("BOQ read failed")

        with site_log_context("SITE-001"):
            handler.filter(record)
        line = handler.format(record)

        assert "[site=SITE-001]: BOQ read failed" in line
