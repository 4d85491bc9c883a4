# =============================================================================
# tests/test_logging.py - Logging Setup Tests
# =============================================================================
# Tests for core/logging.py: formatters, request-id propagation, handler
# installation and old log cleanup.
#
# Run with: pytest tests/test_logging.py -v
# =============================================================================

import json
import logging
import os
import sys
import time
import warnings

import pytest

from core.config import LoggingConfig
from core.logging import (
    JsonFormatter,
    RequestIdFilter,
    build_formatter,
    cleanup_old_logs,
    configure_logging,
    request_id_ctx,
    resolve_level,
)


def make_record(message: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="tests.logging",
        level=level,
        pathname=__file__,
        lineno=42,
        msg=message,
        args=(),
        exc_info=None,
    )


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:

    def test_json_formatter_fields(self):
        record = make_record()
        RequestIdFilter().filter(record)

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "tests.logging"
        assert payload["line"] == 42
        assert payload["request_id"] == "-"

    def test_request_id_from_context(self):
        token = request_id_ctx.set("abc-123")
        try:
            record = make_record()
            RequestIdFilter().filter(record)
        finally:
            request_id_ctx.reset(token)

        assert record.request_id == "abc-123"

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("t", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        payload = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad" in payload["exc_info"]

    def test_json_formatter_uses_current_api(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            payload = json.loads(JsonFormatter().format(make_record()))
        assert payload["message"] == "hello"

    def test_pretty_format_is_two_lines(self):
        record = make_record()
        RequestIdFilter().filter(record)

        text = build_formatter("pretty").format(record)

        assert len(text.splitlines()) == 2
        assert "request_id=-" in text

    def test_compact_format_is_one_line(self):
        record = make_record()
        RequestIdFilter().filter(record)
        assert len(build_formatter("compact").format(record).splitlines()) == 1

    @pytest.mark.parametrize("name,level", [
        ("trace", logging.DEBUG),
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("error", logging.ERROR),
        ("nonsense", logging.INFO),
    ])
    def test_resolve_level(self, name, level):
        assert resolve_level(name) == level


# =============================================================================
# Handler Installation
# =============================================================================

class TestConfigureLogging:

    def test_installs_once(self, reset_log_handlers):
        config = LoggingConfig(level="debug")

        assert configure_logging(config, force=True) is True
        assert configure_logging(config) is False
        assert logging.getLogger().level == logging.DEBUG

    def test_force_replaces_handlers(self, reset_log_handlers):
        root = logging.getLogger()
        configure_logging(LoggingConfig(), force=True)
        count = len(root.handlers)

        configure_logging(LoggingConfig(format="json"), force=True)

        assert len(root.handlers) == count

    def test_file_sink(self, tmp_path, reset_log_handlers):
        config = LoggingConfig(file_enabled=True, dir=str(tmp_path / "logs"), format="json")

        configure_logging(config, force=True)
        logging.getLogger("tests.file_sink").warning("written to disk")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
        assert "written to disk" in content


# =============================================================================
# Cleanup
# =============================================================================

class TestCleanup:

    def test_removes_only_expired_files(self, tmp_path):
        log_dir = tmp_path / "logs"
        log_dir.mkdir()
        old = log_dir / "app.log.2020-01-01"
        fresh = log_dir / "app.log"
        other = log_dir / "notes.txt"
        for path in (old, fresh, other):
            path.write_text("x", encoding="utf-8")

        ten_days_ago = time.time() - 10 * 86400
        os.utime(old, (ten_days_ago, ten_days_ago))
        os.utime(other, (ten_days_ago, ten_days_ago))

        removed = cleanup_old_logs(LoggingConfig(dir=str(log_dir), retention_days=7))

        assert removed == 1
        assert not old.exists()
        assert fresh.exists()
        assert other.exists()

    def test_missing_directory(self, tmp_path):
        assert cleanup_old_logs(LoggingConfig(dir=str(tmp_path / "nope"))) == 0
