# =============================================================================
# core/logging.py - Logging Setup
# =============================================================================
# Configures the root logger from the [logging] section:
#
#   pretty  - two lines per record, location on the first, message indented
#   compact - one line per record
#   json    - one JSON object per record, for log shippers
#
# Every record gets a `request_id` attribute from the current request
# context ("-" outside a request), set by the request-id middleware.
#
# configure_logging() installs handlers once per process; later calls are
# no-ops unless force=True.
# =============================================================================

import logging
import logging.handlers
import sys
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter as BaseJsonFormatter

from core.config import LoggingConfig

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "app.log"

# Current request id; "-" outside a request
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_PRETTY_FORMAT = (
    "%(asctime)s %(levelname)-8s %(filename)s:%(lineno)d [request_id=%(request_id)s]\n"
    "    %(message)s"
)
_COMPACT_FORMAT = "%(asctime)s %(levelname)s %(filename)s:%(lineno)d %(request_id)s %(message)s"

# Handlers installed by configure_logging, so force=True can replace them
_installed_handlers: list[logging.Handler] = []
_configured = False


class RequestIdFilter(logging.Filter):
    """Attach the current request id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_ctx.get()
        return True


class JsonFormatter(BaseJsonFormatter):
    """Render each record as a single JSON object."""

    def __init__(self):
        super().__init__(
            "%(levelname)s %(name)s %(message)s %(filename)s %(lineno)d",
            rename_fields={
                "levelname": "level",
                "name": "logger",
                "filename": "file",
                "lineno": "line",
            },
            json_ensure_ascii=False,
        )

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["request_id"] = getattr(record, "request_id", "-")


def resolve_level(level: str) -> int:
    """Map a config level name to a logging level (unknown names -> INFO)."""
    return _LEVELS.get(level.lower(), logging.INFO)


def build_formatter(fmt: str) -> logging.Formatter:
    fmt = fmt.lower()
    if fmt == "json":
        return JsonFormatter()
    if fmt == "pretty":
        return logging.Formatter(_PRETTY_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return logging.Formatter(_COMPACT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def configure_logging(config: LoggingConfig, force: bool = False) -> bool:
    """
    Install root handlers for the given logging section.

    Args:
        config: the [logging] section
        force: replace handlers installed by an earlier call

    Returns:
        True if handlers were installed, False if logging was already set up
    """
    global _configured

    if _configured and not force:
        return False

    reset_logging()
    root = logging.getLogger()

    level = resolve_level(config.level)
    formatter = build_formatter(config.format)
    request_filter = RequestIdFilter()

    console = logging.StreamHandler(sys.stdout)
    _installed_handlers.append(console)

    if config.file_enabled:
        log_dir = Path(config.dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            when="midnight",
            encoding="utf-8",
            utc=True,
        )
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(request_filter)
        root.addHandler(handler)
    root.setLevel(level)

    _configured = True
    logger.info(f"Logging initialized, level={config.level}, format={config.format}")
    return True


def reset_logging() -> None:
    """Remove and close the handlers installed by configure_logging."""
    global _configured

    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()
    _configured = False


def cleanup_old_logs(config: LoggingConfig) -> int:
    """
    Delete rotated log files older than `retention_days`.

    Returns:
        Number of files removed
    """
    log_dir = Path(config.dir)
    if not log_dir.is_dir():
        return 0

    cutoff = time.time() - config.retention_days * 86400
    removed = 0
    for path in log_dir.glob("*.log*"):
        if not path.is_file():
            continue
        if path.stat().st_mtime < cutoff:
            path.unlink()
            removed += 1

    if removed:
        logger.info(f"Removed {removed} log file(s) older than {config.retention_days} days from {log_dir}")
    return removed
