"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config through
the ``bundle_validator`` package logger.

Levels are resolved in precedence order:
    CLI flag  >  BV_LOG_LEVEL env var  >  config file  >  WARNING (default)

Optional file output via BV_LOG_FILE / BV_LOG_FILE_LEVEL env vars.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

PACKAGE_LOGGER = "bundle_validator"

# ── Format strings ──────────────────────────────────────────────

# WARNING level: message only
_FMT_MINIMAL = "%(message)s"

# INFO level: timestamped, with the bundle being validated when known
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(bundle_prefix)s%(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG level and file output: file:line for every record
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(bundle_prefix)s%(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


class _BundleFieldFilter(logging.Filter):
    """Derive ``bundle_prefix`` from the optional ``bundle`` attribute."""

    def filter(self, record: logging.LogRecord) -> bool:
        bundle = getattr(record, "bundle", None)
        record.bundle_prefix = f"({bundle}) " if bundle else ""
        return True


class BundleLoggerAdapter(logging.LoggerAdapter):
    """Attaches the bundle path or image to every record."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("bundle", self.extra.get("bundle") if self.extra else None)
        kwargs["extra"] = extra
        return msg, kwargs


def bundle_logger(bundle: str, name: str = PACKAGE_LOGGER) -> BundleLoggerAdapter:
    """Logger whose records carry ``bundle`` for the validator to use."""
    return BundleLoggerAdapter(logging.getLogger(name), {"bundle": bundle})


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure logging for the package.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        quiet_third_party: If True, keep loggers outside the package at
            WARNING unless we're at DEBUG level.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    console.addFilter(_BundleFieldFilter())

    handlers: list[logging.Handler] = [console]
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_FILE))
        fh.addFilter(_BundleFieldFilter())
        handlers.append(fh)

    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.handlers.clear()
    for handler in handlers:
        pkg.addHandler(handler)
    pkg.setLevel(effective_level)
    pkg.propagate = False

    root = logging.getLogger()
    if quiet_third_party and numeric_level > logging.DEBUG:
        root.setLevel(logging.WARNING)
    else:
        root.setLevel(effective_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
