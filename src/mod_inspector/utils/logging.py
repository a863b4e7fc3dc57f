"""Structured logging configuration.

This module provides logging configuration for Mod Inspector:
- Configurable log levels and output formats (JSON/console)
- Context injection for correlation (service, version, bound archive ids)
- File and console output support

Logs go to stderr so that command output on stdout stays machine-readable.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from pathlib import Path
from typing import Any

import structlog

SERVICE_NAME = "mod-inspector"


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add service name and version to every log entry.

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with added context
    """
    event_dict["service"] = SERVICE_NAME

    try:
        from mod_inspector._version import __version__

        event_dict["version"] = __version__
    except (ImportError, RuntimeError):
        pass

    return event_dict


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.CONSOLE,
    file_path: Path | str | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging

    Example:
        configure_logging(level="DEBUG", log_format="console")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    numeric_level = getattr(logging, level.value)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(), exception_formatter=structlog.dev.plain_traceback
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    if file_enabled and file_path:
        try:
            file_path = Path(file_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(file_path)
            file_handler.setLevel(numeric_level)
            handlers.append(file_handler)
        except OSError as e:
            # Continue with console output only
            console_logger = logging.getLogger("mod_inspector.logging")
            console_logger.warning(f"Could not create log file {file_path}: {e}")

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=handlers,
        force=True,
    )


def bind_context(**kwargs: Any) -> None:
    """Bind contextual variables for all subsequent log calls.

    Example:
        bind_context(archive_id="mymod")
        log.info("tree_built")  # Includes archive_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove contextual variables."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound contextual variables."""
    structlog.contextvars.clear_contextvars()


class LogEventNames:
    """Standard log event names for consistency."""

    # Session lifecycle
    INSPECTION_STARTING = "inspection_starting"
    INSPECTION_COMPLETE = "inspection_complete"
    INTERRUPTED = "interrupted"

    # Command line input
    INPUT_NOT_FOUND = "input_file_not_found"
    INPUT_INVALID = "input_invalid"
    INPUT_UNREADABLE = "input_unreadable"

    # Archives
    ARCHIVE_OPENED = "archive_opened"
    ARCHIVE_LOADED = "archive_loaded"
    ARCHIVE_REPLACED = "archive_replaced"
    ARCHIVE_REMOVED = "archive_removed"
    ARCHIVE_OPEN_ERROR = "archive_open_error"
    ARCHIVE_SKIPPED = "archive_skipped"
    CONTENT_READ_FAILED = "content_read_failed"

    # Analyzer output
    ANALYSIS_RESULT_INVALID = "analysis_result_invalid"
    ANALYSIS_RESULT_UNNAMED = "analysis_result_unnamed"
    TRANSCRIPT_ERRORS_INDEXED = "transcript_errors_indexed"
    MISSING_SCRIPTS_REPORTED = "missing_scripts_reported"

    # Trees and graphs
    TREE_BUILT = "tree_built"
    TREE_CACHE_HIT = "tree_cache_hit"
    CIRCULAR_INCLUDE = "circular_include"
    MISSING_INCLUDE = "missing_include"
    GRAPH_PROJECTED = "graph_projected"

    # Cache
    CACHE_INVALIDATED = "cache_invalidated"
