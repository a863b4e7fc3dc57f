"""Utility functions and helpers.

- logging: Structured logging configuration
"""

from mod_inspector.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
    unbind_context,
)

__all__ = [
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "bind_context",
    "clear_context",
    "configure_logging",
    "unbind_context",
]
