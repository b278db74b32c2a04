"""Structured logging utilities."""

from .audit import AuditEvent, JsonlAuditLogger, sanitize_arguments, utc_timestamp
from .events import LOG_LEVELS, JsonlEventLogger, LogEvent

__all__ = [
    "AuditEvent",
    "JsonlAuditLogger",
    "JsonlEventLogger",
    "LOG_LEVELS",
    "LogEvent",
    "sanitize_arguments",
    "utc_timestamp",
]
