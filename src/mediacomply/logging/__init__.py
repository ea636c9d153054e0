"""Structured logging module for mediacomply.

Provides configurable logging with JSON format support and file rotation.
Includes per-file context support so every record names the file in flight.
"""

from mediacomply.logging.config import configure_logging
from mediacomply.logging.context import (
    FileContextFilter,
    file_context,
    format_file_id,
    get_file_context,
)
from mediacomply.logging.handlers import JSONFormatter

__all__ = [
    "FileContextFilter",
    "JSONFormatter",
    "configure_logging",
    "file_context",
    "format_file_id",
    "get_file_context",
]
