"""Formatters for mediacomply log output.

Both formatters expect records to have passed through FileContextFilter so
that file_id, file_path and file_tag are present.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came from extra={...}
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
    "file_id",
    "file_path",
    "file_tag",
}

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(file_tag)s%(name)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


class TextFormatter(logging.Formatter):
    """Single-line text output; the file tag reads like "[F003] "."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    The file being processed is reported at top level (file_id, file_path)
    so a run log can be filtered per file. Fields passed through extra=
    land under "context".
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("file_id", "file_path"):
            value = getattr(record, attr, None)
            if value:
                entry[attr] = value

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
