"""JSON logging setup shared by the API and the job pipeline.

Every record is rendered as one JSON object per line. Records whose message
is a ``dict`` (the audit trail and telemetry events) have their keys merged
into the top level instead of being stringified under ``message``.

Job lifecycle events go to the ``docflow.jobs.audit`` logger, which writes to
its own file and does not propagate to the console handler.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

AUDIT_LOGGER_NAME = "docflow.jobs.audit"
AUDIT_LOG_FILENAME = "jobs_audit.log"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).isoformat().replace("+00:00", "Z")


class MinimalJSONFormatter(logging.Formatter):
    """Serialize log records to a compact JSON string."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        payload: dict[str, Any] = {
            "timestamp": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            text = record.getMessage()
            if text:
                payload["message"] = text

        if record.exc_info and "exc" not in payload:
            payload["exc_info"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, ensure_ascii=False, default=str)


def _logging_dict(audit_path: Path, level: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"json": {"()": MinimalJSONFormatter}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "json"},
            "jobs_audit": {
                "class": "logging.FileHandler",
                "filename": str(audit_path),
                "encoding": "utf-8",
                "formatter": "json",
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            AUDIT_LOGGER_NAME: {"level": "INFO", "handlers": ["jobs_audit"], "propagate": False},
        },
    }


def configure_logging(log_dir: str | Path = "logs", level: str = "INFO") -> Path:
    """Install JSON logging and the job audit file; return the audit log path."""

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    audit_path = directory / AUDIT_LOG_FILENAME
    logging.config.dictConfig(_logging_dict(audit_path, level.upper()))
    return audit_path
