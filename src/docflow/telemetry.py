"""Structured lifecycle events for the translation pipeline.

Events are logged as dicts so :class:`~docflow.logging_config.MinimalJSONFormatter`
flattens them into a single JSON line with a stable ``step`` key.
"""

from __future__ import annotations

import logging
import os
import platform
import socket
import sys
import time
import traceback
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

LOGGER = logging.getLogger("docflow.telemetry")

_ENV_KEYS_TO_LOG: tuple[str, ...] = (
    "UPLOAD_DIR",
    "MAX_UPLOAD_BYTES",
    "ALLOWED_EXTENSIONS",
    "LOG_DIR",
    "TRANSLATION_PROVIDER",
    "DEFAULT_SOURCE_LANGUAGE",
)


def _traceback_text(error: BaseException) -> str:
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def log_event(
    logger: Optional[logging.Logger],
    step: str,
    *,
    level: str = "info",
    job_id: str | None = None,
    duration_ms: float | None = None,
    exc: BaseException | str | None = None,
    details: dict[str, Any] | None = None,
    **payload: Any,
) -> None:
    """Emit a structured log event with the agreed-upon schema."""

    target = logger or LOGGER
    event: dict[str, Any] = {"step": step, "module": target.name}
    if job_id:
        event["job_id"] = job_id
    if duration_ms is not None:
        event["duration_ms"] = round(duration_ms, 3)
    if details is not None:
        event["details"] = details
    event.update(payload)

    exc_info = None
    if isinstance(exc, BaseException):
        event["exc"] = _traceback_text(exc)
        exc_info = (type(exc), exc, exc.__traceback__)
    elif exc is not None:
        event["exc"] = str(exc)

    getattr(target, level.lower(), target.info)(event, exc_info=exc_info)


def emit_app_startup_event() -> None:
    configured = {key: os.environ[key] for key in _ENV_KEYS_TO_LOG if key in os.environ}
    log_event(
        LOGGER,
        "app.startup",
        details={"env": configured, "python": sys.version.split()[0], "platform": platform.platform()},
        pid=os.getpid(),
        hostname=socket.gethostname(),
        cwd=str(Path.cwd()),
    )


def emit_segmentation_event(
    step: str,
    *,
    file_name: str,
    document_format: str,
    segments: int,
    job_id: str | None = None,
    duration_ms: float | None = None,
) -> None:
    log_event(
        LOGGER,
        step,
        job_id=job_id,
        duration_ms=duration_ms,
        details={"file": file_name, "format": document_format, "segments": segments},
    )


def emit_job_event(step: str, *, job_id: str, status: str, **details: Any) -> None:
    level = "warning" if status == "failed" else "info"
    log_event(LOGGER, step, level=level, job_id=job_id, details={"status": status, **details})


def emit_exception(
    *,
    module: str,
    error: BaseException,
    job_id: str | None = None,
    suggestion: str | None = None,
) -> None:
    details = {"module": module, "error_type": type(error).__name__}
    if suggestion:
        details["suggestion"] = suggestion
    log_event(LOGGER, "exception", level="error", job_id=job_id, details=details, exc=error)


@contextmanager
def traced_duration(
    step: str,
    *,
    logger: Optional[logging.Logger] = None,
    job_id: str | None = None,
    **fields: Any,
) -> Iterator[None]:
    """Log ``<step>.start`` and ``<step>.complete`` (or ``.error``) around a block."""

    started = time.perf_counter()
    log_event(logger, f"{step}.start", job_id=job_id, details=fields)
    try:
        yield
    except Exception as error:
        log_event(logger, f"{step}.error", level="error", job_id=job_id, details=fields, exc=error)
        raise
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        log_event(logger, f"{step}.complete", job_id=job_id, duration_ms=elapsed_ms, details=fields)
