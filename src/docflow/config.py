"""Runtime configuration sourced from environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Tuple

LOGGER = logging.getLogger(__name__)

DEFAULT_ALLOWED_EXTENSIONS: Tuple[str, ...] = (".txt", ".srt", ".docx", ".pdf")
DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Invalid integer for %s: %s; using default %s", name, value, default)
        return default


def _list_from_env(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    items = tuple(item.strip().lower() for item in value.split(",") if item.strip())
    if not items:
        LOGGER.warning("Empty list for %s; using default %s", name, ",".join(default))
        return default
    return tuple(item if item.startswith(".") else f".{item}" for item in items)


@dataclass(slots=True)
class Settings:
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_extensions: Tuple[str, ...] = field(default=DEFAULT_ALLOWED_EXTENSIONS)
    log_dir: Path = Path("logs")
    translation_provider: str = "mock"
    default_source_language: str = "auto"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
            max_upload_bytes=_int_from_env("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            allowed_extensions=_list_from_env("ALLOWED_EXTENSIONS", DEFAULT_ALLOWED_EXTENSIONS),
            log_dir=Path(os.getenv("LOG_DIR", "logs")),
            translation_provider=os.getenv("TRANSLATION_PROVIDER", "mock").strip().lower(),
            default_source_language=os.getenv("DEFAULT_SOURCE_LANGUAGE", "auto").strip().lower(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""

    return Settings.from_env()
