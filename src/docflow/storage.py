"""Upload persistence and download path resolution."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Iterable, Optional
from uuid import uuid4

from fastapi import UploadFile

LOGGER = logging.getLogger(__name__)

_FILENAME_SAFE_CHARS_RE: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(slots=True)
class UploadResult:
    """Outcome of persisting an upload; ``error`` is set when ``success`` is false."""

    success: bool
    file_path: Optional[Path] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    error: Optional[str] = None


def _sanitize_filename(filename: str) -> str:
    """Return a filesystem-safe filename preserving the extension when possible."""
    if not filename:
        filename = "upload"
    # Remove any path components and replace disallowed characters.
    sanitized = Path(filename).name
    sanitized = _FILENAME_SAFE_CHARS_RE.sub("_", sanitized)
    sanitized = sanitized.strip("._") or "upload"
    return sanitized


def validate_file_type(file_name: str, allowed_extensions: Iterable[str]) -> bool:
    return Path(file_name).suffix.lower() in {extension.lower() for extension in allowed_extensions}


def validate_file_size(file_size: int, max_size_bytes: int) -> bool:
    return file_size <= max_size_bytes


def unique_destination(directory: Path, file_name: str) -> Path:
    sanitized_name = _sanitize_filename(file_name)
    base = Path(sanitized_name).stem or "upload"
    suffix = Path(sanitized_name).suffix
    unique_name = f"{base}-{uuid4().hex}{suffix}" if suffix else f"{base}-{uuid4().hex}"
    return directory / unique_name


async def save_upload(
    upload: UploadFile,
    directory: Path,
    *,
    allowed_extensions: Iterable[str],
    max_size_bytes: int,
) -> UploadResult:
    """Validate an upload against the allow-list and size bound, then persist it."""

    original_name = Path(upload.filename or "").name
    if not validate_file_type(original_name, allowed_extensions):
        suffix = Path(original_name).suffix or "<none>"
        return UploadResult(success=False, file_name=original_name, error=f"File type {suffix} is not allowed")

    contents = await upload.read()
    if not validate_file_size(len(contents), max_size_bytes):
        return UploadResult(
            success=False,
            file_name=original_name,
            file_size=len(contents),
            error=f"File exceeds the maximum size of {max_size_bytes} bytes",
        )

    destination = unique_destination(directory, original_name)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(contents)
    except OSError as error:
        LOGGER.warning("Failed to save upload %s: %s", original_name, error)
        return UploadResult(success=False, file_name=original_name, error=str(error) or "Failed to save file")
    finally:
        await upload.seek(0)

    LOGGER.info("Saved upload %s (%s bytes) to %s", original_name, len(contents), destination)
    return UploadResult(
        success=True,
        file_path=destination.resolve(),
        file_name=original_name,
        file_size=len(contents),
    )


def resolve_download_path(root: Path, path: Path) -> Path:
    """Return ``path`` resolved, refusing anything outside ``root``."""

    resolved_root = root.resolve()
    resolved = path.resolve()
    if resolved != resolved_root and resolved_root not in resolved.parents:
        raise PermissionError(f"Access denied: {path} is outside {root}")
    return resolved
