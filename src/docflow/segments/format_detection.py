"""Utilities for detecting the container format of documents."""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import UnsupportedFormatError

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class DocumentFormat(str, Enum):
    """Supported document container formats."""

    TXT = "txt"
    SRT = "srt"
    DOCX = "docx"
    PDF = "pdf"

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @classmethod
    def parse(cls, value: Union["DocumentFormat", str]) -> "DocumentFormat":
        """Coerce a format tag such as ``"txt"`` or ``".SRT"`` into a member."""

        if isinstance(value, DocumentFormat):
            return value
        tag = (value or "").strip().lower().lstrip(".")
        try:
            return cls(tag)
        except ValueError as exc:
            raise UnsupportedFormatError(tag) from exc


_CONTENT_TYPES = {
    DocumentFormat.TXT: "text/plain",
    DocumentFormat.SRT: "text/plain",
    DocumentFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    DocumentFormat.PDF: "application/pdf",
}


class DocumentFormatDetector:
    """Detects the document format based on file name and optional MIME type."""

    _MIME_MAP = {
        "application/pdf": DocumentFormat.PDF,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.DOCX,
        "text/plain": DocumentFormat.TXT,
        "application/x-subrip": DocumentFormat.SRT,
    }

    @classmethod
    def detect(cls, file_name: str | Path, mime_type: Optional[str] = None) -> DocumentFormat:
        """Return the detected document format.

        An explicit MIME type wins, otherwise the file suffix must be one of
        the recognised extensions. Raises :class:`UnsupportedFormatError` for
        anything else.
        """

        if mime_type and mime_type in cls._MIME_MAP:
            return cls._MIME_MAP[mime_type]

        suffix = Path(file_name).suffix.lower().lstrip(".")
        try:
            return DocumentFormat(suffix)
        except ValueError as exc:
            raise UnsupportedFormatError(suffix, file_name=Path(file_name).name) from exc

    @classmethod
    def for_output(cls, output_path: str | Path) -> DocumentFormat:
        """Return the reconstruction format for an output path.

        Unrecognised extensions fall back to plain text instead of failing.
        """

        suffix = Path(output_path).suffix.lower().lstrip(".")
        try:
            return DocumentFormat(suffix)
        except ValueError:
            LOGGER.info("Unrecognised output extension %r; writing plain text", suffix)
            return DocumentFormat.TXT


def content_type_for(file_name: str | Path) -> str:
    """Return the download content type keyed by the file's extension."""

    suffix = Path(file_name).suffix.lower().lstrip(".")
    try:
        return DocumentFormat(suffix).content_type
    except ValueError:
        return DEFAULT_CONTENT_TYPE
