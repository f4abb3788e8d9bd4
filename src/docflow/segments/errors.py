"""Exceptions raised by the segmentation layer."""
from __future__ import annotations


class UnsupportedFormatError(ValueError):
    """Raised when extraction is requested for a format outside the recognised set."""

    def __init__(self, document_format: str, *, file_name: str | None = None) -> None:
        label = document_format or "<none>"
        message = f"Unsupported file format: {label}"
        if file_name:
            message = f"{message} ({file_name})"
        super().__init__(message)
        self.document_format = document_format
        self.file_name = file_name
