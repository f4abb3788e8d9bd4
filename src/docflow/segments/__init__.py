"""Document segmentation and round-trip reconstruction."""
from __future__ import annotations

from .errors import UnsupportedFormatError
from .extractors import extract, extract_document, extract_segments
from .format_detection import DocumentFormat, DocumentFormatDetector, content_type_for
from .models import DocumentSegment, ExtractedDocument, SubtitleBlock, build_segments
from .reassembly import reassemble

__all__ = [
    "DocumentFormat",
    "DocumentFormatDetector",
    "DocumentSegment",
    "ExtractedDocument",
    "SubtitleBlock",
    "UnsupportedFormatError",
    "build_segments",
    "content_type_for",
    "extract",
    "extract_document",
    "extract_segments",
    "reassemble",
]
