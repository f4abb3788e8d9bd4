"""Reassemble translated segments into an output file.

The output path's extension selects the reconstruction strategy; the format
of the original file only matters for subtitle output, which reuses the
original block layout. Unrecognised output extensions produce plain text.

Page-description (PDF) output is a plain-text rendering with a banner and a
numbered list, not a real PDF container.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from docx import Document as DocxDocument

from .extractors import decode_text
from .format_detection import DocumentFormat, DocumentFormatDetector
from .models import DocumentSegment, SubtitleBlock
from .splitting import split_subtitle_blocks

LOGGER = logging.getLogger(__name__)

BANNER_RULE = "=" * 50
PDF_HEADER = f"TRANSLATED DOCUMENT\n{BANNER_RULE}\n\n"
PDF_FOOTER = f"\n\n{BANNER_RULE}\nTranslation completed by DocFlow Translation Platform"


def reassemble(
    original_path: str | Path,
    segments: Sequence[DocumentSegment],
    output_path: str | Path,
    *,
    subtitle_blocks: Optional[Sequence[SubtitleBlock]] = None,
) -> Path:
    """Write ``segments`` to ``output_path`` and return the written path.

    ``subtitle_blocks`` is the block layout captured at extraction time; when
    omitted, subtitle output re-reads and re-splits ``original_path``.
    """

    output = Path(output_path)
    output_format = DocumentFormatDetector.for_output(output)
    ordered = sorted(segments, key=lambda segment: segment.index)

    if output_format is DocumentFormat.SRT:
        if subtitle_blocks is None:
            subtitle_blocks = split_subtitle_blocks(decode_text(Path(original_path).read_bytes()))
        content = render_subtitles(subtitle_blocks, ordered)
        output.write_text(content, encoding="utf-8")
    elif output_format is DocumentFormat.DOCX:
        write_docx(ordered, output)
    elif output_format is DocumentFormat.PDF:
        output.write_text(render_pdf_text(ordered), encoding="utf-8")
    else:
        output.write_text(render_plain_text(ordered), encoding="utf-8")

    LOGGER.info(
        "Reassembled %s segments from %s into %s (%s)",
        len(ordered),
        Path(original_path).name,
        output.name,
        output_format.value,
    )
    return output


def render_plain_text(segments: Sequence[DocumentSegment]) -> str:
    return " ".join(segment.resolved_text for segment in segments)


def render_subtitles(blocks: Sequence[SubtitleBlock], segments: Sequence[DocumentSegment]) -> str:
    """Rebuild subtitle content, swapping each cue's text for its translation.

    Cues beyond the number of segments, and cues whose segment has no
    translation, keep their original text lines verbatim. Blocks with fewer
    than three lines are dropped.
    """

    rendered: List[str] = []
    cue_index = 0
    for block in blocks:
        if not block.is_cue:
            continue
        text = "\n".join(block.text_lines)
        if cue_index < len(segments) and segments[cue_index].target_text:
            text = segments[cue_index].target_text
        rendered.append(f"{block.number_line}\n{block.timing_line}\n{text}")
        cue_index += 1

    if cue_index != len(segments):
        LOGGER.warning("Subtitle cue count %s does not match segment count %s", cue_index, len(segments))
    return "\n\n".join(rendered).strip()


def render_pdf_text(segments: Sequence[DocumentSegment]) -> str:
    numbered = "\n\n".join(
        f"{position}. {segment.resolved_text}" for position, segment in enumerate(segments, start=1)
    )
    return PDF_HEADER + numbered + PDF_FOOTER


def write_docx(segments: Sequence[DocumentSegment], output: Path) -> None:
    document = DocxDocument()
    for segment in segments:
        document.add_paragraph(segment.resolved_text)
    document.save(str(output))
