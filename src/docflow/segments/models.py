"""Data models shared by the extractor and the reassembler."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .format_detection import DocumentFormat


@dataclass(slots=True)
class DocumentSegment:
    """One translatable unit addressed by its position in the source file."""

    index: int
    source_text: str
    target_text: Optional[str] = None

    @property
    def resolved_text(self) -> str:
        """Text used for output generation: the translation when present."""

        return self.target_text or self.source_text


@dataclass(frozen=True, slots=True)
class SubtitleBlock:
    """A blank-line-delimited block of a subtitle file."""

    lines: Tuple[str, ...]

    @property
    def is_cue(self) -> bool:
        return len(self.lines) >= 3

    @property
    def number_line(self) -> str:
        return self.lines[0]

    @property
    def timing_line(self) -> str:
        return self.lines[1]

    @property
    def text_lines(self) -> Tuple[str, ...]:
        return self.lines[2:]

    @property
    def text(self) -> str:
        return " ".join(self.text_lines).strip()


@dataclass(slots=True)
class ExtractedDocument:
    """Result of an extraction pass, carrying subtitle layout forward when known."""

    format: DocumentFormat
    texts: List[str]
    subtitle_blocks: Optional[List[SubtitleBlock]] = None

    def to_segments(self) -> List[DocumentSegment]:
        return build_segments(self.texts)


def build_segments(texts: Iterable[str]) -> List[DocumentSegment]:
    """Wrap ordered segment texts into segments with contiguous indexes."""

    return [DocumentSegment(index=index, source_text=text) for index, text in enumerate(texts)]
