"""Text splitting primitives used by the extractors and the reassembler."""
from __future__ import annotations

import re
from typing import List

from .models import SubtitleBlock

_SENTENCE_TERMINATORS_RE = re.compile(r"[.!?]+")
_MARKUP_TAG_RE = re.compile(r"<[^>]*>")
_BLANK_LINE_RE = re.compile(r"\n\s*\n")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_sentences(text: str) -> List[str]:
    """Split text on runs of sentence terminators.

    Every surviving piece gets a trailing ``.`` regardless of the terminator
    it originally had, so ``"Really?"`` becomes ``"Really."``. A trailing
    fragment without a terminator is kept and also receives a ``.``.
    """

    pieces = (piece.strip() for piece in _SENTENCE_TERMINATORS_RE.split(text))
    return [f"{piece}." for piece in pieces if piece]


def strip_markup(text: str) -> str:
    """Replace anything that looks like a markup tag with a single space."""

    return _MARKUP_TAG_RE.sub(" ", text)


def split_subtitle_blocks(content: str) -> List[SubtitleBlock]:
    """Split subtitle content into blank-line-delimited blocks.

    Blocks are returned in file order, including the ones that are too short
    to be cues, so that callers can count cues exactly the same way on
    extraction and reassembly.
    """

    normalized = normalize_newlines(content)
    blocks: List[SubtitleBlock] = []
    for raw_block in _BLANK_LINE_RE.split(normalized):
        stripped = raw_block.strip()
        if not stripped:
            continue
        blocks.append(SubtitleBlock(lines=tuple(stripped.split("\n"))))
    return blocks
