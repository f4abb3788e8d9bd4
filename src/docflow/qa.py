"""Automated quality checks run over translated segments.

Two checks are applied to every segment that carries a translation:

* glossary compliance: a glossary source term found in the source text must
  have its target term in the translation (both case-insensitive);
* number consistency: the numbers in source and translation must match in
  count and, position by position, in value once currency symbols, percent
  signs, separators and whitespace are removed.

The quality score starts at 100 and loses 10 points per glossary warning and
15 per number warning, never going below zero.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence

from .providers.base import GlossaryEntry
from .segments.models import DocumentSegment

_NUMBER_RE = re.compile(r"\b\d+(?:[.,]\d+)*(?:\s*%|\s*\$|\s*€|\s*£|\s*¥)?\b")
_NUMBER_NOISE_RE = re.compile(r"[%$€£¥,\s]")

GLOSSARY_PENALTY = 10
NUMBER_PENALTY = 15


@dataclass(slots=True)
class GlossaryWarning:
    segment_index: int
    segment: str
    source_term: str
    target_term: str
    message: str


@dataclass(slots=True)
class NumberWarning:
    segment_index: int
    segment: str
    source_numbers: List[str]
    target_numbers: List[str]
    message: str


@dataclass(slots=True)
class QAResult:
    glossary_warnings: List[GlossaryWarning] = field(default_factory=list)
    number_warnings: List[NumberWarning] = field(default_factory=list)
    quality_score: int = 100

    @property
    def total_warnings(self) -> int:
        return len(self.glossary_warnings) + len(self.number_warnings)


def extract_numbers(text: str) -> List[str]:
    return [match.group(0) for match in _NUMBER_RE.finditer(text)]


def normalize_number(value: str) -> str:
    return _NUMBER_NOISE_RE.sub("", value).replace(".", "")


def check_glossary_compliance(
    segment: DocumentSegment, glossary: Sequence[GlossaryEntry]
) -> List[GlossaryWarning]:
    source = segment.source_text.lower()
    target = (segment.target_text or "").lower()
    warnings: List[GlossaryWarning] = []
    for entry in glossary:
        if entry.source_term.lower() in source and entry.target_term.lower() not in target:
            warnings.append(
                GlossaryWarning(
                    segment_index=segment.index,
                    segment=segment.source_text,
                    source_term=entry.source_term,
                    target_term=entry.target_term,
                    message=(
                        f'Source contains "{entry.source_term}" but target text doesn\'t contain '
                        f'the expected translation "{entry.target_term}".'
                    ),
                )
            )
    return warnings


def check_number_consistency(segment: DocumentSegment) -> List[NumberWarning]:
    source_numbers = extract_numbers(segment.source_text)
    target_numbers = extract_numbers(segment.target_text or "")

    if len(source_numbers) != len(target_numbers):
        return [
            NumberWarning(
                segment_index=segment.index,
                segment=segment.source_text,
                source_numbers=source_numbers,
                target_numbers=target_numbers,
                message=(
                    f"Number count mismatch: source has {len(source_numbers)} numbers, "
                    f"target has {len(target_numbers)}."
                ),
            )
        ]

    warnings: List[NumberWarning] = []
    for source_number, target_number in zip(source_numbers, target_numbers):
        if normalize_number(source_number) != normalize_number(target_number):
            warnings.append(
                NumberWarning(
                    segment_index=segment.index,
                    segment=segment.source_text,
                    source_numbers=source_numbers,
                    target_numbers=target_numbers,
                    message=f'Number value mismatch: "{source_number}" in source vs "{target_number}" in target.',
                )
            )
    return warnings


def calculate_quality_score(glossary_warnings: int, number_warnings: int) -> int:
    return max(0, 100 - glossary_warnings * GLOSSARY_PENALTY - number_warnings * NUMBER_PENALTY)


def perform_qa(segments: Sequence[DocumentSegment], glossary: Sequence[GlossaryEntry] = ()) -> QAResult:
    """Run every check over the translated segments and score the result."""

    result = QAResult()
    for segment in segments:
        if not segment.target_text:
            continue
        if glossary:
            result.glossary_warnings.extend(check_glossary_compliance(segment, glossary))
        result.number_warnings.extend(check_number_consistency(segment))

    result.quality_score = calculate_quality_score(len(result.glossary_warnings), len(result.number_warnings))
    return result
