"""Source-language detection for jobs submitted without a source language."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from langdetect import DetectorFactory, LangDetectException, detect

LOGGER = logging.getLogger(__name__)
DetectorFactory.seed = 0

DEFAULT_SAMPLE_CHARS = 2000


class LanguageDetector:
    """Guess the language of segment text; ``None`` when it cannot tell."""

    def __init__(self, sample_chars: int = DEFAULT_SAMPLE_CHARS) -> None:
        self.sample_chars = sample_chars

    def detect(self, text: str) -> Optional[str]:
        sample = text.strip()[: self.sample_chars]
        if not sample:
            return None
        try:
            language = detect(sample)
        except LangDetectException:
            LOGGER.info("Unable to determine language for text of length %s", len(text))
            return None
        LOGGER.debug("Detected language %s from %s characters", language, len(sample))
        return language

    def detect_segments(self, texts: Iterable[str]) -> Optional[str]:
        """Detect the language of the leading segments up to the sample size."""

        collected: list[str] = []
        size = 0
        for text in texts:
            collected.append(text)
            size += len(text) + 1
            if size >= self.sample_chars:
                break
        return self.detect(" ".join(collected))
