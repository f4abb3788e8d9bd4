"""Deterministic providers for tests and offline development."""
from __future__ import annotations

import re
from typing import Optional, Sequence

from .base import GlossaryEntry, TranslationProvider


class MockTranslationProvider(TranslationProvider):
    """Apply glossary substitutions and tag the text with the target language."""

    name = "mock"

    def translate(
        self,
        text: str,
        target_language: str,
        source_language: Optional[str] = None,
        glossary: Sequence[GlossaryEntry] = (),
    ) -> str:
        del source_language  # Unused in the mock implementation.
        translated = text
        for entry in glossary:
            if not entry.source_term:
                continue
            pattern = re.compile(re.escape(entry.source_term), re.IGNORECASE)
            translated = pattern.sub(lambda _match: entry.target_term, translated)
        return f"[{target_language.upper()}] {translated}"


class EchoTranslationProvider(TranslationProvider):
    """Return the source text unchanged."""

    name = "echo"

    def translate(
        self,
        text: str,
        target_language: str,
        source_language: Optional[str] = None,
        glossary: Sequence[GlossaryEntry] = (),
    ) -> str:
        del target_language, source_language, glossary
        return text
