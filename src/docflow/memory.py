"""In-memory translation memory keyed by source text and language pair."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MemoryEntry:
    source_text: str
    target_text: str
    source_language: str
    target_language: str
    job_id: Optional[str] = None


class TranslationMemory:
    """Exact-match store of previously translated segments."""

    def __init__(self) -> None:
        self._entries: Dict[Tuple[str, str, str], MemoryEntry] = {}

    @staticmethod
    def _key(source_text: str, source_language: str, target_language: str) -> Tuple[str, str, str]:
        return source_language.lower(), target_language.lower(), source_text

    def lookup(self, source_text: str, source_language: str, target_language: str) -> Optional[str]:
        entry = self._entries.get(self._key(source_text, source_language, target_language))
        if entry is None:
            return None
        LOGGER.debug("Translation memory hit for %r (%s->%s)", source_text[:40], source_language, target_language)
        return entry.target_text

    def store(
        self,
        source_text: str,
        target_text: str,
        source_language: str,
        target_language: str,
        *,
        job_id: Optional[str] = None,
    ) -> MemoryEntry:
        entry = MemoryEntry(
            source_text=source_text,
            target_text=target_text,
            source_language=source_language,
            target_language=target_language,
            job_id=job_id,
        )
        self._entries[self._key(source_text, source_language, target_language)] = entry
        return entry

    def entries(self) -> List[MemoryEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
