"""Base interface for machine-translation providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

__all__ = ["GlossaryEntry", "TranslationError", "TranslationProvider"]


@dataclass(frozen=True, slots=True)
class GlossaryEntry:
    source_term: str
    target_term: str


class TranslationError(RuntimeError):
    """Raised when a provider cannot translate a segment."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class TranslationProvider(ABC):
    """Abstract interface for translation providers."""

    name: str = "abstract"

    @abstractmethod
    def translate(
        self,
        text: str,
        target_language: str,
        source_language: Optional[str] = None,
        glossary: Sequence[GlossaryEntry] = (),
    ) -> str:
        """Translate ``text`` into ``target_language``."""
