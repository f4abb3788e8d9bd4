"""Translation provider exports."""
from __future__ import annotations

from .base import GlossaryEntry, TranslationError, TranslationProvider
from .mock import EchoTranslationProvider, MockTranslationProvider

_PROVIDERS = {
    MockTranslationProvider.name: MockTranslationProvider,
    EchoTranslationProvider.name: EchoTranslationProvider,
}


def get_translation_provider(name: str) -> TranslationProvider:
    """Instantiate the provider registered under ``name``."""

    key = name.strip().lower()
    try:
        return _PROVIDERS[key]()
    except KeyError as exc:
        available = ", ".join(sorted(_PROVIDERS))
        raise ValueError(f"Unknown translation provider {name!r}; expected one of: {available}") from exc


__all__ = [
    "EchoTranslationProvider",
    "GlossaryEntry",
    "MockTranslationProvider",
    "TranslationError",
    "TranslationProvider",
    "get_translation_provider",
]
