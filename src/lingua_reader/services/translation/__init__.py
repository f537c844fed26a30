"""Translation services - abstract interface and Gemini implementation."""

from lingua_reader.services.translation.translation_service import (
    TranslationMode,
    TranslationRequest,
    TranslationResult,
    TranslationService,
)
from lingua_reader.services.translation.gemini_translation_service import (
    GeminiTranslationService,
    clean_sentence_translation,
)

__all__ = [
    "TranslationMode",
    "TranslationRequest",
    "TranslationService",
    "TranslationResult",
    "GeminiTranslationService",
    "clean_sentence_translation",
]
