"""Caching services - abstract interface and concrete implementations."""

from lingua_reader.services.caching.translation_cache import TranslationCache, CacheRecord
from lingua_reader.services.caching.in_memory_translation_cache import InMemoryTranslationCache

__all__ = [
    "TranslationCache",
    "CacheRecord",
    "InMemoryTranslationCache",
]
