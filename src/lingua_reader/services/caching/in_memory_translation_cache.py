"""In-memory translation cache for session-level caching."""

from typing import Dict, List, Optional, Tuple

from lingua_reader.services.caching.translation_cache import CacheRecord, TranslationCache


class InMemoryTranslationCache(TranslationCache):
    """
    Simple in-memory cache implementation.

    Translations live for the session only. No persistence.
    """

    def __init__(self):
        # Structure: {book_id: {(key, lang): CacheRecord}}
        self._store: Dict[str, Dict[Tuple[str, str], CacheRecord]] = {}

    def get(self, book_id: str, key: str, lang: str) -> Optional[CacheRecord]:
        return self._store.get(book_id, {}).get((key, lang))

    def put(self, book_id: str, record: CacheRecord) -> None:
        self._store.setdefault(book_id, {})[(record.key, record.lang)] = record

    def delete(self, book_id: str, key: str, lang: str) -> None:
        if book_id in self._store:
            self._store[book_id].pop((key, lang), None)

    def clear_book(self, book_id: str) -> None:
        self._store.pop(book_id, None)

    def list_keys(self, book_id: str) -> List[Tuple[str, str]]:
        return list(self._store.get(book_id, {}).keys())
