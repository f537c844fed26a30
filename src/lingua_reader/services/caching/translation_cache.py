"""Translation Cache abstraction - plugin interface for translation storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple


@dataclass
class CacheRecord:
    """A cached translation entry."""

    key: str
    lang: str
    translation: str
    model: str
    updated_at: datetime


class TranslationCache(ABC):
    """
    Abstract interface for caching translations per book.

    Keys are TranslationRequest.cache_key values, so the cache and the
    coordinator's in-flight set agree on request identity.
    """

    @abstractmethod
    def get(self, book_id: str, key: str, lang: str) -> Optional[CacheRecord]:
        """
        Retrieve a cached entry by book, request key and language.

        Returns:
            CacheRecord if found, else None.
        """

    @abstractmethod
    def put(self, book_id: str, record: CacheRecord) -> None:
        """Store or overwrite a cache entry."""

    @abstractmethod
    def delete(self, book_id: str, key: str, lang: str) -> None:
        """Delete a single cache entry."""

    @abstractmethod
    def clear_book(self, book_id: str) -> None:
        """Clear all cache entries for a given book."""

    @abstractmethod
    def list_keys(self, book_id: str) -> List[Tuple[str, str]]:
        """
        List all (key, lang) pairs for a book.

        Useful for diagnostics and testing.
        """
