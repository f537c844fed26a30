"""Data access layer for books, folders, dictionary, progress and settings."""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from lingua_reader.core import (
    DEFAULT_SETTINGS,
    AppSettings,
    Book,
    DictionaryWord,
    Folder,
    ReadingProgress,
    StorageFullError,
    StorageQuotaExceededError,
)
from lingua_reader.io.storage import StoragePort

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "language_reader_"
BOOKS_KEY = STORAGE_PREFIX + "books"
FOLDERS_KEY = STORAGE_PREFIX + "folders"
DICTIONARY_KEY = STORAGE_PREFIX + "dictionary"
PROGRESS_KEY = STORAGE_PREFIX + "progress"
SETTINGS_KEY = STORAGE_PREFIX + "settings"

PROGRESS_KEEP_LIMIT = 10
BOOKS_KEEP_LIMIT = 20

T = TypeVar("T")


class LibraryRepository:
    """Reads and writes JSON collections through a StoragePort.

    Collections are stored as whole JSON arrays and written back with
    read-modify-write round trips; a single writer is assumed. Corrupted
    collections fail fast with RuntimeError.
    """

    def __init__(self, storage: StoragePort) -> None:
        if storage is None:
            raise RuntimeError("Storage port required")
        self.storage = storage

    def get_books(self) -> List[Book]:
        return self._load_list(BOOKS_KEY, Book.from_dict)

    def save_books(self, books: Sequence[Book]) -> None:
        self._save_list(BOOKS_KEY, [book.to_dict() for book in books])

    def get_book(self, book_id: str) -> Book:
        """Retrieve a book by id.

        Raises:
            KeyError: If no book has this id.
        """
        for book in self.get_books():
            if book.id == book_id:
                return book
        raise KeyError(f"Book not found: {book_id}")

    def get_folders(self) -> List[Folder]:
        return self._load_list(FOLDERS_KEY, Folder.from_dict)

    def save_folders(self, folders: Sequence[Folder]) -> None:
        self._save_list(FOLDERS_KEY, [folder.to_dict() for folder in folders])

    def get_dictionary(self) -> List[DictionaryWord]:
        return self._load_list(DICTIONARY_KEY, DictionaryWord.from_dict)

    def save_dictionary(self, words: Sequence[DictionaryWord]) -> None:
        """Persist the dictionary, cleaning up old data once if storage is full.

        Raises:
            StorageFullError: If the write still fails after cleanup.
        """
        payload = [word.to_dict() for word in words]
        try:
            self._save_list(DICTIONARY_KEY, payload)
            return
        except StorageQuotaExceededError:
            logger.warning("Storage quota exceeded while saving dictionary, cleaning up old data")

        self.cleanup_old_data()
        try:
            self._save_list(DICTIONARY_KEY, payload)
        except StorageQuotaExceededError as e:
            raise StorageFullError(
                "Dictionary is too large to store. Remove some words or books and try again."
            ) from e

    def get_progress(self) -> List[ReadingProgress]:
        return self._load_list(PROGRESS_KEY, ReadingProgress.from_dict)

    def save_progress(self, progress: Sequence[ReadingProgress]) -> None:
        self._save_list(PROGRESS_KEY, [entry.to_dict() for entry in progress])

    def get_book_progress(self, book_id: str) -> Optional[ReadingProgress]:
        return next((entry for entry in self.get_progress() if entry.book_id == book_id), None)

    def upsert_progress(self, entry: ReadingProgress) -> None:
        progress = [existing for existing in self.get_progress() if existing.book_id != entry.book_id]
        progress.append(entry)
        self.save_progress(progress)

    def get_settings(self) -> AppSettings:
        """Load settings merged with defaults; unreadable data yields the defaults."""
        raw = self.storage.get(SETTINGS_KEY)
        if not raw:
            return DEFAULT_SETTINGS
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("Settings must be a JSON object")
            return AppSettings.from_dict(data)
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring unreadable settings, using defaults: %s", e)
            return DEFAULT_SETTINGS

    def save_settings(self, settings: AppSettings) -> None:
        self.storage.set(SETTINGS_KEY, json.dumps(settings.to_dict(), ensure_ascii=False))

    def cleanup_old_data(self) -> None:
        """Evict old progress entries and books beyond fixed caps.

        Keeps the most recently read progress entries and the most recently
        uploaded books. Folders are user-created and never evicted.
        """
        progress = self.get_progress()
        if len(progress) > PROGRESS_KEEP_LIMIT:
            progress.sort(key=lambda entry: entry.last_read_date, reverse=True)
            self.save_progress(progress[:PROGRESS_KEEP_LIMIT])
            logger.warning("Evicted %d reading progress entries", len(progress) - PROGRESS_KEEP_LIMIT)

        books = self.get_books()
        if len(books) > BOOKS_KEEP_LIMIT:
            books.sort(key=lambda book: book.upload_date, reverse=True)
            self.save_books(books[:BOOKS_KEEP_LIMIT])
            logger.warning("Evicted %d books", len(books) - BOOKS_KEEP_LIMIT)

    def _load_list(self, key: str, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        raw = self.storage.get(key)
        if not raw:
            return []
        try:
            return [factory(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            raise RuntimeError(f"Corrupted data in '{key}': {e}") from e

    def _save_list(self, key: str, items: List[Dict[str, Any]]) -> None:
        self.storage.set(key, json.dumps(items, ensure_ascii=False))
