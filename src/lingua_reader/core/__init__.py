"""Domain layer - Pure entities for books, folders, vocabulary and settings."""

from .errors import (
    ConfigurationError,
    DuplicateWordError,
    MissingApiKeyError,
    StorageFullError,
    StorageQuotaExceededError,
)
from .library_entities import Book, Folder, FolderDeletePolicy, ReadingProgress
from .settings import DEFAULT_SETTINGS, TEXT_ALIGN_OPTIONS, AppSettings
from .vocabulary_entities import DictionaryWord

__all__ = [
    "Book",
    "Folder",
    "FolderDeletePolicy",
    "ReadingProgress",
    "DictionaryWord",
    "AppSettings",
    "DEFAULT_SETTINGS",
    "TEXT_ALIGN_OPTIONS",
    "ConfigurationError",
    "MissingApiKeyError",
    "StorageQuotaExceededError",
    "StorageFullError",
    "DuplicateWordError",
]
