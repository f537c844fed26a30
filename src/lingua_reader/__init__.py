"""
Lingua Reader - An interactive reader for English learners.

This package provides:
- A personal dictionary of known and in-progress words
- Per-book difficulty statistics kept in sync with the dictionary
- Splitting long books into readable parts
- Click-to-translate words and sentences via Google Gemini
"""

__version__ = "0.1.0"

# Make key components available at package level
from lingua_reader.core import AppSettings, Book, DictionaryWord, Folder, ReadingProgress
from lingua_reader.io import LibraryRepository, SqliteStorage

__all__ = [
    "AppSettings",
    "Book",
    "DictionaryWord",
    "Folder",
    "ReadingProgress",
    "LibraryRepository",
    "SqliteStorage",
]
