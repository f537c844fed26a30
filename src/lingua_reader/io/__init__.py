"""I/O layer - Storage port and library persistence."""

from .library_repository import LibraryRepository
from .sqlite_storage import SqliteStorage
from .storage import InMemoryStorage, StoragePort

__all__ = ["StoragePort", "InMemoryStorage", "SqliteStorage", "LibraryRepository"]
