"""Library entities: books, folders and reading progress."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Book:
    """An uploaded text and its cached vocabulary statistics.

    Attributes:
        id: Unique identifier (UUID4 string).
        title: Display title.
        content: Full text; never modified after upload.
        file_name: Name of the uploaded file.
        upload_date: When the book was added (used for cleanup ordering).
        char_count: Raw character length of content.
        unique_words: Number of distinct tokens in content.
        known_words: Distinct tokens present in the known-word set.
        unknown_words: Distinct tokens absent from the known-word set.
        difficulty_percentage: Share of unknown distinct tokens, 0-100.
        folder_id: Folder holding the book, None for the library root.
    """

    id: str
    title: str
    content: str
    file_name: str
    upload_date: datetime
    char_count: int = 0
    unique_words: int = 0
    known_words: int = 0
    unknown_words: int = 0
    difficulty_percentage: int = 0
    folder_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "file_name": self.file_name,
            "upload_date": self.upload_date.isoformat(),
            "char_count": self.char_count,
            "unique_words": self.unique_words,
            "known_words": self.known_words,
            "unknown_words": self.unknown_words,
            "difficulty_percentage": self.difficulty_percentage,
            "folder_id": self.folder_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Book":
        return cls(
            id=data["id"],
            title=data["title"],
            content=data["content"],
            file_name=data.get("file_name", ""),
            upload_date=datetime.fromisoformat(data["upload_date"]),
            char_count=int(data.get("char_count", 0)),
            unique_words=int(data.get("unique_words", 0)),
            known_words=int(data.get("known_words", 0)),
            unknown_words=int(data.get("unknown_words", 0)),
            difficulty_percentage=int(data.get("difficulty_percentage", 0)),
            folder_id=data.get("folder_id"),
        )


@dataclass(frozen=True)
class Folder:
    """A named group of books."""

    id: str
    name: str
    created_date: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "created_date": self.created_date.isoformat()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Folder":
        return cls(
            id=data["id"],
            name=data["name"],
            created_date=datetime.fromisoformat(data["created_date"]),
        )


class FolderDeletePolicy(str, Enum):
    """What happens to the books of a folder being deleted."""

    ORPHAN = "orphan"
    CASCADE = "cascade"


@dataclass(frozen=True)
class ReadingProgress:
    """Last scroll position for a book."""

    book_id: str
    position: int
    last_read_date: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "book_id": self.book_id,
            "position": self.position,
            "last_read_date": self.last_read_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReadingProgress":
        return cls(
            book_id=data["book_id"],
            position=int(data.get("position", 0)),
            last_read_date=datetime.fromisoformat(data["last_read_date"]),
        )
