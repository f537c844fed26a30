"""Vocabulary entities persisted in the dictionary collection."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass
class DictionaryWord:
    """A single dictionary entry.

    Attributes:
        id: Unique identifier (UUID4 string).
        word: Normalized form, lower-cased and stripped of surrounding punctuation.
        is_known: True when the user has marked the word as learned.
        created_at: When the entry was first added.
        updated_at: Last time the entry was upserted or toggled.
    """

    id: str
    word: str
    is_known: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "word": self.word,
            "is_known": self.is_known,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DictionaryWord":
        created_at = datetime.fromisoformat(data["created_at"])
        return cls(
            id=data["id"],
            word=data["word"],
            is_known=bool(data.get("is_known", True)),
            created_at=created_at,
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else created_at,
        )
