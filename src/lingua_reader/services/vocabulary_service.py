"""Vocabulary Service - the user's dictionary of known and in-progress words."""

import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from lingua_reader.core import DictionaryWord, DuplicateWordError
from lingua_reader.services.text_processing import vocabulary_key

logger = logging.getLogger(__name__)

KNOWN_SECTION_HEADER = "# Known words"
UNKNOWN_SECTION_HEADER = "# Words in progress"


def parse_word_file(text: str) -> List[str]:
    """Read a one-word-per-line file: lines trimmed, lower-cased, blanks skipped."""
    words = []
    for line in text.splitlines():
        word = line.strip().lower()
        if word:
            words.append(word)
    return words


class VocabularyService:
    """In-memory dictionary snapshot with idempotent mutations.

    Entries are keyed by their normalized form, so at most one entry exists
    per word regardless of case or surrounding punctuation. The service never
    touches storage; callers persist `words` after a mutation.
    """

    def __init__(
        self,
        words: Iterable[DictionaryWord] = (),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._entries: Dict[str, DictionaryWord] = {}
        for entry in words:
            key = vocabulary_key(entry.word)
            if key and key not in self._entries:
                self._entries[key] = entry

    @property
    def words(self) -> List[DictionaryWord]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, word: str) -> Optional[DictionaryWord]:
        return self._entries.get(vocabulary_key(word))

    def upsert(self, word: str, is_known: bool = True) -> DictionaryWord:
        """Insert a word or update its known state.

        Raises:
            ValueError: If the word normalizes to an empty string.
        """
        key = self._require_key(word)
        now = self._clock()
        existing = self._entries.get(key)
        if existing is not None:
            existing.is_known = is_known
            existing.updated_at = now
            return existing

        entry = DictionaryWord(
            id=str(uuid.uuid4()),
            word=key,
            is_known=is_known,
            created_at=now,
            updated_at=now,
        )
        self._entries[key] = entry
        return entry

    def add_word(self, word: str) -> DictionaryWord:
        """Add a new known word from the word list form.

        Raises:
            DuplicateWordError: If the word is already in the dictionary.
        """
        key = self._require_key(word)
        if key in self._entries:
            raise DuplicateWordError(f"'{key}' is already in the dictionary")
        return self.upsert(key, is_known=True)

    def bulk_import(self, words: Iterable[str]) -> int:
        """Add words as known, skipping any already tracked.

        Existing entries keep their state, so importing never downgrades or
        duplicates a word.

        Returns:
            Number of newly added words.
        """
        added = 0
        for raw in words:
            key = vocabulary_key(raw)
            if not key or key in self._entries:
                continue
            self.upsert(key, is_known=True)
            added += 1
        logger.info("Imported %d new words into the dictionary", added)
        return added

    def toggle_known(self, word_id: str) -> DictionaryWord:
        entry = self._get_by_id(word_id)
        entry.is_known = not entry.is_known
        entry.updated_at = self._clock()
        return entry

    def delete(self, word_id: str) -> DictionaryWord:
        entry = self._get_by_id(word_id)
        del self._entries[vocabulary_key(entry.word)]
        return entry

    def known_words(self) -> Set[str]:
        """Return the set of known normalized forms for analysis and rendering."""
        return {key for key, entry in self._entries.items() if entry.is_known}

    def counts(self) -> Tuple[int, int]:
        known = sum(1 for entry in self._entries.values() if entry.is_known)
        return known, len(self._entries) - known

    def search(self, query: str) -> List[DictionaryWord]:
        needle = query.strip().lower()
        return [entry for key, entry in self._entries.items() if needle in key]

    def export_text(self) -> str:
        """Render the dictionary as two labelled sections, one word per line."""
        known = [entry.word for entry in self._entries.values() if entry.is_known]
        unknown = [entry.word for entry in self._entries.values() if not entry.is_known]
        return "\n".join([KNOWN_SECTION_HEADER, *known, "", UNKNOWN_SECTION_HEADER, *unknown])

    def _require_key(self, word: str) -> str:
        key = vocabulary_key(word)
        if not key:
            raise ValueError(f"Cannot add an empty word: {word!r}")
        return key

    def _get_by_id(self, word_id: str) -> DictionaryWord:
        for entry in self._entries.values():
            if entry.id == word_id:
                return entry
        raise KeyError(f"Word not found: {word_id}")
