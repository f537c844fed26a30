"""Statistics Propagator - keeps cached book statistics in step with the vocabulary."""

import dataclasses
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Sequence

from lingua_reader.core import Book, DictionaryWord
from lingua_reader.services.difficulty_analyzer import analyze, round_half_up


@dataclass(frozen=True)
class LibraryStatistics:
    """Overview numbers for the whole library."""

    total_books: int
    total_unique_words: int
    known_dictionary_words: int
    dictionary_size: int
    average_difficulty: int
    known_words_percentage: int

    def library_label(self) -> str:
        if self.average_difficulty < 30:
            return "Easy library"
        if self.average_difficulty < 60:
            return "Medium difficulty"
        return "Hard library"


def apply_analysis(book: Book, known_words: AbstractSet[str]) -> Book:
    """Return a copy of book with freshly computed statistics."""
    analysis = analyze(book.content, known_words)
    return dataclasses.replace(
        book,
        char_count=analysis.char_count,
        unique_words=analysis.unique_words,
        known_words=analysis.known_words,
        unknown_words=analysis.unknown_words,
        difficulty_percentage=analysis.difficulty_percentage,
    )


def recompute_all(books: Iterable[Book], known_words: AbstractSet[str]) -> List[Book]:
    """Re-analyze every book against the current known-word snapshot.

    Runs after any vocabulary change. Every book is processed; statistics
    are replaced, never patched.
    """
    return [apply_analysis(book, known_words) for book in books]


def summarize_library(books: Sequence[Book], words: Sequence[DictionaryWord]) -> LibraryStatistics:
    total_books = len(books)
    known = sum(1 for word in words if word.is_known)

    average = (
        round_half_up(sum(book.difficulty_percentage for book in books) / total_books)
        if total_books
        else 0
    )
    known_percentage = round_half_up(known / len(words) * 100) if words else 0

    return LibraryStatistics(
        total_books=total_books,
        total_unique_words=sum(book.unique_words for book in books),
        known_dictionary_words=known,
        dictionary_size=len(words),
        average_difficulty=average,
        known_words_percentage=known_percentage,
    )
