"""Library Coordinator - Orchestrates books, folders and the dictionary."""

import dataclasses
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

from PySide6.QtCore import QObject, Signal

from lingua_reader.core import (
    Book,
    DictionaryWord,
    Folder,
    FolderDeletePolicy,
    ReadingProgress,
)
from lingua_reader.io import LibraryRepository
from lingua_reader.services import (
    LibraryStatistics,
    SplitResult,
    VocabularyService,
    analyze,
    parse_word_file,
    recompute_all,
    split_book,
    summarize_library,
)

logger = logging.getLogger(__name__)

TEXT_FILE_SUFFIX = ".txt"


class LibraryCoordinator(QObject):
    """Owns every read-modify-write round trip against the repository.

    Responsibilities:
    - Upload, list, split and delete books
    - Create, rename and delete folders
    - Apply dictionary edits and re-analyze every book afterwards
    - Record reading progress

    New state is computed before anything is written, so a failed operation
    leaves previously persisted data as it was.
    """

    books_changed = Signal()
    folders_changed = Signal()
    dictionary_changed = Signal()

    def __init__(
        self,
        library_repository: LibraryRepository,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__()

        if library_repository is None:
            raise ValueError("LibraryRepository must not be None")

        self.library_repository = library_repository
        self._clock = clock

    # Books

    def list_books(self, folder_id: Optional[str] = None, query: str = "") -> List[Book]:
        """Books directly inside a folder (None for the root), filtered by title."""
        needle = query.strip().lower()
        return [
            book
            for book in self.library_repository.get_books()
            if book.folder_id == folder_id and needle in book.title.lower()
        ]

    def get_book(self, book_id: str) -> Book:
        return self.library_repository.get_book(book_id)

    def add_book(
        self,
        title: str,
        content: str,
        file_name: str = "",
        folder_id: Optional[str] = None,
    ) -> Book:
        """Analyze and store a new book.

        Raises:
            ValueError: If the title is empty.
            KeyError: If the folder does not exist.
        """
        if not title or not title.strip():
            raise ValueError("Book title cannot be empty")
        if folder_id is not None:
            self._require_folder(folder_id)

        analysis = analyze(content, self.known_words())
        book = Book(
            id=str(uuid.uuid4()),
            title=title.strip(),
            content=content,
            file_name=file_name or f"{title.strip()}{TEXT_FILE_SUFFIX}",
            upload_date=self._clock(),
            char_count=analysis.char_count,
            unique_words=analysis.unique_words,
            known_words=analysis.known_words,
            unknown_words=analysis.unknown_words,
            difficulty_percentage=analysis.difficulty_percentage,
            folder_id=folder_id,
        )

        books = self.library_repository.get_books()
        books.append(book)
        self.library_repository.save_books(books)
        logger.info("Added book '%s' (%d chars, %d%% unknown)", book.title, book.char_count, book.difficulty_percentage)
        self.books_changed.emit()
        return book

    def upload_files(self, paths: Iterable[Path], folder_id: Optional[str] = None) -> List[Book]:
        """Add every .txt file as a book titled after its file name.

        Raises:
            ValueError: If none of the paths is a .txt file.
        """
        text_files = [Path(p) for p in paths if Path(p).suffix.lower() == TEXT_FILE_SUFFIX]
        if not text_files:
            raise ValueError("Only .txt files can be uploaded")

        return [
            self.add_book(
                title=path.stem,
                content=path.read_text(encoding="utf-8"),
                file_name=path.name,
                folder_id=folder_id,
            )
            for path in text_files
        ]

    def delete_book(self, book_id: str) -> None:
        """Delete a book and its reading progress.

        Raises:
            KeyError: If no book has this id.
        """
        books = self.library_repository.get_books()
        remaining = [book for book in books if book.id != book_id]
        if len(remaining) == len(books):
            raise KeyError(f"Book not found: {book_id}")

        self.library_repository.save_books(remaining)
        self._drop_progress({book_id})
        self.books_changed.emit()

    def split_book(self, book_id: str, target_char_count: int, keep_original: bool = False) -> SplitResult:
        """Split a book into parts stored in a new folder.

        The parts replace the source book in the library unless keep_original
        is set. The source's reading progress goes with it.

        Raises:
            KeyError: If no book has this id.
            ValueError: If the book is empty or the target is not positive.
        """
        source = self.library_repository.get_book(book_id)
        result = split_book(source, target_char_count, self.known_words(), now=self._clock())

        previous_books = self.library_repository.get_books()
        previous_folders = self.library_repository.get_folders()

        books = list(previous_books)
        index = next(i for i, book in enumerate(books) if book.id == book_id)
        if keep_original:
            books[index + 1:index + 1] = result.parts
        else:
            books[index:index + 1] = result.parts

        try:
            self.library_repository.save_folders([*previous_folders, result.folder])
            self.library_repository.save_books(books)
            if not keep_original:
                self._drop_progress({book_id})
        except Exception:
            logger.warning("Split of %s failed, restoring previous books and folders", book_id)
            self.library_repository.save_folders(previous_folders)
            self.library_repository.save_books(previous_books)
            raise

        self.folders_changed.emit()
        self.books_changed.emit()
        return result

    # Folders

    def list_folders(self) -> List[Folder]:
        return self.library_repository.get_folders()

    def folder_book_count(self, folder_id: str) -> int:
        return sum(1 for book in self.library_repository.get_books() if book.folder_id == folder_id)

    def create_folder(self, name: str) -> Folder:
        if not name or not name.strip():
            raise ValueError("Folder name cannot be empty")

        folder = Folder(id=str(uuid.uuid4()), name=name.strip(), created_date=self._clock())
        folders = self.library_repository.get_folders()
        folders.append(folder)
        self.library_repository.save_folders(folders)
        self.folders_changed.emit()
        return folder

    def rename_folder(self, folder_id: str, name: str) -> Folder:
        if not name or not name.strip():
            raise ValueError("Folder name cannot be empty")

        folders = self.library_repository.get_folders()
        renamed = dataclasses.replace(self._require_folder(folder_id, folders), name=name.strip())
        self.library_repository.save_folders(
            [renamed if folder.id == folder_id else folder for folder in folders]
        )
        self.folders_changed.emit()
        return renamed

    def delete_folder(self, folder_id: str, on_delete: FolderDeletePolicy) -> None:
        """Delete a folder, moving its books to the root or deleting them.

        Args:
            folder_id: Folder to delete.
            on_delete: ORPHAN moves contained books to the root, CASCADE
                deletes them together with their reading progress.

        Raises:
            KeyError: If the folder does not exist.
        """
        policy = FolderDeletePolicy(on_delete)
        folders = self.library_repository.get_folders()
        self._require_folder(folder_id, folders)

        books = self.library_repository.get_books()
        contained = {book.id for book in books if book.folder_id == folder_id}
        if policy is FolderDeletePolicy.CASCADE:
            books = [book for book in books if book.id not in contained]
        else:
            books = [
                dataclasses.replace(book, folder_id=None) if book.id in contained else book
                for book in books
            ]

        self.library_repository.save_books(books)
        if policy is FolderDeletePolicy.CASCADE:
            self._drop_progress(contained)
        self.library_repository.save_folders([folder for folder in folders if folder.id != folder_id])

        logger.info("Deleted folder %s (%s, %d books)", folder_id, policy.value, len(contained))
        self.folders_changed.emit()
        self.books_changed.emit()

    # Dictionary

    def list_words(self) -> List[DictionaryWord]:
        return self.library_repository.get_dictionary()

    def known_words(self) -> Set[str]:
        return self._vocabulary().known_words()

    def import_dictionary(self, text: str) -> int:
        """Import a one-word-per-line file; returns the number of new words."""
        vocabulary = self._vocabulary()
        added = vocabulary.bulk_import(parse_word_file(text))
        self._commit_vocabulary(vocabulary)
        return added

    def import_dictionary_files(self, paths: Iterable[Path]) -> int:
        text_files = [Path(p) for p in paths if Path(p).suffix.lower() == TEXT_FILE_SUFFIX]
        if not text_files:
            raise ValueError("Only .txt files can be imported")

        vocabulary = self._vocabulary()
        added = 0
        for path in text_files:
            added += vocabulary.bulk_import(parse_word_file(path.read_text(encoding="utf-8")))
        self._commit_vocabulary(vocabulary)
        return added

    def add_word(self, word: str) -> DictionaryWord:
        vocabulary = self._vocabulary()
        entry = vocabulary.add_word(word)
        self._commit_vocabulary(vocabulary)
        return entry

    def set_word_known(self, word: str, is_known: bool = True) -> DictionaryWord:
        vocabulary = self._vocabulary()
        entry = vocabulary.upsert(word, is_known=is_known)
        self._commit_vocabulary(vocabulary)
        return entry

    def toggle_word(self, word_id: str) -> DictionaryWord:
        vocabulary = self._vocabulary()
        entry = vocabulary.toggle_known(word_id)
        self._commit_vocabulary(vocabulary)
        return entry

    def delete_word(self, word_id: str) -> None:
        vocabulary = self._vocabulary()
        vocabulary.delete(word_id)
        self._commit_vocabulary(vocabulary)

    def export_dictionary(self) -> str:
        """Export known and in-progress words as plain text.

        Raises:
            ValueError: If the dictionary is empty.
        """
        vocabulary = self._vocabulary()
        if not len(vocabulary):
            raise ValueError("Dictionary is empty, nothing to export")
        return vocabulary.export_text()

    # Progress and statistics

    def save_progress(self, book_id: str, position: int) -> ReadingProgress:
        entry = ReadingProgress(book_id=book_id, position=max(0, position), last_read_date=self._clock())
        self.library_repository.upsert_progress(entry)
        return entry

    def get_progress(self, book_id: str) -> Optional[ReadingProgress]:
        return self.library_repository.get_book_progress(book_id)

    def library_statistics(self) -> LibraryStatistics:
        return summarize_library(self.library_repository.get_books(), self.library_repository.get_dictionary())

    # Internals

    def _vocabulary(self) -> VocabularyService:
        return VocabularyService(self.library_repository.get_dictionary(), clock=self._clock)

    def _commit_vocabulary(self, vocabulary: VocabularyService) -> None:
        """Persist the dictionary, then refresh the statistics of every book."""
        previous_words = self.library_repository.get_dictionary()
        self.library_repository.save_dictionary(vocabulary.words)
        try:
            books = recompute_all(self.library_repository.get_books(), vocabulary.known_words())
            self.library_repository.save_books(books)
        except Exception:
            logger.warning("Book statistics could not be saved, restoring previous dictionary")
            self.library_repository.save_dictionary(previous_words)
            raise
        self.dictionary_changed.emit()
        self.books_changed.emit()

    def _drop_progress(self, book_ids: Set[str]) -> None:
        progress = self.library_repository.get_progress()
        kept = [entry for entry in progress if entry.book_id not in book_ids]
        if len(kept) != len(progress):
            self.library_repository.save_progress(kept)

    def _require_folder(self, folder_id: str, folders: Optional[List[Folder]] = None) -> Folder:
        folders = folders if folders is not None else self.library_repository.get_folders()
        for folder in folders:
            if folder.id == folder_id:
                return folder
        raise KeyError(f"Folder not found: {folder_id}")
