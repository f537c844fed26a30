"""Reading Coordinator - Manages the open book, translations and progress."""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Set

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from lingua_reader.core import Book, DictionaryWord, MissingApiKeyError
from lingua_reader.coordinators.library_coordinator import LibraryCoordinator
from lingua_reader.services import (
    CacheRecord,
    LevelAnalysis,
    RenderedLine,
    SettingsManager,
    TranslationCache,
    TranslationMode,
    TranslationRequest,
    TranslationResult,
    TranslationService,
    WordContext,
    build_level_prompt,
    collect_unknown_word_contexts,
    no_unknown_words,
    parse_level_analysis,
    segment,
    unknown_word_batch,
)
from lingua_reader.services.api_workers import TranslationWorker

logger = logging.getLogger(__name__)


class _TranslationRequest(QObject):
    """Holds the context of one in-flight request and forwards its outcome."""

    def __init__(self, request: TranslationRequest, book_id: str, parent: "ReadingCoordinator"):
        super().__init__()
        self.request = request
        self.book_id = book_id
        self.parent_ref = parent

    @Slot(object)
    def on_translation_result(self, result):
        coordinator = self.parent_ref
        if coordinator:
            try:
                coordinator._handle_translation_result(self.request, self.book_id, result)
            except RuntimeError:
                # Coordinator might be destroyed, ignore
                pass

    @Slot(str)
    def on_translation_error(self, error: str):
        coordinator = self.parent_ref
        if coordinator:
            try:
                coordinator._handle_translation_error(self.request, self.book_id, error)
            except RuntimeError:
                pass

    @Slot(str)
    def on_configuration_error(self, message: str):
        coordinator = self.parent_ref
        if coordinator:
            try:
                coordinator._handle_configuration_error(self.request, message)
            except RuntimeError:
                pass


class ReadingCoordinator(QObject):
    """
    Coordinates the reading session of a single open book.

    Responsibilities:
    - Render the book into lines of word, separator and sentence segments
    - Request word and sentence translations without blocking the UI
    - Serve repeated requests from the per-book translation cache
    - Mark words as known and record reading progress
    - Run AI level analysis over batches of unknown words

    At most one request per cache key is in flight. Results arriving after
    the book was closed or switched are cached but not announced.
    """

    book_opened = Signal(str)  # book_id
    book_closed = Signal()
    configuration_required = Signal(str)  # message
    translation_started = Signal(str)  # cache key
    word_translation_completed = Signal(str, str)  # word, translation
    word_translation_failed = Signal(str, str)  # word, error
    sentence_translation_completed = Signal(str, str)  # sentence, translation
    sentence_translation_failed = Signal(str, str)  # sentence, error
    level_analysis_completed = Signal(object)  # LevelAnalysis
    level_analysis_failed = Signal(str)
    known_words_changed = Signal()

    def __init__(
        self,
        library_coordinator: LibraryCoordinator,
        translation_cache: TranslationCache,
        translation_service: TranslationService,
        settings_manager: SettingsManager,
        thread_pool: Optional[QThreadPool] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__()

        if library_coordinator is None:
            raise ValueError("LibraryCoordinator must not be None")
        if translation_cache is None:
            raise ValueError("TranslationCache must not be None")
        if translation_service is None:
            raise ValueError("TranslationService must not be None")
        if settings_manager is None:
            raise ValueError("SettingsManager must not be None")

        self.library_coordinator = library_coordinator
        self.translation_cache = translation_cache
        self.translation_service = translation_service
        self.settings_manager = settings_manager
        self.thread_pool = thread_pool if thread_pool is not None else QThreadPool.globalInstance()
        self._clock = clock

        self._current_book: Optional[Book] = None
        self._known_words: Set[str] = set()
        self._loading: Set[str] = set()
        self._request_helpers = {}

    # Session

    @property
    def current_book(self) -> Optional[Book]:
        return self._current_book

    def open_book(self, book_id: str) -> Book:
        """Open a book for reading; returns the book with fresh statistics."""
        self._current_book = self.library_coordinator.get_book(book_id)
        self._known_words = self.library_coordinator.known_words()
        self.book_opened.emit(book_id)
        return self._current_book

    def close_book(self) -> None:
        self._current_book = None
        self.book_closed.emit()

    def render(self) -> List[RenderedLine]:
        """Lines of the open book marked against the current dictionary."""
        book = self._require_book()
        return segment(book.content, self._known_words)

    def restore_position(self) -> int:
        progress = self.library_coordinator.get_progress(self._require_book().id)
        return progress.position if progress else 0

    def record_progress(self, position: int) -> None:
        self.library_coordinator.save_progress(self._require_book().id, position)

    # Vocabulary

    def mark_word_known(self, word: str, is_known: bool = True) -> DictionaryWord:
        """Add or flip a word in the dictionary and refresh the open book."""
        entry = self.library_coordinator.set_word_known(word, is_known=is_known)
        self._known_words = self.library_coordinator.known_words()
        if self._current_book is not None:
            self._current_book = self.library_coordinator.get_book(self._current_book.id)
        self.known_words_changed.emit()
        return entry

    def unknown_word_contexts(self) -> List[WordContext]:
        return collect_unknown_word_contexts(self._require_book().content, self._known_words)

    # Translation

    def is_loading(self, request: TranslationRequest) -> bool:
        return request.cache_key in self._loading

    def request_word_translation(self, word: str, sentence: str) -> bool:
        """Translate a clicked word in the context of its sentence.

        Returns:
            True if a translation was delivered from cache or started,
            False if the request was a duplicate or no API key is set.
        """
        request = TranslationRequest.for_word(word, sentence, language=self._language())
        return self._submit(request)

    def request_sentence_translation(self, sentence: str) -> bool:
        request = TranslationRequest.for_sentence(sentence, language=self._language())
        return self._submit(request)

    def analyze_level(self, batch: int = 0) -> bool:
        """Ask the model for a CEFR level estimate of a batch of unknown words.

        A book without unknown words completes immediately without an API call.
        """
        book = self._require_book()
        words = unknown_word_batch(book.content, self._known_words, batch)
        if not words:
            self.level_analysis_completed.emit(no_unknown_words())
            return True
        prompt = build_level_prompt(words, language=self._language())
        return self._submit(TranslationRequest.general(prompt, language=self._language()))

    def _submit(self, request: TranslationRequest) -> bool:
        book = self._require_book()
        key = request.cache_key
        if key in self._loading:
            logger.debug("Request already in flight: %s", key)
            return False

        cached = self.translation_cache.get(book.id, key, request.language)
        if cached is not None:
            self._announce(request, cached.translation)
            return True

        api_key = self.settings_manager.get_api_key()
        if not api_key:
            self.configuration_required.emit(str(MissingApiKeyError()))
            return False

        self._loading.add(key)
        self.translation_started.emit(key)

        worker = TranslationWorker(self.translation_service, request, api_key)
        helper = _TranslationRequest(request, book.id, self)
        self._request_helpers[key] = helper
        worker.signals.translation_result.connect(helper.on_translation_result)
        worker.signals.error.connect(helper.on_translation_error)
        worker.signals.configuration_error.connect(helper.on_configuration_error)
        self.thread_pool.start(worker)
        return True

    def _handle_translation_result(self, request: TranslationRequest, book_id: str, result: TranslationResult):
        if result.is_error:
            self._handle_translation_error(request, book_id, result.error)
            return

        self._finish(request)

        self.translation_cache.put(
            book_id,
            CacheRecord(
                key=request.cache_key,
                lang=request.language,
                translation=result.text,
                model=result.model,
                updated_at=self._clock(),
            ),
        )
        if self._is_current(book_id):
            self._announce(request, result.text)
        else:
            logger.debug("Cached translation for closed book %s", book_id)

    def _handle_translation_error(self, request: TranslationRequest, book_id: str, error: str):
        self._finish(request)
        logger.warning("Translation failed (%s): %s", request.mode.value, error)
        if not self._is_current(book_id):
            return
        if request.mode is TranslationMode.WORD:
            self.word_translation_failed.emit(request.word, error)
        elif request.mode is TranslationMode.SENTENCE:
            self.sentence_translation_failed.emit(request.sentence, error)
        else:
            self.level_analysis_failed.emit(error)

    def _handle_configuration_error(self, request: TranslationRequest, message: str):
        self._finish(request)
        self.configuration_required.emit(message)

    def _announce(self, request: TranslationRequest, text: str) -> None:
        if request.mode is TranslationMode.WORD:
            self.word_translation_completed.emit(request.word, text)
        elif request.mode is TranslationMode.SENTENCE:
            self.sentence_translation_completed.emit(request.sentence, text)
        else:
            analysis: LevelAnalysis = parse_level_analysis(text)
            self.level_analysis_completed.emit(analysis)

    def _finish(self, request: TranslationRequest) -> None:
        self._loading.discard(request.cache_key)
        self._request_helpers.pop(request.cache_key, None)

    def _is_current(self, book_id: str) -> bool:
        return self._current_book is not None and self._current_book.id == book_id

    def _language(self) -> str:
        return self.settings_manager.settings.translation_language

    def _require_book(self) -> Book:
        if self._current_book is None:
            raise RuntimeError("No book is open")
        return self._current_book
