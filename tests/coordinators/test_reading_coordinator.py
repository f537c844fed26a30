"""Unit tests for ReadingCoordinator."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from lingua_reader.coordinators import LibraryCoordinator, ReadingCoordinator
from lingua_reader.io import InMemoryStorage, LibraryRepository
from lingua_reader.services import (
    CacheRecord,
    InMemoryTranslationCache,
    SegmentKind,
    TranslationMode,
    TranslationRequest,
    TranslationResult,
)
from lingua_reader.services.level_analysis import NO_UNKNOWN_WORDS_LEVEL


class SynchronousThreadPool:
    """Runs workers inline so signal delivery is deterministic."""

    def __init__(self):
        self.started = []

    def start(self, worker):
        self.started.append(worker)
        worker.run()


class DeferredThreadPool:
    """Holds workers until run_all() is called."""

    def __init__(self):
        self.pending = []

    def start(self, worker):
        self.pending.append(worker)

    def run_all(self):
        while self.pending:
            self.pending.pop(0).run()


@pytest.fixture
def library():
    return LibraryCoordinator(LibraryRepository(InMemoryStorage()))


@pytest.fixture
def translation_cache():
    """Provide a fresh in-memory cache."""
    return InMemoryTranslationCache()


@pytest.fixture
def mock_translation_service():
    service = MagicMock()
    service.translate.return_value = TranslationResult(text="берег", model="gemini-2.0-flash")
    return service


@pytest.fixture
def settings_manager():
    """Provide a settings manager with a test API key."""
    manager = MagicMock()
    manager.get_api_key.return_value = "test-key"
    manager.settings.translation_language = "Russian"
    return manager


@pytest.fixture
def thread_pool():
    return SynchronousThreadPool()


@pytest.fixture
def coordinator(library, translation_cache, mock_translation_service, settings_manager, thread_pool):
    return ReadingCoordinator(
        library_coordinator=library,
        translation_cache=translation_cache,
        translation_service=mock_translation_service,
        settings_manager=settings_manager,
        thread_pool=thread_pool,
    )


@pytest.fixture
def book(library):
    return library.add_book("River", "The river bank was steep. Birds sang!")


class TestInitialization:
    def test_requires_collaborators(self, library, translation_cache, mock_translation_service, settings_manager):
        with pytest.raises(ValueError):
            ReadingCoordinator(None, translation_cache, mock_translation_service, settings_manager)
        with pytest.raises(ValueError):
            ReadingCoordinator(library, None, mock_translation_service, settings_manager)

    def test_starts_without_book(self, coordinator):
        assert coordinator.current_book is None
        with pytest.raises(RuntimeError):
            coordinator.render()


class TestSession:
    def test_open_book_emits_signal(self, coordinator, book):
        spy = MagicMock()
        coordinator.book_opened.connect(spy)

        opened = coordinator.open_book(book.id)

        assert opened.id == book.id
        spy.assert_called_once_with(book.id)

    def test_render_marks_known_words(self, coordinator, library, book):
        library.import_dictionary("river")
        coordinator.open_book(book.id)

        words = {
            s.normalized: s.is_known_token
            for line in coordinator.render()
            for s in line.segments
            if s.kind is SegmentKind.WORD
        }

        assert words["river"] is True
        assert words["bank"] is False

    def test_progress_round_trip(self, coordinator, book):
        coordinator.open_book(book.id)
        assert coordinator.restore_position() == 0

        coordinator.record_progress(420)
        assert coordinator.restore_position() == 420

    def test_mark_word_known_refreshes_book_and_render(self, coordinator, book):
        coordinator.open_book(book.id)
        spy = MagicMock()
        coordinator.known_words_changed.connect(spy)
        before = coordinator.current_book.difficulty_percentage

        coordinator.mark_word_known("bank")

        spy.assert_called_once()
        assert coordinator.current_book.difficulty_percentage < before
        known = [s for line in coordinator.render() for s in line.segments if s.is_known_token]
        assert [s.normalized for s in known] == ["bank"]


class TestWordTranslation:
    def test_translation_is_delivered_and_cached(
        self, coordinator, book, translation_cache, mock_translation_service
    ):
        coordinator.open_book(book.id)
        completed = MagicMock()
        coordinator.word_translation_completed.connect(completed)

        assert coordinator.request_word_translation("bank", "The river bank was steep") is True

        completed.assert_called_once_with("bank", "берег")
        request = TranslationRequest.for_word("bank", "The river bank was steep")
        mock_translation_service.translate.assert_called_once_with(request=request, api_key="test-key")
        assert translation_cache.get(book.id, request.cache_key, "Russian").translation == "берег"
        assert not coordinator.is_loading(request)

    def test_cache_hit_skips_service(self, coordinator, book, translation_cache, mock_translation_service):
        request = TranslationRequest.for_word("bank", "The river bank was steep")
        translation_cache.put(
            book.id,
            CacheRecord(key=request.cache_key, lang="Russian", translation="берег (кэш)", model="m", updated_at=datetime.now()),
        )
        coordinator.open_book(book.id)
        completed = MagicMock()
        coordinator.word_translation_completed.connect(completed)

        coordinator.request_word_translation("bank", "The river bank was steep")

        completed.assert_called_once_with("bank", "берег (кэш)")
        mock_translation_service.translate.assert_not_called()

    def test_missing_api_key_requests_configuration(
        self, coordinator, book, settings_manager, mock_translation_service
    ):
        settings_manager.get_api_key.return_value = None
        coordinator.open_book(book.id)
        spy = MagicMock()
        coordinator.configuration_required.connect(spy)

        assert coordinator.request_word_translation("bank", "The river bank was steep") is False

        spy.assert_called_once()
        mock_translation_service.translate.assert_not_called()

    def test_failures_are_reported_and_not_cached(
        self, coordinator, book, translation_cache, mock_translation_service
    ):
        mock_translation_service.translate.return_value = TranslationResult(
            text="", model="gemini", error="API quota exceeded. Please try again later.", status=429
        )
        coordinator.open_book(book.id)
        failed = MagicMock()
        coordinator.word_translation_failed.connect(failed)

        coordinator.request_word_translation("bank", "The river bank was steep")

        failed.assert_called_once_with("bank", "API quota exceeded. Please try again later.")
        assert translation_cache.list_keys(book.id) == []

    def test_failed_request_is_released_once_and_can_be_retried(
        self, coordinator, book, mock_translation_service
    ):
        mock_translation_service.translate.return_value = TranslationResult(
            text="", model="gemini", error="Network error. Please check your connection.", status=None
        )
        coordinator.open_book(book.id)
        request = TranslationRequest.for_word("bank", "The river bank was steep")
        coordinator._finish = MagicMock(wraps=coordinator._finish)

        coordinator.request_word_translation("bank", "The river bank was steep")

        coordinator._finish.assert_called_once_with(request)
        assert not coordinator.is_loading(request)
        assert coordinator.request_word_translation("bank", "The river bank was steep") is True
        assert mock_translation_service.translate.call_count == 2

    def test_unexpected_worker_error_is_reported(self, coordinator, book, mock_translation_service):
        mock_translation_service.translate.side_effect = RuntimeError("socket closed")
        coordinator.open_book(book.id)
        failed = MagicMock()
        coordinator.word_translation_failed.connect(failed)

        coordinator.request_word_translation("bank", "The river bank was steep")

        failed.assert_called_once_with("bank", "Unexpected translation error: socket closed")


class TestInFlightRequests:
    @pytest.fixture
    def thread_pool(self):
        return DeferredThreadPool()

    def test_duplicate_requests_are_ignored_while_loading(
        self, coordinator, book, thread_pool, mock_translation_service
    ):
        coordinator.open_book(book.id)
        started = MagicMock()
        coordinator.translation_started.connect(started)

        assert coordinator.request_sentence_translation("Birds sang") is True
        assert coordinator.request_sentence_translation("  Birds   sang ") is False
        assert coordinator.is_loading(TranslationRequest.for_sentence("Birds sang"))

        thread_pool.run_all()

        started.assert_called_once()
        assert mock_translation_service.translate.call_count == 1
        assert not coordinator.is_loading(TranslationRequest.for_sentence("Birds sang"))

    def test_stale_results_are_cached_but_not_announced(
        self, coordinator, book, library, thread_pool, translation_cache
    ):
        other = library.add_book("Other", "Something else.")
        coordinator.open_book(book.id)
        completed = MagicMock()
        coordinator.sentence_translation_completed.connect(completed)

        coordinator.request_sentence_translation("Birds sang")
        coordinator.open_book(other.id)
        thread_pool.run_all()

        completed.assert_not_called()
        key = TranslationRequest.for_sentence("Birds sang").cache_key
        assert translation_cache.get(book.id, key, "Russian") is not None

    def test_result_after_close_is_not_announced(self, coordinator, book, thread_pool):
        coordinator.open_book(book.id)
        completed = MagicMock()
        coordinator.sentence_translation_completed.connect(completed)

        coordinator.request_sentence_translation("Birds sang")
        coordinator.close_book()
        thread_pool.run_all()

        completed.assert_not_called()


class TestLevelAnalysis:
    def test_structured_reply(self, coordinator, book, mock_translation_service):
        mock_translation_service.translate.return_value = TranslationResult(
            text='{"level": "A2", "description": "Easy text", "examples": []}', model="gemini"
        )
        coordinator.open_book(book.id)
        spy = MagicMock()
        coordinator.level_analysis_completed.connect(spy)

        coordinator.analyze_level()

        analysis = spy.call_args.args[0]
        assert analysis.level == "A2"
        request = mock_translation_service.translate.call_args.kwargs["request"]
        assert request.mode is TranslationMode.GENERAL
        assert "river" in request.text

    def test_nothing_unknown_completes_without_api_call(self, coordinator, library, book, mock_translation_service):
        library.import_dictionary("the\nriver\nbank\nwas\nsteep\nbirds\nsang")
        coordinator.open_book(book.id)
        spy = MagicMock()
        coordinator.level_analysis_completed.connect(spy)

        coordinator.analyze_level()

        assert spy.call_args.args[0].level == NO_UNKNOWN_WORDS_LEVEL
        mock_translation_service.translate.assert_not_called()

    def test_failure(self, coordinator, book, mock_translation_service):
        mock_translation_service.translate.return_value = TranslationResult(text="", model="m", error="boom")
        coordinator.open_book(book.id)
        spy = MagicMock()
        coordinator.level_analysis_failed.connect(spy)

        coordinator.analyze_level()

        spy.assert_called_once_with("boom")


def test_unknown_word_contexts(coordinator, library, book):
    library.import_dictionary("the\nriver")
    coordinator.open_book(book.id)

    words = [c.word for c in coordinator.unknown_word_contexts()]

    assert "bank" in words
    assert "river" not in words
