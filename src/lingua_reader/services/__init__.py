"""Services layer - text analysis, vocabulary state and external integrations."""

from lingua_reader.services.difficulty_analyzer import (
    BookAnalysis,
    WordContext,
    analyze,
    collect_unknown_word_contexts,
    difficulty_label,
    round_half_up,
    unknown_word_batch,
    unknown_words,
)
from lingua_reader.services.book_statistics import (
    LibraryStatistics,
    apply_analysis,
    recompute_all,
    summarize_library,
)
from lingua_reader.services.document_segmenter import (
    PartSpan,
    SplitResult,
    estimate_part_count,
    find_part_spans,
    folder_name_for,
    split_book,
    split_text,
)
from lingua_reader.services.vocabulary_service import VocabularyService, parse_word_file
from lingua_reader.services.settings_manager import SettingsManager
from lingua_reader.services.level_analysis import (
    LevelAnalysis,
    LevelExample,
    build_level_prompt,
    no_unknown_words,
    parse_level_analysis,
)

# Text processing services
from lingua_reader.services.text_processing import (
    NormalizationMode,
    RenderedLine,
    RenderSegment,
    SegmentKind,
    normalize_text,
    normalize_word,
    segment,
    tokenize,
    vocabulary_key,
)

# Translation services
from lingua_reader.services.translation import (
    GeminiTranslationService,
    TranslationMode,
    TranslationRequest,
    TranslationResult,
    TranslationService,
)

# Caching services
from lingua_reader.services.caching import TranslationCache, CacheRecord, InMemoryTranslationCache

from lingua_reader.services.api_workers import TranslationWorker, WorkerSignals

__all__ = [
    "BookAnalysis",
    "WordContext",
    "analyze",
    "collect_unknown_word_contexts",
    "difficulty_label",
    "round_half_up",
    "unknown_word_batch",
    "unknown_words",
    "LibraryStatistics",
    "apply_analysis",
    "recompute_all",
    "summarize_library",
    "PartSpan",
    "SplitResult",
    "estimate_part_count",
    "find_part_spans",
    "folder_name_for",
    "split_book",
    "split_text",
    "VocabularyService",
    "parse_word_file",
    "SettingsManager",
    "LevelAnalysis",
    "LevelExample",
    "build_level_prompt",
    "no_unknown_words",
    "parse_level_analysis",
    "NormalizationMode",
    "RenderedLine",
    "RenderSegment",
    "SegmentKind",
    "normalize_text",
    "normalize_word",
    "segment",
    "tokenize",
    "vocabulary_key",
    "GeminiTranslationService",
    "TranslationMode",
    "TranslationRequest",
    "TranslationResult",
    "TranslationService",
    "TranslationCache",
    "CacheRecord",
    "InMemoryTranslationCache",
    "TranslationWorker",
    "WorkerSignals",
]
