"""Text processing services - word normalization, tokenization and rendering."""

from lingua_reader.services.text_processing.rendering_mapper import (
    RenderedLine,
    RenderSegment,
    SegmentKind,
    iter_lines,
    segment,
)
from lingua_reader.services.text_processing.text_normalization import normalize_text
from lingua_reader.services.text_processing.word_normalization import (
    NormalizationMode,
    is_known_form,
    normalize_word,
    strip_possessive,
    tokenize,
    vocabulary_key,
)

__all__ = [
    "NormalizationMode",
    "normalize_word",
    "tokenize",
    "strip_possessive",
    "is_known_form",
    "vocabulary_key",
    "normalize_text",
    "RenderedLine",
    "RenderSegment",
    "SegmentKind",
    "iter_lines",
    "segment",
]
