"""Maps book text to lines, sentences and clickable word segments."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Iterator, List, Optional

from lingua_reader.services.text_processing.word_normalization import (
    WORD_SEPARATOR_PATTERN,
    NormalizationMode,
    is_known_form,
    normalize_word,
)

_SENTENCE_SPLIT_RE = re.compile(r"([.!?]+)")
_TERMINATOR_RUN_RE = re.compile(r"[.!?]+")
_WORD_SPLIT_RE = re.compile(f"({WORD_SEPARATOR_PATTERN})")
_SEPARATOR_RUN_RE = re.compile(WORD_SEPARATOR_PATTERN)


class SegmentKind(str, Enum):
    WORD = "word"
    SEPARATOR = "separator"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class RenderSegment:
    """One rendered piece of a line.

    Attributes:
        text: Literal text to display.
        kind: Word, separator or sentence punctuation.
        is_sentence_boundary: True for a terminator run closing a sentence;
            the UI attaches a "translate sentence" action to it.
        is_known_token: Known/unknown verdict for words, None otherwise.
        normalized: LENIENT form sent for translation (words only).
        sentence: Trimmed sentence this segment belongs to or closes.
    """

    text: str
    kind: SegmentKind
    is_sentence_boundary: bool = False
    is_known_token: Optional[bool] = None
    normalized: Optional[str] = None
    sentence: Optional[str] = None


@dataclass
class RenderedLine:
    """Segments of a single line; blank lines have no segments."""

    index: int
    segments: List[RenderSegment] = field(default_factory=list)

    @property
    def is_blank(self) -> bool:
        return not self.segments


def iter_lines(content: str, known_words: AbstractSet[str]) -> Iterator[RenderedLine]:
    """Lazily map content line by line."""
    for index, line in enumerate(content.split("\n")):
        yield RenderedLine(index=index, segments=_segment_line(line, known_words))


def segment(content: str, known_words: AbstractSet[str]) -> List[RenderedLine]:
    """Map content into rendered lines.

    Args:
        content: Book text.
        known_words: Snapshot of known dictionary words.

    Returns:
        One RenderedLine per "\\n"-separated line, in order.
    """
    return list(iter_lines(content, known_words))


def _segment_line(line: str, known_words: AbstractSet[str]) -> List[RenderSegment]:
    parts = [part for part in _SENTENCE_SPLIT_RE.split(line) if part.strip()]
    segments: List[RenderSegment] = []

    for index, part in enumerate(parts):
        if _TERMINATOR_RUN_RE.fullmatch(part):
            previous = parts[index - 1].strip() if index > 0 else ""
            if previous:
                segments.append(
                    RenderSegment(
                        text=part,
                        kind=SegmentKind.PUNCTUATION,
                        is_sentence_boundary=True,
                        sentence=previous,
                    )
                )
            else:
                segments.append(RenderSegment(text=part, kind=SegmentKind.PUNCTUATION))
            continue

        segments.extend(_segment_sentence(part.strip(), known_words))

    return segments


def _segment_sentence(sentence: str, known_words: AbstractSet[str]) -> List[RenderSegment]:
    segments = []
    for piece in _WORD_SPLIT_RE.split(sentence):
        if not piece:
            continue
        if _SEPARATOR_RUN_RE.fullmatch(piece):
            segments.append(RenderSegment(text=piece, kind=SegmentKind.SEPARATOR, sentence=sentence))
            continue

        normalized = normalize_word(piece, NormalizationMode.LENIENT)
        segments.append(
            RenderSegment(
                text=piece,
                kind=SegmentKind.WORD,
                is_known_token=is_known_form(normalized, known_words),
                normalized=normalized,
                sentence=sentence,
            )
        )
    return segments
