"""Difficulty Analyzer - known/unknown statistics for a text."""

import math
import re
from dataclasses import dataclass
from typing import AbstractSet, List

from lingua_reader.services.text_processing import tokenize

LEVEL_ANALYSIS_BATCH_SIZE = 50

_DIFFICULTY_LABELS = (
    (5, "Very easy"),
    (10, "Beginner"),
    (15, "Elementary"),
    (20, "Intermediate"),
    (40, "Hard"),
    (60, "Very hard"),
)

_CONTEXT_WORD_RE = re.compile(r"\b[a-zA-Z']{3,}\b")
_ALPHA_RE = re.compile(r"^[a-zA-Z]+$")


@dataclass(frozen=True)
class BookAnalysis:
    """Statistics derived from one content/vocabulary pair."""

    char_count: int
    unique_words: int
    known_words: int
    unknown_words: int
    difficulty_percentage: int


@dataclass(frozen=True)
class WordContext:
    word: str
    context: str


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positive values."""
    return int(math.floor(value + 0.5))


def analyze(content: str, known_words: AbstractSet[str]) -> BookAnalysis:
    """Compute vocabulary statistics for content.

    Unique words are the distinct STRICT tokens, so repeating a word does not
    change the score. A text without words has a difficulty of 0.

    Args:
        content: Raw book text.
        known_words: Normalized known-word snapshot.

    Returns:
        BookAnalysis with known + unknown == unique.
    """
    unique = set(tokenize(content))
    known_count = sum(1 for word in unique if word in known_words)
    unknown_count = len(unique) - known_count

    difficulty = round_half_up(unknown_count / len(unique) * 100) if unique else 0

    return BookAnalysis(
        char_count=len(content),
        unique_words=len(unique),
        known_words=known_count,
        unknown_words=unknown_count,
        difficulty_percentage=difficulty,
    )


def difficulty_label(percentage: int) -> str:
    for threshold, label in _DIFFICULTY_LABELS:
        if percentage < threshold:
            return label
    return "Extreme"


def unknown_words(content: str, known_words: AbstractSet[str]) -> List[str]:
    """Distinct unknown tokens in order of first appearance."""
    seen = set()
    result = []
    for word in tokenize(content):
        if word in seen or word in known_words:
            continue
        seen.add(word)
        result.append(word)
    return result


def unknown_word_batch(
    content: str,
    known_words: AbstractSet[str],
    batch: int,
    batch_size: int = LEVEL_ANALYSIS_BATCH_SIZE,
) -> List[str]:
    """Return the n-th batch of unknown words for level analysis."""
    if batch < 0:
        raise ValueError("Batch number must not be negative")
    start = batch * batch_size
    return unknown_words(content, known_words)[start:start + batch_size]


def collect_unknown_word_contexts(
    content: str,
    known_words: AbstractSet[str],
    radius: int = 100,
) -> List[WordContext]:
    """Find unknown alphabetic words with surrounding context for study lists.

    Only plain ASCII words of three letters or more are considered; each
    occurrence yields an entry with up to `radius` characters on both sides.
    """
    results = []
    for match in _CONTEXT_WORD_RE.finditer(content.lower()):
        word = match.group(0)
        if word in known_words or not _ALPHA_RE.match(word):
            continue
        start = max(0, match.start() - radius)
        end = min(len(content), match.end() + radius)
        context = content[start:end]
        if 0 < len(context) < 500:
            results.append(WordContext(word=word, context=context))
    return results
