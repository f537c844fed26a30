"""Word normalization policy shared by statistics and on-screen highlighting.

Two modes exist and must stay in step with each other:

- STRICT is used for counting. Quotes and every non-word character become
  whitespace, so contractions fall apart ("don't" -> "don", "t").
- LENIENT is used for rendering clickable words. Apostrophes inside words are
  kept ("don't" stays "don't") and only ASCII/Cyrillic letters survive.
"""

import re
from enum import Enum
from typing import List

# Straight, typographic, angle and low-9 quotation marks.
QUOTE_CHARACTERS = "\"'«»„‚“”‘’‹›"

_QUOTES_RE = re.compile(f"[{re.escape(QUOTE_CHARACTERS)}]")
_NON_WORD_RE = re.compile(r"[^\w\s]")

_LENIENT_EDGES_RE = re.compile(r"^[^\w]+|'$|'([^a-zA-Z])")
_LENIENT_DISALLOWED_RE = re.compile(r"[^a-zа-яё']")
_POSSESSIVE_RE = re.compile(r"'s$")

# Runs that separate words inside a rendered sentence.
WORD_SEPARATOR_PATTERN = r"[\s,;:()\[\]{}\"“”«»„—–-]+"
# Sentence terminators also end a word when rendering.
_LENIENT_SPLIT_RE = re.compile(f"[.!?]+|{WORD_SEPARATOR_PATTERN}")

_SURROUNDING_RE = re.compile(r"^[^\w]+|[^\w]+$")


class NormalizationMode(str, Enum):
    """How aggressively a raw word is cleaned."""

    STRICT = "strict"
    LENIENT = "lenient"


def normalize_word(word: str, mode: NormalizationMode = NormalizationMode.STRICT) -> str:
    """Reduce a raw word (or text fragment) to its comparison form.

    In STRICT mode the result may contain single spaces where punctuation
    split the input; use tokenize() to get the individual tokens.

    Args:
        word: Raw text as it appears in the book.
        mode: STRICT for statistics, LENIENT for rendering.

    Returns:
        The normalized form, possibly empty.
    """
    lowered = word.lower()
    if mode is NormalizationMode.STRICT:
        cleaned = _NON_WORD_RE.sub(" ", _QUOTES_RE.sub(" ", lowered))
        return " ".join(cleaned.split())

    cleaned = _LENIENT_EDGES_RE.sub(r"\1", lowered)
    return _LENIENT_DISALLOWED_RE.sub("", cleaned)


def tokenize(text: str, mode: NormalizationMode = NormalizationMode.STRICT) -> List[str]:
    """Split text into normalized word tokens, preserving their order.

    LENIENT tokens are the normalized forms of the words the reader renders,
    in reading order.

    Empty input yields an empty list.
    """
    if not text:
        return []

    if mode is NormalizationMode.STRICT:
        return normalize_word(text, mode).split()

    tokens = []
    for piece in _LENIENT_SPLIT_RE.split(text):
        normalized = normalize_word(piece, mode)
        if normalized:
            tokens.append(normalized)
    return tokens


def strip_possessive(word: str) -> str:
    """Drop an English possessive suffix: "tom's" -> "tom"."""
    return _POSSESSIVE_RE.sub("", word)


def is_known_form(normalized: str, known_words) -> bool:
    """Check a LENIENT form and its possessive-less base against the known set."""
    if not normalized:
        return False
    return normalized in known_words or strip_possessive(normalized) in known_words


def vocabulary_key(word: str) -> str:
    """Dictionary form of a word: lower-cased, surrounding punctuation removed.

    Inner apostrophes survive so words marked from the reader ("don't") keep
    their rendered form.
    """
    return _SURROUNDING_RE.sub("", word.strip().lower())
