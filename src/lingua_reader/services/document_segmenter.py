"""Document Segmenter - splits a long book into parts at natural boundaries."""

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, List, Optional

from lingua_reader.core import Book, Folder
from lingua_reader.services.book_statistics import apply_analysis

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"
SENTENCE_TERMINATORS = (". ", "! ", "? ")
PARAGRAPH_MIN_RATIO = 0.5
SENTENCE_MIN_RATIO = 0.7
FOLDER_NAME_MAX_LENGTH = 27


@dataclass(frozen=True)
class PartSpan:
    """Half-open [start, end) range of the source content consumed by one step."""

    start: int
    end: int


@dataclass(frozen=True)
class SplitResult:
    folder: Folder
    parts: List[Book]


def _find_cut(content: str, cursor: int, target: int) -> int:
    end = min(cursor + target, len(content))
    if end >= len(content):
        return end

    paragraph = content.rfind(PARAGRAPH_BREAK, cursor, end)
    if paragraph != -1 and paragraph >= cursor + target * PARAGRAPH_MIN_RATIO:
        return paragraph + len(PARAGRAPH_BREAK)

    sentence_end = max(content.rfind(terminator, cursor, end) for terminator in SENTENCE_TERMINATORS)
    if sentence_end != -1 and sentence_end >= cursor + target * SENTENCE_MIN_RATIO:
        return sentence_end + 1

    return end


def find_part_spans(content: str, target_char_count: int) -> List[PartSpan]:
    """Greedily choose cut points near target_char_count.

    A paragraph break in the second half of the window wins; otherwise the
    last sentence terminator in the final 30% of the window; otherwise a hard
    cut. Consecutive spans cover the content exactly.
    """
    if target_char_count <= 0:
        raise ValueError("Target character count must be positive")

    spans = []
    cursor = 0
    while cursor < len(content):
        end = _find_cut(content, cursor, target_char_count)
        spans.append(PartSpan(start=cursor, end=end))
        cursor = end
    return spans


def split_text(content: str, target_char_count: int) -> List[str]:
    """Split content into trimmed, non-empty parts."""
    if not content.strip():
        raise ValueError("Cannot split empty content")

    parts = []
    for span in find_part_spans(content, target_char_count):
        text = content[span.start:span.end].strip()
        if text:
            parts.append(text)
    return parts


def estimate_part_count(char_count: int, target_char_count: int) -> int:
    if target_char_count <= 0:
        raise ValueError("Target character count must be positive")
    return math.ceil(char_count / target_char_count)


def folder_name_for(title: str) -> str:
    if len(title) > FOLDER_NAME_MAX_LENGTH:
        return title[:FOLDER_NAME_MAX_LENGTH] + "..."
    return title


def split_book(
    book: Book,
    target_char_count: int,
    known_words: AbstractSet[str],
    now: Optional[datetime] = None,
) -> SplitResult:
    """Split a book into analyzed parts grouped in a new folder.

    Args:
        book: Source book; it is not modified.
        target_char_count: Desired characters per part.
        known_words: Vocabulary snapshot used to analyze each part.
        now: Timestamp for the new folder and parts.

    Returns:
        SplitResult with the folder and parts titled "<title> (i/N)".

    Raises:
        ValueError: If the content is empty or the target is not positive.
    """
    now = now or datetime.now()
    texts = split_text(book.content, target_char_count)
    folder = Folder(id=str(uuid.uuid4()), name=folder_name_for(book.title), created_date=now)

    total = len(texts)
    parts = []
    for index, text in enumerate(texts, start=1):
        part = Book(
            id=str(uuid.uuid4()),
            title=f"{book.title} ({index}/{total})",
            content=text,
            file_name=book.file_name,
            upload_date=now,
            folder_id=folder.id,
        )
        parts.append(apply_analysis(part, known_words))

    logger.info("Split '%s' into %d parts of ~%d chars", book.title, total, target_char_count)
    return SplitResult(folder=folder, parts=parts)
