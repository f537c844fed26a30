"""Text normalization utilities for consistent cache keying."""

import re


def normalize_text(text: str) -> str:
    """
    Normalize a sentence for consistent translation cache keying.

    Rules:
    - Trim leading and trailing whitespace
    - Collapse runs of whitespace (spaces, tabs, newlines) to single spaces
    - Case and punctuation are preserved

    Args:
        text: Original text to normalize.

    Returns:
        Normalized text string.
    """
    return re.sub(r"\s+", " ", text.strip())
