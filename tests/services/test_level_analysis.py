"""Tests for the AI level analysis prompt and reply parsing."""

import pytest

from lingua_reader.services import build_level_prompt, no_unknown_words, parse_level_analysis
from lingua_reader.services.level_analysis import FALLBACK_LEVEL, NO_UNKNOWN_WORDS_LEVEL


def test_prompt_lists_words_and_language():
    prompt = build_level_prompt(["ephemeral", "ubiquitous"], language="Spanish")

    assert "ephemeral, ubiquitous" in prompt
    assert "Spanish" in prompt


def test_prompt_needs_words():
    with pytest.raises(ValueError):
        build_level_prompt([])


def test_parses_fenced_json():
    raw = """```json
{"level": "B2", "description": "Upper intermediate", "examples": [
  {"word": "ephemeral", "translation": "мимолётный", "meaning": "short-lived"}
]}
```"""
    analysis = parse_level_analysis(raw)

    assert analysis.is_structured
    assert analysis.level == "B2"
    assert analysis.description == "Upper intermediate"
    assert analysis.examples[0].translation == "мимолётный"


def test_skips_malformed_examples():
    analysis = parse_level_analysis('{"level": "A2", "examples": ["oops", {"word": "cat"}]}')

    assert [e.word for e in analysis.examples] == ["cat"]
    assert analysis.examples[0].meaning == ""


@pytest.mark.parametrize("raw", ["The level is roughly B1.", "[1, 2, 3]", "{broken"])
def test_unstructured_reply_falls_back_to_raw_text(raw):
    analysis = parse_level_analysis(raw)

    assert analysis.level == FALLBACK_LEVEL
    assert analysis.description == raw
    assert not analysis.is_structured
    assert analysis.examples == []


def test_no_unknown_words_result():
    assert no_unknown_words().level == NO_UNKNOWN_WORDS_LEVEL
