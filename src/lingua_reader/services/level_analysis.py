"""Level analysis - asks the model to grade a batch of unknown words."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence

logger = logging.getLogger(__name__)

FALLBACK_LEVEL = "Analysis complete"
NO_UNKNOWN_WORDS_LEVEL = "No unknown words"

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")

LEVEL_PROMPT = """Analyze the difficulty of these English words and determine the overall English level (A1, A2, B1, B2, C1, C2): {words}.

Reply in JSON format:
{{
  "level": "the level, for example B1",
  "description": "description of the level and the difficulty of the words",
  "examples": [
    {{"word": "word", "translation": "translation into {language}", "meaning": "meaning and context"}}
  ]
}}
Give 10 examples of the most important words."""


@dataclass(frozen=True)
class LevelExample:
    word: str
    translation: str
    meaning: str


@dataclass(frozen=True)
class LevelAnalysis:
    level: str
    description: str
    examples: List[LevelExample] = field(default_factory=list)

    @property
    def is_structured(self) -> bool:
        return self.level != FALLBACK_LEVEL


def build_level_prompt(words: Sequence[str], language: str = "Russian") -> str:
    if not words:
        raise ValueError("Level analysis needs at least one word")
    return LEVEL_PROMPT.format(words=", ".join(words), language=language)


def no_unknown_words() -> LevelAnalysis:
    return LevelAnalysis(level=NO_UNKNOWN_WORDS_LEVEL, description="Every word in this book is already known!")


def parse_level_analysis(raw: str) -> LevelAnalysis:
    """Parse the model reply, degrading to an unstructured description.

    A reply that is not a JSON object (optionally wrapped in a code fence)
    is kept whole as the description instead of failing.
    """
    cleaned = _CODE_FENCE_RE.sub("", raw.strip())
    try:
        data = json.loads(cleaned)
        if not isinstance(data, dict):
            raise ValueError("Level analysis reply is not an object")
        examples = [
            LevelExample(
                word=str(item.get("word", "")),
                translation=str(item.get("translation", "")),
                meaning=str(item.get("meaning", "")),
            )
            for item in data.get("examples", [])
            if isinstance(item, dict)
        ]
        return LevelAnalysis(
            level=str(data.get("level", FALLBACK_LEVEL)),
            description=str(data.get("description", "")),
            examples=examples,
        )
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning("Level analysis reply is not structured JSON, showing raw text: %s", e)
        return LevelAnalysis(level=FALLBACK_LEVEL, description=raw)
