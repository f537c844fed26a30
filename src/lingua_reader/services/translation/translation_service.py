"""Translation Service - request/response types and the abstract provider."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lingua_reader.services.text_processing import normalize_text


class TranslationMode(str, Enum):
    WORD = "word"
    SENTENCE = "sentence"
    GENERAL = "general"


@dataclass(frozen=True)
class TranslationRequest:
    """What to translate.

    WORD requests carry the clicked word and its sentence, SENTENCE requests
    the sentence, GENERAL requests a free-form prompt in `text`.
    """

    mode: TranslationMode
    word: Optional[str] = None
    sentence: Optional[str] = None
    text: Optional[str] = None
    language: str = "Russian"

    def __post_init__(self) -> None:
        if self.mode is TranslationMode.WORD and not (self.word and self.sentence is not None):
            raise ValueError("Word translation needs a word and its sentence")
        if self.mode is TranslationMode.SENTENCE and not self.sentence:
            raise ValueError("Sentence translation needs a sentence")
        if self.mode is TranslationMode.GENERAL and not self.text:
            raise ValueError("General translation needs text")

    @classmethod
    def for_word(cls, word: str, sentence: str, language: str = "Russian") -> "TranslationRequest":
        return cls(mode=TranslationMode.WORD, word=word, sentence=sentence, language=language)

    @classmethod
    def for_sentence(cls, sentence: str, language: str = "Russian") -> "TranslationRequest":
        return cls(mode=TranslationMode.SENTENCE, sentence=sentence, language=language)

    @classmethod
    def general(cls, text: str, language: str = "Russian") -> "TranslationRequest":
        return cls(mode=TranslationMode.GENERAL, text=text, language=language)

    @property
    def cache_key(self) -> str:
        """Identity shared by the result cache and the in-flight set."""
        if self.mode is TranslationMode.WORD:
            return f"word:{self.word}|{normalize_text(self.sentence or '')}"
        if self.mode is TranslationMode.SENTENCE:
            return f"sentence:{normalize_text(self.sentence or '')}"
        return f"general:{normalize_text(self.text or '')}"


@dataclass
class TranslationResult:
    """Result of a translation request."""

    text: str
    model: str
    error: Optional[str] = None
    status: Optional[int] = None

    @property
    def is_error(self) -> bool:
        """True if translation failed."""
        return self.error is not None

    @property
    def is_rate_limited(self) -> bool:
        return self.status == 429


class TranslationService(ABC):
    """
    Abstract service for translating words and sentences.

    Implementations (e.g., GeminiTranslationService) handle API calls.
    """

    @abstractmethod
    def translate(self, request: TranslationRequest, api_key: str) -> TranslationResult:
        """
        Translate a word in context, a sentence, or a general prompt.

        Args:
            request: What to translate.
            api_key: Model provider API key for authentication.

        Returns:
            TranslationResult with text or error message.

        Raises:
            MissingApiKeyError: If api_key is empty.
        """
