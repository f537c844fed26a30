"""Gemini Translation Service - Implements translation via Google Gemini API."""

import logging
import re
import time
from typing import Callable, Optional

import google.genai as genai
from google.genai import types

from lingua_reader.core import MissingApiKeyError
from lingua_reader.services.translation.translation_service import (
    TranslationMode,
    TranslationRequest,
    TranslationResult,
    TranslationService,
)

logger = logging.getLogger(__name__)

_LABEL_PREFIX_RE = re.compile(r"^(?:.*?:\s*)?[\"']?")
_TRAILING_QUOTE_RE = re.compile(r"[\"']?\s*$")


def clean_sentence_translation(text: str) -> str:
    """Strip a leading "Translation:" style label and wrapping quotes."""
    text = _LABEL_PREFIX_RE.sub("", text, count=1)
    return _TRAILING_QUOTE_RE.sub("", text, count=1).strip()


def _status_of(exc: Exception) -> Optional[int]:
    code = getattr(exc, "code", None)
    if isinstance(code, int):
        return code
    match = re.search(r"\b([45]\d\d)\b", str(exc))
    return int(match.group(1)) if match else None


def _is_rate_limit(status: Optional[int], message: str) -> bool:
    return status == 429 or "resource_exhausted" in message or "rate_limit" in message or "quota" in message


class GeminiTranslationService(TranslationService):
    """
    Translation service using Google Gemini API.

    A rate-limited request is retried once after RATE_LIMIT_RETRY_DELAY
    seconds; any other failure is returned as an error result.
    """

    MODEL_NAME = "gemini-2.0-flash"
    RATE_LIMIT_RETRY_DELAY = 2.0
    MAX_ATTEMPTS = 2

    WORD_PROMPT = """Translate the word "{word}" into {language} in the context of the sentence "{sentence}".
Explain the meaning of the word as used in this context. If it is part of a phrasal verb,
give the meaning of the whole phrase together with the other words of the sentence."""

    SENTENCE_PROMPT = """Translate the following sentence into {language}: "{sentence}".
Only output the translation, without any explanation."""

    def __init__(
        self,
        client_factory: Optional[Callable[[str], "genai.Client"]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client_factory = client_factory or (lambda api_key: genai.Client(api_key=api_key))
        self._sleep = sleep

    def build_prompt(self, request: TranslationRequest) -> str:
        if request.mode is TranslationMode.WORD:
            return self.WORD_PROMPT.format(word=request.word, sentence=request.sentence, language=request.language)
        if request.mode is TranslationMode.SENTENCE:
            return self.SENTENCE_PROMPT.format(sentence=request.sentence, language=request.language)
        return request.text

    def translate(self, request: TranslationRequest, api_key: str) -> TranslationResult:
        """
        Translate using the Gemini API.

        Args:
            request: Word, sentence or general request.
            api_key: Gemini API key for authentication.

        Returns:
            TranslationResult with translated text or error message.

        Raises:
            MissingApiKeyError: If no API key is given.
        """
        if not api_key or not api_key.strip():
            raise MissingApiKeyError()

        prompt = self.build_prompt(request)
        attempt = 0

        while True:
            attempt += 1
            try:
                client = self._client_factory(api_key.strip())
                logger.debug("Sending %s translation request (attempt %d)", request.mode.value, attempt)

                response = client.models.generate_content(
                    model=self.MODEL_NAME,
                    contents=prompt,
                    config=types.GenerateContentConfig(
                        temperature=0.3,
                        top_p=0.95,
                        top_k=40,
                        max_output_tokens=1024,
                    ),
                )

                if not response.text:
                    return TranslationResult(
                        text="",
                        model=self.MODEL_NAME,
                        error="Empty response from API",
                    )

                text = response.text.strip()
                if request.mode is TranslationMode.SENTENCE:
                    text = clean_sentence_translation(text)
                return TranslationResult(text=text, model=self.MODEL_NAME)

            except Exception as e:
                error_msg = str(e).lower()
                status = _status_of(e)
                rate_limited = _is_rate_limit(status, error_msg)

                if rate_limited and attempt < self.MAX_ATTEMPTS:
                    logger.warning("Rate limit hit, retrying in %.0f seconds", self.RATE_LIMIT_RETRY_DELAY)
                    self._sleep(self.RATE_LIMIT_RETRY_DELAY)
                    continue

                logger.error("Translation request failed (%s): %s", type(e).__name__, e)

                if rate_limited:
                    return TranslationResult(
                        text="",
                        model=self.MODEL_NAME,
                        error="API quota exceeded. Please try again later.",
                        status=429,
                    )
                if "api_key" in error_msg or "authentication" in error_msg or status in (401, 403):
                    return TranslationResult(
                        text="",
                        model=self.MODEL_NAME,
                        error=f"Invalid API key or request: {e}",
                        status=status,
                    )
                if "deadline" in error_msg or "timeout" in error_msg:
                    return TranslationResult(
                        text="",
                        model=self.MODEL_NAME,
                        error="Request timed out. Please check your connection.",
                        status=status,
                    )
                return TranslationResult(
                    text="",
                    model=self.MODEL_NAME,
                    error=f"Translation failed: {e}",
                    status=status,
                )
