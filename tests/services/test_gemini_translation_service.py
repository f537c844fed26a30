"""Unit tests for GeminiTranslationService with a mocked client."""

from unittest.mock import MagicMock

import pytest

from lingua_reader.core import MissingApiKeyError
from lingua_reader.services import GeminiTranslationService, TranslationRequest
from lingua_reader.services.translation.gemini_translation_service import clean_sentence_translation


@pytest.fixture
def client():
    client = MagicMock()
    client.models.generate_content.return_value = MagicMock(text="перевод")
    return client


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def service(client, sleep):
    return GeminiTranslationService(client_factory=lambda api_key: client, sleep=sleep)


class TestPrompts:
    def test_word_prompt_mentions_word_sentence_and_language(self, service):
        prompt = service.build_prompt(TranslationRequest.for_word("bank", "The river bank.", language="German"))

        assert '"bank"' in prompt
        assert "The river bank." in prompt
        assert "German" in prompt

    def test_general_prompt_is_sent_verbatim(self, service):
        assert service.build_prompt(TranslationRequest.general("Rate these words")) == "Rate these words"


class TestTranslate:
    def test_missing_key_raises(self, service, client):
        with pytest.raises(MissingApiKeyError):
            service.translate(TranslationRequest.for_sentence("Hi."), api_key="  ")
        client.models.generate_content.assert_not_called()

    def test_success(self, service, client):
        result = service.translate(TranslationRequest.for_word("bank", "The river bank."), api_key="key")

        assert not result.is_error
        assert result.text == "перевод"
        assert result.model == GeminiTranslationService.MODEL_NAME
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == GeminiTranslationService.MODEL_NAME

    def test_sentence_reply_is_cleaned(self, service, client):
        client.models.generate_content.return_value = MagicMock(text='Translation: "Привет, мир"')

        result = service.translate(TranslationRequest.for_sentence("Hello, world"), api_key="key")

        assert result.text == "Привет, мир"

    def test_empty_response_is_an_error(self, service, client):
        client.models.generate_content.return_value = MagicMock(text="")

        result = service.translate(TranslationRequest.for_sentence("Hi."), api_key="key")

        assert result.is_error
        assert result.error == "Empty response from API"

    def test_rate_limit_is_retried_once(self, service, client, sleep):
        client.models.generate_content.side_effect = [
            Exception("429 RESOURCE_EXHAUSTED"),
            MagicMock(text="ok"),
        ]

        result = service.translate(TranslationRequest.for_sentence("Hi."), api_key="key")

        assert result.text == "ok"
        assert client.models.generate_content.call_count == 2
        sleep.assert_called_once_with(GeminiTranslationService.RATE_LIMIT_RETRY_DELAY)

    def test_rate_limit_twice_reports_quota(self, service, client, sleep):
        client.models.generate_content.side_effect = Exception("429 RESOURCE_EXHAUSTED")

        result = service.translate(TranslationRequest.for_sentence("Hi."), api_key="key")

        assert result.is_rate_limited
        assert "quota" in result.error
        assert client.models.generate_content.call_count == 2
        assert sleep.call_count == 1

    def test_auth_error_is_not_retried(self, service, client, sleep):
        client.models.generate_content.side_effect = Exception("403 PERMISSION_DENIED: API_KEY_INVALID")

        result = service.translate(TranslationRequest.for_sentence("Hi."), api_key="bad")

        assert result.status == 403
        assert result.error.startswith("Invalid API key")
        sleep.assert_not_called()

    def test_timeout(self, service, client):
        client.models.generate_content.side_effect = TimeoutError("Deadline exceeded")

        result = service.translate(TranslationRequest.for_sentence("Hi."), api_key="key")

        assert result.error == "Request timed out. Please check your connection."

    def test_generic_failure(self, service, client):
        client.models.generate_content.side_effect = RuntimeError("boom")

        result = service.translate(TranslationRequest.for_sentence("Hi."), api_key="key")

        assert result.error == "Translation failed: boom"
        assert result.status is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('"Привет"', "Привет"),
        ("Перевод: Привет", "Привет"),
        ("Привет", "Привет"),
    ],
)
def test_clean_sentence_translation(raw, expected):
    assert clean_sentence_translation(raw) == expected
