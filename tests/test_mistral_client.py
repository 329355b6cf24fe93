from unittest.mock import MagicMock, patch

import requests

import mistral_client
import prompts
from settings import Settings

_SETTINGS = Settings(mistral_api_key="test-key", mistral_model="mistral-test")
_NO_KEY = Settings()


def _chat_resp(content: str, status: int = 200) -> MagicMock:
    mock = MagicMock()
    mock.status_code = status
    mock.json.return_value = {"choices": [{"message": {"content": content}}]}
    return mock


def test_is_available_reflects_key_presence() -> None:
    assert mistral_client.is_available(_SETTINGS) is True
    assert mistral_client.is_available(_NO_KEY) is False


def test_translate_query_uses_bearer_key() -> None:
    with patch("mistral_client.requests.post", return_value=_chat_resp("diabetes")) as mock_post:
        result = mistral_client.translate_query_to_english("диабет", _SETTINGS)

    assert result == "diabetes"
    assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer test-key"
    payload = mock_post.call_args.kwargs["json"]
    assert payload["model"] == "mistral-test"
    assert payload["temperature"] == 0.1
    assert payload["max_tokens"] == 1000


def test_missing_key_falls_back_without_network() -> None:
    with patch("mistral_client.requests.post") as mock_post:
        assert mistral_client.translate_query_to_english("диабет", _NO_KEY) == "диабет"
        assert mistral_client.translate_titles(["A", "B"], _NO_KEY) == ["A", "B"]
        assert mistral_client.optimize_query("long query", _NO_KEY) == "long query"
    mock_post.assert_not_called()


def test_rate_limit_falls_back_to_original_query() -> None:
    with patch("mistral_client.requests.post", return_value=_chat_resp("", status=429)):
        assert mistral_client.translate_query_to_english("диабет", _SETTINGS) == "диабет"


def test_translate_titles_one_request_per_title() -> None:
    replies = [_chat_resp("Один"), _chat_resp("Два")]
    with patch("mistral_client.requests.post", side_effect=replies) as mock_post:
        result = mistral_client.translate_titles(["One", "Two"], _SETTINGS)

    assert result == ["Один", "Два"]
    assert mock_post.call_count == 2


def test_translate_titles_failure_returns_originals() -> None:
    replies = [_chat_resp("Один"), requests.ConnectionError("reset")]
    with patch("mistral_client.requests.post", side_effect=replies):
        assert mistral_client.translate_titles(["One", "Two"], _SETTINGS) == ["One", "Two"]


def test_summarize_without_abstract_makes_no_call() -> None:
    with patch("mistral_client.requests.post") as mock_post:
        assert mistral_client.summarize_for_layperson("T", "  ", _SETTINGS) == prompts.NO_ABSTRACT_MESSAGE
    mock_post.assert_not_called()


def test_summarize_empty_reply_returns_placeholder() -> None:
    with patch("mistral_client.requests.post", return_value=_chat_resp("")):
        result = mistral_client.summarize_for_layperson("T", "Abstract.", _SETTINGS)
    assert result == prompts.SUMMARY_EMPTY_MESSAGE


def test_optimize_query_empty_reply_returns_input() -> None:
    with patch("mistral_client.requests.post", return_value=_chat_resp("")):
        assert mistral_client.optimize_query("long query", _SETTINGS) == "long query"


def test_optimize_query_limit_is_inclusive() -> None:
    exactly_max = "y" * prompts.OPTIMIZED_QUERY_MAX_LENGTH
    with patch("mistral_client.requests.post", return_value=_chat_resp(exactly_max)):
        assert mistral_client.optimize_query("long query", _SETTINGS) == exactly_max
