from unittest.mock import MagicMock, patch

import gemini_client
import prompts
from ai_service import AIService
from gemini_client import _parse_titles_json
from models import Article, ProviderName
from settings import Settings

_SETTINGS = Settings(gemini_api_key="test-key", gemini_model="gemini-test")


def _mock_client(*contents: str) -> MagicMock:
    responses = []
    for content in contents:
        choice = MagicMock()
        choice.message.content = content
        response = MagicMock()
        response.choices = [choice]
        responses.append(response)

    client = MagicMock()
    client.chat.completions.create.side_effect = responses
    return client


def test_parse_titles_json_accepts_bare_array() -> None:
    assert _parse_titles_json('["А", "Б"]') == ["А", "Б"]


def test_parse_titles_json_accepts_wrapped_object_in_prose() -> None:
    noisy = 'Here you go:\n{"titles": ["А", "Б"]}\nDone.'
    assert _parse_titles_json(noisy) == ["А", "Б"]


def test_translate_titles_batched_single_call() -> None:
    client = _mock_client('{"titles": ["Первый", "Второй"]}')

    with patch("gemini_client.OpenAI", return_value=client) as mock_openai:
        result = gemini_client.translate_titles(["First", "Second"], _SETTINGS)

    assert result == ["Первый", "Второй"]
    assert client.chat.completions.create.call_count == 1
    assert mock_openai.call_args.kwargs["base_url"] == gemini_client.GEMINI_BASE_URL
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["response_format"]["type"] == "json_schema"
    assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]


def test_translate_titles_length_mismatch_returns_originals() -> None:
    client = _mock_client('["Только один"]')

    with patch("gemini_client.OpenAI", return_value=client):
        result = gemini_client.translate_titles(["First", "Second"], _SETTINGS)

    assert result == ["First", "Second"]


def test_translate_titles_unparseable_reply_returns_originals() -> None:
    client = _mock_client("Sorry, I cannot help with that.")

    with patch("gemini_client.OpenAI", return_value=client):
        assert gemini_client.translate_titles(["First"], _SETTINGS) == ["First"]


def test_translate_titles_without_key_returns_originals() -> None:
    with patch("gemini_client.OpenAI") as mock_openai:
        assert gemini_client.translate_titles(["First"], Settings()) == ["First"]
    mock_openai.assert_not_called()


def test_translate_query_returns_stripped_text() -> None:
    client = _mock_client("  vitamin D deficiency\n")

    with patch("gemini_client.OpenAI", return_value=client):
        assert gemini_client.translate_query_to_english("дефицит витамина D", _SETTINGS) == "vitamin D deficiency"


def test_translate_query_sdk_error_returns_original() -> None:
    client = MagicMock()
    client.chat.completions.create.side_effect = gemini_client.OpenAIError("boom")

    with patch("gemini_client.OpenAI", return_value=client):
        assert gemini_client.translate_query_to_english("диабет", _SETTINGS) == "диабет"


def test_summarize_without_abstract_makes_no_call() -> None:
    with patch("gemini_client.OpenAI") as mock_openai:
        assert gemini_client.summarize_for_layperson("T", "", _SETTINGS) == prompts.NO_ABSTRACT_MESSAGE
    mock_openai.assert_not_called()


def test_optimize_query_returns_compressed_terms() -> None:
    client = _mock_client("diabetes AND metformin")

    with patch("gemini_client.OpenAI", return_value=client):
        result = gemini_client.optimize_query("long story about diabetes and metformin", _SETTINGS)

    assert result == "diabetes AND metformin"


# ---------------------------------------------------------------------------
# Replies without usable choices (e.g. a safety block) fall back like any failure
# ---------------------------------------------------------------------------

def _client_without_choices() -> MagicMock:
    response = MagicMock()
    response.choices = []
    client = MagicMock()
    client.chat.completions.create.return_value = response
    return client


def test_translate_query_without_choices_returns_original() -> None:
    with patch("gemini_client.OpenAI", return_value=_client_without_choices()):
        assert gemini_client.translate_query_to_english("диабет", _SETTINGS) == "диабет"


def test_summarize_without_choices_returns_error_message() -> None:
    with patch("gemini_client.OpenAI", return_value=_client_without_choices()):
        result = gemini_client.summarize_for_layperson("T", "Abstract.", _SETTINGS)

    assert result == prompts.SUMMARY_ERROR_MESSAGE


def test_translate_titles_without_choices_returns_originals() -> None:
    with patch("gemini_client.OpenAI", return_value=_client_without_choices()):
        assert gemini_client.translate_titles(["First", "Second"], _SETTINGS) == ["First", "Second"]


def test_service_summary_survives_reply_without_choices() -> None:
    settings = Settings(provider=ProviderName.GEMINI, gemini_api_key="test-key")
    article = Article(
        article_id="1",
        title="Metformin and diabetes",
        authors=(),
        journal="Diabetes Care",
        year="2021",
        abstract="It works.",
        url="https://pubmed.ncbi.nlm.nih.gov/1/",
    )

    with patch("gemini_client.OpenAI", return_value=_client_without_choices()):
        assert AIService(settings).summarize(article) == prompts.SUMMARY_ERROR_MESSAGE


def test_choice_without_message_returns_original() -> None:
    choice = MagicMock()
    choice.message = None
    response = MagicMock()
    response.choices = [choice]
    client = MagicMock()
    client.chat.completions.create.return_value = response

    with patch("gemini_client.OpenAI", return_value=client):
        assert gemini_client.optimize_query("long query", _SETTINGS) == "long query"


# ---------------------------------------------------------------------------
# Summary and optimization fallbacks
# ---------------------------------------------------------------------------

def test_summarize_returns_model_text() -> None:
    client = _mock_client("  Простое объяснение.  ")

    with patch("gemini_client.OpenAI", return_value=client):
        assert gemini_client.summarize_for_layperson("T", "Abstract.", _SETTINGS) == "Простое объяснение."


def test_summarize_sdk_error_returns_error_message() -> None:
    client = MagicMock()
    client.chat.completions.create.side_effect = gemini_client.OpenAIError("quota")

    with patch("gemini_client.OpenAI", return_value=client):
        result = gemini_client.summarize_for_layperson("T", "Abstract.", _SETTINGS)

    assert result == prompts.SUMMARY_ERROR_MESSAGE


def test_summarize_empty_reply_returns_placeholder() -> None:
    with patch("gemini_client.OpenAI", return_value=_mock_client("")):
        result = gemini_client.summarize_for_layperson("T", "Abstract.", _SETTINGS)

    assert result == prompts.SUMMARY_EMPTY_MESSAGE


def test_optimize_query_rejects_overlong_output() -> None:
    with patch("gemini_client.OpenAI", return_value=_mock_client("x" * 301)):
        assert gemini_client.optimize_query("long query", _SETTINGS) == "long query"


def test_optimize_query_empty_reply_returns_input() -> None:
    with patch("gemini_client.OpenAI", return_value=_mock_client("   ")):
        assert gemini_client.optimize_query("long query", _SETTINGS) == "long query"


def test_optimize_query_sdk_error_returns_input() -> None:
    client = MagicMock()
    client.chat.completions.create.side_effect = gemini_client.OpenAIError("boom")

    with patch("gemini_client.OpenAI", return_value=client):
        assert gemini_client.optimize_query("long query", _SETTINGS) == "long query"
