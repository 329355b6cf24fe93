"""Gemini client over Google's OpenAI-compatible chat completions endpoint."""

from __future__ import annotations

import json
import logging
from json import JSONDecodeError
from typing import Any

from openai import OpenAI, OpenAIError

import prompts
from settings import Settings

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
GEMINI_TEMPERATURE = 0.1

LOGGER = logging.getLogger(__name__)

_TITLES_SCHEMA: dict[str, Any] = {
    "name": "translated_titles",
    "schema": {
        "type": "object",
        "properties": {
            "titles": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["titles"],
    },
}


def is_available(settings: Settings) -> bool:
    return bool(settings.gemini_api_key)


def translate_query_to_english(query: str, settings: Settings) -> str:
    try:
        content = _chat(prompts.query_translation_messages(query), settings)
    except (OpenAIError, RuntimeError) as exc:
        LOGGER.warning("Gemini query translation failed: %s", exc)
        return query
    return content.strip() or query


def translate_titles(titles: list[str], settings: Settings) -> list[str]:
    """Translate all titles in one structured-output request.

    The reply must be a JSON array with exactly one string per input title;
    anything else returns the original titles.
    """
    if not titles:
        return []

    try:
        content = _chat(
            prompts.titles_batch_messages(titles, settings.target_language),
            settings,
            response_format={"type": "json_schema", "json_schema": _TITLES_SCHEMA},
        )
        translated = _parse_titles_json(content)
    except (OpenAIError, RuntimeError) as exc:
        LOGGER.warning("Gemini title translation failed: %s", exc)
        return list(titles)

    if len(translated) != len(titles):
        LOGGER.warning(
            "Gemini returned %s titles for %s inputs; keeping originals",
            len(translated),
            len(titles),
        )
        return list(titles)
    return [text.strip() or original for text, original in zip(translated, titles)]


def summarize_for_layperson(title: str, abstract: str, settings: Settings) -> str:
    if not abstract.strip():
        return prompts.NO_ABSTRACT_MESSAGE

    try:
        content = _chat(
            prompts.summary_messages(title, abstract, settings.target_language),
            settings,
        )
    except (OpenAIError, RuntimeError) as exc:
        LOGGER.warning("Gemini summarization failed: %s", exc)
        return prompts.SUMMARY_ERROR_MESSAGE
    return content.strip() or prompts.SUMMARY_EMPTY_MESSAGE


def optimize_query(long_query: str, settings: Settings) -> str:
    try:
        content = _chat(prompts.optimize_messages(long_query), settings)
    except (OpenAIError, RuntimeError) as exc:
        LOGGER.warning("Gemini query optimization failed: %s", exc)
        return long_query
    return prompts.accept_optimized_query(content, long_query)


def _chat(
    messages: list[dict[str, str]],
    settings: Settings,
    response_format: dict[str, Any] | None = None,
) -> str:
    if not settings.gemini_api_key:
        raise RuntimeError("GEMINI_API_KEY environment variable is required")

    client = OpenAI(api_key=settings.gemini_api_key, base_url=GEMINI_BASE_URL)
    kwargs: dict[str, Any] = {
        "model": settings.gemini_model,
        "temperature": GEMINI_TEMPERATURE,
        "messages": messages,
    }
    if response_format:
        kwargs["response_format"] = response_format

    LOGGER.debug("Calling Gemini model=%s", settings.gemini_model)
    response = client.chat.completions.create(**kwargs)
    if not response.choices:
        raise RuntimeError("Gemini returned no choices")

    message = response.choices[0].message
    if message is None:
        raise RuntimeError("Gemini returned a choice without a message")
    return message.content or ""


def _parse_titles_json(content: str) -> list[str]:
    """Parse a title array from possibly noisy model output.

    Accepts a bare array or an object with a ``titles`` array, optionally
    wrapped in prose.
    """
    try:
        parsed: Any = json.loads(content)
    except JSONDecodeError:
        parsed = _extract_first_json_value(content)

    if isinstance(parsed, dict):
        parsed = parsed.get("titles")
    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        raise RuntimeError("Expected a JSON array of strings from Gemini")
    return parsed


def _extract_first_json_value(content: str) -> Any:
    decoder = json.JSONDecoder()
    for index, char in enumerate(content):
        if char not in "[{":
            continue
        try:
            candidate, _ = decoder.raw_decode(content[index:])
        except JSONDecodeError:
            continue
        return candidate
    raise RuntimeError("Could not extract JSON from Gemini output")
