"""Mistral chat completions client."""

from __future__ import annotations

import logging

import requests

import prompts
from settings import Settings

MISTRAL_API_URL = "https://api.mistral.ai/v1/chat/completions"
MISTRAL_TEMPERATURE = 0.1
MISTRAL_MAX_TOKENS = 1000
REQUEST_TIMEOUT_SECONDS = 60

LOGGER = logging.getLogger(__name__)


def is_available(settings: Settings) -> bool:
    """Mistral is a hosted API; a configured key is the availability signal."""
    return bool(settings.mistral_api_key)


def translate_query_to_english(query: str, settings: Settings) -> str:
    try:
        content = _chat(prompts.query_translation_messages(query), settings)
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.warning("Mistral query translation failed: %s", exc)
        return query
    return content.strip() or query


def translate_titles(titles: list[str], settings: Settings) -> list[str]:
    """Translate titles sequentially, one request per title.

    A failure on any title returns the original batch unchanged.
    """
    if not titles:
        return []

    translated: list[str] = []
    try:
        for title in titles:
            content = _chat(
                prompts.title_translation_messages(title, settings.target_language),
                settings,
            )
            translated.append(content.strip() or title)
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.warning("Mistral title translation failed: %s", exc)
        return list(titles)
    return translated


def summarize_for_layperson(title: str, abstract: str, settings: Settings) -> str:
    if not abstract.strip():
        return prompts.NO_ABSTRACT_MESSAGE

    try:
        content = _chat(
            prompts.summary_messages(title, abstract, settings.target_language),
            settings,
        )
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.warning("Mistral summarization failed: %s", exc)
        return prompts.SUMMARY_ERROR_MESSAGE
    return content.strip() or prompts.SUMMARY_EMPTY_MESSAGE


def optimize_query(long_query: str, settings: Settings) -> str:
    try:
        content = _chat(prompts.optimize_messages(long_query), settings)
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.warning("Mistral query optimization failed: %s", exc)
        return long_query
    return prompts.accept_optimized_query(content, long_query)


def _chat(messages: list[dict[str, str]], settings: Settings) -> str:
    if not settings.mistral_api_key:
        raise RuntimeError("MISTRAL_API_KEY environment variable is required")

    payload = {
        "model": settings.mistral_model,
        "temperature": MISTRAL_TEMPERATURE,
        "max_tokens": MISTRAL_MAX_TOKENS,
        "messages": messages,
    }
    headers = {
        "Authorization": f"Bearer {settings.mistral_api_key}",
        "Content-Type": "application/json",
    }

    response = requests.post(
        MISTRAL_API_URL,
        headers=headers,
        json=payload,
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    if response.status_code == 429:
        raise RuntimeError("Mistral API rate limit or monthly token quota exceeded")
    response.raise_for_status()
    body = response.json()

    try:
        return body["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as exc:
        raise RuntimeError(f"Unexpected Mistral response shape: {body}") from exc
