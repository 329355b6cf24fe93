"""Ollama chat client for a local or LAN-hosted model server."""

from __future__ import annotations

import logging

import requests

import prompts
from settings import Settings

PROBE_TIMEOUT_SECONDS = 5
REQUEST_TIMEOUT_SECONDS = 120

LOGGER = logging.getLogger(__name__)


def is_available(settings: Settings) -> bool:
    """Cheap reachability probe against the server's model list."""
    try:
        response = requests.get(
            f"{settings.ollama_base_url}/api/tags",
            headers={"Content-Type": "application/json"},
            timeout=PROBE_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        LOGGER.info("Ollama probe failed at %s: %s", settings.ollama_base_url, exc)
        return False
    return response.ok


def translate_query_to_english(query: str, settings: Settings) -> str:
    try:
        content = _chat(prompts.query_translation_messages(query), settings)
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.warning("Ollama query translation failed: %s", exc)
        return query
    return content.strip() or query


def translate_titles(titles: list[str], settings: Settings) -> list[str]:
    """Translate titles one request at a time, in input order.

    Any failed request reverts the whole batch to the original titles; an empty
    reply keeps only that one title untranslated.
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
        LOGGER.warning(
            "Ollama title translation failed after %s/%s titles: %s",
            len(translated),
            len(titles),
            exc,
        )
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
        LOGGER.warning("Ollama summarization failed: %s", exc)
        return prompts.SUMMARY_ERROR_MESSAGE
    return content.strip() or prompts.SUMMARY_EMPTY_MESSAGE


def optimize_query(long_query: str, settings: Settings) -> str:
    try:
        content = _chat(prompts.optimize_messages(long_query), settings)
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.warning("Ollama query optimization failed: %s", exc)
        return long_query
    return prompts.accept_optimized_query(content, long_query)


def _chat(messages: list[dict[str, str]], settings: Settings) -> str:
    payload = {
        "model": settings.ollama_model,
        "messages": messages,
        "stream": False,
    }
    LOGGER.debug("Calling Ollama model=%s", settings.ollama_model)
    response = requests.post(
        f"{settings.ollama_base_url}/api/chat",
        json=payload,
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    body = response.json()

    try:
        return body["message"]["content"] or ""
    except (KeyError, TypeError) as exc:
        raise RuntimeError(f"Unexpected Ollama response shape: {body}") from exc
