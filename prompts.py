"""Prompt text and fixed user-facing messages shared by every provider client."""

from __future__ import annotations

import json

OPTIMIZED_QUERY_MAX_LENGTH = 300

NO_ABSTRACT_MESSAGE = (
    "К сожалению, для этой статьи нет доступной аннотации (abstract), "
    "поэтому ИИ не может составить резюме."
)
SUMMARY_EMPTY_MESSAGE = "Не удалось создать краткое содержание."
SUMMARY_ERROR_MESSAGE = "Произошла ошибка при генерации описания."
PROVIDER_UNAVAILABLE_MESSAGE = (
    "ИИ-провайдер «{provider}» недоступен. Проверьте настройки подключения и ключи API."
)

_QUERY_SYSTEM = (
    "You are a helpful assistant that translates medical search queries to English "
    "for PubMed database searches. Return ONLY the English translation, no other text "
    "or explanation."
)

_TITLE_SYSTEM = (
    "You are a helpful assistant that translates medical article titles from English "
    "to {language}. Return ONLY the {language} translation, no other text."
)

_TITLES_BATCH_SYSTEM = (
    "You translate medical article titles from English to {language}. "
    "Return ONLY a JSON array of strings, one translation per input title, "
    "in the same order as the input."
)

_SUMMARY_SYSTEM = (
    "You are a helpful medical assistant. Your task is to explain medical scientific "
    "articles to simple people (non-medical experts) in {language}. Use simple, clear "
    "language. Focus on the main conclusion. Be concise but informative."
)

_SUMMARY_RULES = """Rules:
1. **Output Language**: {language}.
2. Use simple, clear language. Avoid complex terminology where possible, or explain it.
3. Focus on the main conclusion: What did they find? Why is it important?
4. Structure the response with clear paragraphs or bullet points.
5. Be concise but informative.
6. Do not make up facts. Stick to the abstract provided."""

_OPTIMIZE_SYSTEM = (
    "You are a medical research assistant. Your task is to optimize long, detailed "
    "queries into concise PubMed search terms. Focus on the core medical concepts, "
    "diseases, treatments, and key terms that would yield the best search results."
)

_OPTIMIZE_RULES = """Rules:
1. Focus on medical keywords, diseases, treatments, symptoms, and research topics
2. Use PubMed-compatible syntax when appropriate (AND, OR, NOT)
3. Keep it under 200 characters if possible
4. Return ONLY the optimized search query, no explanations"""


def query_translation_messages(query: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": _QUERY_SYSTEM},
        {
            "role": "user",
            "content": (
                "Translate the following medical search query into English for a PubMed "
                "database search. If the query is already in English, return it exactly "
                "as is. Return ONLY the English translation, no other text or explanation."
                f'\n\nQuery: "{query}"'
            ),
        },
    ]


def title_translation_messages(title: str, language: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": _TITLE_SYSTEM.format(language=language)},
        {
            "role": "user",
            "content": (
                f"Translate this medical article title from English to {language}. "
                f"Return ONLY the translation:\n\n{title}"
            ),
        },
    ]


def titles_batch_messages(titles: list[str], language: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": _TITLES_BATCH_SYSTEM.format(language=language)},
        {
            "role": "user",
            "content": (
                f"Translate the following medical article titles from English to {language}.\n"
                f"Input: {json.dumps(titles, ensure_ascii=False)}"
            ),
        },
    ]


def summary_messages(title: str, abstract: str, language: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": _SUMMARY_SYSTEM.format(language=language)},
        {
            "role": "user",
            "content": (
                "Explain the following medical scientific article to a simple person "
                f"(non-medical expert) in {language}.\n\n"
                f"{_SUMMARY_RULES.format(language=language)}\n\n"
                f"Article Title: {title}\n"
                f"Abstract: {abstract}"
            ),
        },
    ]


def optimize_messages(long_query: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": _OPTIMIZE_SYSTEM},
        {
            "role": "user",
            "content": (
                "Please optimize this medical query for PubMed search. Extract the key "
                "medical terms, diseases, treatments, and concepts. Make it concise but "
                f'comprehensive.\n\nOriginal query: "{long_query}"\n\n{_OPTIMIZE_RULES}'
            ),
        },
    ]


def accept_optimized_query(optimized: str, long_query: str) -> str:
    """Return the model's compressed query, or the untouched input if it is unusable."""
    candidate = optimized.strip()
    if not candidate or len(candidate) > OPTIMIZED_QUERY_MAX_LENGTH:
        return long_query
    return candidate
