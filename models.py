"""Shared typed models for the search and AI pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class ProviderName(str, Enum):
    """LLM backends the AI layer can route to. The first member is the default."""

    OLLAMA = "ollama"
    MISTRAL = "mistral"
    GEMINI = "gemini"


class SelectionPolicy(str, Enum):
    FIXED = "fixed"
    FALLBACK = "fallback"
    MANUAL = "manual"


@dataclass(frozen=True, slots=True)
class Article:
    """Normalized PubMed record produced by the search client."""

    article_id: str
    title: str
    authors: tuple[str, ...]
    journal: str
    year: str
    abstract: str
    url: str
    translated_title: str | None = None

    def with_translated_title(self, translated: str | None) -> Article:
        """Return a copy carrying ``translated``; a missing value keeps the current one."""
        if not translated:
            return self
        return replace(self, translated_title=translated)


@dataclass(frozen=True, slots=True)
class SearchState:
    """Observable state of one search pipeline, replaced wholesale on each change."""

    query: str = ""
    results: tuple[Article, ...] = field(default_factory=tuple)
    loading: bool = False
    error: str | None = None
    count: int = 10
