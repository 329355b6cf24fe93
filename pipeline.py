"""Search pipeline: query translation -> PubMed search -> title translation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from ai_service import AIService
from models import Article, SearchState
from pubmed_client import search_articles

LOGGER = logging.getLogger(__name__)

SearchFn = Callable[..., list[Article]]
StateListener = Callable[[SearchState], None]

DEFAULT_SEARCH_ERROR = "Произошла ошибка при поиске"


class SearchPipeline:
    """Run one search at a time and publish each stage as a new SearchState.

    Every run takes a fresh guard token. ``clear()`` or a newer ``run()`` makes
    the token stale, and a stage finishing under a stale token is discarded.
    """

    def __init__(
        self,
        ai_service: AIService,
        search: SearchFn | None = None,
        api_key: str | None = None,
        count: int = 10,
        on_change: StateListener | None = None,
    ) -> None:
        self.ai_service = ai_service
        self._search = search or search_articles
        self._api_key = api_key
        self._on_change = on_change
        self._token = 0
        self.state = SearchState(count=count)

    def run(self, query: str, optimize: bool = False) -> SearchState:
        if not query.strip():
            return self.state

        self._token += 1
        token = self._token
        self._publish(replace(self.state, query=query, loading=True, error=None, results=()))

        try:
            search_query = self.ai_service.optimize_query(query) if optimize else query
            english_query = self.ai_service.translate_query_to_english(search_query)
            if not self._is_current(token):
                return self.state
            articles = self._search(english_query, self.state.count, self._api_key)
        except Exception as exc:  # surfaced verbatim to the consumer
            LOGGER.warning("Search failed for query=%r: %s", query, exc)
            if self._is_current(token):
                self._publish(replace(self.state, loading=False, error=str(exc) or DEFAULT_SEARCH_ERROR))
            return self.state

        if not self._is_current(token):
            LOGGER.info("Discarding stale search results for query=%r", query)
            return self.state

        if not articles:
            self._publish(replace(self.state, loading=False, results=()))
            return self.state

        self._publish(replace(self.state, results=tuple(articles)))
        enriched = self._translate_titles(articles)

        if not self._is_current(token):
            LOGGER.info("Discarding stale title translations for query=%r", query)
            return self.state

        self._publish(replace(self.state, loading=False, results=enriched))
        return self.state

    def clear(self) -> SearchState:
        """Abandon any in-flight search and reset query, results and error."""
        self._token += 1
        self._publish(replace(self.state, query="", results=(), error=None, loading=False))
        return self.state

    def summarize(self, article: Article) -> str:
        return self.ai_service.summarize(article)

    def _translate_titles(self, articles: list[Article]) -> tuple[Article, ...]:
        titles = [article.title for article in articles]
        try:
            translated = self.ai_service.translate_titles(titles)
        except Exception as exc:  # enrichment must not discard primary results
            LOGGER.warning("Title translation failed: %s", exc)
            return tuple(articles)

        return tuple(
            article.with_translated_title(text if text and text != article.title else None)
            for article, text in zip(articles, translated)
        )

    def _is_current(self, token: int) -> bool:
        return token == self._token

    def _publish(self, state: SearchState) -> None:
        self.state = state
        if self._on_change is not None:
            self._on_change(state)
