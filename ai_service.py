"""Single entry point for AI work: routes each operation to the selected provider."""

from __future__ import annotations

import logging

import prompts
from errors import ProviderUnavailableError
from models import Article
from provider_selector import ProviderClient, ProviderSelector
from settings import Settings

LOGGER = logging.getLogger(__name__)


class AIService:
    """Façade over provider selection and the provider clients.

    Query translation and optimization feed the search backend, so they raise
    ProviderUnavailableError when no provider can be used. Title translation
    and summaries are display-only and degrade instead.
    """

    def __init__(
        self,
        settings: Settings,
        selector: ProviderSelector | None = None,
    ) -> None:
        self.settings = settings
        self.selector = selector or ProviderSelector(settings)

    def translate_query_to_english(self, query: str) -> str:
        client = self._resolve()
        translated = client.translate_query_to_english(query, self.settings)
        LOGGER.info("Query translated by %s: %r -> %r", client.name.value, query, translated)
        return translated

    def optimize_query(self, long_query: str) -> str:
        client = self._resolve()
        optimized = client.optimize_query(long_query, self.settings)
        LOGGER.info(
            "Query optimized by %s: %s -> %s chars",
            client.name.value,
            len(long_query),
            len(optimized),
        )
        return optimized

    def translate_titles(self, titles: list[str]) -> list[str]:
        if not titles:
            return []
        try:
            client = self._resolve()
        except ProviderUnavailableError as exc:
            LOGGER.warning("Title translation skipped: %s", exc)
            return list(titles)

        translated = client.translate_titles(list(titles), self.settings)
        if len(translated) != len(titles):
            LOGGER.warning(
                "%s returned %s titles for %s inputs; keeping originals",
                client.name.value,
                len(translated),
                len(titles),
            )
            return list(titles)
        return translated

    def summarize(self, article: Article) -> str:
        """Explain one article for a layperson; never raises for a missing provider."""
        if not article.abstract.strip():
            return prompts.NO_ABSTRACT_MESSAGE

        try:
            client = self._resolve()
        except ProviderUnavailableError as exc:
            LOGGER.warning("Summary unavailable for article_id=%s: %s", article.article_id, exc)
            return prompts.PROVIDER_UNAVAILABLE_MESSAGE.format(
                provider=", ".join(p.value for p in exc.providers)
            )

        return client.summarize_for_layperson(article.title, article.abstract, self.settings)

    def _resolve(self) -> ProviderClient:
        return self.selector.client(self.selector.select())
