"""Error types surfaced to callers of the search and AI layers."""

from __future__ import annotations

from models import ProviderName


class SearchError(RuntimeError):
    """A PubMed network phase failed; the whole search is void."""


class ProviderUnavailableError(RuntimeError):
    """No usable LLM provider exists for the configured selection policy.

    ``provider`` is the first provider tried; ``providers`` lists every one.
    """

    def __init__(self, provider: ProviderName, *also_tried: ProviderName) -> None:
        self.provider = provider
        self.providers = (provider, *also_tried)
        if also_tried:
            names = " and ".join(f"'{p.value}'" for p in self.providers)
            message = f"AI providers {names} are not available"
        else:
            message = f"AI provider '{provider.value}' is not available"
        super().__init__(message)
