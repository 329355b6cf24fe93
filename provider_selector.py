"""Provider capability table and the per-call provider selection policy."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

import gemini_client
import mistral_client
import ollama_client
from errors import ProviderUnavailableError
from models import ProviderName, SelectionPolicy
from settings import Settings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProviderClient:
    """The four AI operations plus the availability probe of one backend."""

    name: ProviderName
    is_available: Callable[[Settings], bool]
    translate_query_to_english: Callable[[str, Settings], str]
    translate_titles: Callable[[list[str], Settings], list[str]]
    summarize_for_layperson: Callable[[str, str, Settings], str]
    optimize_query: Callable[[str, Settings], str]


def _client_from_module(name: ProviderName, module: object) -> ProviderClient:
    return ProviderClient(
        name=name,
        is_available=getattr(module, "is_available"),
        translate_query_to_english=getattr(module, "translate_query_to_english"),
        translate_titles=getattr(module, "translate_titles"),
        summarize_for_layperson=getattr(module, "summarize_for_layperson"),
        optimize_query=getattr(module, "optimize_query"),
    )


PROVIDER_CLIENTS: dict[ProviderName, ProviderClient] = {
    ProviderName.OLLAMA: _client_from_module(ProviderName.OLLAMA, ollama_client),
    ProviderName.MISTRAL: _client_from_module(ProviderName.MISTRAL, mistral_client),
    ProviderName.GEMINI: _client_from_module(ProviderName.GEMINI, gemini_client),
}

DEFAULT_PROVIDER = next(iter(ProviderName))


class ProviderSelector:
    """Choose the provider for one call under exactly one configured policy.

    - fixed: always the first-listed provider; the preference is ignored.
    - fallback: the preferred provider, else the configured fallback provider.
    - manual: the preferred provider only, with no automatic fallback.

    Every policy raises ProviderUnavailableError instead of returning a provider
    that failed its probe.
    """

    def __init__(
        self,
        settings: Settings,
        clients: Mapping[ProviderName, ProviderClient] | None = None,
    ) -> None:
        self._settings = settings
        self._clients = clients if clients is not None else PROVIDER_CLIENTS

    def client(self, name: ProviderName) -> ProviderClient:
        return self._clients[name]

    def is_available(self, name: ProviderName) -> bool:
        client = self._clients.get(name)
        if client is None:
            return False
        try:
            return bool(client.is_available(self._settings))
        except Exception as exc:  # a broken probe means unavailable, not a crash
            LOGGER.warning("Availability probe for %s raised: %s", name.value, exc)
            return False

    def select(self) -> ProviderName:
        policy = self._settings.policy
        preferred = self._settings.provider

        if policy is SelectionPolicy.FIXED:
            return self._require(DEFAULT_PROVIDER)

        if policy is SelectionPolicy.FALLBACK:
            if self.is_available(preferred):
                return preferred
            fallback = self._settings.fallback_provider
            if fallback is not preferred and self.is_available(fallback):
                LOGGER.info(
                    "Provider %s unavailable, falling back to %s",
                    preferred.value,
                    fallback.value,
                )
                return fallback
            if fallback is preferred:
                raise ProviderUnavailableError(preferred)
            raise ProviderUnavailableError(preferred, fallback)

        return self._require(preferred)

    def _require(self, name: ProviderName) -> ProviderName:
        if not self.is_available(name):
            raise ProviderUnavailableError(name)
        return name
