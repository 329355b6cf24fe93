"""Process-scoped configuration, read from the environment once and injected."""

from __future__ import annotations

import os
from dataclasses import dataclass

from models import ProviderName, SelectionPolicy

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "gpt-oss:20b"
DEFAULT_MISTRAL_MODEL = "mistral-small-latest"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_RESULT_COUNT = 10


@dataclass(frozen=True, slots=True)
class Settings:
    provider: ProviderName = ProviderName.OLLAMA
    policy: SelectionPolicy = SelectionPolicy.MANUAL
    fallback_provider: ProviderName = ProviderName.MISTRAL
    pubmed_api_key: str | None = None
    result_count: int = DEFAULT_RESULT_COUNT
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    mistral_api_key: str | None = None
    mistral_model: str = DEFAULT_MISTRAL_MODEL
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    target_language: str = "Russian"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables.

        Raises ValueError for an unknown provider or policy name. Credentials are
        only checked for presence later, by the provider probes.
        """
        return cls(
            provider=ProviderName(os.getenv("AI_PROVIDER", ProviderName.OLLAMA.value).strip().lower()),
            policy=SelectionPolicy(os.getenv("AI_SELECTION_POLICY", SelectionPolicy.MANUAL.value).strip().lower()),
            fallback_provider=ProviderName(
                os.getenv("AI_FALLBACK_PROVIDER", ProviderName.MISTRAL.value).strip().lower()
            ),
            pubmed_api_key=_optional(os.getenv("PUBMED_API_KEY")),
            result_count=int(os.getenv("PUBMED_RESULT_COUNT", str(DEFAULT_RESULT_COUNT))),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL).rstrip("/"),
            ollama_model=os.getenv("OLLAMA_MODEL", DEFAULT_OLLAMA_MODEL),
            mistral_api_key=_optional(os.getenv("MISTRAL_API_KEY")),
            mistral_model=os.getenv("MISTRAL_MODEL", DEFAULT_MISTRAL_MODEL),
            gemini_api_key=_optional(os.getenv("GEMINI_API_KEY")),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            target_language=os.getenv("TARGET_LANGUAGE", "Russian"),
        )


def _optional(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None
