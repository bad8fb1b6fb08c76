"""Provider factory and instance cache"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from loan_finder.config import Settings, settings as default_settings
from loan_finder.providers.base import (
    AIProvider,
    AIProviderType,
    Diagnostics,
    ProviderConfig,
    SupportedLanguage,
)
from loan_finder.providers.claude import ClaudeProvider
from loan_finder.providers.keyword import KeywordProvider
from loan_finder.providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderConfig, SupportedLanguage, str], AIProvider]

DEFAULT_FACTORIES: Dict[AIProviderType, ProviderFactory] = {
    AIProviderType.OPENAI: lambda config, language, currency: OpenAIProvider(config, language, currency),
    AIProviderType.CLAUDE: lambda config, language, currency: ClaudeProvider(config, language, currency),
    AIProviderType.KEYWORD: lambda config, language, currency: KeywordProvider(config, language, currency),
}


@dataclass(frozen=True)
class ProviderRecommendation:
    primary: AIProviderType
    fallback: AIProviderType
    reasoning: str

    @property
    def pair(self) -> Tuple[AIProviderType, AIProviderType]:
        return (self.primary, self.fallback)


def recommend(language: SupportedLanguage = SupportedLanguage.TURKISH) -> ProviderRecommendation:
    """Primary/fallback pair for a query language"""
    if language == SupportedLanguage.TURKISH:
        return ProviderRecommendation(
            primary=AIProviderType.OPENAI,
            fallback=AIProviderType.CLAUDE,
            reasoning="OpenAI models handle Turkish well with fast responses; Claude is the fallback for harder phrasing",
        )
    return ProviderRecommendation(
        primary=AIProviderType.CLAUDE,
        fallback=AIProviderType.OPENAI,
        reasoning="Claude handles complex language understanding well; OpenAI is a consistent fallback",
    )


class ProviderRegistry:
    """
    Creates provider adapters from Settings and caches them.

    One registry is shared per application. Adapters are cached by their
    ProviderConfig.cache_key plus query language, so rotating an API key
    without changing the key's presence reuses the cached adapter until
    clear() is called.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        factories: Optional[Mapping[AIProviderType, ProviderFactory]] = None,
    ):
        self.settings = config or default_settings
        self._factories: Dict[AIProviderType, ProviderFactory] = {**DEFAULT_FACTORIES, **(factories or {})}
        self._providers: Dict[Tuple, AIProvider] = {}

    def default_config(self, provider_type: AIProviderType) -> ProviderConfig:
        """Build a provider configuration from Settings"""
        common = dict(
            max_tokens=self.settings.provider_max_tokens,
            temperature=self.settings.provider_temperature,
            timeout=self.settings.provider_timeout_seconds,
            max_retries=self.settings.provider_max_retries,
            backoff_base=self.settings.provider_backoff_base,
        )
        if provider_type == AIProviderType.OPENAI:
            return ProviderConfig(
                type=provider_type,
                api_key=self.settings.openai_api_key,
                model=self.settings.openai_model,
                base_url=self.settings.openai_api_base,
                **common,
            )
        if provider_type == AIProviderType.CLAUDE:
            return ProviderConfig(
                type=provider_type,
                api_key=self.settings.anthropic_api_key,
                model=self.settings.claude_model,
                base_url=self.settings.anthropic_api_base,
                **common,
            )
        return ProviderConfig(type=AIProviderType.KEYWORD, model="keyword-v1", max_retries=0)

    def create(
        self,
        config: ProviderConfig,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
    ) -> AIProvider:
        """Return the cached adapter for this configuration, creating it on first use"""
        key = config.cache_key + (language.value,)
        if key in self._providers:
            logger.debug(f"Returning cached {config.type.value} provider")
            return self._providers[key]

        factory = self._factories.get(config.type)
        if factory is None:
            raise ValueError(f"Unsupported AI provider type: {config.type.value}")

        provider = factory(config, language, self.settings.default_currency)
        self._providers[key] = provider
        logger.info(
            f"Created new {config.type.value} provider",
            extra={"provider": config.type.value, "model": config.model, "configured": provider.is_configured},
        )
        return provider

    def get(
        self,
        provider_type: AIProviderType,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
    ) -> AIProvider:
        return self.create(self.default_config(provider_type), language)

    def is_available(self, provider_type: AIProviderType) -> bool:
        """A provider is available when its credential is present"""
        if provider_type == AIProviderType.OPENAI:
            return bool(self.settings.openai_api_key)
        if provider_type == AIProviderType.CLAUDE:
            return bool(self.settings.anthropic_api_key)
        return provider_type == AIProviderType.KEYWORD

    def available_types(self) -> List[AIProviderType]:
        return list(self._factories)

    def select_type(
        self,
        preferred: Optional[AIProviderType] = None,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
    ) -> AIProviderType:
        """
        Pick a provider type.

        Selection order:
        1. Explicit preferred type
        2. Language primary, when its credential is present
        3. Language fallback, when its credential is present
        4. Keyword heuristic
        """
        if preferred is not None:
            return preferred

        recommendation = recommend(language)
        if self.is_available(recommendation.primary):
            return recommendation.primary
        if self.is_available(recommendation.fallback):
            logger.warning(
                f"Primary provider {recommendation.primary.value} not available, "
                f"using fallback {recommendation.fallback.value}"
            )
            return recommendation.fallback

        logger.warning("No AI provider credentials configured, using keyword provider")
        return AIProviderType.KEYWORD

    def create_from_settings(
        self,
        preferred: Optional[AIProviderType] = None,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
    ) -> AIProvider:
        return self.get(self.select_type(preferred, language), language)

    async def run_diagnostics(
        self, language: SupportedLanguage = SupportedLanguage.TURKISH
    ) -> Dict[AIProviderType, Diagnostics]:
        """Diagnose every registered provider type, one after another"""
        report = {}
        for provider_type in self.available_types():
            report[provider_type] = await self.get(provider_type, language).get_diagnostics()
        return report

    @property
    def cached_count(self) -> int:
        return len(self._providers)

    def clear(self) -> None:
        """Drop cached adapters so the next lookup re-reads credentials"""
        self._providers.clear()
        logger.info("Provider cache cleared")
