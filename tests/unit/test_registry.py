"""Unit tests for provider selection and caching"""

import pytest

from loan_finder.providers.base import AIProviderType, ApiKeyStatus, ConnectionStatus, SupportedLanguage
from loan_finder.providers.claude import ClaudeProvider
from loan_finder.providers.keyword import KeywordProvider
from loan_finder.providers.openai import OpenAIProvider
from loan_finder.providers.registry import ProviderRegistry, recommend


def test_recommendation_pairs():
    turkish = recommend(SupportedLanguage.TURKISH)
    english = recommend(SupportedLanguage.ENGLISH)

    assert turkish.pair == (AIProviderType.OPENAI, AIProviderType.CLAUDE)
    assert english.pair == (AIProviderType.CLAUDE, AIProviderType.OPENAI)
    assert turkish.reasoning


def test_without_credentials_keyword_is_selected(registry):
    provider = registry.create_from_settings()

    assert isinstance(provider, KeywordProvider)


@pytest.mark.parametrize(
    "openai_key,anthropic_key,language,expected",
    [
        ("sk-a", "sk-ant-b", SupportedLanguage.TURKISH, AIProviderType.OPENAI),
        ("sk-a", "sk-ant-b", SupportedLanguage.ENGLISH, AIProviderType.CLAUDE),
        ("", "sk-ant-b", SupportedLanguage.TURKISH, AIProviderType.CLAUDE),
        ("sk-a", "", SupportedLanguage.ENGLISH, AIProviderType.OPENAI),
        ("", "", SupportedLanguage.ENGLISH, AIProviderType.KEYWORD),
    ],
)
def test_selection_follows_language_pair_and_credentials(settings_factory, openai_key, anthropic_key, language, expected):
    registry = ProviderRegistry(settings_factory(openai_api_key=openai_key, anthropic_api_key=anthropic_key))

    assert registry.select_type(language=language) == expected


def test_explicit_preference_wins_even_without_credentials(registry):
    provider = registry.create_from_settings(preferred=AIProviderType.CLAUDE)

    assert isinstance(provider, ClaudeProvider)
    assert provider.is_configured is False


def test_default_config_comes_from_settings(settings_factory):
    registry = ProviderRegistry(
        settings_factory(openai_api_key="sk-a", openai_model="gpt-4o", provider_max_tokens=500, provider_timeout_seconds=12)
    )

    config = registry.default_config(AIProviderType.OPENAI)

    assert config.api_key == "sk-a"
    assert config.model == "gpt-4o"
    assert config.max_tokens == 500
    assert config.timeout == 12
    assert config.base_url == "https://api.openai.com/v1"
    assert config.sanitized()["api_key"] == "sk-a..."


def test_providers_are_cached_by_config(registry):
    first = registry.get(AIProviderType.OPENAI)
    second = registry.get(AIProviderType.OPENAI)

    assert first is second
    assert isinstance(first, OpenAIProvider)
    assert registry.cached_count == 1


def test_different_model_gets_its_own_instance(registry):
    default = registry.get(AIProviderType.OPENAI)
    other = registry.create(registry.default_config(AIProviderType.OPENAI).updated(model="gpt-4"))

    assert default is not other
    assert registry.cached_count == 2


def test_key_rotation_reuses_cache_until_cleared(settings_factory):
    settings = settings_factory(openai_api_key="sk-old")
    registry = ProviderRegistry(settings)
    before = registry.get(AIProviderType.OPENAI)

    settings.openai_api_key = "sk-new"
    assert registry.get(AIProviderType.OPENAI) is before
    assert before.config.api_key == "sk-old"

    registry.clear()
    after = registry.get(AIProviderType.OPENAI)
    assert after is not before
    assert after.config.api_key == "sk-new"


def test_available_types(registry):
    assert registry.available_types() == [AIProviderType.OPENAI, AIProviderType.CLAUDE, AIProviderType.KEYWORD]
    assert registry.is_available(AIProviderType.KEYWORD)
    assert not registry.is_available(AIProviderType.OPENAI)


async def test_run_diagnostics_without_credentials_makes_no_calls(registry):
    report = await registry.run_diagnostics()

    assert report[AIProviderType.OPENAI].api_key_status == ApiKeyStatus.MISSING
    assert report[AIProviderType.CLAUDE].connection_status == ConnectionStatus.NOT_TESTED
    assert report[AIProviderType.KEYWORD].connection_status == ConnectionStatus.SUCCESS
