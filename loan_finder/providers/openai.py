"""OpenAI chat-completions provider"""

from typing import Any, Optional

import httpx

from loan_finder.providers.base import (
    AIProviderType,
    Diagnostics,
    ParsedQuery,
    ParseOutcome,
    ProviderConfig,
    SupportedLanguage,
    TokenUsage,
)
from loan_finder.providers.common import diagnose, guarded_parse, probe_connectivity
from loan_finder.providers.errors import ResponseParseError
from loan_finder.providers.http import post_json
from loan_finder.providers.prompt import SYSTEM_PROMPT, build_loan_prompt, decode_response

SUPPORTED_MODELS = ("gpt-4", "gpt-4o", "gpt-3.5-turbo", "gpt-4-turbo")
KEY_PREFIX = "sk-"


class OpenAIProvider:
    """Parses loan queries with an OpenAI chat model in JSON mode"""

    def __init__(
        self,
        config: ProviderConfig,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
        currency: str = "TRY",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if config.type != AIProviderType.OPENAI:
            raise ValueError(f"OpenAIProvider cannot run a {config.type.value} configuration")
        self._config = config
        self.language = language
        self.currency = currency
        self._transport = transport

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.OPENAI

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def is_configured(self) -> bool:
        return self._config.has_key

    async def _complete(self, config: ProviderConfig, text: str) -> ParsedQuery:
        payload = {
            "model": config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_loan_prompt(text, self.language, self.currency)},
            ],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "response_format": {"type": "json_object"},
        }
        headers = {"Authorization": f"Bearer {config.api_key}"}
        data = await post_json(config, "chat/completions", headers, payload, self._transport)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ResponseParseError("no completion content in OpenAI response") from e
        if not content:
            raise ResponseParseError("empty completion from OpenAI")

        query = decode_response(content, text, self.provider_type.value)
        query.usage = _usage(data.get("usage"))
        return query

    async def parse(self, text: str) -> ParseOutcome:
        return await guarded_parse(self._config, text, self._complete)

    async def parse_query(self, text: str) -> ParsedQuery:
        return (await self.parse(text)).query

    async def test_connectivity(self) -> bool:
        return await probe_connectivity(self)

    async def get_diagnostics(self) -> Diagnostics:
        return await diagnose(self, KEY_PREFIX, "OPENAI_API_KEY", SUPPORTED_MODELS)

    def update_config(self, **changes: Any) -> None:
        self._config = self._config.updated(**changes)


def _usage(raw: Any) -> Optional[TokenUsage]:
    if not isinstance(raw, dict):
        return None
    return TokenUsage(
        prompt_tokens=int(raw.get("prompt_tokens") or 0),
        completion_tokens=int(raw.get("completion_tokens") or 0),
    )
