"""Anthropic Claude messages-API provider"""

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

SUPPORTED_MODELS = ("claude-3-haiku", "claude-3-sonnet", "claude-3-opus", "claude-3-5-sonnet", "claude-3.5-sonnet")
KEY_PREFIX = "sk-ant-"
API_VERSION = "2023-06-01"


class ClaudeProvider:
    """Parses loan queries with a Claude model; the answer is prefilled with '{' to force JSON"""

    def __init__(
        self,
        config: ProviderConfig,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
        currency: str = "TRY",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if config.type != AIProviderType.CLAUDE:
            raise ValueError(f"ClaudeProvider cannot run a {config.type.value} configuration")
        self._config = config
        self.language = language
        self.currency = currency
        self._transport = transport

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.CLAUDE

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def is_configured(self) -> bool:
        return self._config.has_key

    async def _complete(self, config: ProviderConfig, text: str) -> ParsedQuery:
        payload = {
            "model": config.model,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "system": SYSTEM_PROMPT,
            "messages": [
                {"role": "user", "content": build_loan_prompt(text, self.language, self.currency)},
                {"role": "assistant", "content": "{"},
            ],
        }
        headers = {
            "x-api-key": config.api_key,
            "anthropic-version": API_VERSION,
        }
        data = await post_json(config, "messages", headers, payload, self._transport)

        blocks = data.get("content") if isinstance(data, dict) else None
        if not isinstance(blocks, list):
            raise ResponseParseError("no content blocks in Claude response")
        text_parts = [
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        if not text_parts:
            raise ResponseParseError("Claude response has no text block")

        # The prefilled brace is not echoed back
        content = "".join(text_parts).strip()
        if not content.startswith("{"):
            content = "{" + content

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
        return await diagnose(self, KEY_PREFIX, "ANTHROPIC_API_KEY", SUPPORTED_MODELS)

    def update_config(self, **changes: Any) -> None:
        self._config = self._config.updated(**changes)


def _usage(raw: Any) -> Optional[TokenUsage]:
    if not isinstance(raw, dict):
        return None
    return TokenUsage(
        prompt_tokens=int(raw.get("input_tokens") or 0),
        completion_tokens=int(raw.get("output_tokens") or 0),
    )
