"""Provider error taxonomy and mapping from HTTP/transport failures"""

from enum import Enum
from typing import Optional

import httpx


class ProviderErrorKind(str, Enum):
    """Stable machine-readable error kinds"""

    AUTHENTICATION = "AUTHENTICATION_ERROR"
    BILLING = "BILLING_ERROR"
    RATE_LIMIT = "RATE_LIMIT_ERROR"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    SERVER_ERROR = "SERVER_ERROR"
    CONNECTION = "CONNECTION_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN = "UNKNOWN_ERROR"


# Network/timeout conditions and 5xx are retried; everything else fails fast
TRANSIENT_KINDS = frozenset({ProviderErrorKind.SERVER_ERROR, ProviderErrorKind.CONNECTION})

_MESSAGES = {
    ProviderErrorKind.AUTHENTICATION: "{provider} API key rejected or lacks permission",
    ProviderErrorKind.BILLING: "{provider} account has insufficient credit",
    ProviderErrorKind.RATE_LIMIT: "{provider} API rate limit exceeded",
    ProviderErrorKind.MODEL_NOT_FOUND: "{provider} model not found",
    ProviderErrorKind.BAD_REQUEST: "{provider} API rejected the request format",
    ProviderErrorKind.SERVER_ERROR: "{provider} API server error",
    ProviderErrorKind.CONNECTION: "{provider} API connection failed",
    ProviderErrorKind.PARSE_ERROR: "{provider} response could not be parsed",
    ProviderErrorKind.UNKNOWN: "{provider} API unknown error",
}

_SUGGESTIONS = {
    ProviderErrorKind.AUTHENTICATION: "Check the {key_env} environment variable and the key's permissions",
    ProviderErrorKind.BILLING: "Check the provider account balance and add credit",
    ProviderErrorKind.RATE_LIMIT: "Wait a moment and retry, or upgrade the plan",
    ProviderErrorKind.MODEL_NOT_FOUND: "Check the configured model name: {model}",
    ProviderErrorKind.BAD_REQUEST: "Check the query format, model parameters and token limits",
    ProviderErrorKind.SERVER_ERROR: "The provider has a temporary problem, retry later",
    ProviderErrorKind.CONNECTION: "Check network connectivity and the configured timeout",
    ProviderErrorKind.PARSE_ERROR: "The model did not return valid JSON; retry or switch model",
    ProviderErrorKind.UNKNOWN: "Check the logs and contact support",
}

_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}


class ProviderError(Exception):
    """Failure talking to an AI backend, with a remediation hint"""

    def __init__(
        self,
        kind: ProviderErrorKind,
        provider: str,
        model: str = "",
        detail: str = "",
        status_code: Optional[int] = None,
    ):
        self.kind = kind
        self.provider = provider
        self.status_code = status_code
        self.user_message = _MESSAGES[kind].format(provider=provider)
        self.suggestion = _SUGGESTIONS[kind].format(key_env=_KEY_ENV.get(provider, "API key"), model=model)
        message = self.user_message if not detail else f"{self.user_message}: {detail}"
        super().__init__(message)

    @property
    def transient(self) -> bool:
        return self.kind in TRANSIENT_KINDS


class ResponseParseError(Exception):
    """Model output is not JSON or not a JSON object"""

    pass


def kind_for_status(status_code: int, body: str = "") -> ProviderErrorKind:
    """Map an HTTP status (and error body hints) onto the error taxonomy"""
    body = body.lower()
    if status_code == 402 or "credit balance" in body or "insufficient_quota" in body:
        return ProviderErrorKind.BILLING
    if status_code in (400, 422):
        return ProviderErrorKind.BAD_REQUEST
    if status_code in (401, 403):
        return ProviderErrorKind.AUTHENTICATION
    if status_code == 404:
        return ProviderErrorKind.MODEL_NOT_FOUND
    if status_code == 429:
        return ProviderErrorKind.RATE_LIMIT
    if status_code >= 500:
        return ProviderErrorKind.SERVER_ERROR
    return ProviderErrorKind.UNKNOWN


def classify_exception(exc: Exception, provider: str, model: str = "") -> ProviderError:
    """Convert any exception raised during a provider call into a ProviderError"""
    if isinstance(exc, ProviderError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        body = exc.response.text[:500]
        return ProviderError(kind_for_status(status, body), provider, model, detail=f"HTTP {status}", status_code=status)
    if isinstance(exc, httpx.TimeoutException):
        return ProviderError(ProviderErrorKind.CONNECTION, provider, model, detail="request timed out")
    if isinstance(exc, httpx.TransportError):
        return ProviderError(ProviderErrorKind.CONNECTION, provider, model, detail=str(exc) or type(exc).__name__)
    if isinstance(exc, ResponseParseError):
        return ProviderError(ProviderErrorKind.PARSE_ERROR, provider, model, detail=str(exc))
    return ProviderError(ProviderErrorKind.UNKNOWN, provider, model, detail=str(exc) or type(exc).__name__)
