"""Routines shared by provider adapters, composed rather than inherited"""

import logging
import time
from typing import Awaitable, Callable, Sequence

from loan_finder.infrastructure.observability.logging import log_parse_attempt, log_diagnostics
from loan_finder.infrastructure.observability.metrics import record_parse
from loan_finder.providers.base import (
    AIProvider,
    ApiKeyStatus,
    ConnectionStatus,
    Diagnostics,
    ParsedQuery,
    ParseOutcome,
    ProviderConfig,
    ProviderFailure,
)
from loan_finder.providers.errors import ProviderError, ProviderErrorKind, classify_exception
from loan_finder.providers.prompt import parse_error_result

logger = logging.getLogger(__name__)

PROBE_QUERY = "test konut kredisi 1000000 TL 60 ay"


async def guarded_parse(
    config: ProviderConfig,
    text: str,
    call: Callable[[ProviderConfig, str], Awaitable[ParsedQuery]],
) -> ParseOutcome:
    """
    Run a provider call and convert every failure into a ParseOutcome.

    Nothing raised by the backend crosses this boundary: HTTP/transport errors
    become a confidence-0 result tagged with the error kind, undecodable answers
    become the PARSE_ERROR result.
    """
    provider = config.type.value
    start_time = time.perf_counter()

    try:
        if not config.has_key:
            raise ProviderError(
                ProviderErrorKind.AUTHENTICATION, provider, config.model, detail="API key not configured"
            )
        query = await call(config, text)
        outcome = ParseOutcome(query=query)
    except Exception as e:
        error = classify_exception(e, provider, config.model)
        failure = ProviderFailure(
            kind=error.kind.value,
            message=str(error),
            suggestion=error.suggestion,
            provider=provider,
            status_code=error.status_code,
        )
        if error.kind == ProviderErrorKind.PARSE_ERROR:
            query = parse_error_result(text, provider)
        else:
            query = ParsedQuery.failed(text, provider, error.user_message, error.kind.value)
        outcome = ParseOutcome(query=query, failure=failure)

    duration = time.perf_counter() - start_time
    record_parse(provider, outcome.ok, duration)
    log_parse_attempt(
        provider,
        outcome.ok,
        duration * 1000,
        outcome.query.confidence,
        outcome.failure.kind if outcome.failure else None,
    )
    return outcome


async def probe_connectivity(provider: AIProvider) -> bool:
    """Connectivity probe: a canned parse that must come back as a confident loan query"""
    outcome = await provider.parse(PROBE_QUERY)
    succeeded = outcome.ok and outcome.query.is_loan_query and outcome.query.confidence > 0
    if succeeded:
        logger.info(f"{provider.provider_type.value} connectivity test successful")
    else:
        logger.warning(
            f"{provider.provider_type.value} connectivity test failed",
            extra={"error_type": outcome.failure.kind if outcome.failure else None},
        )
    return succeeded


async def diagnose(
    provider: AIProvider,
    key_prefix: str,
    key_env: str,
    supported_models: Sequence[str],
) -> Diagnostics:
    """
    Build a provider self-check report.

    The credential format is checked first; a missing or malformed key stops
    here with connection_status left at not_tested, before any network probe.
    """
    config = provider.config
    diagnostics = Diagnostics(provider=config.type.value)

    if not config.api_key:
        diagnostics.api_key_status = ApiKeyStatus.MISSING
        diagnostics.suggestions.append(f"{key_env} environment variable is missing")
    elif not config.api_key.startswith(key_prefix):
        diagnostics.api_key_status = ApiKeyStatus.INVALID_FORMAT
        diagnostics.suggestions.append(f"API key format is invalid (must start with {key_prefix})")
    else:
        diagnostics.api_key_status = ApiKeyStatus.CONFIGURED

    diagnostics.model_supported = any(model in config.model for model in supported_models)
    if not diagnostics.model_supported:
        diagnostics.suggestions.append(f"Model {config.model} may not be supported")

    if diagnostics.api_key_status != ApiKeyStatus.CONFIGURED:
        log_diagnostics(diagnostics.provider, diagnostics.api_key_status.value, diagnostics.connection_status.value)
        return diagnostics

    outcome = await provider.parse(PROBE_QUERY)
    if outcome.ok and outcome.query.is_loan_query and outcome.query.confidence > 0:
        diagnostics.connection_status = ConnectionStatus.SUCCESS
    else:
        diagnostics.connection_status = ConnectionStatus.FAILED
        if outcome.failure:
            diagnostics.last_error = outcome.failure.message
            diagnostics.suggestions.append(outcome.failure.suggestion)
        else:
            diagnostics.suggestions.append(
                f"{config.type.value} answered the probe without recognising a loan query"
            )

    log_diagnostics(diagnostics.provider, diagnostics.api_key_status.value, diagnostics.connection_status.value)
    return diagnostics
