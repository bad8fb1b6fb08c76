"""Query parsing facade: active provider selection and the one-step fallback cascade"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from loan_finder.domain.value_objects import LoanType
from loan_finder.infrastructure.observability.logging import log_fallback
from loan_finder.infrastructure.observability.metrics import record_fallback
from loan_finder.providers.base import (
    AIProvider,
    AIProviderType,
    ConnectionStatus,
    Diagnostics,
    ParsedQuery,
    ParseOutcome,
    ProviderFailure,
    SupportedLanguage,
)
from loan_finder.providers.errors import ProviderErrorKind
from loan_finder.providers.registry import ProviderRecommendation, ProviderRegistry, recommend

logger = logging.getLogger(__name__)

ALL_PROVIDERS_FAILED = "ALL_PROVIDERS_FAILED"

# Advisory business bounds reported by validate_loan_parameters
MIN_LOAN_AMOUNT = 50_000
MAX_LOAN_AMOUNT = 10_000_000
MIN_LOAN_TERM = 6
MAX_LOAN_TERM = 360


@dataclass
class ProviderInfo:
    type: AIProviderType
    is_configured: bool
    language: SupportedLanguage


def all_providers_failed(text: str) -> ParsedQuery:
    return ParsedQuery.failed(
        text,
        provider="none",
        reasoning="All AI providers failed",
        uncertainty=ALL_PROVIDERS_FAILED,
    )


def _to_provider_type(value: Union[AIProviderType, str]) -> AIProviderType:
    if isinstance(value, AIProviderType):
        return value
    try:
        return AIProviderType(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown AI provider: {value}") from None


class QueryParsingService:
    """
    Turns free text into a ParsedQuery through the active provider.

    A failed parse gets exactly one alternate attempt: the other member of the
    language's {primary, fallback} pair, or the pair's primary when the active
    provider is outside the pair. Calls are strictly sequential.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        preferred: Optional[AIProviderType] = None,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
    ):
        self.registry = registry
        self.preferred = preferred
        self.language = language
        self._provider: Optional[AIProvider] = None

    def initialize(
        self,
        preferred: Optional[AIProviderType] = None,
        language: Optional[SupportedLanguage] = None,
    ) -> AIProvider:
        if preferred is not None:
            self.preferred = preferred
        if language is not None:
            self.language = language

        self._provider = self.registry.create_from_settings(self.preferred, self.language)
        logger.info(
            "Query parsing service initialized",
            extra={
                "provider": self._provider.provider_type.value,
                "configured": self._provider.is_configured,
                "language": self.language.value,
            },
        )
        return self._provider

    @property
    def provider(self) -> AIProvider:
        if self._provider is None:
            return self.initialize()
        return self._provider

    def fallback_type(self, current: AIProviderType) -> AIProviderType:
        """The single alternate tried after a failure of `current`"""
        pair = recommend(self.language)
        if current == pair.primary:
            return pair.fallback
        return pair.primary

    async def _attempt(self, provider: AIProvider, text: str) -> ParseOutcome:
        # Adapters convert their own failures; this also covers misbehaving stand-ins
        try:
            return await provider.parse(text)
        except Exception as e:
            logger.exception(f"{provider.provider_type.value} provider raised during parse")
            failure = ProviderFailure(
                kind=ProviderErrorKind.UNKNOWN.value,
                message=str(e) or type(e).__name__,
                suggestion="Check the logs and contact support",
                provider=provider.provider_type.value,
            )
            return ParseOutcome(
                query=ParsedQuery.failed(text, provider.provider_type.value, failure.message, failure.kind),
                failure=failure,
            )

    async def parse(self, text: str) -> ParseOutcome:
        """
        Parse with the active provider, falling back once on failure.

        Returns:
            ParseOutcome whose query is the terminal ALL_PROVIDERS_FAILED
            result when both attempts fail
        """
        start_time = time.perf_counter()
        primary = self.provider

        outcome = await self._attempt(primary, text)
        if outcome.ok:
            return outcome

        fallback_type = self.fallback_type(primary.provider_type)
        reason = outcome.failure.kind if outcome.failure else None
        log_fallback(primary.provider_type.value, fallback_type.value, reason)
        record_fallback(primary.provider_type.value, fallback_type.value)

        fallback = self.registry.get(fallback_type, self.language)
        fallback_outcome = await self._attempt(fallback, text)
        if fallback_outcome.ok:
            return fallback_outcome

        logger.error(
            "All AI providers failed",
            extra={
                "providers": [primary.provider_type.value, fallback_type.value],
                "duration_ms": (time.perf_counter() - start_time) * 1000,
            },
        )
        return ParseOutcome(query=all_providers_failed(text), failure=fallback_outcome.failure)

    async def parse_query(self, text: str) -> ParsedQuery:
        return (await self.parse(text)).query

    def switch_provider(self, provider_type: Union[AIProviderType, str]) -> ProviderInfo:
        """
        Make another provider active.

        Raises:
            ValueError: if the provider name is unknown
        """
        resolved = _to_provider_type(provider_type)
        self.preferred = resolved
        self._provider = self.registry.get(resolved, self.language)
        logger.info(
            "AI provider switched",
            extra={"provider": resolved.value, "configured": self._provider.is_configured},
        )
        return self.current_provider_info()

    def current_provider_info(self) -> ProviderInfo:
        return ProviderInfo(
            type=self.provider.provider_type,
            is_configured=self.provider.is_configured,
            language=self.language,
        )

    async def test_connectivity(self) -> bool:
        try:
            return await self.provider.test_connectivity()
        except Exception:
            logger.exception("Provider connectivity test failed")
            return False

    async def get_diagnostics(self) -> Diagnostics:
        provider = self.provider
        try:
            return await provider.get_diagnostics()
        except Exception as e:
            logger.exception("Provider diagnostics failed")
            return Diagnostics(
                provider=provider.provider_type.value,
                connection_status=ConnectionStatus.FAILED,
                last_error=str(e) or type(e).__name__,
            )

    async def get_all_diagnostics(self) -> Dict[AIProviderType, Diagnostics]:
        return await self.registry.run_diagnostics(self.language)

    def recommendations(self) -> ProviderRecommendation:
        return recommend(self.language)

    def set_language(self, language: SupportedLanguage) -> None:
        self.initialize(self.preferred, language)


def validate_loan_parameters(
    amount: Optional[float] = None,
    term: Optional[int] = None,
    credit_type: Optional[Union[LoanType, str]] = None,
) -> List[str]:
    """Advisory business-range checks; the catalog still decides eligibility"""
    errors = []

    if amount is not None:
        if amount <= 0:
            errors.append("Loan amount must be positive")
        elif amount < MIN_LOAN_AMOUNT:
            errors.append(f"Minimum loan amount is {MIN_LOAN_AMOUNT:,}")
        elif amount > MAX_LOAN_AMOUNT:
            errors.append(f"Maximum loan amount is {MAX_LOAN_AMOUNT:,}")

    if term is not None:
        if term <= 0:
            errors.append("Loan term must be positive")
        elif term < MIN_LOAN_TERM:
            errors.append(f"Minimum loan term is {MIN_LOAN_TERM} months")
        elif term > MAX_LOAN_TERM:
            errors.append(f"Maximum loan term is {MAX_LOAN_TERM} months (30 years)")

    if credit_type is not None and not isinstance(credit_type, LoanType):
        if str(credit_type).lower() not in {loan_type.value for loan_type in LoanType}:
            errors.append("Invalid loan type; must be housing, vehicle or personal")

    return errors
