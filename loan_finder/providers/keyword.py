"""Deterministic keyword provider: no network, always available, never fails"""

import re
import time
from typing import Any, List, Optional, Tuple

from loan_finder.domain.value_objects import LoanType, normalize_text
from loan_finder.infrastructure.observability.logging import log_parse_attempt
from loan_finder.infrastructure.observability.metrics import record_parse
from loan_finder.providers.base import (
    AIProviderType,
    ApiKeyStatus,
    ConnectionStatus,
    Diagnostics,
    ExtractedInfo,
    ParsedQuery,
    ParseOutcome,
    ProviderConfig,
    SupportedLanguage,
)

_NUMBER = r"\d+(?:[.,]\d+)*"

_TERM = re.compile(rf"({_NUMBER})\s*(aylık|ay|months?|yıllık|yillik|senelik|yearly|yıl|yil|sene|years?)\b")
_YEAR_UNITS = {"yıllık", "yillik", "senelik", "yearly", "yıl", "yil", "sene", "year", "years"}

# Longest alternatives first so "milyon" is not read as "m"
_MULTIPLIED_AMOUNT = re.compile(rf"({_NUMBER})\s*(milyar|milyon|million|thousand|bin|k|m)\b")
_MULTIPLIERS = {
    "milyar": 1_000_000_000,
    "milyon": 1_000_000,
    "million": 1_000_000,
    "m": 1_000_000,
    "thousand": 1_000,
    "bin": 1_000,
    "k": 1_000,
}
_CURRENCY_AMOUNT = re.compile(rf"({_NUMBER})\s*(?:(?:tl|lira|try)\b|₺)")
_BARE_NUMBER = re.compile(_NUMBER)

# 1.500.000 / 1,500,000 are digit groups; 3.5 / 2,5 are decimals
_GROUPED = re.compile(r"\d{1,3}(?:[.,]\d{3})+")

_TYPE_PATTERNS = (
    (LoanType.HOUSING, re.compile(r"\b(?:konut|mortgage|housing|house|home|ev\b)")),
    (LoanType.VEHICLE, re.compile(r"\b(?:taşıt|taşit|tasit|araç|arac|araba|otomobil|vehicle|car\b|auto\b)")),
    (LoanType.PERSONAL, re.compile(r"\b(?:ihtiyaç|ihtiyac|kişisel|kisisel|personal|consumer)")),
)

_LOAN_WORDS = ("kredi", "loan", "credit")

MIN_BARE_AMOUNT = 1_000


def _parse_number(token: str) -> Optional[float]:
    if _GROUPED.fullmatch(token):
        return float(re.sub(r"[.,]", "", token))
    try:
        return float(token.replace(",", "."))
    except ValueError:
        return None


def extract_term(text: str) -> Tuple[Optional[int], Optional[str], str]:
    """Find the term in months; returns (months, phrase, text with the phrase removed)"""
    match = _TERM.search(text)
    if not match:
        return None, None, text

    value = _parse_number(match.group(1))
    if value is None or value <= 0:
        return None, None, text

    months = value * 12 if match.group(2) in _YEAR_UNITS else value
    remaining = text[: match.start()] + " " + text[match.end() :]
    return round(months), match.group(0), remaining


def extract_amount(text: str) -> Tuple[Optional[float], Optional[str]]:
    """Find the principal: multiplier words first, then a currency suffix, then the largest plain number"""
    match = _MULTIPLIED_AMOUNT.search(text)
    if match:
        value = _parse_number(match.group(1))
        if value:
            return value * _MULTIPLIERS[match.group(2)], match.group(0)

    match = _CURRENCY_AMOUNT.search(text)
    if match:
        value = _parse_number(match.group(1))
        if value:
            return value, match.group(0)

    candidates = []
    for number in _BARE_NUMBER.finditer(text):
        value = _parse_number(number.group(0))
        if value is not None and value >= MIN_BARE_AMOUNT:
            candidates.append((value, number.group(0)))
    if candidates:
        return max(candidates, key=lambda candidate: candidate[0])
    return None, None


def extract_credit_type(text: str) -> Tuple[Optional[LoanType], Optional[str]]:
    """Earliest keyword hit wins when several loan types are mentioned"""
    hits = []
    for loan_type, pattern in _TYPE_PATTERNS:
        match = pattern.search(text)
        if match:
            hits.append((match.start(), loan_type, match.group(0)))
    if not hits:
        return None, None
    _, loan_type, phrase = min(hits, key=lambda hit: hit[0])
    return loan_type, phrase


class KeywordProvider:
    """Rule-based last resort when no LLM credential is configured"""

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        language: SupportedLanguage = SupportedLanguage.TURKISH,
        currency: str = "TRY",
    ):
        config = config or ProviderConfig(type=AIProviderType.KEYWORD, model="keyword-v1")
        if config.type != AIProviderType.KEYWORD:
            raise ValueError(f"KeywordProvider cannot run a {config.type.value} configuration")
        self._config = config
        self.language = language
        self.currency = currency

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.KEYWORD

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def is_configured(self) -> bool:
        return True

    def interpret(self, text: str) -> ParsedQuery:
        normalized = normalize_text(text)

        term, term_phrase, remaining = extract_term(normalized)
        amount, amount_phrase = extract_amount(remaining)
        credit_type, type_phrase = extract_credit_type(normalized)

        mentions_loan = any(word in normalized for word in _LOAN_WORDS)
        found = [value for value in (credit_type, amount, term) if value is not None]

        confidence = 0.1 + 0.25 * len(found)
        if mentions_loan:
            confidence += 0.1
        confidence = min(confidence, 0.95) if found else 0.1

        uncertainties: List[str] = []
        if credit_type is None:
            uncertainties.append("CREDIT_TYPE_NOT_FOUND")
        if amount is None:
            uncertainties.append("AMOUNT_NOT_FOUND")
        if term is None:
            uncertainties.append("TERM_NOT_FOUND")

        phrases = [phrase for phrase in (type_phrase, amount_phrase, term_phrase) if phrase]
        return ParsedQuery(
            credit_type=credit_type,
            amount=amount,
            term=term,
            confidence=confidence,
            reasoning=f"Keyword match found {len(found)} of 3 fields",
            extracted_info=ExtractedInfo(
                detected_phrases=phrases,
                amount_phrase=amount_phrase,
                term_phrase=term_phrase,
                credit_type_phrase=type_phrase,
            ),
            uncertainties=uncertainties,
            is_loan_query=mentions_loan or credit_type is not None,
            provider=self.provider_type.value,
            raw_text=text,
        )

    async def parse(self, text: str) -> ParseOutcome:
        start_time = time.perf_counter()
        query = self.interpret(text)
        duration = time.perf_counter() - start_time
        record_parse(self.provider_type.value, True, duration)
        log_parse_attempt(self.provider_type.value, True, duration * 1000, query.confidence)
        return ParseOutcome(query=query)

    async def parse_query(self, text: str) -> ParsedQuery:
        return (await self.parse(text)).query

    async def test_connectivity(self) -> bool:
        return True

    async def get_diagnostics(self) -> Diagnostics:
        return Diagnostics(
            provider=self.provider_type.value,
            api_key_status=ApiKeyStatus.CONFIGURED,
            connection_status=ConnectionStatus.SUCCESS,
            model_supported=True,
        )

    def update_config(self, **changes: Any) -> None:
        self._config = self._config.updated(**changes)
