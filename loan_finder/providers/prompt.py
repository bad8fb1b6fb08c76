"""Loan extraction prompt shared by LLM providers, and the lenient decoder for its answers"""

import json
import math
import re
from typing import Any, List, Optional

from loan_finder.domain.exceptions import ValidationError
from loan_finder.domain.value_objects import LoanType, normalize_text
from loan_finder.providers.base import ExtractedInfo, ParsedQuery, SupportedLanguage
from loan_finder.providers.errors import ResponseParseError, ProviderErrorKind

SYSTEM_PROMPT = "You are a natural language processing expert for Turkish loan queries. Reply with JSON only."

PROMPT_TEMPLATE = """Extract the loan request from the user's text and answer in JSON.

TASK: find the credit type, the amount and the term.

RULES:
- creditType: one of "housing" (konut, ev), "vehicle" (taşıt, araç, araba), "personal" (ihtiyaç, kişisel)
- amount: number in {currency}. Multipliers: "milyon", "million", "m", "M" = x1,000,000; "bin", "thousand", "k", "K" = x1,000
- term: number of months. "ay", "aylık", "month" = months; "yıl", "sene", "year" = multiply by 12
- Use null for anything you cannot find
- confidence: your certainty between 0.0 and 1.0
- The user writes in {language}

USER TEXT:
"{text}"

Answer ONLY with JSON matching this schema:

{{
  "creditType": "housing" | "vehicle" | "personal" | null,
  "amount": number | null,
  "term": number | null,
  "confidence": number,
  "reasoning": "short explanation",
  "extractedInfo": {{
    "detectedPhrases": ["phrases found in the text"],
    "amountPhrase": "amount phrase" | null,
    "termPhrase": "term phrase" | null,
    "creditTypePhrase": "credit type phrase" | null
  }},
  "uncertainties": ["anything ambiguous"],
  "isLoanQuery": boolean
}}

Examples:
- "5 milyon 48 ay vade konut kredisi" -> creditType "housing", amount 5000000, term 48
- "300bin 24ay ihtiyaç" -> creditType "personal", amount 300000, term 24
- "Taşıt kredisi 1 milyon lira 10 yıl vade" -> creditType "vehicle", amount 1000000, term 120"""

_LANGUAGE_NAMES = {
    SupportedLanguage.TURKISH: "Turkish",
    SupportedLanguage.ENGLISH: "English",
}

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def build_loan_prompt(
    text: str,
    language: SupportedLanguage = SupportedLanguage.TURKISH,
    currency: str = "TRY",
) -> str:
    return PROMPT_TEMPLATE.format(text=text, language=_LANGUAGE_NAMES[language], currency=currency)


def _load_object(response_text: str) -> dict:
    cleaned = _FENCE.sub("", response_text.strip())
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose; take the outermost braces
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ResponseParseError("response is not JSON") from None
        try:
            payload = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"response is not JSON: {e.msg}") from e

    if not isinstance(payload, dict):
        raise ResponseParseError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.replace(" ", "").replace("_", "")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # 0 means "not found" in model answers
    return number if math.isfinite(number) and number > 0 else None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def decode_response(response_text: str, original_text: str, provider: str) -> ParsedQuery:
    """
    Decode a model answer into a ParsedQuery.

    Missing keys default to null/false/[] rather than raising.

    Raises:
        ResponseParseError: if the answer is not a JSON object
    """
    payload = _load_object(response_text)

    uncertainties = _as_list(payload.get("uncertainties"))

    credit_type = None
    raw_type = _as_text(payload.get("creditType"))
    if raw_type:
        try:
            credit_type = LoanType.from_string(raw_type)
        except ValidationError:
            uncertainties.append("UNKNOWN_CREDIT_TYPE")

    amount = _as_number(payload.get("amount"))
    term = _as_number(payload.get("term"))

    info = payload.get("extractedInfo")
    if not isinstance(info, dict):
        info = {}

    confidence = _as_number(payload.get("confidence")) or 0.0

    return ParsedQuery(
        credit_type=credit_type,
        amount=amount,
        term=round(term) if term is not None else None,
        confidence=confidence,
        reasoning=_as_text(payload.get("reasoning")) or "No reasoning provided",
        extracted_info=ExtractedInfo(
            detected_phrases=_as_list(info.get("detectedPhrases")),
            amount_phrase=_as_text(info.get("amountPhrase")),
            term_phrase=_as_text(info.get("termPhrase")),
            credit_type_phrase=_as_text(info.get("creditTypePhrase")),
        ),
        uncertainties=uncertainties,
        is_loan_query=payload.get("isLoanQuery") in (True, "true"),
        provider=provider,
        raw_text=original_text,
    )


def parse_error_result(original_text: str, provider: str) -> ParsedQuery:
    """Terminal low-confidence result for an answer that could not be decoded"""
    lowered = normalize_text(original_text)
    return ParsedQuery.failed(
        original_text,
        provider,
        reasoning=f"{provider} response could not be parsed",
        uncertainty=ProviderErrorKind.PARSE_ERROR.value,
        confidence=0.1,
        is_loan_query="kredi" in lowered or "loan" in lowered,
    )
