"""AI provider contract and the data it exchanges with the orchestration layer"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Tuple

from loan_finder.domain.value_objects import LoanType


class AIProviderType(str, Enum):
    """Configuration key naming a provider variant"""

    OPENAI = "openai"
    CLAUDE = "claude"
    KEYWORD = "keyword"


class SupportedLanguage(str, Enum):
    TURKISH = "tr"
    ENGLISH = "en"


class ApiKeyStatus(str, Enum):
    MISSING = "missing"
    INVALID_FORMAT = "invalid_format"
    CONFIGURED = "configured"


class ConnectionStatus(str, Enum):
    NOT_TESTED = "not_tested"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ProviderConfig:
    """Working configuration of one provider instance"""

    type: AIProviderType
    api_key: str = ""
    model: str = ""
    max_tokens: int = 800
    temperature: float = 0.1
    timeout: float = 30.0  # seconds
    max_retries: int = 1
    base_url: str = ""
    backoff_base: float = 0.5

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)

    @property
    def cache_key(self) -> Tuple[Any, ...]:
        return (self.type.value, self.model, self.max_tokens, self.temperature, self.has_key)

    def sanitized(self) -> Dict[str, Any]:
        """Configuration safe to log (API key reduced to a prefix)"""
        return {
            "type": self.type.value,
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "api_key": f"{self.api_key[:8]}..." if self.api_key else "not_set",
        }

    def updated(self, **changes: Any) -> "ProviderConfig":
        if "type" in changes and changes["type"] != self.type:
            raise ValueError("Provider type cannot be changed on an existing provider")
        return replace(self, **changes)


@dataclass
class ExtractedInfo:
    """Evidence the model quoted from the query text"""

    detected_phrases: List[str] = field(default_factory=list)
    amount_phrase: Optional[str] = None
    term_phrase: Optional[str] = None
    credit_type_phrase: Optional[str] = None


@dataclass
class TokenUsage:
    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class ParsedQuery:
    """Structured interpretation of a free-form loan query; every field is always present"""

    credit_type: Optional[LoanType]
    amount: Optional[float]
    term: Optional[int]  # months
    confidence: float
    reasoning: str
    extracted_info: ExtractedInfo
    uncertainties: List[str]
    is_loan_query: bool
    provider: str
    raw_text: str = ""
    usage: Optional[TokenUsage] = None

    def __post_init__(self) -> None:
        self.confidence = min(max(float(self.confidence or 0.0), 0.0), 1.0)

    @property
    def missing_fields(self) -> List[str]:
        missing = []
        if self.credit_type is None:
            missing.append("type")
        if self.amount is None:
            missing.append("amount")
        if self.term is None:
            missing.append("term")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    @classmethod
    def failed(
        cls,
        text: str,
        provider: str,
        reasoning: str,
        uncertainty: str,
        confidence: float = 0.0,
        is_loan_query: bool = False,
    ) -> "ParsedQuery":
        return cls(
            credit_type=None,
            amount=None,
            term=None,
            confidence=confidence,
            reasoning=reasoning,
            extracted_info=ExtractedInfo(),
            uncertainties=[uncertainty],
            is_loan_query=is_loan_query,
            provider=provider,
            raw_text=text,
        )


@dataclass(frozen=True)
class ProviderFailure:
    """Why a provider could not produce a usable parse"""

    kind: str
    message: str
    suggestion: str
    provider: str
    status_code: Optional[int] = None


@dataclass
class ParseOutcome:
    """Explicit success/failure result returned across the adapter boundary"""

    query: ParsedQuery
    failure: Optional[ProviderFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class Diagnostics:
    """Self-check report of a provider's credential and connectivity state"""

    provider: str
    api_key_status: ApiKeyStatus = ApiKeyStatus.MISSING
    connection_status: ConnectionStatus = ConnectionStatus.NOT_TESTED
    suggestions: List[str] = field(default_factory=list)
    model_supported: Optional[bool] = None
    last_error: Optional[str] = None


class AIProvider(Protocol):
    """Capability set every provider variant implements"""

    @property
    def provider_type(self) -> AIProviderType: ...

    @property
    def config(self) -> ProviderConfig: ...

    @property
    def is_configured(self) -> bool: ...

    async def parse(self, text: str) -> ParseOutcome: ...

    async def parse_query(self, text: str) -> ParsedQuery: ...

    async def test_connectivity(self) -> bool: ...

    async def get_diagnostics(self) -> Diagnostics: ...

    def update_config(self, **changes: Any) -> None: ...
