"""Pydantic schemas for API request/response validation"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from loan_finder.domain.models import Installment, Loan
from loan_finder.domain.value_objects import LoanType
from loan_finder.providers.base import Diagnostics, ParsedQuery, ProviderFailure


class ParseRequest(BaseModel):
    """Request body for POST /v1/parse"""

    query: str = Field(..., min_length=1, description="Natural-language loan query")


class ExtractedInfoSchema(BaseModel):
    detected_phrases: List[str] = Field(default_factory=list)
    amount_phrase: Optional[str] = None
    term_phrase: Optional[str] = None
    credit_type_phrase: Optional[str] = None


class UsageSchema(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ProviderFailureSchema(BaseModel):
    kind: str
    message: str
    suggestion: str
    provider: str

    @classmethod
    def from_failure(cls, failure: ProviderFailure) -> "ProviderFailureSchema":
        return cls(kind=failure.kind, message=failure.message, suggestion=failure.suggestion, provider=failure.provider)


class ParseResponse(BaseModel):
    """Response for POST /v1/parse"""

    credit_type: Optional[LoanType] = None
    amount: Optional[float] = None
    term: Optional[int] = None
    confidence: float
    reasoning: str
    extracted_info: ExtractedInfoSchema
    uncertainties: List[str]
    is_loan_query: bool
    provider: str
    usage: Optional[UsageSchema] = None
    validation_errors: List[str] = Field(default_factory=list)
    failure: Optional[ProviderFailureSchema] = None

    @classmethod
    def build(
        cls,
        query: ParsedQuery,
        validation_errors: List[str],
        failure: Optional[ProviderFailure] = None,
    ) -> "ParseResponse":
        info = query.extracted_info
        return cls(
            credit_type=query.credit_type,
            amount=query.amount,
            term=query.term,
            confidence=query.confidence,
            reasoning=query.reasoning,
            extracted_info=ExtractedInfoSchema(
                detected_phrases=info.detected_phrases,
                amount_phrase=info.amount_phrase,
                term_phrase=info.term_phrase,
                credit_type_phrase=info.credit_type_phrase,
            ),
            uncertainties=query.uncertainties,
            is_loan_query=query.is_loan_query,
            provider=query.provider,
            usage=UsageSchema(
                prompt_tokens=query.usage.prompt_tokens,
                completion_tokens=query.usage.completion_tokens,
                total_tokens=query.usage.total_tokens,
            )
            if query.usage
            else None,
            validation_errors=validation_errors,
            failure=ProviderFailureSchema.from_failure(failure) if failure else None,
        )


class RecommendationSchema(BaseModel):
    primary: str
    fallback: str
    reasoning: str


class ProviderInfoResponse(BaseModel):
    """Response for GET /v1/providers and POST /v1/providers/switch"""

    type: str
    is_configured: bool
    language: str
    recommendation: RecommendationSchema
    available: List[str]


class SwitchProviderRequest(BaseModel):
    """Request body for POST /v1/providers/switch"""

    provider: str = Field(..., min_length=1, description="openai, claude or keyword")


class DiagnosticsResponse(BaseModel):
    provider: str
    api_key_status: str
    connection_status: str
    suggestions: List[str]
    model_supported: Optional[bool] = None
    last_error: Optional[str] = None

    @classmethod
    def from_diagnostics(cls, diagnostics: Diagnostics) -> "DiagnosticsResponse":
        return cls(
            provider=diagnostics.provider,
            api_key_status=diagnostics.api_key_status.value,
            connection_status=diagnostics.connection_status.value,
            suggestions=diagnostics.suggestions,
            model_supported=diagnostics.model_supported,
            last_error=diagnostics.last_error,
        )


class AllDiagnosticsResponse(BaseModel):
    providers: Dict[str, DiagnosticsResponse]


class LoanSchema(BaseModel):
    """Catalog entry"""

    id: str
    bank_id: str
    bank_name: str
    type: LoanType
    type_display_name: str
    interest_rate: float
    min_amount: float
    max_amount: float
    max_term_months: int
    currency: str
    eligibility_note: str
    is_active: bool

    @classmethod
    def from_loan(cls, loan: Loan) -> "LoanSchema":
        return cls(
            id=loan.id,
            bank_id=loan.bank.id,
            bank_name=loan.bank.name,
            type=loan.type,
            type_display_name=loan.type.display_name,
            interest_rate=loan.interest_rate.rate,
            min_amount=float(loan.min_amount.amount),
            max_amount=float(loan.max_amount.amount),
            max_term_months=loan.max_term.months,
            currency=loan.currency,
            eligibility_note=loan.eligibility_note,
            is_active=loan.is_active,
        )


class LoanListResponse(BaseModel):
    """Response for GET /v1/loans"""

    loans: List[LoanSchema]
    total: int


class InstallmentSchema(BaseModel):
    """Single month in an amortization schedule"""

    month: int
    payment: float
    principal: float
    interest: float
    remaining_balance: float

    @classmethod
    def from_installment(cls, installment: Installment) -> "InstallmentSchema":
        return cls(
            month=installment.month,
            payment=float(installment.payment.amount),
            principal=float(installment.principal.amount),
            interest=float(installment.interest.amount),
            remaining_balance=float(installment.remaining_balance.amount),
        )


class ScheduleResponse(BaseModel):
    """Response for GET /v1/loans/{loan_id}/schedule"""

    loan_id: str
    amount: float
    term_months: int
    currency: str
    monthly_payment: float
    total_payment: float
    total_interest: float
    installments: List[InstallmentSchema]
