"""Pydantic DTOs exchanged by the search service and its callers"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from loan_finder.domain.models import LoanComparison
from loan_finder.domain.value_objects import LoanType


class SearchFailureKind(str, Enum):
    PARSE_FAILURE = "PARSE_FAILURE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class LoanSearchRequest(BaseModel):
    """Free-text query plus optional explicit overrides of the parsed parameters"""

    query: str = Field(..., min_length=1, description="Natural-language loan query")
    type: Optional[LoanType] = Field(None, description="Overrides the parsed loan type")
    amount: Optional[float] = Field(None, description="Overrides the parsed amount")
    term_months: Optional[int] = Field(None, description="Overrides the parsed term in months")
    currency: str = Field("TRY", min_length=3, max_length=3)


class ParsedLoanSearchParams(BaseModel):
    """Parameters the search actually ran with"""

    type: LoanType
    amount: float
    term_months: int
    currency: str


class LoanOfferDto(BaseModel):
    """One ranked loan with its payment figures"""

    id: str
    bank_name: str
    type: LoanType
    type_display_name: str
    interest_rate: float
    monthly_payment: float
    total_payment: float
    total_interest: float
    min_amount: float
    max_amount: float
    max_term_months: int
    eligibility_note: str
    currency: str

    @classmethod
    def from_comparison(cls, comparison: LoanComparison) -> "LoanOfferDto":
        loan = comparison.loan
        return cls(
            id=loan.id,
            bank_name=loan.bank.name,
            type=loan.type,
            type_display_name=loan.type.display_name,
            interest_rate=loan.interest_rate.rate,
            monthly_payment=float(comparison.monthly_payment.amount),
            total_payment=float(comparison.total_payment.amount),
            total_interest=float(comparison.total_interest.amount),
            min_amount=float(loan.min_amount.amount),
            max_amount=float(loan.max_amount.amount),
            max_term_months=loan.max_term.months,
            eligibility_note=loan.eligibility_note,
            currency=comparison.monthly_payment.currency,
        )


class SearchError(BaseModel):
    kind: SearchFailureKind
    message: str


class LoanSearchResponse(BaseModel):
    """Search result; failures are reported in `error`, never raised"""

    query: str
    parsed_params: Optional[ParsedLoanSearchParams] = None
    loans: List[LoanOfferDto] = Field(default_factory=list)
    total_found: int = 0
    success: bool
    error: Optional[SearchError] = None
    provider: Optional[str] = None
    confidence: float = 0.0
