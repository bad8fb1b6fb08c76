"""Loan search orchestration - parse, validate, match and rank"""

import logging
import time
from typing import Optional

from loan_finder.application.dtos import (
    LoanOfferDto,
    LoanSearchRequest,
    LoanSearchResponse,
    ParsedLoanSearchParams,
    SearchError,
    SearchFailureKind,
)
from loan_finder.application.parsing import QueryParsingService
from loan_finder.domain.calculation import LoanCalculationService
from loan_finder.domain.catalog import LoanCatalog
from loan_finder.domain.exceptions import ValidationError
from loan_finder.domain.value_objects import Money, Term
from loan_finder.infrastructure.observability.logging import log_search
from loan_finder.infrastructure.observability.metrics import record_search

logger = logging.getLogger(__name__)

_FIELD_LABELS = {"type": "loan type", "amount": "amount", "term": "term"}


class LoanSearchService:
    """Turns a free-text query into a ranked list of eligible loans"""

    def __init__(
        self,
        parsing: QueryParsingService,
        catalog: LoanCatalog,
        calculation: Optional[LoanCalculationService] = None,
    ):
        self.parsing = parsing
        self.catalog = catalog
        self.calculation = calculation or LoanCalculationService()

    async def search(self, request: LoanSearchRequest, request_id: Optional[str] = None) -> LoanSearchResponse:
        """
        Run one search. Never raises; failures come back with success=False.

        Flow:
        1. Parse the query through the active provider (with fallback)
        2. Apply explicit overrides from the request
        3. Require type, amount and term
        4. Build value objects (domain validation)
        5. Fetch eligible loans and rank them by total payment
        """
        start_time = time.perf_counter()
        provider = None
        confidence = 0.0

        try:
            # 1. Parse
            parsed = await self.parsing.parse_query(request.query)
            provider = parsed.provider
            confidence = parsed.confidence

            # 2. Overrides win over parsed values
            loan_type = request.type or parsed.credit_type
            amount = request.amount if request.amount is not None else parsed.amount
            term_months = request.term_months if request.term_months is not None else parsed.term

            # 3. Completeness
            missing = [
                name
                for name, value in (("type", loan_type), ("amount", amount), ("term", term_months))
                if value is None
            ]
            if missing:
                labels = ", ".join(_FIELD_LABELS[name] for name in missing)
                response = self._failure(
                    request,
                    SearchFailureKind.PARSE_FAILURE,
                    f"Could not determine {labels} from the query",
                    provider,
                    confidence,
                )
                return self._finish(response, request_id, start_time)

            # 4. Value objects
            money = Money.of(amount, request.currency)
            term = Term(term_months)

            # 5. Match and rank
            loans = self.catalog.find_eligible(loan_type, money, term)
            comparisons = self.calculation.compare_loans(loans, money, term)

            response = LoanSearchResponse(
                query=request.query,
                parsed_params=ParsedLoanSearchParams(
                    type=loan_type,
                    amount=float(money.amount),
                    term_months=term.months,
                    currency=money.currency,
                ),
                loans=[LoanOfferDto.from_comparison(comparison) for comparison in comparisons],
                total_found=len(comparisons),
                success=True,
                provider=provider,
                confidence=confidence,
            )
            return self._finish(response, request_id, start_time)

        except ValidationError as e:
            logger.warning(f"Search validation failed: {e}", extra={"request_id": request_id})
            response = self._failure(request, SearchFailureKind.VALIDATION_ERROR, str(e), provider, confidence)
            return self._finish(response, request_id, start_time)

        except Exception as e:
            logger.error(f"Unexpected search error: {e}", extra={"request_id": request_id}, exc_info=True)
            response = self._failure(
                request, SearchFailureKind.INTERNAL_ERROR, "Internal error while searching loans", provider, confidence
            )
            return self._finish(response, request_id, start_time)

    def _failure(
        self,
        request: LoanSearchRequest,
        kind: SearchFailureKind,
        message: str,
        provider: Optional[str],
        confidence: float,
    ) -> LoanSearchResponse:
        return LoanSearchResponse(
            query=request.query,
            success=False,
            error=SearchError(kind=kind, message=message),
            provider=provider,
            confidence=confidence,
        )

    def _finish(self, response: LoanSearchResponse, request_id: Optional[str], start_time: float) -> LoanSearchResponse:
        duration_ms = (time.perf_counter() - start_time) * 1000
        error_kind = response.error.kind.value if response.error else None
        record_search(response.success, response.total_found, error_kind or "")
        log_search(request_id, response.query, response.success, response.total_found, duration_ms, error_kind)
        return response
