"""POST /v1/search - Natural-language loan search endpoint"""

from fastapi import APIRouter, Depends, Request, Response

from loan_finder.api.dependencies import get_request_id, get_search_service
from loan_finder.application.dtos import LoanSearchRequest, LoanSearchResponse, SearchFailureKind
from loan_finder.application.search import LoanSearchService

router = APIRouter()

_STATUS_BY_KIND = {
    SearchFailureKind.PARSE_FAILURE: 422,
    SearchFailureKind.VALIDATION_ERROR: 422,
    SearchFailureKind.INTERNAL_ERROR: 500,
}


@router.post("/search", response_model=LoanSearchResponse)
async def search_loans(
    request_body: LoanSearchRequest,
    request: Request,
    response: Response,
    search_service: LoanSearchService = Depends(get_search_service),
):
    """
    Find and rank loans for a free-text query.

    Flow:
    1. Parse the query with the active AI provider (one fallback on failure)
    2. Apply explicit type/amount/term overrides from the body
    3. Match eligible catalog products and rank them by total payment

    The body is always a LoanSearchResponse; failures carry `error` and
    a 422 (unparseable or invalid parameters) or 500 status.
    """
    result = await search_service.search(request_body, request_id=get_request_id(request))
    if result.error is not None:
        response.status_code = _STATUS_BY_KIND[result.error.kind]
    return result
