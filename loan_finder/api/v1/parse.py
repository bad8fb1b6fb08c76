"""POST /v1/parse - Parse a query without searching"""

from fastapi import APIRouter, Depends

from loan_finder.api.dependencies import get_parsing_service
from loan_finder.api.v1.schemas import ParseRequest, ParseResponse
from loan_finder.application.parsing import QueryParsingService, validate_loan_parameters

router = APIRouter()


@router.post("/parse", response_model=ParseResponse)
async def parse_query(
    request_body: ParseRequest,
    parsing_service: QueryParsingService = Depends(get_parsing_service),
):
    """
    Return the structured interpretation of a query.

    `validation_errors` lists advisory business-range problems
    (amount 50,000..10,000,000, term 6..360 months); they do not fail the call.
    """
    outcome = await parsing_service.parse(request_body.query)
    query = outcome.query
    errors = validate_loan_parameters(query.amount, query.term, query.credit_type)
    return ParseResponse.build(query, errors, outcome.failure)
